# tests/conftest.py
import os, sys, pathlib
import pytest

# Add ./src to sys.path so `import mancala...` works in tests
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC  = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("MANCALA_LOG_LEVEL", "DEBUG")

@pytest.fixture
def app():
    from mancala.api.app import create_app
    app = create_app({"MANCALA_STONE_CHOICES": (3, 4), "MANCALA_DEFAULT_STONES": 4})
    app.config.update(TESTING=True)
    return app

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def engine():
    from mancala.engine import MancalaEngine
    return MancalaEngine(4)

@pytest.fixture
def events(engine):
    received = []
    engine.subscribe(received.append)
    return received
