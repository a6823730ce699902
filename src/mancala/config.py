# src/mancala/config.py
import logging
import os
from typing import List, Tuple

# ---------------------------------------------------------------------
# Settings (environment)
# ---------------------------------------------------------------------

def _int_list(raw: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in raw.split(",") if part.strip())


def _str_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


STONE_CHOICES = _int_list(os.getenv("MANCALA_STONE_CHOICES", "3,4"))
DEFAULT_STONES = int(os.getenv("MANCALA_DEFAULT_STONES", str(STONE_CHOICES[-1])))
LOG_LEVEL = os.getenv("MANCALA_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = _str_list(os.getenv(
    "MANCALA_CORS_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080,http://127.0.0.1:8080",
))

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# ---------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------

def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("mancala").setLevel(level)
