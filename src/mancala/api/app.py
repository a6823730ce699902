import logging
import os

from flask import Flask, jsonify
from flask_smorest import Api
from flask_cors import CORS

from mancala import config
from mancala.api.routes import bp
from mancala.engine import MancalaEngine

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__)

    # smorest OpenAPI basics
    app.config["API_TITLE"] = "Mancala (Kalah)"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"

    app.config["MANCALA_STONE_CHOICES"] = config.STONE_CHOICES
    app.config["MANCALA_DEFAULT_STONES"] = config.DEFAULT_STONES
    app.config["MANCALA_CORS_ORIGINS"] = config.CORS_ORIGINS
    app.config["MANCALA_LOG_LEVEL"] = config.LOG_LEVEL
    if overrides:
        app.config.update(overrides)

    config.configure_logging(app.config["MANCALA_LOG_LEVEL"])

    api = Api(app)
    api.register_blueprint(bp)

    # the board UI runs on its own dev server
    CORS(app, resources={r"/api/*": {"origins": app.config["MANCALA_CORS_ORIGINS"]}})

    # one hot-seat game per app; the engine serializes concurrent requests
    app.extensions["mancala_engine"] = MancalaEngine(app.config["MANCALA_DEFAULT_STONES"])
    logger.info("Mancala API ready (stone choices: %s)", app.config["MANCALA_STONE_CHOICES"])

    @app.get("/openapi.json")
    def openapi_json():
        return jsonify(api.spec.to_dict())

    return app


def main():
    port = int(os.getenv("PORT", "8000"))
    create_app().run(host="127.0.0.1", port=port)


if __name__ == "__main__":
    main()
