from mancala.api.app import create_app
