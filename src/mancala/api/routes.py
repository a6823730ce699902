# src/mancala/api/routes.py
import logging

from flask import current_app
from flask_smorest import Blueprint, abort
from marshmallow import Schema, fields, validate, EXCLUDE

from mancala.engine import GameOver, MancalaEngine, MancalaError

logger = logging.getLogger(__name__)

bp = Blueprint("mancala", __name__, url_prefix="/api")

# ---------- Schemas ----------
class ResultSchema(Schema):
    result = fields.String()
    scores = fields.List(fields.Integer())

class StateSchema(Schema):
    pits = fields.List(fields.List(fields.Integer()))
    stores = fields.List(fields.Integer())
    current_player = fields.Integer()
    finished = fields.Boolean()
    stones_per_pit = fields.Integer()
    take_backs_remaining = fields.Integer()
    undo_available = fields.Boolean()
    result = fields.Nested(ResultSchema, allow_none=True)

class CaptureSchema(Schema):
    landing_pit = fields.Integer()
    opposite_pit = fields.Integer()
    stones = fields.Integer()

class OutcomeSchema(Schema):
    player = fields.Integer()
    start_pit = fields.Integer()
    path = fields.List(fields.Integer())
    last_slot = fields.Integer()
    changed_slots = fields.List(fields.Integer())
    capture = fields.Nested(CaptureSchema, allow_none=True)
    turn_passed = fields.Boolean()
    next_player = fields.Integer()
    result = fields.Nested(ResultSchema, allow_none=True)

class NewGameReqSchema(Schema):
    class Meta: unknown = EXCLUDE
    stones = fields.Integer(load_default=None)

class MoveReqSchema(Schema):
    class Meta: unknown = EXCLUDE
    pit    = fields.Integer(required=True)
    player = fields.Integer(required=True, validate=validate.OneOf([0, 1]))

class StateRespSchema(Schema):
    state = fields.Nested(StateSchema)

class MoveRespSchema(Schema):
    outcome = fields.Nested(OutcomeSchema)
    state   = fields.Nested(StateSchema)

class UndoRespSchema(Schema):
    undone = fields.Boolean()
    state  = fields.Nested(StateSchema)
# -----------------------------

def _engine() -> MancalaEngine:
    return current_app.extensions["mancala_engine"]

@bp.route("/health")
@bp.response(200, Schema.from_dict({"status": fields.String()})())
def health():
    return {"status": "ok"}

@bp.route("/state")
@bp.response(200, StateRespSchema)
def state():
    return {"state": _engine().state()}

@bp.route("/newgame", methods=["POST"])
@bp.arguments(NewGameReqSchema)
@bp.response(200, StateRespSchema)
def newgame(req):
    choices = current_app.config["MANCALA_STONE_CHOICES"]
    stones = req.get("stones")
    if stones is None:
        stones = current_app.config["MANCALA_DEFAULT_STONES"]
    if stones not in choices:
        abort(400, message=f"Stones per pit must be one of {list(choices)}")
    engine = _engine()
    engine.new_game(stones)
    return {"state": engine.state()}

@bp.route("/move", methods=["POST"])   # human move
@bp.arguments(MoveReqSchema)
@bp.response(200, MoveRespSchema)
def move(req):
    engine = _engine()
    try:
        outcome = engine.apply_move(req["pit"], req["player"])
    except GameOver as exc:
        abort(409, message=str(exc))
    except MancalaError as exc:
        logger.debug("Rejected move %s: %s", req, exc)
        abort(400, message=str(exc))
    return {"outcome": outcome.to_dict(), "state": engine.state()}

@bp.route("/undo", methods=["POST"])
@bp.response(200, UndoRespSchema)
def undo():
    engine = _engine()
    undone = engine.request_undo()
    return {"undone": undone, "state": engine.state()}
