from flask import current_app, request
from flask_login import current_user

from asamblea.services import ballots, normalize
from asamblea.services.errors import MESSAGES, STATUS_CODES
from asamblea.services.validation import submit_vote, validate_voter
from asamblea.services.voting import current_tally
from asamblea.services.voting_session import get_current_session, session_snapshot


def _vote_fields():
    data = request.get_json(silent=True) or request.form
    return (
        normalize.national_id(data.get("national_id")),
        normalize.apartment(data.get("apartment")),
        data.get("option"),
    )


def _missing_fields():
    return {
        "ok": False,
        "error": "missing_fields",
        "message": "Please fill in the ID and the apartment.",
    }, 400


def register_public_routes(app):
    @app.route("/")
    def index():
        return {"ok": True, "service": "asamblea"}

    @app.route("/sessions/current")
    def current_session():
        return {"ok": True, "session": session_snapshot()}

    @app.route("/votes/validate", methods=["POST"])
    def validate_vote():
        national_id, apartment, _ = _vote_fields()
        if not national_id or not apartment:
            return _missing_fields()

        result = validate_voter(national_id, apartment)
        if result.valid:
            return result.to_dict()
        return result.to_dict(), STATUS_CODES[result.error]

    @app.route("/votes", methods=["POST"])
    def cast_vote():
        national_id, apartment, option = _vote_fields()
        if not national_id or not apartment:
            return _missing_fields()

        outcome = submit_vote(national_id, apartment, option)
        if not outcome.accepted:
            return {
                "ok": False,
                "error": outcome.error.value,
                "message": MESSAGES[outcome.error],
            }, STATUS_CODES[outcome.error]

        return {"ok": True, "ballot": outcome.ballot.to_dict()}, 201

    @app.route("/votes/recent")
    def recent_votes():
        limit = current_app.config["RECENT_BALLOTS_LIMIT"]
        requested = request.args.get("limit", type=int)
        if requested is not None and 0 < requested < limit:
            limit = requested

        session = get_current_session()
        recent = ballots.list_recent(limit, session.round)
        return {
            "ok": True,
            "ballots": [ballot.to_dict(include_voter=False) for ballot in recent],
        }

    @app.route("/tally")
    def tally():
        session = get_current_session()
        if not session.results_visible and not current_user.is_authenticated:
            return {"ok": True, "results_visible": False}

        return {"ok": True, "results_visible": session.results_visible, **current_tally()}
