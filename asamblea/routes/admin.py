from datetime import datetime, timezone

from flask import Response, request

from asamblea.models.user import ATTENDANCE_ADMIN, VOTING_ADMIN
from asamblea.services import attendance, ballots, questions, registry, weights
from asamblea.services import voting_session
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.security import (
    generate_reset_token,
    require_reset_confirmation,
    role_required,
)
from asamblea.services.voting import export_ballots_csv

ANY_ADMIN = (VOTING_ADMIN, ATTENDANCE_ADMIN)


def _payload():
    return request.get_json(silent=True) or request.form


def _csv_response(text, filename):
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def register_admin_routes(app):
    # --- Voter registry ---

    @app.route("/voters", methods=["GET"])
    @role_required(*ANY_ADMIN)
    def list_voters():
        return {"ok": True, "voters": [voter.to_dict() for voter in registry.list_voters()]}

    @app.route("/voters", methods=["POST"])
    @role_required(*ANY_ADMIN)
    def create_voter():
        data = _payload()
        voter, created = registry.register_voter(
            data.get("national_id"),
            data.get("apartment"),
            data.get("attendance_apartment"),
        )
        return {"ok": True, "voter": voter.to_dict()}, 201 if created else 200

    @app.route("/voters/<national_id>")
    @role_required(*ANY_ADMIN)
    def voter_detail(national_id):
        return {"ok": True, "voter": registry.lookup_voter(national_id).to_dict()}

    @app.route("/voters/import", methods=["POST"])
    @role_required(*ANY_ADMIN)
    def import_voters():
        upload = request.files.get("file")
        if upload is not None:
            text = upload.read().decode("utf-8-sig")
        else:
            text = request.get_data(as_text=True)

        report = registry.import_voters_csv(text)
        return report.to_dict()

    @app.route("/voters/template")
    @role_required(*ANY_ADMIN)
    def voter_template():
        return _csv_response(registry.voter_import_template(), "plantilla_votantes.csv")

    # --- Attendance ---

    @app.route("/attendance")
    @role_required(ATTENDANCE_ADMIN)
    def list_attendance():
        return {
            "ok": True,
            "stats": attendance.attendance_stats(),
            "attendance": [record.to_dict() for record in attendance.list_attendance()],
        }

    @app.route("/attendance/<national_id>", methods=["GET"])
    @role_required(ATTENDANCE_ADMIN)
    def attendance_detail(national_id):
        record = attendance.get_status(national_id)
        if record is None:
            raise VotingError(ErrorKind.NOT_FOUND, "No attendance record exists for this ID.")
        return {"ok": True, "attendance": record.to_dict()}

    @app.route("/attendance/<national_id>", methods=["POST"])
    @role_required(ATTENDANCE_ADMIN)
    def register_attendance(national_id):
        record, created = attendance.register_attendance(
            national_id, _payload().get("apartment")
        )
        return {"ok": True, "attendance": record.to_dict()}, 201 if created else 200

    @app.route("/attendance/<national_id>", methods=["PATCH"])
    @role_required(ATTENDANCE_ADMIN)
    def toggle_attendance(national_id):
        enabled = _payload().get("enabled")
        if not isinstance(enabled, bool):
            return {
                "ok": False,
                "error": "missing_fields",
                "message": "'enabled' must be true or false.",
            }, 400

        record = attendance.set_enabled(national_id, enabled)
        return {"ok": True, "attendance": record.to_dict()}

    # --- Weight table ---

    @app.route("/weights", methods=["GET"])
    @role_required(*ANY_ADMIN)
    def list_weights():
        return {"ok": True, "weights": weights.weight_table()}

    @app.route("/weights", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def import_weights():
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            data = data.get("weights")
        if not isinstance(data, list):
            raise VotingError(
                ErrorKind.INVALID_IMPORT,
                "Send a list of {apartment, weight} entries.",
            )

        table = weights.replace_weight_table(data)
        return {"ok": True, "weights": table}

    # --- Questions ---

    @app.route("/questions", methods=["GET"])
    @role_required(VOTING_ADMIN)
    def list_questions():
        return {
            "ok": True,
            "questions": [question.to_dict() for question in questions.list_questions()],
        }

    @app.route("/questions", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def create_question():
        data = request.get_json(silent=True) or {}
        question = questions.create_question(
            data.get("title"), data.get("description"), data.get("options")
        )
        return {"ok": True, "question": question.to_dict()}, 201

    @app.route("/questions/<int:question_id>", methods=["DELETE"])
    @role_required(VOTING_ADMIN)
    def delete_question(question_id):
        questions.delete_question(question_id)
        return {"ok": True}

    # --- Voting session ---

    @app.route("/sessions/current/start", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def start_voting():
        data = _payload()
        question_id = data.get("question_id")
        if isinstance(data.get("question"), dict):
            question_id = data["question"].get("id")
        try:
            question_id = int(question_id)
        except (TypeError, ValueError):
            raise VotingError(ErrorKind.NOT_FOUND, "The question does not exist.")

        session = voting_session.start_voting(question_id)
        return {"ok": True, "session": voting_session.session_snapshot(session)}

    @app.route("/sessions/current/stop", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def stop_voting():
        session = voting_session.stop_voting()
        return {"ok": True, "session": voting_session.session_snapshot(session)}

    @app.route("/sessions/current", methods=["PATCH"])
    @role_required(VOTING_ADMIN)
    def update_session():
        visible = _payload().get("results_visible")
        if not isinstance(visible, bool):
            return {
                "ok": False,
                "error": "missing_fields",
                "message": "'results_visible' must be true or false.",
            }, 400

        session = voting_session.set_results_visible(visible)
        return {"ok": True, "session": voting_session.session_snapshot(session)}

    @app.route("/sessions/current/reset-token", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def reset_token():
        session = voting_session.get_current_session()
        return {
            "ok": True,
            "token": generate_reset_token(session.round),
            "expires_in": app.config["RESET_TOKEN_MAX_AGE"],
        }

    @app.route("/sessions/current/reset", methods=["POST"])
    @role_required(VOTING_ADMIN)
    def reset_session():
        data = request.get_json(silent=True) or {}
        session = voting_session.get_current_session()
        require_reset_confirmation(data, session.round)

        session = voting_session.reset_session()
        return {"ok": True, "session": voting_session.session_snapshot(session)}

    # --- Results and statistics ---

    @app.route("/votes/export")
    @role_required(VOTING_ADMIN)
    def export_votes():
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%SZ")
        return _csv_response(export_ballots_csv(), f"resultados-votacion-{stamp}.csv")

    @app.route("/stats")
    @role_required(*ANY_ADMIN)
    def stats():
        session = voting_session.get_current_session()
        return {
            "ok": True,
            "ballots_cast": ballots.count(session.round),
            "registered_voters": registry.count_voters(),
            "session_state": session.state,
            "questions": len(questions.list_questions()),
            "attendance": attendance.attendance_stats(),
        }
