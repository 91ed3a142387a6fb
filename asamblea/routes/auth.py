from flask import current_app, request
from flask_login import current_user, login_required, login_user, logout_user
from werkzeug.security import check_password_hash

from asamblea.models import User


def register_auth_routes(app):
    @app.route("/login", methods=["POST"])
    def login():
        data = request.get_json(silent=True) or request.form
        username = (data.get("username") or "").strip()
        password = data.get("password") or ""
        remember = bool(data.get("remember"))

        user = User.query.filter_by(username=username).first()
        if not user or not check_password_hash(user.password_hash, password):
            current_app.logger.warning("Failed login for username %r", username)
            return {
                "ok": False,
                "error": "invalid_credentials",
                "message": "Invalid username or password.",
            }, 401

        login_user(user, remember=remember)
        current_app.logger.info("User %s logged in as %s", user.username, user.role)
        return {"ok": True, "user": {"username": user.username, "role": user.role}}

    @app.route("/me")
    @login_required
    def whoami():
        return {
            "ok": True,
            "user": {"username": current_user.username, "role": current_user.role},
        }

    @app.route("/logout", methods=["GET", "POST"])
    @login_required
    def logout():
        logout_user()
        return {"ok": True}
