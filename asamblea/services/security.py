from functools import wraps

from flask import current_app
from flask_login import current_user
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from asamblea.services.errors import ErrorKind, VotingError

RESET_SALT = "session-reset"


def _reset_serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"])


def generate_reset_token(session_round):
    return _reset_serializer().dumps({"round": session_round}, salt=RESET_SALT)


def verify_reset_token(token, max_age=None):
    if max_age is None:
        max_age = current_app.config["RESET_TOKEN_MAX_AGE"]
    try:
        data = _reset_serializer().loads(token, salt=RESET_SALT, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    return data.get("round") if isinstance(data, dict) else None


def require_reset_confirmation(payload, session_round):
    """Reject a reset request that is not explicitly confirmed for this round."""
    if payload.get("confirm") is not True:
        raise VotingError(ErrorKind.CONFIRMATION_REQUIRED)

    token_round = verify_reset_token(payload.get("token") or "")
    if token_round is None or token_round != session_round:
        raise VotingError(
            ErrorKind.CONFIRMATION_REQUIRED,
            "The reset confirmation token is invalid or has expired.",
        )


def role_required(*roles):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            if current_user.role not in roles:
                current_app.logger.warning(
                    "User %s (%s) denied access to %s",
                    current_user.username,
                    current_user.role,
                    view.__name__,
                )
                return {
                    "ok": False,
                    "error": "forbidden",
                    "message": "Your role cannot perform this action.",
                }, 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
