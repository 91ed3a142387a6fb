from functools import wraps

from flask import current_app
from sqlalchemy.exc import OperationalError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from asamblea.extensions import db
from asamblea.services.errors import ErrorKind, VotingError


def _rollback_before_retry(retry_state):
    db.session.rollback()
    current_app.logger.warning(
        "Database call %s failed (attempt %s), retrying: %s",
        getattr(retry_state.fn, "__name__", "?"),
        retry_state.attempt_number,
        retry_state.outcome.exception(),
    )


def db_retry(func):
    """Retry transient database failures, then surface UNAVAILABLE."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        config = current_app.config
        retrying = Retrying(
            retry=retry_if_exception_type(OperationalError),
            stop=stop_after_attempt(config["DB_RETRY_ATTEMPTS"]),
            wait=wait_exponential(
                multiplier=config["DB_RETRY_WAIT_MULTIPLIER"],
                max=config["DB_RETRY_MAX_WAIT"],
            ),
            before_sleep=_rollback_before_retry,
            reraise=True,
        )
        try:
            return retrying(func, *args, **kwargs)
        except OperationalError as exc:
            db.session.rollback()
            current_app.logger.error(
                "Database unavailable in %s after %s attempts: %s",
                func.__name__,
                config["DB_RETRY_ATTEMPTS"],
                exc,
            )
            raise VotingError(ErrorKind.UNAVAILABLE) from exc

    return wrapper
