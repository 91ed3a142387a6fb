"""Lifecycle of the single live voting session.

States are derived from the session row: IDLE (no question), OPEN (question
set and active) and CLOSED (question set, inactive). Every transition locks
the row so concurrent administrators are serialized by the database.
"""

from flask import current_app

from asamblea.extensions import db
from asamblea.models import VotingSession
from asamblea.models.voting_session import OPEN
from asamblea.services import ballots
from asamblea.services.clock import utcnow
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.events import session_changed
from asamblea.services.questions import get_question
from asamblea.services.resilience import db_retry

SESSION_ID = 1


def load_session(for_update=False):
    query = db.select(VotingSession).filter_by(id=SESSION_ID)
    if for_update:
        query = query.with_for_update()
    session = db.session.execute(query).scalar_one_or_none()
    if session is None:
        session = VotingSession(id=SESSION_ID, active=False, results_visible=False, round=0)
        db.session.add(session)
    return session


def _commit_and_notify(session, event):
    db.session.commit()
    snapshot = session_snapshot(session)
    session_changed.send(current_app._get_current_object(), event=event, snapshot=snapshot)
    return session


@db_retry
def get_current_session():
    session = load_session()
    if session in db.session.new:
        db.session.commit()
    return session


@db_retry
def start_voting(question_id):
    session = load_session(for_update=True)
    if session.state == OPEN:
        db.session.rollback()
        raise VotingError(ErrorKind.ALREADY_ACTIVE)

    try:
        question = get_question(question_id)
    except VotingError:
        db.session.rollback()
        raise
    session.question_id = question.id
    session.question = question
    session.active = True
    session.started_at = utcnow()
    session.ended_at = None
    session.round = (session.round or 0) + 1

    current_app.logger.info(
        "Voting opened for question %s (round %s)", question.id, session.round
    )
    return _commit_and_notify(session, "started")


@db_retry
def stop_voting():
    session = load_session(for_update=True)
    if session.state != OPEN:
        db.session.commit()
        current_app.logger.warning("Stop requested while voting is %s", session.state)
        return session

    session.active = False
    session.ended_at = utcnow()
    current_app.logger.info("Voting closed for question %s", session.question_id)
    return _commit_and_notify(session, "stopped")


@db_retry
def set_results_visible(visible):
    session = load_session(for_update=True)
    session.results_visible = bool(visible)
    current_app.logger.info("Results %s", "shown" if session.results_visible else "hidden")
    return _commit_and_notify(session, "results_visibility")


@db_retry
def reset_session():
    """Delete every ballot and return the session to IDLE in one transaction."""
    session = load_session(for_update=True)
    deleted = ballots.reset_all()

    session.active = False
    session.question_id = None
    session.question = None
    session.started_at = None
    session.ended_at = None

    current_app.logger.warning("Voting session reset; %s ballots deleted", deleted)
    return _commit_and_notify(session, "reset")


def session_snapshot(session=None):
    if session is None:
        session = get_current_session()

    question = session.question
    return {
        "state": session.state,
        "active": session.is_open,
        "question": question.to_dict() if question is not None else None,
        "started_at": session.started_at.isoformat() if session.started_at else None,
        "ended_at": session.ended_at.isoformat() if session.ended_at else None,
        "results_visible": session.results_visible,
        "round": session.round,
        "ballots_cast": ballots.count(session.round) if question is not None else 0,
    }
