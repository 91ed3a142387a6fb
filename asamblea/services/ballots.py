from sqlalchemy.exc import IntegrityError

from asamblea.extensions import db
from asamblea.models import Ballot, VotingSession


class DuplicateBallot(Exception):
    """A ballot for this ID already exists in the session round."""


def current_round():
    return db.session.query(VotingSession.round).filter_by(id=1).scalar() or 0


def has_voted(national_id, session_round=None):
    if session_round is None:
        session_round = current_round()
    return (
        db.session.query(Ballot.id)
        .filter_by(national_id=national_id, session_round=session_round)
        .first()
        is not None
    )


def append(ballot):
    """Insert ``ballot``; the unique (national_id, session_round) key rejects repeats."""
    db.session.add(ballot)
    try:
        db.session.flush()
    except IntegrityError as exc:
        db.session.rollback()
        raise DuplicateBallot(ballot.national_id) from exc
    return ballot


def list_all(session_round=None):
    if session_round is None:
        session_round = current_round()
    return (
        Ballot.query.filter_by(session_round=session_round)
        .order_by(Ballot.cast_at, Ballot.id)
        .all()
    )


def list_recent(limit, session_round=None):
    if session_round is None:
        session_round = current_round()
    return (
        Ballot.query.filter_by(session_round=session_round)
        .order_by(Ballot.cast_at.desc(), Ballot.id.desc())
        .limit(limit)
        .all()
    )


def count(session_round=None):
    if session_round is None:
        session_round = current_round()
    return Ballot.query.filter_by(session_round=session_round).count()


def reset_all():
    """Delete every ballot. Only reset_session calls this."""
    return Ballot.query.delete()
