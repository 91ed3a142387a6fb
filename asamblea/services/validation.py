"""Ballot admission: the checks a prospective vote must pass.

``validate_voter`` and ``submit_vote`` return tagged results instead of
raising for business-rule rejections. When several checks fail, the first
one in this order is reported:

1. the session is not open (SESSION_INACTIVE)
2. the ID already has a ballot in this round (ALREADY_VOTED)
3. the ID is not in the registry (VOTER_NOT_REGISTERED)
4. the apartment differs from the registered one (APARTMENT_MISMATCH)
5. the voter is not checked in or is disabled (NOT_CHECKED_IN)
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from asamblea.extensions import db
from asamblea.models import Ballot
from asamblea.services import attendance, ballots, normalize, registry
from asamblea.services.clock import utcnow
from asamblea.services.errors import MESSAGES, ErrorKind
from asamblea.services.events import ballot_cast
from asamblea.services.questions import match_option
from asamblea.services.resilience import db_retry
from asamblea.services.voting_session import load_session
from asamblea.services.weights import resolve_weight


@dataclass
class ValidationResult:
    valid: bool
    weight: Optional[float] = None
    error: Optional[ErrorKind] = None

    def to_dict(self):
        if self.valid:
            return {"ok": True, "valid": True, "weight": self.weight}
        return {
            "ok": False,
            "valid": False,
            "error": self.error.value,
            "message": MESSAGES[self.error],
        }


@dataclass
class VoteOutcome:
    ballot: Optional[Ballot] = None
    error: Optional[ErrorKind] = None

    @property
    def accepted(self):
        return self.ballot is not None


def _rejection(kind):
    return ValidationResult(valid=False, error=kind)


def _check(national_id, apartment, session):
    if not session.is_open:
        return _rejection(ErrorKind.SESSION_INACTIVE)

    already_voted = ballots.has_voted(national_id, session.round)
    voter = registry.get_voter(national_id)
    record = attendance.get_status(national_id)

    if already_voted:
        return _rejection(ErrorKind.ALREADY_VOTED)
    if voter is None:
        return _rejection(ErrorKind.VOTER_NOT_REGISTERED)
    if voter.voting_apartment != apartment:
        return _rejection(ErrorKind.APARTMENT_MISMATCH)
    if record is None or not record.enabled:
        return _rejection(ErrorKind.NOT_CHECKED_IN)

    return ValidationResult(valid=True, weight=resolve_weight(apartment))


@db_retry
def validate_voter(national_id, apartment):
    national_id = normalize.national_id(national_id)
    apartment = normalize.apartment(apartment)
    return _check(national_id, apartment, load_session())


@db_retry
def submit_vote(national_id, apartment, option):
    national_id = normalize.national_id(national_id)
    apartment = normalize.apartment(apartment)
    session = load_session()

    # Re-validate at submit time; a prior validation may be stale.
    result = _check(national_id, apartment, session)
    if not result.valid:
        current_app.logger.warning(
            "Vote rejected for %s (%s): %s", national_id, apartment, result.error.value
        )
        return VoteOutcome(error=result.error)

    chosen = match_option(session.question, option)
    if chosen is None:
        current_app.logger.warning(
            "Vote rejected for %s: unknown option %r", national_id, option
        )
        return VoteOutcome(error=ErrorKind.INVALID_OPTION)

    ballot = Ballot(
        national_id=national_id,
        apartment=apartment,
        option=chosen.key,
        option_label=chosen.label,
        weight=result.weight,
        cast_at=utcnow(),
        session_round=session.round,
    )
    try:
        ballots.append(ballot)
    except ballots.DuplicateBallot:
        current_app.logger.warning(
            "Concurrent duplicate vote for %s rejected by the ballot store", national_id
        )
        return VoteOutcome(error=ErrorKind.ALREADY_VOTED)
    db.session.commit()

    current_app.logger.info(
        "Ballot accepted: apartment %s, option %s, weight %s",
        apartment,
        chosen.key,
        ballot.weight,
    )
    ballot_cast.send(current_app._get_current_object(), ballot=ballot.to_dict(include_voter=False))
    return VoteOutcome(ballot=ballot)
