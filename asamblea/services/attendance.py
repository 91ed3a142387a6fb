from flask import current_app
from sqlalchemy.exc import IntegrityError

from asamblea.extensions import db
from asamblea.models import AttendanceRecord, Voter
from asamblea.services import normalize
from asamblea.services.clock import utcnow
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.resilience import db_retry


@db_retry
def register_attendance(national_id, apartment):
    """Check a registered voter in at the assembly.

    The apartment must be the one on file in the registry. An ID that is
    already checked in keeps its existing record, enabled or not.
    """
    national_id = normalize.national_id(national_id)
    apartment = normalize.apartment(apartment)

    voter = db.session.get(Voter, national_id)
    if voter is None or voter.apartment != apartment:
        current_app.logger.warning(
            "Attendance rejected for %s (apartment %s): not in the registry",
            national_id,
            apartment,
        )
        raise VotingError(ErrorKind.VOTER_NOT_REGISTERED)

    record = db.session.get(AttendanceRecord, national_id)
    if record is not None:
        return record, False

    record = AttendanceRecord(
        national_id=national_id,
        apartment=apartment,
        enabled=True,
        registered_at=utcnow(),
    )
    db.session.add(record)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return db.session.get(AttendanceRecord, national_id), False
    current_app.logger.info("Attendance registered for %s (%s)", national_id, apartment)
    return record, True


@db_retry
def set_enabled(national_id, enabled):
    record = db.session.get(AttendanceRecord, normalize.national_id(national_id))
    if record is None:
        raise VotingError(ErrorKind.NOT_FOUND, "No attendance record exists for this ID.")

    record.enabled = bool(enabled)
    db.session.commit()
    current_app.logger.info(
        "Attendance for %s %s",
        record.national_id,
        "enabled" if record.enabled else "disabled",
    )
    return record


def get_status(national_id):
    return db.session.get(AttendanceRecord, normalize.national_id(national_id))


@db_retry
def list_attendance():
    return AttendanceRecord.query.order_by(
        AttendanceRecord.registered_at.desc(), AttendanceRecord.national_id
    ).all()


@db_retry
def attendance_stats():
    total_registered = AttendanceRecord.query.count()
    total_enabled = AttendanceRecord.query.filter_by(enabled=True).count()
    return {"total_registered": total_registered, "total_enabled": total_enabled}
