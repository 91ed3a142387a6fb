import csv
import io
import math
from dataclasses import dataclass, field

from flask import current_app

from asamblea.extensions import db
from asamblea.models import Voter
from asamblea.services import normalize
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.resilience import db_retry
from asamblea.services.weights import store_weight_table

IMPORT_HEADER = ("cedula", "apartamento", "peso")
TEMPLATE_ROWS = (("123456789", "A101", "1.5"), ("987654321", "A102", "2.0"))


@dataclass
class ImportReport:
    voters: int = 0
    skipped_rows: list = field(default_factory=list)
    weights: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "ok": True,
            "voters": self.voters,
            "apartments": len(self.weights),
            "skipped_rows": self.skipped_rows,
        }


def _upsert_voter(national_id, apartment, attendance_apartment=None):
    voter = db.session.get(Voter, national_id)
    if voter is None:
        voter = Voter(
            national_id=national_id,
            apartment=apartment,
            attendance_apartment=attendance_apartment,
        )
        db.session.add(voter)
        return voter, True

    voter.apartment = apartment
    voter.attendance_apartment = attendance_apartment
    return voter, False


@db_retry
def register_voter(national_id, apartment, attendance_apartment=None):
    national_id = normalize.national_id(national_id)
    apartment = normalize.apartment(apartment)
    attendance_apartment = normalize.apartment(attendance_apartment) or None
    if not national_id or not apartment:
        raise VotingError(
            ErrorKind.INVALID_IMPORT, "Both the ID and the apartment are required."
        )

    voter, created = _upsert_voter(national_id, apartment, attendance_apartment)
    db.session.commit()
    current_app.logger.info(
        "Voter %s %s for apartment %s",
        national_id,
        "registered" if created else "updated",
        apartment,
    )
    return voter, created


def get_voter(national_id):
    return db.session.get(Voter, normalize.national_id(national_id))


@db_retry
def lookup_voter(national_id):
    voter = get_voter(national_id)
    if voter is None:
        raise VotingError(ErrorKind.NOT_FOUND, "The voter is not registered in the system.")
    return voter


@db_retry
def list_voters():
    return Voter.query.order_by(Voter.apartment, Voter.national_id).all()


def count_voters():
    return Voter.query.count()


def parse_voter_csv(text):
    """Parse ``cedula,apartamento,peso`` rows into an ImportReport.

    The first non-empty row is treated as a header when its first cell contains
    "cedula". Rows without an ID or apartment, or with a weight that is not a
    positive number, are reported in ``skipped_rows`` by line number.
    """
    report = ImportReport()
    rows = []
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))

    first_row = True
    for line_number, row in enumerate(reader, start=1):
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue
        is_header = first_row and "cedula" in cells[0].lower()
        first_row = False
        if is_header:
            continue

        if len(cells) < 3:
            report.skipped_rows.append(line_number)
            continue

        national_id = normalize.national_id(cells[0])
        apartment = normalize.apartment(cells[1])
        try:
            weight = float(cells[2])
        except ValueError:
            weight = None

        if (
            not national_id
            or not apartment
            or weight is None
            or not math.isfinite(weight)
            or weight <= 0
        ):
            report.skipped_rows.append(line_number)
            continue

        rows.append((national_id, apartment))
        report.weights[apartment] = weight

    return report, rows


@db_retry
def import_voters_csv(text):
    report, rows = parse_voter_csv(text)
    if not rows:
        raise VotingError(ErrorKind.INVALID_IMPORT)

    apartments_by_id = dict(rows)
    for national_id, apartment in apartments_by_id.items():
        voter = db.session.get(Voter, national_id)
        if voter is None:
            db.session.add(Voter(national_id=national_id, apartment=apartment))
        else:
            voter.apartment = apartment
    report.voters = len(apartments_by_id)

    store_weight_table(report.weights)
    db.session.commit()

    current_app.logger.info(
        "Imported %s voters and %s apartment weights (%s rows skipped)",
        report.voters,
        len(report.weights),
        len(report.skipped_rows),
    )
    return report


def voter_import_template():
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(IMPORT_HEADER)
    writer.writerows(TEMPLATE_ROWS)
    return buffer.getvalue()
