import math

from flask import current_app

from asamblea.extensions import db
from asamblea.models import ApartmentWeight
from asamblea.services import normalize
from asamblea.services.errors import ErrorKind, VotingError
from asamblea.services.resilience import db_retry

DEFAULT_WEIGHT = 1.0


def _validated_table(pairs):
    table = {}
    for entry in pairs:
        if isinstance(entry, dict):
            apartment, weight = entry.get("apartment"), entry.get("weight")
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            apartment, weight = entry
        else:
            raise VotingError(
                ErrorKind.INVALID_IMPORT,
                "Each weight entry needs an apartment and a weight.",
            )

        apartment = normalize.apartment(apartment)
        try:
            weight = float(weight)
        except (TypeError, ValueError):
            weight = None

        if not apartment or weight is None or not math.isfinite(weight) or weight <= 0:
            raise VotingError(
                ErrorKind.INVALID_IMPORT,
                f"Invalid weight entry for apartment '{apartment}'. "
                "Weights must be positive numbers.",
            )
        table[apartment] = weight

    if not table:
        raise VotingError(ErrorKind.INVALID_IMPORT)
    return table


def store_weight_table(table):
    """Replace the stored table with ``table`` inside the caller's transaction."""
    ApartmentWeight.query.delete()
    db.session.add_all(
        ApartmentWeight(apartment=apartment, weight=weight)
        for apartment, weight in table.items()
    )


@db_retry
def replace_weight_table(pairs):
    """Replace the whole weight table.

    ``pairs`` is an iterable of ``(apartment, weight)`` tuples or
    ``{"apartment", "weight"}`` mappings. Apartments missing from the new
    table fall back to DEFAULT_WEIGHT afterwards.
    """
    if isinstance(pairs, dict):
        pairs = pairs.items()
    table = _validated_table(pairs)

    store_weight_table(table)
    db.session.commit()
    current_app.logger.info("Weight table replaced with %s apartments", len(table))
    return table


def resolve_weight(apartment):
    row = db.session.get(ApartmentWeight, normalize.apartment(apartment))
    return row.weight if row is not None else DEFAULT_WEIGHT


@db_retry
def weight_table():
    return {
        row.apartment: row.weight
        for row in ApartmentWeight.query.order_by(ApartmentWeight.apartment).all()
    }
