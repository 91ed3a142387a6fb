from math import fsum


def tally_weighted_ballots(ballots, options=None):
    """Aggregate ballots into per-option counts, weights and percentages.

    ``ballots`` is any iterable of objects with ``option`` and ``weight``.
    Ballots are grouped by the stored option string as-is. When ``options`` is
    given, every listed option is reported (zero rows included) in that order
    and unlisted options seen in the ballots follow in first-seen order.
    """
    weights_by_option = {option: [] for option in options or ()}
    for ballot in ballots:
        weights_by_option.setdefault(ballot.option, []).append(float(ballot.weight))

    # fsum is exactly rounded, so totals do not depend on ballot order.
    per_option = {
        option: {"count": len(weights), "weight": fsum(weights)}
        for option, weights in weights_by_option.items()
    }
    total_count = sum(row["count"] for row in per_option.values())
    total_weight = fsum(
        weight for weights in weights_by_option.values() for weight in weights
    )

    for row in per_option.values():
        row["percent"] = (row["weight"] / total_weight * 100) if total_weight > 0 else 0

    top_weight = max((row["weight"] for row in per_option.values()), default=0.0)
    leaders = []
    if top_weight > 0:
        leaders = [
            option for option, row in per_option.items() if row["weight"] == top_weight
        ]

    return {
        "per_option": per_option,
        "total_count": total_count,
        "total_weight": total_weight,
        "leader": leaders[0] if len(leaders) == 1 else None,
        "is_tie": len(leaders) > 1,
    }
