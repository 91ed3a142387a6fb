import math
import random
from types import SimpleNamespace

import pytest

from asamblea.services.voting import tally_weighted_ballots


def make_ballots(*pairs):
    return [SimpleNamespace(option=option, weight=weight) for option, weight in pairs]


def test_weighted_tally_splits_evenly_by_weight():
    ballots = make_ballots(("Sí", 1.0), ("No", 2.0), ("Sí", 1.0))

    result = tally_weighted_ballots(ballots)

    assert result["per_option"]["Sí"]["count"] == 2
    assert result["per_option"]["Sí"]["weight"] == pytest.approx(2.0)
    assert result["per_option"]["No"]["count"] == 1
    assert result["per_option"]["No"]["weight"] == pytest.approx(2.0)
    assert result["per_option"]["Sí"]["percent"] == pytest.approx(50.0)
    assert result["per_option"]["No"]["percent"] == pytest.approx(50.0)
    assert result["total_count"] == 3
    assert result["total_weight"] == pytest.approx(4.0)
    assert result["is_tie"] is True
    assert result["leader"] is None


def test_tally_is_invariant_under_reordering():
    rng = random.Random(7)
    pairs = [(rng.choice(["sí", "no", "blanco"]), rng.choice([1.0, 1.2, 1.5, 1.7, 2.0])) for _ in range(60)]
    ballots = make_ballots(*pairs)
    expected = tally_weighted_ballots(ballots, options=["sí", "no", "blanco"])

    for _ in range(5):
        shuffled = ballots[:]
        rng.shuffle(shuffled)
        assert tally_weighted_ballots(shuffled, options=["sí", "no", "blanco"]) == expected


def test_percentages_sum_to_one_hundred():
    ballots = make_ballots(("a", 1.3), ("b", 1.7), ("c", 1.1), ("a", 2.0))

    result = tally_weighted_ballots(ballots)

    total = math.fsum(row["percent"] for row in result["per_option"].values())
    assert total == pytest.approx(100.0)
    assert result["leader"] == "a"


def test_empty_tally_reports_zero_percentages():
    result = tally_weighted_ballots([], options=["sí", "no"])

    assert result["total_count"] == 0
    assert result["total_weight"] == 0
    assert list(result["per_option"]) == ["sí", "no"]
    assert all(row["percent"] == 0 for row in result["per_option"].values())
    assert result["leader"] is None
    assert result["is_tie"] is False


def test_grouping_uses_the_stored_option_string():
    ballots = make_ballots(("Sí", 1.0), ("sí", 1.0))

    result = tally_weighted_ballots(ballots)

    assert set(result["per_option"]) == {"Sí", "sí"}


def test_unlisted_options_follow_the_listed_ones():
    ballots = make_ballots(("otro", 1.0), ("no", 1.0))

    result = tally_weighted_ballots(ballots, options=["sí", "no"])

    assert list(result["per_option"]) == ["sí", "no", "otro"]
    assert result["per_option"]["sí"]["count"] == 0
