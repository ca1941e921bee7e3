import pytest

from spellsuggest.spellcheck.budget import Deadline
from spellsuggest.spellcheck.scoring import ScoringWeights, rank, score


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_score_is_clamped_to_unit_interval() -> None:
    assert score("playstation", "playstation") == 1.0
    for query, candidate in [("swich", "switch"), ("swich", "mousepad"), ("a", "grand theft auto"), ("", "")]:
        assert 0.0 <= score(query, candidate) <= 1.0


def test_score_prefers_close_candidates() -> None:
    assert score("playstaton", "playstation") >= 0.7
    assert score("swich", "switch") > score("swich", "mousepad")


def test_rank_keeps_iteration_order_on_ties() -> None:
    ranked = rank("abc", ["abd", "abe"], limit=2)

    assert [item.term for item in ranked] == ["abd", "abe"]
    assert ranked[0].score == ranked[1].score


def test_rank_skips_candidates_beyond_max_distance() -> None:
    ranked = rank("abc", ["xyzxyz", "abd"], max_distance=1)

    assert [item.term for item in ranked] == ["abd"]
    assert ranked[0].distance == 1


def test_rank_respects_limit_and_min_score() -> None:
    assert rank("abc", ["abd"], limit=0) == []
    assert rank("swich", ["mousepad", "switch"], min_score=0.5)[0].term == "switch"
    assert all(item.term != "mousepad" for item in rank("swich", ["mousepad", "switch"], min_score=0.5))


def test_rank_stops_when_deadline_expires() -> None:
    clock = _FakeClock()
    deadline = Deadline(10, clock=clock)
    clock.now += 1.0

    assert rank("abc", ["abd", "abe"], deadline=deadline) == []
    assert deadline.was_hit


def test_deadline_without_budget_never_expires() -> None:
    clock = _FakeClock()
    deadline = Deadline(None, clock=clock)
    clock.now += 3600.0

    assert not deadline.expired()
    assert deadline.elapsed_ms() == 3600.0 * 1000.0


def test_deadline_stays_expired() -> None:
    clock = _FakeClock()
    deadline = Deadline(5, clock=clock)
    assert not deadline.expired()

    clock.now += 0.01
    assert deadline.expired()
    clock.now = 0.0
    assert deadline.expired()


def test_transposition_weight_is_opt_in() -> None:
    weighted = score("abcd", "dbca", ScoringWeights(transposition=0.15))

    assert weighted == pytest.approx(score("abcd", "dbca") + 0.85 * 0.15)
    assert score("abcd", "abce", ScoringWeights(transposition=0.15)) == score("abcd", "abce")
