"""Star limit tests."""

from core.star_limiter import STAR_LIMIT, StarCounter, can_star


def test_unstar_always_allowed() -> None:
    assert can_star(True, STAR_LIMIT + 5)


def test_star_blocked_at_limit() -> None:
    assert can_star(False, STAR_LIMIT - 1)
    assert not can_star(False, STAR_LIMIT)


def test_counter_seeds_from_items() -> None:
    counter = StarCounter.from_items(
        [("cat-a", True), ("cat-a", True), ("cat-a", False), ("cat-b", True)]
    )
    assert counter.as_dict() == {"cat-a": 2, "cat-b": 1}
    assert counter.count("cat-c") == 0


def test_counter_apply_moves_and_floors_at_zero() -> None:
    counter = StarCounter({"cat": 1}, limit=2)

    assert counter.apply("cat", True) == 2
    assert not counter.can_star("cat", False)
    assert counter.can_star("cat", True)
    assert counter.apply("cat", False) == 1
    assert counter.apply("cat", False) == 0
    assert counter.apply("cat", False) == 0
