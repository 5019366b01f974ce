"""Unit tests for src/mathler/puzzles.py"""

import datetime as dt

import pytest

from src.core.exceptions import PuzzlePoolError
from src.mathler.expression import evaluate
from src.mathler.puzzles import (
    SAMPLE_PUZZLES,
    SOLUTION_LENGTH,
    DailySelector,
    PuzzleTemplate,
    RoundRobinSelector,
    validate_pool,
)


def test_sample_pool_satisfies_invariants() -> None:
    validate_pool(SAMPLE_PUZZLES)
    for template in SAMPLE_PUZZLES:
        assert len(template.solution) == SOLUTION_LENGTH
        assert evaluate(template.solution) == template.target


@pytest.mark.parametrize(
    "template",
    [
        PuzzleTemplate("short", 30, "6*5+0"),  # length 5
        PuzzleTemplate("wrong", 13, "18-3*2"),  # evaluates to 12
        PuzzleTemplate("broken", 1, "1/0+00"),  # does not evaluate
    ],
)
def test_invalid_templates_are_rejected(template: PuzzleTemplate) -> None:
    with pytest.raises(PuzzlePoolError):
        validate_pool([template])


def test_empty_pool_is_rejected() -> None:
    with pytest.raises(PuzzlePoolError):
        validate_pool([])


def test_round_robin_wraps_around() -> None:
    selector = RoundRobinSelector(SAMPLE_PUZZLES[:3])
    picked = [selector.select().internal_id for _ in range(5)]
    assert picked == ["p1", "p2", "p3", "p1", "p2"]


def test_daily_selector_is_stable_within_a_day(clock) -> None:
    selector = DailySelector(clock)
    first = selector.select()
    clock.advance(60)
    assert selector.select() == first


def test_daily_selector_follows_day_of_year(clock) -> None:
    selector = DailySelector(clock)
    day = dt.datetime.fromtimestamp(clock.now(), tz=dt.timezone.utc).timetuple().tm_yday
    assert selector.select() == SAMPLE_PUZZLES[day % len(SAMPLE_PUZZLES)]
    clock.advance(24 * 60 * 60)
    assert selector.select() == SAMPLE_PUZZLES[(day + 1) % len(SAMPLE_PUZZLES)]
