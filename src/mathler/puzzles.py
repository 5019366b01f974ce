"""The pool of puzzles and the policies used to pick the next one."""

import datetime as dt
import threading
from dataclasses import dataclass
from typing import Protocol, Sequence

from src.core.clock import Clock
from src.core.exceptions import PuzzlePoolError
from src.mathler.expression import EvaluationFailure, evaluate

SOLUTION_LENGTH = 6


@dataclass(frozen=True)
class PuzzleTemplate:
    internal_id: str
    target: int
    solution: str


# Kept in memory for now. Could move into the database once the pool grows.
SAMPLE_PUZZLES: tuple[PuzzleTemplate, ...] = (
    PuzzleTemplate("p1", 12, "18-3*2"),
    PuzzleTemplate("p2", 25, "10*2+5"),
    PuzzleTemplate("p3", 7, "10-3+0"),
    PuzzleTemplate("p4", 100, "50*2-0"),
    PuzzleTemplate("p5", 1, "10/5-1"),
    PuzzleTemplate("p6", 15, "10+5+0"),
    PuzzleTemplate("p7", 30, "15*2+0"),
    PuzzleTemplate("p8", 8, "16-8*1"),
)


def validate_pool(templates: Sequence[PuzzleTemplate], length: int = SOLUTION_LENGTH) -> None:
    """Every solution must have the fixed length and evaluate exactly to its target."""
    if not templates:
        raise PuzzlePoolError("Puzzle pool is empty.")
    for template in templates:
        if len(template.solution) != length:
            raise PuzzlePoolError(
                f"Puzzle {template.internal_id}: solution {template.solution!r} is not {length} characters long."
            )
        value = evaluate(template.solution)
        if isinstance(value, EvaluationFailure) or value != template.target:
            raise PuzzlePoolError(
                f"Puzzle {template.internal_id}: solution {template.solution!r} does not evaluate to {template.target}."
            )


class PuzzleSelector(Protocol):
    def select(self) -> PuzzleTemplate: ...


class RoundRobinSelector:
    """Hands out the pool in order, wrapping around."""

    def __init__(self, templates: Sequence[PuzzleTemplate] = SAMPLE_PUZZLES) -> None:
        self.templates = tuple(templates)
        self._index = 0
        self._lock = threading.Lock()

    def select(self) -> PuzzleTemplate:
        with self._lock:
            template = self.templates[self._index % len(self.templates)]
            self._index += 1
        return template


class DailySelector:
    """Same puzzle for everyone on a given day (picked by day of the year)."""

    def __init__(
        self, clock: Clock, templates: Sequence[PuzzleTemplate] = SAMPLE_PUZZLES
    ) -> None:
        self.clock = clock
        self.templates = tuple(templates)

    def select(self) -> PuzzleTemplate:
        today = dt.datetime.fromtimestamp(self.clock.now(), tz=dt.timezone.utc).date()
        day_of_year = today.timetuple().tm_yday
        return self.templates[day_of_year % len(self.templates)]
