"""
The Puzzle Registry keeps the hidden solution of every active puzzle and checks guesses against it.

Puzzles live in a plain dict keyed by an opaque id. Each one expires a fixed time after it was issued:
a scheduled callback removes it, and reads also treat an entry past its deadline as gone. A guess
racing the timer therefore always sees either the full puzzle or `PuzzleNotFoundError`.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import uuid4

from src.core.clock import Clock, Scheduler
from src.core.exceptions import PuzzleNotFoundError
from src.core.models import GuessOutcome, IssuedPuzzle, PuzzleId
from src.core.shared_types import GameStatus
from src.mathler.expression import EvaluationFailure, evaluate
from src.mathler.puzzles import SOLUTION_LENGTH, PuzzleSelector, validate_pool
from src.mathler.scoring import is_solved, score

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 10 * 60


@dataclass(frozen=True)
class Puzzle:
    puzzle_id: PuzzleId
    target_value: int
    solution: str
    created_at: float


class PuzzleRegistry:
    """Issues puzzles and validates guesses. Safe to share between concurrent sessions."""

    def __init__(
        self,
        selector: PuzzleSelector,
        clock: Clock,
        scheduler: Scheduler,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        solution_length: int = SOLUTION_LENGTH,
        id_factory: Callable[[], object] = uuid4,
    ) -> None:
        templates = getattr(selector, "templates", None)
        if templates is not None:
            validate_pool(templates, solution_length)

        self.selector = selector
        self.clock = clock
        self.scheduler = scheduler
        self.expiry_seconds = expiry_seconds
        self.solution_length = solution_length
        self.id_factory = id_factory
        self._puzzles: dict[PuzzleId, Puzzle] = {}
        self._lock = threading.Lock()

    # -- Registry API --
    def issue(self) -> IssuedPuzzle:
        """Pick a puzzle, store it under a fresh id and schedule its removal. The solution is not returned."""
        template = self.selector.select()
        puzzle = Puzzle(
            puzzle_id=str(self.id_factory()),
            target_value=template.target,
            solution=template.solution,
            created_at=self.clock.now(),
        )
        with self._lock:
            self._puzzles[puzzle.puzzle_id] = puzzle

        self.scheduler.call_later(
            self.expiry_seconds, lambda: self.expire(puzzle.puzzle_id)
        )
        logger.debug("Issued puzzle %s (template %s)", puzzle.puzzle_id, template.internal_id)

        return IssuedPuzzle(
            puzzle_id=puzzle.puzzle_id,
            target_value=puzzle.target_value,
            solution_length=self.solution_length,
        )

    def check_guess(self, puzzle_id: PuzzleId, guess: str) -> GuessOutcome:
        """
        Validate and score a guess.
        ----
        Raises `PuzzleNotFoundError` for unknown/expired ids. Any other rejection is returned as data,
        with `game_status` still `playing` and a message in `error`.
        """
        puzzle = self._fetch_puzzle(puzzle_id)

        if len(guess) != self.solution_length:
            return self._rejected(guess, f"Guess must be {self.solution_length} characters.")

        value = evaluate(guess)
        if isinstance(value, EvaluationFailure):
            return self._rejected(guess, "Invalid mathematical expression.")

        # Tiles are computed even for a wrong value, so the player still gets positional feedback.
        tiles = score(guess, puzzle.solution)

        if value != puzzle.target_value:
            return GuessOutcome(
                guess=guess,
                matches_target=False,
                evaluated_value=value,
                tile_colors=tiles,
                game_status=GameStatus.PLAYING,
                error=f"Expression evaluates to {value}, not {puzzle.target_value}.",
            )

        # Same value is not enough: a different expression can reach the target too.
        won = is_solved(tiles)
        return GuessOutcome(
            guess=guess,
            matches_target=True,
            evaluated_value=value,
            tile_colors=tiles,
            game_status=GameStatus.WON if won else GameStatus.PLAYING,
            solution=puzzle.solution if won else None,
        )

    def expire(self, puzzle_id: PuzzleId) -> None:
        """Remove a puzzle. Removing an id that is already gone is a no-op."""
        with self._lock:
            removed = self._puzzles.pop(puzzle_id, None)
        if removed is not None:
            logger.debug("Puzzle %s expired", puzzle_id)

    def purge_expired(self) -> int:
        """Drop every entry past its deadline. Returns how many were removed."""
        now = self.clock.now()
        with self._lock:
            stale = [pid for pid, p in self._puzzles.items() if self._is_expired(p, now)]
            for pid in stale:
                del self._puzzles[pid]
        if stale:
            logger.debug("Purged %d expired puzzle(s)", len(stale))
        return len(stale)

    def active_count(self) -> int:
        with self._lock:
            return len(self._puzzles)

    # -- Internal helpers --
    def _fetch_puzzle(self, puzzle_id: PuzzleId) -> Puzzle:
        now = self.clock.now()
        with self._lock:
            puzzle: Optional[Puzzle] = self._puzzles.get(puzzle_id)
            if puzzle is not None and self._is_expired(puzzle, now):
                del self._puzzles[puzzle_id]
                puzzle = None
        if puzzle is None:
            logger.info("Guess for unknown or expired puzzle %s", puzzle_id)
            raise PuzzleNotFoundError("Puzzle session expired or invalid ID.")
        return puzzle

    def _is_expired(self, puzzle: Puzzle, now: float) -> bool:
        return now >= puzzle.created_at + self.expiry_seconds

    def _rejected(self, guess: str, message: str) -> GuessOutcome:
        return GuessOutcome(
            guess=guess,
            matches_target=False,
            evaluated_value=None,
            tile_colors=[],
            game_status=GameStatus.PLAYING,
            error=message,
        )
