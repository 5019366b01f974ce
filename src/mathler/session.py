"""
Client side game session: turns key presses into guesses and follows the server's verdicts.

    loading -> playing <-> submitting -> won | lost
    loading -> error_fetching

`won` and `lost` only move again through `reset()`. One action is handled at a time; while a guess is
being submitted (`submitting`) every key press is ignored, so the same puzzle never gets two guesses in flight.
The server is authoritative, the local evaluation on ENTER only saves pointless round trips.
A guess whose value misses the target is stopped by that local check, so the partial tile feedback the
server computes for such a guess never reaches the player here.
"""

import logging
from typing import Optional, Protocol

from src.core.exceptions import MathlerError
from src.core.models import (
    GuessAttempt,
    GuessOutcome,
    IssuedPuzzle,
    PuzzleId,
    Tile,
)
from src.core.shared_types import DIGITS, OPERATORS, GameStatus, SessionStatus, TileState
from src.mathler.expression import EvaluationFailure, evaluate
from src.mathler.registry import PuzzleRegistry
from src.mathler.scoring import derive_key_states

logger = logging.getLogger(__name__)

MAX_GUESSES = 6
ENTER = "ENTER"
BACKSPACE = "BACKSPACE"

BYPASS_GUESS = "BYPASSED"
BYPASS_TILE_CHAR = "✓"
BYPASS_SOLUTION_TEXT = "Puzzle Bypassed"
BYPASS_RECORDED_SOLUTION = "BYPASSED - Solution N/A"


class PuzzleClient(Protocol):
    def fetch_new_puzzle(self) -> IssuedPuzzle: ...

    def submit_guess(self, puzzle_id: PuzzleId, guess: str) -> GuessOutcome: ...


class OutcomeSink(Protocol):
    def record(self, is_win: bool, guesses: list[str], solution: Optional[str]) -> None: ...


class LocalPuzzleClient:
    """Talks to a registry in the same process (no HTTP in between)."""

    def __init__(self, registry: PuzzleRegistry) -> None:
        self.registry = registry

    def fetch_new_puzzle(self) -> IssuedPuzzle:
        return self.registry.issue()

    def submit_guess(self, puzzle_id: PuzzleId, guess: str) -> GuessOutcome:
        return self.registry.check_guess(puzzle_id, guess)


class GameSession:
    def __init__(
        self,
        client: PuzzleClient,
        outcome_sink: Optional[OutcomeSink] = None,
        max_guesses: int = MAX_GUESSES,
    ) -> None:
        self.client = client
        self.outcome_sink = outcome_sink
        self.max_guesses = max_guesses

        self.status = SessionStatus.LOADING
        self.puzzle_id: Optional[PuzzleId] = None
        self.target_value: Optional[int] = None
        self.solution_length = 0
        self.current_input = ""
        self.error: Optional[str] = None
        self.solution: Optional[str] = None
        self.outcome_error: Optional[str] = None
        self.key_states: dict[str, TileState] = {}
        self._history: list[GuessAttempt] = []

    @property
    def history(self) -> tuple[GuessAttempt, ...]:
        return tuple(self._history)

    # --- Actions ---
    def start(self) -> None:
        """(Re)load a puzzle. Ends in `playing`, or in `error_fetching` if the puzzle could not be issued."""
        self.status = SessionStatus.LOADING
        self.puzzle_id = None
        self.target_value = None
        self.current_input = ""
        self.error = None
        self.solution = None
        self.outcome_error = None
        self._set_history([])

        try:
            puzzle = self.client.fetch_new_puzzle()
        except MathlerError as exc:
            logger.warning("Could not load new puzzle: %s", exc)
            self.error = f"Could not load new puzzle: {exc}"
            self.solution_length = 0
            self.status = SessionStatus.ERROR_FETCHING
            return

        self.puzzle_id = puzzle.puzzle_id
        self.target_value = puzzle.target_value
        self.solution_length = puzzle.solution_length
        self.status = SessionStatus.PLAYING

    def reset(self) -> None:
        if self.status == SessionStatus.SUBMITTING:
            return
        self.start()

    def press(self, key: str) -> None:
        """Handle one key: a digit, an operator, ENTER or BACKSPACE. Only does something while playing."""
        if self.status != SessionStatus.PLAYING or self.puzzle_id is None:
            return

        if key == ENTER:
            self._submit()
        elif key == BACKSPACE:
            self.current_input = self.current_input[:-1]
            self.error = None
        elif len(key) == 1 and key in DIGITS + OPERATORS:
            if len(self.current_input) < self.solution_length:
                self.current_input += key
                self.error = None

    def bypass(self) -> None:
        """Escape hatch: mark the puzzle solved without asking the server."""
        if self.status != SessionStatus.PLAYING or self.puzzle_id is None:
            return

        placeholder = GuessAttempt(
            raw_text=BYPASS_GUESS,
            evaluated_value=None,
            tiles=tuple(Tile(BYPASS_TILE_CHAR, TileState.CORRECT) for _ in range(self.solution_length)),
        )
        self._set_history([placeholder])
        self.current_input = ""
        self.error = None
        self.solution = BYPASS_SOLUTION_TEXT
        self.status = SessionStatus.WON
        self._record_outcome(True, BYPASS_RECORDED_SOLUTION)

    # --- Internal helpers ---
    def _submit(self) -> None:
        guess = self.current_input

        # Local pre-flight. Input is left untouched so the player can fix it.
        if len(guess) != self.solution_length:
            self.error = f"Equation must be {self.solution_length} characters."
            return
        value = evaluate(guess)
        if isinstance(value, EvaluationFailure):
            self.error = "Invalid math expression format."
            return
        if value != self.target_value:
            self.error = f"Expression evaluates to {value}, not {self.target_value}."
            return

        self.error = None
        self.status = SessionStatus.SUBMITTING
        try:
            outcome = self.client.submit_guess(self.puzzle_id, guess)
        except MathlerError as exc:
            logger.warning("Submitting guess %r failed: %s", guess, exc)
            self.error = f"Submission failed: {exc}"
            self.status = SessionStatus.PLAYING
            return

        if outcome.game_status == GameStatus.PLAYING and not outcome.matches_target:
            # Rejected by the server (length, syntax or value). Not a used attempt.
            self.error = outcome.error or "Guess rejected."
            self.status = SessionStatus.PLAYING
            return

        self._set_history(self._history + [GuessAttempt.from_outcome(outcome)])
        self.current_input = ""
        self.error = outcome.error

        if outcome.game_status == GameStatus.WON:
            self.solution = outcome.solution
            self.status = SessionStatus.WON
            self._record_outcome(True, outcome.solution)
        elif len(self._history) >= self.max_guesses:
            self.status = SessionStatus.LOST
            self._record_outcome(False, None)
        else:
            self.status = SessionStatus.PLAYING

    def _set_history(self, history: list[GuessAttempt]) -> None:
        self._history = history
        self.key_states = derive_key_states(history)

    def _record_outcome(self, is_win: bool, solution: Optional[str]) -> None:
        """Best effort. The game is already over; a failure here is only reported."""
        if self.outcome_sink is None:
            return
        guesses = [attempt.raw_text for attempt in self._history]
        try:
            self.outcome_sink.record(is_win, guesses, solution)
        except Exception as exc:
            logger.exception("Recording game outcome failed")
            self.outcome_error = str(exc)
