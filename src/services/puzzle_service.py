"""Orchestration of communication from API router to the puzzle registry (and the reverse direction)."""

from src.api.models import NewPuzzleResponse, SubmitGuessRequest, SubmitGuessResponse
from src.core.models import GuessOutcome
from src.mathler.registry import PuzzleRegistry


class PuzzleService:
    """Orchestration of layers for the puzzle game."""

    def __init__(self, registry: PuzzleRegistry) -> None:
        self.registry = registry

    # -- API routes logic ---
    def new_puzzle(self) -> NewPuzzleResponse:
        """Client asks for a puzzle to play. The solution stays in the registry."""
        issued = self.registry.issue()
        return NewPuzzleResponse(
            puzzle_id=issued.puzzle_id,
            target_number=issued.target_value,
            solution_length=issued.solution_length,
        )

    def submit_guess(self, request: SubmitGuessRequest) -> SubmitGuessResponse:
        """
        Check a guess.
        ----
        PuzzleNotFoundError propagates (the API turns it into a 404). Everything else is part of the response.
        """
        outcome = self.registry.check_guess(request.puzzle_id, request.guess_string)
        return self._create_guess_response(outcome)

    # -- Internal helpers --
    def _create_guess_response(self, outcome: GuessOutcome) -> SubmitGuessResponse:
        """Optional fields are only set when they carry something, so they are left out of the JSON otherwise."""
        extra = {}
        if outcome.error is not None:
            extra["error"] = outcome.error
        if outcome.solution is not None:
            extra["solution"] = outcome.solution
        return SubmitGuessResponse(
            guess=outcome.guess,
            matches_target=outcome.matches_target,
            evaluated_value=outcome.evaluated_value,
            tile_colors=outcome.tile_colors,
            game_status=outcome.game_status,
            **extra,
        )
