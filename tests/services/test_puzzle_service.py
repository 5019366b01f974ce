"""Unit tests for src/services/puzzle_service.py"""

import pytest

from src.core.exceptions import MathlerError, PuzzleNotFoundError
from src.core.shared_types import GameStatus, TileState
from src.mathler.registry import PuzzleRegistry
from src.services.puzzle_service import (
    NewPuzzleResponse,
    PuzzleService,
    SubmitGuessRequest,
    SubmitGuessResponse,
)


@pytest.fixture
def service(registry: PuzzleRegistry) -> PuzzleService:
    return PuzzleService(registry)


def test_new_puzzle(service: PuzzleService, registry: PuzzleRegistry) -> None:
    response = service.new_puzzle()
    assert isinstance(response, NewPuzzleResponse)
    assert response.target_number == 10
    assert response.solution_length == 6
    assert registry.active_count() == 1
    assert "solution" not in response.model_dump()


def test_submit_winning_guess(service: PuzzleService) -> None:
    puzzle = service.new_puzzle()
    response = service.submit_guess(
        SubmitGuessRequest(puzzle_id=puzzle.puzzle_id, guess_string="5*2+00")
    )
    assert isinstance(response, SubmitGuessResponse)
    assert response.game_status == GameStatus.WON
    assert response.tile_colors == [TileState.CORRECT] * 6
    assert response.solution == "5*2+00"
    assert "error" not in response.model_fields_set


def test_submit_wrong_value(service: PuzzleService) -> None:
    puzzle = service.new_puzzle()
    response = service.submit_guess(
        SubmitGuessRequest(puzzle_id=puzzle.puzzle_id, guess_string="18-3*2")
    )
    assert response.game_status == GameStatus.PLAYING
    assert response.matches_target is False
    assert response.evaluated_value == 12
    assert response.error == "Expression evaluates to 12, not 10."
    assert "solution" not in response.model_fields_set


def test_unknown_puzzle_propagates(service: PuzzleService) -> None:
    """Make sure service propagates the exceptions."""
    with pytest.raises(PuzzleNotFoundError):
        service.submit_guess(SubmitGuessRequest(puzzle_id="missing", guess_string="5*2+00"))

    # And it is one of ours (the API layer maps these)
    with pytest.raises(MathlerError):
        service.submit_guess(SubmitGuessRequest(puzzle_id="missing", guess_string="5*2+00"))
