import pytest
from pydantic import ValidationError

from src.api.models import (
    MintRequest,
    ProgressResponse,
    RecordOutcomeRequest,
    SubmitGuessRequest,
    SubmitGuessResponse,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GameStatus, TileState


# -- Validation - SubmitGuessRequest --
def test_submit_guess_request_from_camel_case() -> None:
    request = SubmitGuessRequest.model_validate({"puzzleId": "abc", "guessString": "5*2+00"})
    assert request.puzzle_id == "abc"
    assert request.guess_string == "5*2+00"


def test_submit_guess_request_accepts_field_names() -> None:
    request = SubmitGuessRequest(puzzle_id="abc", guess_string="5*2+00")
    assert request.puzzle_id == "abc"


@pytest.mark.parametrize("puzzle_id", [None, ""])
def test_submit_guess_request_requires_puzzle_id(puzzle_id) -> None:
    with pytest.raises(InvalidRequestError):
        SubmitGuessRequest(puzzle_id=puzzle_id, guess_string="5*2+00")


def test_submit_guess_request_requires_guess() -> None:
    """Missing guess is rejected, even though puzzle id is fine."""
    with pytest.raises(InvalidRequestError):
        SubmitGuessRequest(puzzle_id="abc")


def test_submit_guess_request_keeps_wrong_length_guess() -> None:
    """Length is checked by the registry, which answers with a `playing` response instead of an error."""
    request = SubmitGuessRequest(puzzle_id="abc", guess_string="1+1")
    assert request.guess_string == "1+1"


def test_submit_guess_request_rejects_non_string_guess() -> None:
    with pytest.raises(ValidationError):
        SubmitGuessRequest(puzzle_id="abc", guess_string=123456)


# -- Validation - MintRequest --
def test_mint_request_blank_wallet() -> None:
    with pytest.raises(InvalidRequestError):
        MintRequest(user_wallet_address="   ", user_id="u1")


def test_mint_request_missing_user() -> None:
    with pytest.raises(ValidationError):
        MintRequest.model_validate({"userWalletAddress": "0xabc"})


# -- Validation - RecordOutcomeRequest --
def test_record_outcome_request_parses_date() -> None:
    request = RecordOutcomeRequest.model_validate(
        {"isWin": False, "guesses": ["5*2+00"], "date": "2025-05-17"}
    )
    assert request.date.isoformat() == "2025-05-17"
    assert request.wallet_address is None


# -- Serialization --
def test_guess_response_leaves_out_unset_fields() -> None:
    response = SubmitGuessResponse(
        guess="18-3*2",
        matches_target=False,
        evaluated_value=12,
        tile_colors=[TileState.ABSENT] * 6,
        game_status=GameStatus.PLAYING,
    )
    dumped = response.model_dump(by_alias=True, exclude_unset=True, mode="json")
    assert "error" not in dumped
    assert "solution" not in dumped
    assert dumped["matchesTarget"] is False
    assert dumped["tileColors"] == ["absent"] * 6


def test_progress_response_aliases() -> None:
    response = ProgressResponse(
        has_ever_solved=True,
        total_wins=2,
        history={},
        first_win_nft_attempted=True,
        has_received_first_win_nft=False,
        version=1,
    )
    dumped = response.model_dump(by_alias=True)
    assert dumped["hasEverSolvedAMathler"] is True
    assert dumped["mathlerHistory"] == {}
    assert dumped["firstWinNftAwardedOrAttempted"] is True
    assert dumped["hasReceivedFirstWinNft"] is False
