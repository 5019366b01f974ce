"""Requests and Response models (camelCase on the wire)"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import GameStatus, OutcomeStatus, TileState


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- REQUEST MODELS ---
class SubmitGuessRequest(WireModel):
    puzzle_id: Optional[str] = Field(default=None, validate_default=True)
    guess_string: Optional[StrictStr] = Field(default=None, validate_default=True)

    @field_validator("puzzle_id")
    @classmethod
    def validate_puzzle_id(cls, value: Optional[str]) -> str:
        if not value:
            raise InvalidRequestError(
                "Invalid request: puzzleId and guessString are required."
            )
        return value

    @field_validator("guess_string")
    @classmethod
    def validate_guess_string(cls, value: Optional[str]) -> str:
        if value is None:
            raise InvalidRequestError(
                "Invalid request: puzzleId and guessString are required."
            )
        return value


class MintRequest(WireModel):
    user_wallet_address: str
    user_id: str

    @field_validator(*["user_wallet_address", "user_id"])
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("userWalletAddress and userId are required.")
        return value


class RecordOutcomeRequest(WireModel):
    wallet_address: Optional[str] = None
    is_win: bool
    guesses: list[str]
    solution: Optional[str] = None
    date: Optional[dt.date] = None


# --- RESPONSE MODELS ---
class NewPuzzleResponse(WireModel):
    puzzle_id: str
    target_number: int
    solution_length: int


class SubmitGuessResponse(WireModel):
    guess: str
    matches_target: bool
    evaluated_value: Optional[int | float]
    tile_colors: list[TileState]
    game_status: GameStatus
    error: Optional[str] = None
    solution: Optional[str] = None


class MintResponse(WireModel):
    success: bool
    message: str
    transaction_hash: Optional[str] = None
    token_id: Optional[str] = None


class DailyRecordResponse(WireModel):
    guesses: list[str]
    status: OutcomeStatus
    solution: Optional[str] = None


class ProgressResponse(WireModel):
    has_ever_solved: bool = Field(alias="hasEverSolvedAMathler")
    total_wins: int
    history: dict[str, DailyRecordResponse] = Field(alias="mathlerHistory")
    first_win_nft_attempted: bool = Field(alias="firstWinNftAwardedOrAttempted")
    has_received_first_win_nft: bool
    version: int


class OutcomeResponse(WireModel):
    saved: bool
    replayed: bool
    mint_attempted: bool
    transaction_hash: Optional[str] = None
    token_id: Optional[str] = None
    mint_error: Optional[str] = None
    error: Optional[str] = None
