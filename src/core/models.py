"""
Boundary layer data model(s).

These objects are used to communicate with the Services.
Both the API layer (higher) and the domain/db layers (lower) send and receive these models,
which decouples the wire format and the database schema from the game logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from src.core.shared_types import GameStatus, OutcomeStatus, TileState

# Type aliases to make the models easier to read
PuzzleId = str
DateString = str  # ISO date, e.g. "2025-05-17"
Number = int | float

PROGRESS_VERSION = 1


@dataclass(frozen=True)
class IssuedPuzzle:
    """What a client gets to see of a freshly issued puzzle (the solution stays on the server)."""

    puzzle_id: PuzzleId
    target_value: int
    solution_length: int


@dataclass(frozen=True)
class GuessOutcome:
    """Result of checking one guess against a stored puzzle."""

    guess: str
    matches_target: bool
    evaluated_value: Optional[Number]
    tile_colors: list[TileState]
    game_status: GameStatus
    error: Optional[str] = None
    solution: Optional[str] = None


@dataclass(frozen=True)
class Tile:
    char: str
    state: TileState


@dataclass(frozen=True)
class GuessAttempt:
    """A scored guess, as kept in the history of a game session."""

    raw_text: str
    evaluated_value: Optional[Number]
    tiles: tuple[Tile, ...]

    @classmethod
    def from_outcome(cls, outcome: GuessOutcome) -> GuessAttempt:
        tiles = tuple(
            Tile(char, state) for char, state in zip(outcome.guess, outcome.tile_colors)
        )
        return cls(outcome.guess, outcome.evaluated_value, tiles)


@dataclass
class DailyRecord:
    guesses: list[str]
    status: OutcomeStatus
    solution: Optional[str] = None


@dataclass
class UserProgress:
    """Versioned record of a player's progress. Replaces the loosely typed wallet-provider metadata bag."""

    has_ever_solved: bool = False
    total_wins: int = 0
    history: dict[DateString, DailyRecord] = field(default_factory=dict)
    first_win_nft_attempted: bool = False
    has_received_first_win_nft: bool = False
    version: int = PROGRESS_VERSION


@dataclass(frozen=True)
class MintReceipt:
    transaction_hash: str
    token_id: Optional[str]


@dataclass(frozen=True)
class OutcomeReport:
    """
    Result of recording a finished game.
    ----
    `saved` tells whether the outcome itself is stored. The mint fields report the NFT side effect independently:
    a failed mint never un-saves a win.
    """

    saved: bool
    replayed: bool = False
    mint_attempted: bool = False
    receipt: Optional[MintReceipt] = None
    mint_error: Optional[str] = None
    error: Optional[str] = None
