"""
Type definitions used across layers
"""

from enum import StrEnum


class TileState(StrEnum):
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


# --- Higher rank wins when deriving keyboard colors. A key once CORRECT never goes back.
TILE_PRECEDENCE: dict[TileState, int] = {
    TileState.ABSENT: 0,
    TileState.PRESENT: 1,
    TileState.CORRECT: 2,
}


class GameStatus(StrEnum):
    """Status reported by the server for a single guess."""

    PLAYING = "playing"
    WON = "won"


class SessionStatus(StrEnum):
    """Status of a client side game session."""

    LOADING = "loading"
    PLAYING = "playing"
    SUBMITTING = "submitting"
    WON = "won"
    LOST = "lost"
    ERROR_FETCHING = "error_fetching"


class OutcomeStatus(StrEnum):
    WON = "won"
    LOST = "lost"


OPERATORS = "+-*/"
DIGITS = "0123456789"
