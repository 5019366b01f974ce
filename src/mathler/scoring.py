"""
Per-character feedback for a guess, Wordle style.

Repeated characters are the subtle part: every character of the solution can earn at most one
`correct` or `present` mark. Exact matches are taken out of the pool first, the remaining guess
characters then draw from what is left, by ascending position.
"""

from collections import Counter
from typing import Iterable

from src.core.models import GuessAttempt
from src.core.shared_types import TILE_PRECEDENCE, TileState


def score(guess: str, solution: str) -> list[TileState]:
    """
    Score `guess` against `solution`.
    ----
    Both are expected to have the same length. If they do not, one tile per guess character is still returned
    (positions past the end of the solution can only be `present` or `absent`).
    """
    pool = Counter(solution)
    tiles = [TileState.ABSENT] * len(guess)

    # Pass 1: exact positions
    for i, (g, s) in enumerate(zip(guess, solution)):
        if g == s:
            tiles[i] = TileState.CORRECT
            pool[g] -= 1

    # Pass 2: right character, wrong position (only while the pool still has that character)
    for i, g in enumerate(guess):
        if tiles[i] == TileState.CORRECT:
            continue
        if pool[g] > 0:
            tiles[i] = TileState.PRESENT
            pool[g] -= 1

    return tiles


def is_solved(tiles: Iterable[TileState]) -> bool:
    tiles = list(tiles)
    return len(tiles) > 0 and all(tile == TileState.CORRECT for tile in tiles)


def derive_key_states(history: Iterable[GuessAttempt]) -> dict[str, TileState]:
    """Best known state per key over all attempts, in order. A key is only ever upgraded (absent < present < correct)."""
    states: dict[str, TileState] = {}
    for attempt in history:
        for tile in attempt.tiles:
            known = states.get(tile.char)
            if known is None or TILE_PRECEDENCE[tile.state] > TILE_PRECEDENCE[known]:
                states[tile.char] = tile.state
    return states
