"""Custom exceptions shared by all layers."""


class MathlerError(Exception):
    """Top-level exception for anything the game backend raises on purpose."""


class InvalidRequestError(MathlerError):
    """Request data does not pass validation."""


class PuzzleNotFoundError(MathlerError):
    """Puzzle id is unknown or its session expired. Not retryable against the same id."""


class PuzzlePoolError(MathlerError):
    """A puzzle template breaks the pool invariants (length / target value)."""


class PersistenceError(MathlerError):
    """User progress could not be read or written."""


class MintError(MathlerError):
    """Minting the achievement NFT failed."""


class TransportError(MathlerError):
    """Network or server failure talking to the puzzle API."""
