"""Achievement NFT minting, seen from the game: an opaque operation that may fail on its own."""

import logging
from typing import Protocol

from src.core.exceptions import MintError
from src.core.models import MintReceipt

logger = logging.getLogger(__name__)


class Minter(Protocol):
    def mint_first_win(self, wallet_address: str, user_id: str) -> MintReceipt:
        """Mint the "first win" achievement to the wallet. Raises MintError on failure."""
        ...


class UnconfiguredMinter:
    """Used when no chain connection is configured: every mint attempt fails cleanly."""

    def mint_first_win(self, wallet_address: str, user_id: str) -> MintReceipt:
        logger.warning(
            "Mint requested for user %s but minting is not configured", user_id
        )
        raise MintError("NFT Service is not properly initialized.")
