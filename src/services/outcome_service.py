"""
Recording finished games.

One call stores the outcome and, on a player's first win, triggers the achievement mint.
Partial failure contract:
  - if the outcome cannot be saved, nothing else happens and the report says `saved=False`
  - once saved, a failed mint is only reported (`mint_error`); the recorded win stays
  - replaying the exact same outcome for the same day writes nothing, but retries a mint that is still due
"""

import datetime as dt
import logging
from dataclasses import replace
from typing import Optional, Sequence

from src.core.exceptions import MintError, PersistenceError
from src.core.models import DailyRecord, OutcomeReport, UserProgress
from src.core.shared_types import OutcomeStatus
from src.db.repository import ProgressRepository
from src.services.nft_service import Minter

logger = logging.getLogger(__name__)


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


class OutcomeService:
    """Outcome persistence adapter between a game session and user storage + minting."""

    def __init__(self, repository: ProgressRepository, minter: Minter) -> None:
        self.repo = repository
        self.minter = minter

    def get_progress(self, user_id: str) -> UserProgress:
        return self.repo.load(user_id)

    def record_outcome(
        self,
        user_id: str,
        wallet_address: Optional[str],
        is_win: bool,
        guesses: Sequence[str],
        solution: Optional[str] = None,
        today: Optional[dt.date] = None,
    ) -> OutcomeReport:
        date = (today or utc_today()).isoformat()
        record = DailyRecord(
            guesses=list(guesses),
            status=OutcomeStatus.WON if is_win else OutcomeStatus.LOST,
            solution=solution if is_win else None,
        )

        try:
            progress = self.repo.load(user_id)
        except PersistenceError as exc:
            logger.error("Loading progress for %s failed: %s", user_id, exc)
            return OutcomeReport(saved=False, error=str(exc))

        if progress.history.get(date) == record:
            logger.info("Outcome for %s on %s already recorded", user_id, date)
            return self._mint_if_due(user_id, wallet_address, is_win, progress, replayed=True)

        updated = replace(
            progress,
            has_ever_solved=progress.has_ever_solved or is_win,
            total_wins=progress.total_wins + (1 if is_win else 0),
            history={**progress.history, date: record},
            first_win_nft_attempted=progress.first_win_nft_attempted
            or (is_win and not progress.has_received_first_win_nft),
        )
        try:
            stored = self.repo.save(user_id, updated)
        except PersistenceError as exc:
            logger.error("Saving outcome for %s failed: %s", user_id, exc)
            return OutcomeReport(saved=False, error=str(exc))

        logger.info(
            "Recorded %s for %s on %s (total wins: %d)",
            record.status, user_id, date, stored.total_wins,
        )
        return self._mint_if_due(user_id, wallet_address, is_win, stored)

    def reset_progress(self, user_id: str) -> UserProgress:
        """Clear game progress (wins, history). Whether the NFT was actually received is kept: that is on chain."""
        progress = self.repo.load(user_id)
        cleared = replace(
            progress,
            has_ever_solved=False,
            total_wins=0,
            history={},
            first_win_nft_attempted=False,
        )
        logger.info("Progress of %s reset", user_id)
        return self.repo.save(user_id, cleared)

    # -- Internal helpers --
    def _mint_if_due(
        self,
        user_id: str,
        wallet_address: Optional[str],
        is_win: bool,
        progress: UserProgress,
        replayed: bool = False,
    ) -> OutcomeReport:
        """Mint after a win when the player never received the achievement."""
        if not is_win or progress.has_received_first_win_nft:
            return OutcomeReport(saved=True, replayed=replayed)

        if not wallet_address:
            return OutcomeReport(
                saved=True,
                replayed=replayed,
                mint_error="No wallet address to mint the achievement to.",
            )

        try:
            receipt = self.minter.mint_first_win(wallet_address, user_id)
        except MintError as exc:
            logger.warning("Minting first win NFT for %s failed: %s", user_id, exc)
            return OutcomeReport(
                saved=True, replayed=replayed, mint_attempted=True, mint_error=str(exc)
            )

        try:
            self.repo.save(user_id, replace(progress, has_received_first_win_nft=True))
        except PersistenceError as exc:
            # The token exists; only our bookkeeping of it is missing.
            logger.error("Storing NFT receipt %s for %s failed: %s", receipt.transaction_hash, user_id, exc)
            return OutcomeReport(
                saved=True, replayed=replayed, mint_attempted=True, receipt=receipt, error=str(exc)
            )

        return OutcomeReport(saved=True, replayed=replayed, mint_attempted=True, receipt=receipt)


class SessionOutcomeSink:
    """Plugs an OutcomeService into a GameSession for one user."""

    def __init__(
        self,
        service: OutcomeService,
        user_id: str,
        wallet_address: Optional[str],
        today: Optional[dt.date] = None,
    ) -> None:
        self.service = service
        self.user_id = user_id
        self.wallet_address = wallet_address
        self.today = today
        self.last_report: Optional[OutcomeReport] = None

    def record(self, is_win: bool, guesses: list[str], solution: Optional[str]) -> None:
        self.last_report = self.service.record_outcome(
            self.user_id, self.wallet_address, is_win, guesses, solution, today=self.today
        )
        if not self.last_report.saved:
            raise PersistenceError(self.last_report.error or "Outcome was not saved.")
