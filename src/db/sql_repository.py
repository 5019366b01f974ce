"""Implementation of (Progress)Repository using SQLAlchemy"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import PersistenceError
from src.core.models import DailyRecord, UserProgress
from src.core.shared_types import OutcomeStatus
from src.db.schema import DBUserProgress


class SQLProgressRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def load(self, user_id: str) -> UserProgress:
        """Progress of a user. A user without a record gets a fresh, empty progress."""
        try:
            progress_db = self._fetch_progress(user_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load progress for {user_id=}.") from exc
        if progress_db is None:
            return UserProgress()
        return self._to_model(progress_db)

    def save(self, user_id: str, progress: UserProgress) -> UserProgress:
        """Create or overwrite the user's record and return what was stored."""
        try:
            progress_db = self._fetch_progress(user_id)
            if progress_db is None:
                progress_db = DBUserProgress(user_id=user_id)
                self.db.add(progress_db)
            progress_db.version = progress.version
            progress_db.has_ever_solved = progress.has_ever_solved
            progress_db.total_wins = progress.total_wins
            progress_db.history = self._history_to_json(progress)
            progress_db.first_win_nft_attempted = progress.first_win_nft_attempted
            progress_db.has_received_first_win_nft = progress.has_received_first_win_nft
            self.db.commit()
            self.db.refresh(progress_db)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Could not save progress for {user_id=}.") from exc
        return self._to_model(progress_db)

    def _fetch_progress(self, user_id: str) -> DBUserProgress | None:
        query = select(DBUserProgress).where(DBUserProgress.user_id == user_id)
        return self.db.scalar(query)

    def _history_to_json(self, progress: UserProgress) -> dict[str, dict]:
        # NOTE a new dict is assigned every time, so the JSON column is always seen as changed
        history = {}
        for date, record in progress.history.items():
            entry = {"guesses": list(record.guesses), "status": str(record.status)}
            if record.solution is not None:
                entry["solution"] = record.solution
            history[date] = entry
        return history

    def _to_model(self, progress_db: DBUserProgress) -> UserProgress:
        """Convert SQLAlchemy model to data transfer model."""
        return UserProgress(
            has_ever_solved=progress_db.has_ever_solved,
            total_wins=progress_db.total_wins,
            history={
                date: DailyRecord(
                    guesses=list(entry.get("guesses", [])),
                    status=OutcomeStatus(entry["status"]),
                    solution=entry.get("solution"),
                )
                for date, entry in (progress_db.history or {}).items()
            },
            first_win_nft_attempted=progress_db.first_win_nft_attempted,
            has_received_first_win_nft=progress_db.has_received_first_win_nft,
            version=progress_db.version,
        )
