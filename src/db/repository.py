"""Protocol repository for user progress (SQLAlchemy implementation in sql_repository.py)."""

from typing import Protocol

from src.core.models import UserProgress


class ProgressRepository(Protocol):
    """Persistence layer orchestration"""

    def load(self, user_id: str) -> UserProgress:
        """Progress of a user. A user without a record gets a fresh, empty progress."""
        ...

    def save(self, user_id: str, progress: UserProgress) -> UserProgress:
        """Create or overwrite the user's record and return what was stored."""
        ...
