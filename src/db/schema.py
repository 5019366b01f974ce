"""Database tables / schema"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.models import PROGRESS_VERSION


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBUserProgress(Base):
    __tablename__ = "user_progress"
    user_id: Mapped[str] = mapped_column(primary_key=True)
    version: Mapped[int] = mapped_column(default=PROGRESS_VERSION)
    has_ever_solved: Mapped[bool] = mapped_column(default=False)
    total_wins: Mapped[int] = mapped_column(default=0)
    # date string -> {"guesses": [...], "status": "won"|"lost", "solution": ...}
    history: Mapped[dict[str, dict]] = mapped_column(JSON, default=dict)
    first_win_nft_attempted: Mapped[bool] = mapped_column(default=False)
    has_received_first_win_nft: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
