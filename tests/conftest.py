"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import MintError
from src.core.models import MintReceipt
from src.db.schema import Base
from src.mathler.puzzles import PuzzleTemplate, RoundRobinSelector
from src.mathler.registry import PuzzleRegistry

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

EXPIRY_SECONDS = 600.0
MOCK_PUZZLES = (
    PuzzleTemplate("t1", 10, "5*2+00"),
    PuzzleTemplate("t2", 12, "18-3*2"),
)


# --- Fakes for time related collaborators ---
class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Callable[[], None]]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay, callback))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class FakeMinter:
    """Counts mint calls; fails when `error` is set."""

    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def mint_first_win(self, wallet_address: str, user_id: str) -> MintReceipt:
        self.calls.append((wallet_address, user_id))
        if self.error:
            raise MintError(self.error)
        return MintReceipt(transaction_hash=f"0xhash{len(self.calls)}", token_id=str(len(self.calls)))


# --- Fixtures ---
@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def registry(clock: ManualClock, scheduler: ManualScheduler) -> PuzzleRegistry:
    """Registry over a small pool, handing out MOCK_PUZZLES in order."""
    return PuzzleRegistry(
        selector=RoundRobinSelector(MOCK_PUZZLES),
        clock=clock,
        scheduler=scheduler,
        expiry_seconds=EXPIRY_SECONDS,
    )


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def minter() -> FakeMinter:
    return FakeMinter()


@pytest.fixture
def failing_minter() -> FakeMinter:
    return FakeMinter(error="NFT minting failed: execution reverted")
