"""Providers for FastAPI `Depends`. Tests swap them through `app.dependency_overrides`."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from src.core.clock import SystemClock, ThreadingScheduler
from src.core.config import Settings, get_settings
from src.db.database import get_db
from src.db.repository import ProgressRepository
from src.db.sql_repository import SQLProgressRepository
from src.mathler.puzzles import DailySelector, PuzzleSelector, RoundRobinSelector
from src.mathler.registry import PuzzleRegistry
from src.services.nft_service import Minter, UnconfiguredMinter
from src.services.outcome_service import OutcomeService
from src.services.puzzle_service import PuzzleService


def build_registry(settings: Settings) -> PuzzleRegistry:
    clock = SystemClock()
    selector: PuzzleSelector = (
        DailySelector(clock) if settings.puzzle_selection == "daily" else RoundRobinSelector()
    )
    return PuzzleRegistry(
        selector=selector,
        clock=clock,
        scheduler=ThreadingScheduler(),
        expiry_seconds=settings.puzzle_expiry_seconds,
        solution_length=settings.solution_length,
    )


@lru_cache
def get_registry() -> PuzzleRegistry:
    """One registry per process: puzzles only live in memory."""
    return build_registry(get_settings())


def get_puzzle_service(registry: PuzzleRegistry = Depends(get_registry)) -> PuzzleService:
    return PuzzleService(registry)


@lru_cache
def get_minter() -> Minter:
    return UnconfiguredMinter()


def get_progress_repository(db: Session = Depends(get_db)) -> ProgressRepository:
    return SQLProgressRepository(db)


def get_outcome_service(
    repository: ProgressRepository = Depends(get_progress_repository),
    minter: Minter = Depends(get_minter),
) -> OutcomeService:
    return OutcomeService(repository, minter)
