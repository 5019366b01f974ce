"""HTTP routes. Thin: parse, call a service, shape the response."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_minter, get_outcome_service, get_puzzle_service
from src.api.models import (
    DailyRecordResponse,
    MintRequest,
    MintResponse,
    NewPuzzleResponse,
    OutcomeResponse,
    ProgressResponse,
    RecordOutcomeRequest,
    SubmitGuessRequest,
    SubmitGuessResponse,
)
from src.core.exceptions import MintError, PuzzleNotFoundError
from src.core.models import UserProgress
from src.services.nft_service import Minter
from src.services.outcome_service import OutcomeService
from src.services.puzzle_service import PuzzleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Puzzle ---
@router.get("/puzzle/new", response_model=NewPuzzleResponse)
def new_puzzle(service: PuzzleService = Depends(get_puzzle_service)):
    try:
        return service.new_puzzle()
    except Exception:
        logger.exception("Error serving new puzzle")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error generating puzzle"},
        )


@router.post(
    "/puzzle/submit-guess",
    response_model=SubmitGuessResponse,
    response_model_exclude_unset=True,
)
def submit_guess(
    request: SubmitGuessRequest, service: PuzzleService = Depends(get_puzzle_service)
):
    try:
        return service.submit_guess(request)
    except PuzzleNotFoundError:
        raise
    except Exception:
        logger.exception("Error checking guess")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error checking guess"},
        )


# --- Achievements ---
@router.post("/feature/mint-first-win-nft", response_model=MintResponse)
def mint_first_win_nft(request: MintRequest, minter: Minter = Depends(get_minter)):
    try:
        receipt = minter.mint_first_win(request.user_wallet_address, request.user_id)
    except MintError as exc:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": str(exc)},
        )
    return MintResponse(
        success=True,
        message="First Win NFT minted.",
        transaction_hash=receipt.transaction_hash,
        token_id=receipt.token_id,
    )


# --- User progress ---
@router.get("/users/{user_id}/progress", response_model=ProgressResponse)
def get_progress(user_id: str, service: OutcomeService = Depends(get_outcome_service)):
    return _create_progress_response(service.get_progress(user_id))


@router.delete("/users/{user_id}/progress", response_model=ProgressResponse)
def reset_progress(user_id: str, service: OutcomeService = Depends(get_outcome_service)):
    return _create_progress_response(service.reset_progress(user_id))


@router.post("/users/{user_id}/outcome", response_model=OutcomeResponse)
def record_outcome(
    user_id: str,
    request: RecordOutcomeRequest,
    service: OutcomeService = Depends(get_outcome_service),
):
    report = service.record_outcome(
        user_id,
        request.wallet_address,
        request.is_win,
        request.guesses,
        request.solution,
        today=request.date,
    )
    return OutcomeResponse(
        saved=report.saved,
        replayed=report.replayed,
        mint_attempted=report.mint_attempted,
        transaction_hash=report.receipt.transaction_hash if report.receipt else None,
        token_id=report.receipt.token_id if report.receipt else None,
        mint_error=report.mint_error,
        error=report.error,
    )


def _create_progress_response(progress: UserProgress) -> ProgressResponse:
    return ProgressResponse(
        has_ever_solved=progress.has_ever_solved,
        total_wins=progress.total_wins,
        history={
            date: DailyRecordResponse(
                guesses=record.guesses, status=record.status, solution=record.solution
            )
            for date, record in progress.history.items()
        },
        first_win_nft_attempted=progress.first_win_nft_attempted,
        has_received_first_win_nft=progress.has_received_first_win_nft,
        version=progress.version,
    )
