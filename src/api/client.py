"""HTTP implementations of the game session's collaborators (puzzle API and outcome recording)."""

import logging
from typing import Optional

import httpx

from src.core.config import Settings
from src.core.exceptions import PersistenceError, PuzzleNotFoundError, TransportError
from src.core.models import GuessOutcome, IssuedPuzzle, PuzzleId
from src.core.shared_types import GameStatus, TileState
from src.mathler.session import GameSession

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpPuzzleClient:
    """`PuzzleClient` over the JSON API. Every failure surfaces as a MathlerError subclass."""

    def __init__(self, base_url: str, http: Optional[httpx.Client] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=DEFAULT_TIMEOUT)

    def fetch_new_puzzle(self) -> IssuedPuzzle:
        data = self._request("GET", "/puzzle/new")
        try:
            return IssuedPuzzle(
                puzzle_id=data["puzzleId"],
                target_value=data["targetNumber"],
                solution_length=data["solutionLength"],
            )
        except (KeyError, TypeError) as exc:
            raise TransportError(f"Puzzle data missing field: {exc}") from exc

    def submit_guess(self, puzzle_id: PuzzleId, guess: str) -> GuessOutcome:
        data = self._request(
            "POST",
            "/puzzle/submit-guess",
            json={"puzzleId": puzzle_id, "guessString": guess},
        )
        try:
            return GuessOutcome(
                guess=data.get("guess", guess),
                matches_target=data.get("matchesTarget", False),
                evaluated_value=data.get("evaluatedValue"),
                tile_colors=[TileState(color) for color in data.get("tileColors", [])],
                game_status=GameStatus(data["gameStatus"]),
                error=data.get("error"),
                solution=data.get("solution"),
            )
        except (KeyError, ValueError) as exc:
            raise TransportError(f"Unexpected guess response: {exc}") from exc

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Network error: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code == 404:
            raise PuzzleNotFoundError(data.get("message", "Puzzle not found."))
        if response.is_error:
            raise TransportError(
                data.get("message") or f"Server error: {response.reason_phrase}"
            )
        return data


class HttpOutcomeSink:
    """`OutcomeSink` that records outcomes through the API for one user."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        wallet_address: Optional[str],
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.wallet_address = wallet_address
        self.http = http or httpx.Client(timeout=DEFAULT_TIMEOUT)
        self.last_report: Optional[dict] = None

    def record(self, is_win: bool, guesses: list[str], solution: Optional[str]) -> None:
        url = f"{self.base_url}/users/{self.user_id}/outcome"
        payload = {
            "walletAddress": self.wallet_address,
            "isWin": is_win,
            "guesses": guesses,
            "solution": solution,
        }
        try:
            response = self.http.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PersistenceError(f"Recording outcome failed: {exc}") from exc

        try:
            report = response.json()
        except ValueError:
            report = None
        self.last_report = report if isinstance(report, dict) else {}
        if not self.last_report.get("saved", False):
            raise PersistenceError(self.last_report.get("error") or "Outcome was not saved.")
        if self.last_report.get("mintError"):
            logger.warning("Outcome saved, but minting failed: %s", self.last_report["mintError"])


def create_http_session(
    settings: Settings,
    user_id: Optional[str] = None,
    wallet_address: Optional[str] = None,
    http: Optional[httpx.Client] = None,
) -> GameSession:
    """Game session against a remote API. Outcomes are only recorded for a known user."""
    http = http or httpx.Client(timeout=DEFAULT_TIMEOUT)
    sink = (
        HttpOutcomeSink(settings.api_base_url, user_id, wallet_address, http)
        if user_id
        else None
    )
    return GameSession(
        HttpPuzzleClient(settings.api_base_url, http),
        outcome_sink=sink,
        max_guesses=settings.max_guesses,
    )
