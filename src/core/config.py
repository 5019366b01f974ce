"""Application settings, read from environment variables (a local `.env` file is loaded first)."""

import logging
import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "MATHLER_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str = "sqlite:///./mathler.db"
    puzzle_expiry_seconds: float = Field(default=600.0, gt=0)
    solution_length: int = Field(default=6, gt=0)
    max_guesses: int = Field(default=6, gt=0)
    puzzle_selection: Literal["round_robin", "daily"] = "round_robin"
    client_origin: str = "http://localhost:5173"
    log_level: str = "INFO"
    api_base_url: str = "http://localhost:3001/api"

    @classmethod
    def from_env(cls) -> "Settings":
        """Only the variables that are actually set override the defaults."""
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
