"""Environment settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    openai_api_key: Optional[str] = Field(default=None, description="Key for the extraction service")
    model: str = Field(default="gpt-4o-mini", description="Model used to read dimensions from images/text")
    ai_timeout: float = Field(default=30.0, gt=0, description="Extraction request timeout in seconds")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")


def load_settings() -> Settings:
    """Read settings from the environment. A .env file never overrides real env vars."""
    load_dotenv()

    origins = os.getenv("FREIGHT_FIT_CORS_ORIGINS", "*")
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("FREIGHT_FIT_MODEL", "gpt-4o-mini"),
        ai_timeout=float(os.getenv("FREIGHT_FIT_AI_TIMEOUT", "30")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("FREIGHT_FIT_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
