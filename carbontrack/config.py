from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(use_dotenv: bool = True) -> Settings:
    """Read process-wide settings from the environment (and .env when present)."""
    if use_dotenv:
        load_dotenv()

    api_key = None
    for name in API_KEY_VARIABLES:
        value = os.getenv(name, "").strip()
        if value:
            api_key = value
            break

    model = os.getenv("CARBONTRACK_MODEL", "").strip() or DEFAULT_MODEL
    log_level = os.getenv("CARBONTRACK_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL

    if api_key is None:
        logging.getLogger(__name__).warning(
            "GEMINI_API_KEY not set - document analysis will fail until it is configured."
        )

    return Settings(api_key=api_key, model=model, log_level=log_level)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
