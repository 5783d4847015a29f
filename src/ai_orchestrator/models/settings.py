"""Pydantic models for application settings."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel, frozen=True):
    """Runtime configuration loaded from environment variables."""

    config_dir: str = "./config"
    history_dir: str = ".orchestrator/history"
    history_max_items: int = 50
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Load settings from environment variables with defaults."""
    load_dotenv()

    try:
        history_max_items = int(os.getenv("ORCHESTRATOR_HISTORY_MAX_ITEMS", "50"))
    except ValueError as exc:
        msg = "ORCHESTRATOR_HISTORY_MAX_ITEMS must be an integer."
        raise ValueError(msg) from exc
    if history_max_items <= 0:
        msg = "ORCHESTRATOR_HISTORY_MAX_ITEMS must be > 0."
        raise ValueError(msg)

    log_level = os.getenv("ORCHESTRATOR_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        msg = f"Unknown ORCHESTRATOR_LOG_LEVEL: {log_level!r}"
        raise ValueError(msg)

    return Settings(
        config_dir=os.getenv("ORCHESTRATOR_CONFIG_DIR", "./config"),
        history_dir=os.getenv("ORCHESTRATOR_HISTORY_DIR", ".orchestrator/history"),
        history_max_items=history_max_items,
        log_level=log_level,
    )
