"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_TRIGGER_CODES = ("violet-admin-2024", "admin-mode-violet", "shopglow-admin")


@dataclass(frozen=True)
class Settings:
    """Configuration container for the chat relay and its generation backend."""

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    max_output_tokens: int = 1000
    temperature: float = 0.7
    backend_timeout: float = 30.0
    history_window: int = 6
    session_join_ttl: float = 600.0
    admin_trigger_codes: Tuple[str, ...] = DEFAULT_TRIGGER_CODES
    database_dir: Path = BASE_DIR / "database"
    log_level: str = "INFO"


def _trigger_codes(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return DEFAULT_TRIGGER_CODES
    codes = tuple(code.strip().lower() for code in raw.split(",") if code.strip())
    return codes or DEFAULT_TRIGGER_CODES


def load_settings() -> Settings:
    """Build a Settings instance from the current environment.

    Invalid numeric values raise ValueError so misconfiguration fails at startup.
    """
    database_dir = os.getenv("DATABASE_DIR")
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        max_output_tokens=int(os.getenv("OPENAI_MAX_OUTPUT_TOKENS", "1000")),
        temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.7")),
        backend_timeout=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30")),
        history_window=int(os.getenv("CHAT_HISTORY_WINDOW", "6")),
        session_join_ttl=float(os.getenv("SESSION_JOIN_TTL_SECONDS", "600")),
        admin_trigger_codes=_trigger_codes(os.getenv("ADMIN_TRIGGER_CODES")),
        database_dir=Path(database_dir).expanduser() if database_dir and database_dir.strip() else BASE_DIR / "database",
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
