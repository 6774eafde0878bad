"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

load_dotenv()

DEFAULT_SIMULATED_USERS = "Alex Johnson,Maria Garcia,Chen Wei,Fatima Al-Sayed,David Smith"


def _split_names(raw: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class Settings:
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("LEGAL_EAGLE_DATA_DIR", ".legal_eagle"))
    )
    model: str = field(default_factory=lambda: os.getenv("LEGAL_EAGLE_MODEL", "gpt-4-turbo"))
    current_user: str = field(
        default_factory=lambda: os.getenv("LEGAL_EAGLE_CURRENT_USER", "indudhar")
    )
    simulated_users: tuple[str, ...] = field(
        default_factory=lambda: _split_names(
            os.getenv("LEGAL_EAGLE_SIMULATED_USERS", DEFAULT_SIMULATED_USERS)
        )
    )
    activity_limit: int = field(
        default_factory=lambda: int(os.getenv("LEGAL_EAGLE_ACTIVITY_LIMIT", "50"))
    )
    upcoming_limit: int = field(
        default_factory=lambda: int(os.getenv("LEGAL_EAGLE_UPCOMING_LIMIT", "7"))
    )
    llm_attempts: int = field(
        default_factory=lambda: int(os.getenv("LEGAL_EAGLE_LLM_ATTEMPTS", "3"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LEGAL_EAGLE_LOG_LEVEL", "INFO"))

    # API keys
    openai_api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    anthropic_api_key: str | None = field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY") or None
    )

    @property
    def has_api_key(self) -> bool:
        if self.model.startswith("claude"):
            return bool(self.anthropic_api_key)
        return bool(self.openai_api_key)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to a rich handler on stderr, keeping stdout for command output."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
    )


settings = Settings()
