from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from typing import Optional

import pytz
from dotenv import load_dotenv


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a numeric Telegram id, got {raw!r}") from exc


def _non_negative_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    if not raw.isdigit():
        raise RuntimeError(f"{name} must be a non-negative number of days, got {raw!r}")
    return int(raw)


def _parse_time(raw: str) -> time:
    try:
        hours, minutes = raw.split(":", 1)
        return time(hour=int(hours), minute=int(minutes))
    except ValueError as exc:
        raise RuntimeError(f"NOTIFY_TIME must look like HH:MM, got {raw!r}") from exc


@dataclass(slots=True)
class BotConfig:
    """Configuration container for the visa keeper bot."""

    token: str
    database_path: Path = field(default=Path("data/visa_keeper.sqlite"))
    bootstrap_admin_id: Optional[int] = None
    admin_chat_id: Optional[int] = None
    timezone_name: str = "Asia/Tashkent"
    notify_time: time = field(default=time(hour=9))
    notify_days: int = 3
    check_days: int = 7

    @property
    def timezone(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone_name)

    @classmethod
    def load(cls, env_path: str | os.PathLike[str] | None = ".env") -> "BotConfig":
        """Load configuration from environment variables."""
        if env_path is not None:
            load_dotenv(env_path)

        token = os.getenv("BOT_TOKEN")
        if not token:
            raise RuntimeError(
                "BOT_TOKEN is not defined. Please add it to your .env file before running the bot."
            )

        timezone_name = os.getenv("BOT_TIMEZONE", "Asia/Tashkent").strip()
        try:
            pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError as exc:
            raise RuntimeError(f"Unknown BOT_TIMEZONE {timezone_name!r}") from exc

        database_path = Path(os.getenv("BOT_DATABASE", "data/visa_keeper.sqlite")).expanduser()
        return cls(
            token=token.strip(),
            database_path=database_path,
            bootstrap_admin_id=_optional_int("BOOTSTRAP_ADMIN_ID"),
            admin_chat_id=_optional_int("ADMIN_CHAT_ID"),
            timezone_name=timezone_name,
            notify_time=_parse_time(os.getenv("NOTIFY_TIME", "09:00").strip()),
            notify_days=_non_negative_int("NOTIFY_DAYS", 3),
            check_days=_non_negative_int("CHECK_DAYS", 7),
        )


__all__ = ["BotConfig"]
