from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


def _parse_user_id(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _parse_positive_int(value: str | None, default: int) -> int:
    try:
        parsed = int((value or "").strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _parse_positive_float(value: str | None, default: float) -> float:
    try:
        parsed = float((value or "").strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Settings:
    database_url: str
    state_dir: Path
    api_token: str = ""
    user_id: int | None = None
    auto_refresh: bool = True
    log_level: str = "INFO"
    log_dir: str = "logs"
    snooze_default_days: int = 1
    request_timeout: float = 30.0

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.api_token:
            missing.append("CLICKUP_API_TOKEN")
        if self.user_id is None:
            missing.append("CLICKUP_USER_ID")
        return missing


load_env()

STATE_DIR = Path(
    os.getenv("TASKDASH_STATE_DIR", "").strip() or Path.home() / ".config" / "taskdash"
).expanduser()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{STATE_DIR / 'taskdash.db'}"

SETTINGS = Settings(
    database_url=DATABASE_URL,
    state_dir=STATE_DIR,
    api_token=os.getenv("CLICKUP_API_TOKEN", "").strip(),
    user_id=_parse_user_id(os.getenv("CLICKUP_USER_ID", "")),
    auto_refresh=_parse_bool(os.getenv("AUTO_REFRESH"), True),
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    snooze_default_days=_parse_positive_int(os.getenv("SNOOZE_DEFAULT_DAYS"), 1),
    request_timeout=_parse_positive_float(os.getenv("CLICKUP_TIMEOUT"), 30.0),
)
