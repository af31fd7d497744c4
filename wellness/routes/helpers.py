# wellness/routes/helpers.py
from datetime import datetime
from typing import Any, Optional

from flask import current_app
from flask_jwt_extended import get_jwt_identity


def current_user_id() -> int:
    return int(get_jwt_identity())


def badge_engine():
    return current_app.extensions["badge_engine"]


def run_badge_check(method_name: str, *args) -> None:
    """
    Best-effort badge bookkeeping after a handler's write has committed.
    Never raises: a badge failure must not change the response.
    """
    try:
        getattr(badge_engine(), method_name)(*args)
    except Exception:
        current_app.logger.exception(f"Badge check error ({method_name}) args={args}")


def now() -> datetime:
    return badge_engine().clock.now()


def safe_int_or_none(v: Any) -> Optional[int]:
    if v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def as_text(v: Any) -> str:
    """JSON value -> str; anything that is not a string counts as missing."""
    return v if isinstance(v, str) else ""


def parse_bool(v: Any) -> Optional[bool]:
    """true/false, 1/0 or their string spellings; None for anything else."""
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        lowered = v.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO-8601 string -> naive datetime (aware values are converted to local time)."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
