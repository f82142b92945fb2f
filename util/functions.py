# util/functions.py
import re
from datetime import datetime, timezone
from typing import Iterable, List
from fastapi import Request

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_SLUG_EDGES = re.compile(r"(^-|-$)")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def generate_slug(name: str) -> str:
    """
    - Lowercase, collapse every run of non [a-z0-9] into one '-'.
    - Strip a single leading/trailing '-'.
    """
    return _SLUG_EDGES.sub("", _SLUG_INVALID.sub("-", name.lower()))


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL.match(value))


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def parse_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def format_last_updated(updated_at: datetime, now: datetime | None = None) -> str:
    """Human "last updated" text: Just now / N minutes / hours / days ago."""
    now = now or datetime.now(timezone.utc)
    minutes = int((now - updated_at).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(hours // 24, "day")


def unique_in_order(*groups: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for group in groups:
        for value in group:
            if value not in seen:
                seen.add(value)
                out.append(value)
    return out


def file_extension(filename: str | None, default: str = "bin") -> str:
    if not filename or "." not in filename:
        return default
    return filename.rsplit(".", 1)[-1].lower() or default


def client_ip(request: Request, trust_proxy: bool) -> str:
    """First X-Forwarded-For hop when behind a trusted proxy, else the peer address."""
    if trust_proxy:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
