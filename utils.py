import datetime as dt
import re
import time
import uuid
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional


def utc_now() -> dt.datetime:
    """Current time in UTC."""
    return dt.datetime.now(dt.timezone.utc)


def now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T09:30:00.123Z."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def local_time_text(d: Optional[dt.datetime] = None) -> str:
    """Human-readable local time, e.g. 05/01/2024, 11:30:00 AM."""
    d = d or dt.datetime.now()
    return d.strftime("%m/%d/%Y, %I:%M:%S %p")


def new_id(prefix: str) -> str:
    """Random collision-resistant identifier such as v_3f2a...; prefix names the entity."""
    return f"{prefix}_{uuid.uuid4().hex}"


def email_key(email: str) -> str:
    """Emails are matched case-insensitively everywhere."""
    return (email or "").strip().lower()


def find_user_index(users: List[Dict[str, Any]], email: str) -> int:
    """Index of the user with this email, or -1."""
    key = email_key(email)
    for i, u in enumerate(users):
        if email_key(u.get("email", "")) == key:
            return i
    return -1


def filter_by_course(items: Iterable[Dict[str, Any]], course: Optional[str]) -> List[Dict[str, Any]]:
    """Keep records whose course equals ``course``; no filter when it is empty."""
    if not course:
        return list(items)
    return [it for it in items if it.get("course") == course]


def upload_filename(original: str) -> str:
    """Stored name for an upload: <ms timestamp>_<8 hex>_<original, whitespace as _>."""
    base = PurePath((original or "").replace("\\", "/")).name or "video"
    safe = re.sub(r"\s+", "_", base)
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{safe}"


def parse_iso(value: Optional[str]) -> dt.datetime:
    """Parse an ISO-8601 timestamp ('Z' accepted); unparseable or missing sorts oldest."""
    if not value:
        return dt.datetime.min.replace(tzinfo=dt.timezone.utc)
    try:
        d = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return dt.datetime.min.replace(tzinfo=dt.timezone.utc)
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    return d
