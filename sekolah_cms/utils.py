"""Small helpers — slugs, timestamps, registration numbers, file sizes."""
import random
import re
import unicodedata
from datetime import datetime, timezone
from typing import Callable

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite stores no tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def slugify(text: str) -> str:
    norm = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    norm = re.sub(r"[^a-z0-9\s-]", "", norm.lower())
    norm = re.sub(r"[\s_-]+", "-", norm).strip("-")
    return norm


def is_valid_slug(slug: str) -> bool:
    return bool(slug) and bool(SLUG_RE.match(slug))


def unique_copy_slug(slug: str, exists: Callable[[str], bool]) -> str:
    """`slug-copy`, then `slug-copy-2`, `slug-copy-3`… until `exists` says no."""
    candidate = f"{slug}-copy"
    n = 2
    while exists(candidate):
        candidate = f"{slug}-copy-{n}"
        n += 1
    return candidate


def generate_registration_no(now: datetime = None) -> str:
    """PPDB + year + last 6 digits of the epoch millis + 4 random digits."""
    now = now or utcnow()
    millis = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000)
    return f"PPDB{now.year}{str(millis)[-6:]}{random.randint(0, 9999):04d}"


def format_file_size(size: int) -> str:
    if not size:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{value:.0f} {units[i]}" if i == 0 else f"{value:.1f} {units[i]}"
