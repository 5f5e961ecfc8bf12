"""
Security helpers — password hashing, signed session tokens, upload validation,
text/URL sanitising.
"""
import base64
import hashlib
import hmac
import json
import re
import time
from dataclasses import dataclass
from typing import Optional

import bcrypt

from . import config

# ── Passwords ─────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# ── Session tokens ────────────────────────────────────────────────────────────
# Format: base64url(json payload) "." hex(hmac-sha256). Stateless, nothing kept in memory.

def _sign(body: str) -> str:
    return hmac.new(config.secret_key().encode(), body.encode(), hashlib.sha256).hexdigest()


def create_session_token(user_id: str, ttl_hours: Optional[int] = None) -> str:
    ttl = ttl_hours if ttl_hours is not None else config.session_ttl_hours()
    payload = {"uid": user_id, "exp": int(time.time()) + ttl * 3600}
    body = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    return f"{body}.{_sign(body)}"


def read_session_token(token: str) -> Optional[str]:
    """User id carried by a valid, unexpired token; None otherwise."""
    if not token or "." not in token:
        return None
    body, sig = token.rsplit(".", 1)
    if not hmac.compare_digest(sig, _sign(body)):
        return None
    try:
        padded = body + "=" * (-len(body) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded))
    except (ValueError, json.JSONDecodeError):
        return None
    if int(payload.get("exp", 0)) < time.time():
        return None
    return payload.get("uid")


# ── Upload validation ─────────────────────────────────────────────────────────

ALLOWED_FILE_TYPES = {
    "image": {
        "mime_types": ["image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml"],
        "extensions": [".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"],
    },
    "video": {
        "mime_types": ["video/mp4", "video/webm", "video/ogg", "video/quicktime"],
        "extensions": [".mp4", ".webm", ".ogv", ".mov"],
    },
    "audio": {
        "mime_types": ["audio/mpeg", "audio/wav", "audio/ogg", "audio/mp4"],
        "extensions": [".mp3", ".wav", ".ogg", ".m4a"],
    },
    "document": {
        "mime_types": [
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
            "text/plain",
        ],
        "extensions": [".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt"],
    },
}

_DANGEROUS_EXTENSIONS = {".exe", ".bat", ".cmd", ".sh", ".ps1", ".msi", ".dll", ".js", ".vbs"}


@dataclass
class FileCheck:
    valid: bool
    error: Optional[str] = None
    file_type: Optional[str] = None


def validate_file(filename: str, mime_type: str, size: int,
                  max_size_mb: Optional[int] = None,
                  allowed_types: Optional[list] = None) -> FileCheck:
    """Size, MIME whitelist, extension/MIME agreement, no executable double extension."""
    max_mb = max_size_mb if max_size_mb is not None else config.max_upload_mb()
    allowed = allowed_types or list(ALLOWED_FILE_TYPES)

    if size > max_mb * 1024 * 1024:
        return FileCheck(False, f"Ukuran file maksimal {max_mb}MB")

    name = (filename or "").lower()
    dot = name.rfind(".")
    extension = name[dot:] if dot != -1 else ""

    detected = None
    for ftype, spec in ALLOWED_FILE_TYPES.items():
        if mime_type in spec["mime_types"]:
            detected = ftype
            break
    if detected is None or detected not in allowed:
        return FileCheck(False, "Tipe file tidak diizinkan")

    if extension not in ALLOWED_FILE_TYPES[detected]["extensions"]:
        return FileCheck(False, "Ekstensi file tidak valid untuk tipe ini")

    parts = name.split(".")
    if len(parts) > 2 and any(f".{p}" in _DANGEROUS_EXTENSIONS for p in parts[1:-1]):
        return FileCheck(False, "Nama file tidak valid")

    return FileCheck(True, file_type=detected)


# ── Sanitising ────────────────────────────────────────────────────────────────

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_ALLOWED_URL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "/", "#")


def clean_text(value) -> str:
    """Strip control characters; non-strings become ''. Escaping is left to the renderer."""
    if not isinstance(value, str):
        return ""
    return _CONTROL_CHARS.sub("", value).strip()


def sanitize_url(url) -> str:
    """Only http(s), mailto, tel, relative and anchor URLs survive; anything else → ''."""
    if not isinstance(url, str):
        return ""
    trimmed = url.strip()
    if not trimmed.lower().startswith(_ALLOWED_URL_PREFIXES) and ":" in trimmed:
        return ""
    return trimmed
