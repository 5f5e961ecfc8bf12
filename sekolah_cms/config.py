"""Environment configuration, read at call time so tests can override via os.environ."""
import os
from pathlib import Path

ROOT_DIR = Path(__file__).parent.parent
DATA_DIR = ROOT_DIR / "data"


def app_env() -> str:
    return os.getenv("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_path = os.getenv("DB_PATH", str(DATA_DIR / "sekolah.db"))
    return f"sqlite:///{db_path}"


DEFAULT_SECRET = "dev-secret-change-me"


def secret_key() -> str:
    key = os.getenv("SECRET_KEY", "") or DEFAULT_SECRET
    if key == DEFAULT_SECRET and is_production():
        raise RuntimeError("SECRET_KEY must be set to a private value when APP_ENV=production")
    return key


def session_ttl_hours() -> int:
    return int(os.getenv("SESSION_TTL_HOURS", "24"))


def uploads_dir() -> Path:
    return Path(os.getenv("UPLOADS_DIR", str(ROOT_DIR / "dist" / "uploads")))


def media_base_url() -> str:
    return os.getenv("MEDIA_BASE_URL", "/uploads").rstrip("/")


def max_upload_mb() -> int:
    return int(os.getenv("MAX_UPLOAD_MB", "10"))


def site_url() -> str:
    """Public origin used in sitemap and robots links; empty means the request origin."""
    return os.getenv("SITE_URL", "").rstrip("/")


# ── Remote object storage (S3-compatible / Cloudflare R2) ─────────────────────

def r2_settings() -> dict:
    return {
        "endpoint":   os.getenv("R2_ENDPOINT", ""),
        "access_key": os.getenv("R2_ACCESS_KEY", ""),
        "secret_key": os.getenv("R2_SECRET_KEY", ""),
        "bucket":     os.getenv("R2_BUCKET", ""),
        "public_url": os.getenv("R2_PUBLIC_URL", "").rstrip("/"),
    }


def remote_storage_configured() -> bool:
    s = r2_settings()
    return bool(s["endpoint"] and s["access_key"] and s["secret_key"] and s["bucket"])


def scheduler_enabled() -> bool:
    return os.getenv("SCHEDULER_ENABLED", "1") not in ("0", "false", "no")
