"""Local filesystem backend — files under UPLOADS_DIR, served at MEDIA_BASE_URL."""
import logging
from pathlib import Path

from .. import config

log = logging.getLogger(__name__)

NAME = "local"


def _path_for(key: str) -> Path:
    root = config.uploads_dir().resolve()
    path = (root / key).resolve()
    if root not in path.parents:
        raise ValueError(f"Key escapes the uploads directory: {key!r}")
    return path


def save(key: str, data: bytes, content_type: str) -> str:
    path = _path_for(key)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return f"{config.media_base_url()}/{key}"


def delete(key: str):
    path = _path_for(key)
    if path.exists():
        path.unlink()
    else:
        log.warning("Local file already gone: %s", path)
