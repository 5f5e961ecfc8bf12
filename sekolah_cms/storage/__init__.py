"""
Media storage selection.

Remote (R2) when configured, local filesystem otherwise. In production a
missing or failing remote store is an error; elsewhere uploads fall back to
local disk.
"""
import logging
from typing import Tuple

from .. import config
from ..errors import StorageError
from . import local, r2

log = logging.getLogger(__name__)

BACKENDS = {local.NAME: local, r2.NAME: r2}


def store(key: str, data: bytes, content_type: str) -> Tuple[str, str]:
    """Write `data` under `key`; returns (backend name, public url)."""
    if config.remote_storage_configured():
        try:
            return r2.NAME, r2.save(key, data, content_type)
        except StorageError:
            if config.is_production():
                raise
            log.warning("Remote storage unreachable, falling back to local for %s", key)
    elif config.is_production():
        log.error("Production upload refused: remote storage is not configured")
        raise StorageError("Penyimpanan media belum dikonfigurasi")
    try:
        return local.NAME, local.save(key, data, content_type)
    except OSError as e:
        log.error("Local write failed for %s: %s", key, e)
        raise StorageError("Gagal mengupload file") from e


def remove(backend: str, key: str):
    """Delete through the backend that holds the file. Raises on failure."""
    mod = BACKENDS.get(backend)
    if mod is None:
        raise StorageError(f"Unknown storage backend {backend!r}")
    mod.delete(key)
