"""
Media library — validated uploads, listing, alt text, deletion.
Bytes go through sekolah_cms.storage (R2 or local disk); one MediaDB row per file.
"""
import io
import logging
import re
import uuid
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from .. import storage
from ..context import RequestContext, require_role
from ..errors import ActionResult, StorageError, ValidationFailed, service_action
from ..models import MediaDB
from ..security import validate_file
from ._crud import get_or_404, paginate

log = logging.getLogger(__name__)

NOT_FOUND = "Media tidak ditemukan"


def _safe_folder(folder: Optional[str]) -> str:
    cleaned = re.sub(r"[^a-z0-9_-]", "", (folder or "").lower())
    return cleaned or "general"


def _safe_name(filename: str) -> str:
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return re.sub(r"[^A-Za-z0-9._-]", "-", base).strip("-.") or "file"


def image_size(data: bytes, mime_type: str) -> Tuple[Optional[int], Optional[int]]:
    """(width, height) of a raster image, (None, None) when Pillow cannot read it."""
    if mime_type == "image/svg+xml":
        return None, None
    from PIL import Image, UnidentifiedImageError
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        log.warning("Image dimensions unreadable: %s", e)
        return None, None


# ── Reads ──────────────────────────────────────────────────────────────

def list_media(db: Session, page: int = 1, limit: int = 24,
               folder: Optional[str] = None, type: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(MediaDB)
    if folder:
        q = q.filter(MediaDB.folder == folder)
    if type:
        q = q.filter(MediaDB.type == type)
    return paginate(q.order_by(MediaDB.created_at.desc()), page, limit)


def list_folders(db: Session) -> list:
    return [r[0] for r in db.query(MediaDB.folder).distinct().order_by(MediaDB.folder).all()]


# ── Mutations ──────────────────────────────────────────────────────────

@service_action("Gagal mengupload file")
def upload_media(db: Session, ctx: RequestContext, filename: str, mime_type: str,
                 data: bytes, folder: str = "general", alt: Optional[str] = None) -> ActionResult:
    require_role(ctx)
    if not filename or data is None:
        raise ValidationFailed("File tidak ditemukan")

    check = validate_file(filename, mime_type, len(data))
    if not check.valid:
        raise ValidationFailed(check.error)

    folder = _safe_folder(folder)
    key = f"{folder}/{uuid.uuid4().hex[:12]}-{_safe_name(filename)}"
    backend, url = storage.store(key, data, mime_type)

    width = height = None
    if check.file_type == "image":
        width, height = image_size(data, mime_type)

    media = MediaDB(
        name=filename, url=url, storage=backend, storage_key=key, type=check.file_type,
        mime_type=mime_type, size=len(data), width=width, height=height,
        alt=alt, folder=folder,
    )
    try:
        db.add(media); db.commit(); db.refresh(media)
    except Exception:
        db.rollback()
        try:
            storage.remove(backend, key)
        except (StorageError, OSError) as e:
            log.warning("Orphaned upload %s left on %s: %s", key, backend, e)
        raise

    ctx.invalidate("/admin/media")
    log.info("Media stored: %s via %s (%d bytes)", key, backend, len(data))
    return ActionResult.ok(media.to_dict(), "File berhasil diupload")


@service_action("Gagal menghapus file")
def delete_media(db: Session, ctx: RequestContext, media_id: str) -> ActionResult:
    require_role(ctx)
    media = get_or_404(db, MediaDB, media_id, NOT_FOUND)
    try:
        storage.remove(media.storage, media.storage_key)
    except (StorageError, OSError, ValueError) as e:
        log.warning("File %s not removed from %s, deleting record anyway: %s",
                    media.storage_key, media.storage, e)
    db.delete(media); db.commit()
    ctx.invalidate("/admin/media")
    return ActionResult.ok(message="File berhasil dihapus")


@service_action("Gagal memperbarui alt text")
def update_media_alt(db: Session, ctx: RequestContext, media_id: str, alt: str) -> ActionResult:
    require_role(ctx)
    media = get_or_404(db, MediaDB, media_id, NOT_FOUND)
    media.alt = (alt or "").strip() or None
    db.commit()
    ctx.invalidate("/admin/media")
    return ActionResult.ok(media.to_dict(), "Alt text berhasil diperbarui")
