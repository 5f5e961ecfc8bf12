"""Downloadable documents (unduhan): forms, brochures, calendars."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..errors import ActionResult, NotFound, service_action
from ..models import DownloadDB
from ..schemas import DownloadInput
from ._crud import paginate, search_filter
from ._resource import Resource

log = logging.getLogger(__name__)

downloads = Resource(DownloadDB, DownloadInput, {
    "not_found":   "File tidak ditemukan",
    "created":     "File berhasil ditambahkan",
    "create_fail": "Gagal menambahkan file",
    "updated":     "File berhasil diperbarui",
    "update_fail": "Gagal memperbarui file",
    "deleted":     "File berhasil dihapus",
    "delete_fail": "Gagal menghapus file",
    "toggled_on":  "File berhasil dipublikasikan",
    "toggled_off": "File berhasil disembunyikan",
    "toggle_fail": "Gagal mengubah status file",
}, admin_path="/admin/downloads", public_paths=("/unduhan",), toggle_field="is_published", slug_field=None)

create_download = downloads.create
update_download = downloads.update
delete_download = downloads.delete
toggle_download_publish = downloads.toggle
reorder_downloads = downloads.reorder


def list_downloads(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                   category: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(DownloadDB)
    cond = search_filter(DownloadDB, search, "title", "description")
    if cond is not None:
        q = q.filter(cond)
    if category:
        q = q.filter(DownloadDB.category == category)
    return paginate(q.order_by(DownloadDB.order, DownloadDB.created_at.desc()), page, limit)


def download_categories(db: Session) -> List[str]:
    rows = db.query(DownloadDB.category).filter(DownloadDB.category.isnot(None)).distinct().all()
    return sorted(r[0] for r in rows)


def published_downloads(db: Session, category: Optional[str] = None, limit: Optional[int] = None) -> List[DownloadDB]:
    q = db.query(DownloadDB).filter_by(is_published=True)
    if category:
        q = q.filter(DownloadDB.category == category)
    q = q.order_by(DownloadDB.order, DownloadDB.created_at.desc())
    return q.limit(limit).all() if limit else q.all()


@service_action("Gagal memperbarui jumlah unduhan")
def increment_download_count(db: Session, download_id: str) -> ActionResult:
    """Public: counts one download of a published file and hands back its URL."""
    d = db.query(DownloadDB).filter_by(id=download_id, is_published=True).first()
    if d is None:
        raise NotFound("File tidak ditemukan")
    d.download_count = (d.download_count or 0) + 1
    db.commit()
    return ActionResult.ok({"file": d.file, "download_count": d.download_count})
