"""Announcements (pengumuman): short notices shown as a bar on the public site."""
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Session

from ..models import AnnouncementDB
from ..schemas import AnnouncementInput
from ..utils import utcnow
from ._crud import paginate, search_filter
from ._resource import Resource

announcements = Resource(AnnouncementDB, AnnouncementInput, {
    "not_found":   "Pengumuman tidak ditemukan",
    "created":     "Pengumuman berhasil dibuat",
    "create_fail": "Gagal membuat pengumuman",
    "updated":     "Pengumuman berhasil diperbarui",
    "update_fail": "Gagal memperbarui pengumuman",
    "deleted":     "Pengumuman berhasil dihapus",
    "delete_fail": "Gagal menghapus pengumuman",
    "toggled_on":  "Pengumuman berhasil diaktifkan",
    "toggled_off": "Pengumuman berhasil dinonaktifkan",
    "toggle_fail": "Gagal mengubah status pengumuman",
}, admin_path="/admin/announcements", public_paths=("/",), toggle_field="is_active", slug_field=None)

create_announcement = announcements.create
update_announcement = announcements.update
delete_announcement = announcements.delete
toggle_announcement_status = announcements.toggle
reorder_announcements = announcements.reorder


def list_announcements(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                       is_active: Optional[bool] = None) -> Dict[str, Any]:
    q = db.query(AnnouncementDB)
    cond = search_filter(AnnouncementDB, search, "title", "content")
    if cond is not None:
        q = q.filter(cond)
    if is_active is not None:
        q = q.filter(AnnouncementDB.is_active == is_active)
    return paginate(q.order_by(AnnouncementDB.order, AnnouncementDB.created_at.desc()), page, limit)


def get_announcement(db: Session, announcement_id: str) -> Optional[dict]:
    a = db.get(AnnouncementDB, announcement_id)
    return a.to_dict() if a else None


def active_announcements(db: Session, path: Optional[str] = None, now=None) -> List[AnnouncementDB]:
    """Active and inside their date window. With `path`, only those shown on that page
    (an empty page list means every page)."""
    now = now or utcnow()
    rows = (db.query(AnnouncementDB)
            .filter(AnnouncementDB.is_active.is_(True))
            .filter(sa.or_(AnnouncementDB.start_date.is_(None), AnnouncementDB.start_date <= now))
            .filter(sa.or_(AnnouncementDB.end_date.is_(None), AnnouncementDB.end_date >= now))
            .order_by(AnnouncementDB.order, AnnouncementDB.created_at.desc())
            .all())
    if path is None:
        return rows
    return [a for a in rows if not a.show_on_pages or path in a.show_on_pages]
