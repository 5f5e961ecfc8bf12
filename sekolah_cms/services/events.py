"""School calendar events (agenda kegiatan)."""
import calendar
from datetime import datetime
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Session

from ..models import EventDB
from ..schemas import EventInput
from ..utils import utcnow
from ._crud import paginate, search_filter
from ._resource import Resource

events = Resource(EventDB, EventInput, {
    "not_found":   "Kegiatan tidak ditemukan",
    "created":     "Kegiatan berhasil dibuat",
    "create_fail": "Gagal membuat kegiatan",
    "updated":     "Kegiatan berhasil diperbarui",
    "update_fail": "Gagal memperbarui kegiatan",
    "deleted":     "Kegiatan berhasil dihapus",
    "delete_fail": "Gagal menghapus kegiatan",
    "toggled_on":  "Kegiatan berhasil dipublikasikan",
    "toggled_off": "Kegiatan berhasil disembunyikan",
    "toggle_fail": "Gagal mengubah status kegiatan",
}, admin_path="/admin/events", public_paths=("/agenda",), toggle_field="is_published")

create_event = events.create
update_event = events.update
delete_event = events.delete
toggle_event_publish = events.toggle


def list_events(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                type: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(EventDB)
    cond = search_filter(EventDB, search, "title", "location")
    if cond is not None:
        q = q.filter(cond)
    if type:
        q = q.filter(EventDB.type == type)
    return paginate(q.order_by(EventDB.start_date.desc()), page, limit)


def get_event_by_slug(db: Session, slug: str) -> Optional[EventDB]:
    return db.query(EventDB).filter_by(slug=slug, is_published=True).first()


def upcoming_events(db: Session, limit: int = 5, now: Optional[datetime] = None) -> List[EventDB]:
    now = now or utcnow()
    return db.query(EventDB).filter(EventDB.is_published.is_(True), EventDB.start_date >= now) \
        .order_by(EventDB.start_date).limit(limit).all()


def events_by_month(db: Session, year: int, month: int) -> List[EventDB]:
    """Published events that overlap the given month."""
    first = datetime(year, month, 1)
    last = datetime(year, month, calendar.monthrange(year, month)[1], 23, 59, 59)
    return db.query(EventDB).filter(
        EventDB.is_published.is_(True),
        sa.or_(
            EventDB.start_date.between(first, last),
            EventDB.end_date.between(first, last),
            sa.and_(EventDB.start_date <= first, EventDB.end_date >= last),
        ),
    ).order_by(EventDB.start_date).all()
