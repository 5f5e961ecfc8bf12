"""School facilities (fasilitas)."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import FacilityDB
from ..schemas import FacilityInput
from ._crud import paginate, search_filter
from ._resource import Resource

facilities = Resource(FacilityDB, FacilityInput, {
    "not_found":    "Fasilitas tidak ditemukan",
    "created":      "Fasilitas berhasil dibuat",
    "create_fail":  "Gagal membuat fasilitas",
    "updated":      "Fasilitas berhasil diperbarui",
    "update_fail":  "Gagal memperbarui fasilitas",
    "deleted":      "Fasilitas berhasil dihapus",
    "delete_fail":  "Gagal menghapus fasilitas",
    "toggled_on":   "Fasilitas berhasil dipublikasikan",
    "toggled_off":  "Fasilitas berhasil disembunyikan",
    "toggle_fail":  "Gagal mengubah status fasilitas",
    "reordered":    "Urutan fasilitas berhasil diperbarui",
    "reorder_fail": "Gagal mengubah urutan fasilitas",
}, admin_path="/admin/facilities", public_paths=("/fasilitas",), toggle_field="is_published")

create_facility = facilities.create
update_facility = facilities.update
delete_facility = facilities.delete
toggle_facility_publish = facilities.toggle
reorder_facilities = facilities.reorder


def list_facilities(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(FacilityDB)
    cond = search_filter(FacilityDB, search, "name", "description")
    if cond is not None:
        q = q.filter(cond)
    return paginate(q.order_by(FacilityDB.order, FacilityDB.name), page, limit)


def published_facilities(db: Session, limit: Optional[int] = None) -> List[FacilityDB]:
    q = db.query(FacilityDB).filter_by(is_published=True).order_by(FacilityDB.order)
    return q.limit(limit).all() if limit else q.all()


def get_facility_by_slug(db: Session, slug: str) -> Optional[FacilityDB]:
    return db.query(FacilityDB).filter_by(slug=slug, is_published=True).first()
