"""Teachers and staff (guru & tenaga kependidikan)."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import StaffDB
from ..schemas import StaffInput
from ._crud import paginate, search_filter
from ._resource import Resource

staff = Resource(StaffDB, StaffInput, {
    "not_found":    "Staff tidak ditemukan",
    "created":      "Staff berhasil ditambahkan",
    "create_fail":  "Gagal menambahkan staff",
    "updated":      "Staff berhasil diperbarui",
    "update_fail":  "Gagal memperbarui staff",
    "deleted":      "Staff berhasil dihapus",
    "delete_fail":  "Gagal menghapus staff",
    "toggled_on":   "Staff berhasil diaktifkan",
    "toggled_off":  "Staff berhasil dinonaktifkan",
    "toggle_fail":  "Gagal mengubah status staff",
    "reordered":    "Urutan staff berhasil diperbarui",
    "reorder_fail": "Gagal mengubah urutan staff",
}, admin_path="/admin/staff", public_paths=("/guru",), toggle_field="is_active", slug_field=None)

create_staff = staff.create
update_staff = staff.update
delete_staff = staff.delete
toggle_staff_status = staff.toggle
reorder_staff = staff.reorder


def list_staff(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
               department: Optional[str] = None, is_teacher: Optional[bool] = None) -> Dict[str, Any]:
    q = db.query(StaffDB)
    cond = search_filter(StaffDB, search, "name", "position", "nip")
    if cond is not None:
        q = q.filter(cond)
    if department:
        q = q.filter(StaffDB.department == department)
    if is_teacher is not None:
        q = q.filter(StaffDB.is_teacher == is_teacher)
    return paginate(q.order_by(StaffDB.order, StaffDB.name), page, limit)


def active_staff(db: Session, limit: Optional[int] = None) -> List[StaffDB]:
    q = db.query(StaffDB).filter_by(is_active=True).order_by(StaffDB.order, StaffDB.name)
    return q.limit(limit).all() if limit else q.all()
