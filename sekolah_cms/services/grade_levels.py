"""Grade levels / classes offered (kelas), with age ranges and quotas."""
from typing import List

from sqlalchemy.orm import Session

from ..models import GradeLevelDB
from ..schemas import GradeLevelInput
from ._resource import Resource

grade_levels = Resource(GradeLevelDB, GradeLevelInput, {
    "not_found":   "Kelas tidak ditemukan",
    "created":     "Kelas berhasil dibuat",
    "create_fail": "Gagal membuat kelas",
    "updated":     "Kelas berhasil diperbarui",
    "update_fail": "Gagal memperbarui kelas",
    "deleted":     "Kelas berhasil dihapus",
    "delete_fail": "Gagal menghapus kelas",
    "toggled_on":  "Kelas diaktifkan",
    "toggled_off": "Kelas dinonaktifkan",
    "toggle_fail": "Gagal mengubah status kelas",
}, admin_path="/admin/grade-levels", public_paths=("/ppdb",), toggle_field="is_active")

create_grade_level = grade_levels.create
update_grade_level = grade_levels.update
delete_grade_level = grade_levels.delete
toggle_grade_level_active = grade_levels.toggle


def list_grade_levels(db: Session) -> List[dict]:
    return [g.to_dict() for g in db.query(GradeLevelDB).order_by(GradeLevelDB.order).all()]


def active_grade_levels(db: Session) -> List[GradeLevelDB]:
    return db.query(GradeLevelDB).filter_by(is_active=True).order_by(GradeLevelDB.order).all()
