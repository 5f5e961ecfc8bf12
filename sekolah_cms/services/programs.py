"""Academic programs: curriculum, extracurricular and featured programs."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import ProgramDB
from ..schemas import ProgramInput
from ._crud import paginate, search_filter
from ._resource import Resource

programs = Resource(ProgramDB, ProgramInput, {
    "not_found":    "Program tidak ditemukan",
    "created":      "Program berhasil dibuat",
    "create_fail":  "Gagal membuat program",
    "updated":      "Program berhasil diperbarui",
    "update_fail":  "Gagal memperbarui program",
    "deleted":      "Program berhasil dihapus",
    "delete_fail":  "Gagal menghapus program",
    "toggled_on":   "Program berhasil diaktifkan",
    "toggled_off":  "Program berhasil dinonaktifkan",
    "toggle_fail":  "Gagal mengubah status program",
    "reordered":    "Urutan program berhasil diperbarui",
    "reorder_fail": "Gagal mengubah urutan program",
}, admin_path="/admin/programs", public_paths=("/program",), toggle_field="is_active")

create_program = programs.create
update_program = programs.update
delete_program = programs.delete
toggle_program_status = programs.toggle
reorder_programs = programs.reorder


def list_programs(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                  type: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(ProgramDB)
    cond = search_filter(ProgramDB, search, "name", "description")
    if cond is not None:
        q = q.filter(cond)
    if type:
        q = q.filter(ProgramDB.type == type)
    return paginate(q.order_by(ProgramDB.order, ProgramDB.name), page, limit)


def get_program_by_slug(db: Session, slug: str) -> Optional[ProgramDB]:
    return db.query(ProgramDB).filter_by(slug=slug, is_active=True).first()


def active_programs(db: Session, type: Optional[str] = None, limit: Optional[int] = None) -> List[ProgramDB]:
    q = db.query(ProgramDB).filter_by(is_active=True)
    if type:
        q = q.filter(ProgramDB.type == type)
    q = q.order_by(ProgramDB.order, ProgramDB.name)
    return q.limit(limit).all() if limit else q.all()
