"""Alumni directory."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import AlumniDB
from ..schemas import AlumniInput
from ._crud import paginate, search_filter
from ._resource import Resource

alumni = Resource(AlumniDB, AlumniInput, {
    "not_found":   "Alumni tidak ditemukan",
    "created":     "Alumni berhasil ditambahkan",
    "create_fail": "Gagal menambahkan alumni",
    "updated":     "Alumni berhasil diperbarui",
    "update_fail": "Gagal memperbarui alumni",
    "deleted":     "Alumni berhasil dihapus",
    "delete_fail": "Gagal menghapus alumni",
    "toggled_on":  "Alumni berhasil dipublikasikan",
    "toggled_off": "Alumni berhasil disembunyikan",
    "toggle_fail": "Gagal mengubah status alumni",
}, admin_path="/admin/alumni", public_paths=("/alumni",), toggle_field="is_published", slug_field=None)

create_alumni = alumni.create
update_alumni = alumni.update
delete_alumni = alumni.delete
toggle_alumni_publish = alumni.toggle


def list_alumni(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                graduation_year: Optional[int] = None) -> Dict[str, Any]:
    q = db.query(AlumniDB)
    cond = search_filter(AlumniDB, search, "name", "company", "current_status")
    if cond is not None:
        q = q.filter(cond)
    if graduation_year:
        q = q.filter(AlumniDB.graduation_year == graduation_year)
    return paginate(q.order_by(AlumniDB.graduation_year.desc(), AlumniDB.name), page, limit)


def graduation_years(db: Session) -> List[int]:
    rows = db.query(AlumniDB.graduation_year).distinct().order_by(AlumniDB.graduation_year.desc()).all()
    return [r[0] for r in rows]


def published_alumni(db: Session) -> List[AlumniDB]:
    return db.query(AlumniDB).filter_by(is_published=True) \
        .order_by(AlumniDB.graduation_year.desc(), AlumniDB.name).all()


def featured_alumni(db: Session, limit: int = 6) -> List[AlumniDB]:
    """Published alumni with a recorded achievement."""
    return db.query(AlumniDB).filter(AlumniDB.is_published.is_(True), AlumniDB.achievement.isnot(None)) \
        .order_by(AlumniDB.graduation_year.desc()).limit(limit).all()
