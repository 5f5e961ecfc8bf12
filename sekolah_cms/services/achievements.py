"""Student and school achievements (prestasi)."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import AchievementDB
from ..schemas import AchievementInput
from ._crud import paginate, search_filter
from ._resource import Resource

achievements = Resource(AchievementDB, AchievementInput, {
    "not_found":   "Prestasi tidak ditemukan",
    "created":     "Prestasi berhasil ditambahkan",
    "create_fail": "Gagal menambahkan prestasi",
    "updated":     "Prestasi berhasil diperbarui",
    "update_fail": "Gagal memperbarui prestasi",
    "deleted":     "Prestasi berhasil dihapus",
    "delete_fail": "Gagal menghapus prestasi",
    "toggled_on":  "Prestasi berhasil dipublikasikan",
    "toggled_off": "Prestasi berhasil disembunyikan",
    "toggle_fail": "Gagal mengubah status prestasi",
}, admin_path="/admin/achievements", public_paths=("/prestasi",), toggle_field="is_published")

create_achievement = achievements.create
update_achievement = achievements.update
delete_achievement = achievements.delete
toggle_achievement_publish = achievements.toggle


def list_achievements(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
                      level: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(AchievementDB)
    cond = search_filter(AchievementDB, search, "title", "participants")
    if cond is not None:
        q = q.filter(cond)
    if level:
        q = q.filter(AchievementDB.level == level)
    return paginate(q.order_by(AchievementDB.date.desc(), AchievementDB.order), page, limit)


def published_achievements(db: Session, limit: Optional[int] = None) -> List[AchievementDB]:
    q = db.query(AchievementDB).filter_by(is_published=True) \
        .order_by(AchievementDB.date.desc(), AchievementDB.order)
    return q.limit(limit).all() if limit else q.all()
