"""Back-office accounts. Managing users needs ADMIN; deleting one needs SUPERADMIN."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, Conflict, ValidationFailed, service_action
from ..models import Role, UserDB
from ..schemas import UserInput
from ..security import hash_password
from ._crud import apply, get_or_404, paginate, search_filter, validate, validate_update

log = logging.getLogger(__name__)

NOT_FOUND = "Pengguna tidak ditemukan"


def list_users(db: Session, ctx: RequestContext, page: int = 1, limit: int = 10,
               search: Optional[str] = None) -> Dict[str, Any]:
    require_role(ctx, Role.ADMIN)
    q = db.query(UserDB)
    cond = search_filter(UserDB, search, "name", "email")
    if cond is not None:
        q = q.filter(cond)
    return paginate(q.order_by(UserDB.created_at.desc()), page, limit)


def get_user(db: Session, ctx: RequestContext, user_id: str) -> Optional[dict]:
    require_role(ctx)
    u = db.get(UserDB, user_id)
    return u.to_dict() if u else None


@service_action("Gagal membuat pengguna")
def create_user(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx, Role.ADMIN)
    values = validate(UserInput, data)
    values["email"] = values["email"].lower()
    if db.query(UserDB).filter_by(email=values["email"]).first():
        raise Conflict("Email sudah terdaftar")
    password = values.pop("password")
    user = UserDB(**values, password=hash_password(password) if password else None)
    db.add(user); db.commit(); db.refresh(user)
    ctx.invalidate("/admin/users")
    log.info("User created: %s (%s)", user.email, user.role)
    return ActionResult.ok(user.to_dict(), "Pengguna berhasil dibuat")


@service_action("Gagal memperbarui pengguna")
def update_user(db: Session, ctx: RequestContext, user_id: str, partial: Dict[str, Any]) -> ActionResult:
    actor = require_role(ctx, Role.ADMIN)
    user = get_or_404(db, UserDB, user_id, NOT_FOUND)
    values = validate_update(UserInput, user, partial)
    if "email" in values:
        values["email"] = values["email"].lower()
        if values["email"] != user.email and db.query(UserDB).filter_by(email=values["email"]).first():
            raise Conflict("Email sudah digunakan")
    if user.id == actor.id and values.get("is_active") is False:
        raise ValidationFailed("Tidak dapat menonaktifkan akun sendiri")
    password = values.pop("password", None)
    apply(user, values)
    if password:
        user.password = hash_password(password)
    db.commit(); db.refresh(user)
    ctx.invalidate("/admin/users")
    return ActionResult.ok(user.to_dict(), "Pengguna berhasil diperbarui")


@service_action("Gagal menghapus pengguna")
def delete_user(db: Session, ctx: RequestContext, user_id: str) -> ActionResult:
    actor = require_role(ctx, Role.SUPERADMIN)
    if user_id == actor.id:
        raise ValidationFailed("Tidak dapat menghapus akun sendiri")
    user = get_or_404(db, UserDB, user_id, NOT_FOUND)
    db.delete(user); db.commit()
    ctx.invalidate("/admin/users")
    log.info("User deleted: %s", user.email)
    return ActionResult.ok(message="Pengguna berhasil dihapus")


@service_action("Gagal mengubah status pengguna")
def toggle_user_status(db: Session, ctx: RequestContext, user_id: str) -> ActionResult:
    actor = require_role(ctx, Role.ADMIN)
    user = get_or_404(db, UserDB, user_id, NOT_FOUND)
    if user.id == actor.id:
        raise ValidationFailed("Tidak dapat menonaktifkan akun sendiri")
    user.is_active = not user.is_active
    db.commit()
    ctx.invalidate("/admin/users")
    msg = "Pengguna berhasil diaktifkan" if user.is_active else "Pengguna berhasil dinonaktifkan"
    return ActionResult.ok({"is_active": user.is_active}, msg)
