"""Key/value site settings. Values are JSON; keys are grouped (general, seo, theme, email)."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, NotFound, ValidationFailed, service_action
from ..models import Role, SettingDB
from ..schemas import SettingInput
from ._crud import validate

log = logging.getLogger(__name__)

GROUP_FAILURES = {
    "general": "Gagal menyimpan pengaturan umum",
    "seo":     "Gagal menyimpan pengaturan SEO",
    "theme":   "Gagal menyimpan pengaturan tema",
    "email":   "Gagal menyimpan pengaturan email",
}


def get_settings(db: Session, group: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(SettingDB)
    if group:
        q = q.filter(SettingDB.group == group)
    return {s.key: s.value for s in q.order_by(SettingDB.key).all()}


def get_settings_by_group(db: Session) -> Dict[str, Dict[str, Any]]:
    grouped: Dict[str, Dict[str, Any]] = {}
    for s in db.query(SettingDB).order_by(SettingDB.group, SettingDB.key).all():
        grouped.setdefault(s.group, {})[s.key] = s.value
    return grouped


def get_setting(db: Session, key: str, default: Any = None) -> Any:
    s = db.query(SettingDB).filter_by(key=key).first()
    return s.value if s is not None else default


def setting_text(db: Session, key: str, default: str = "") -> str:
    """Scalar view of a setting stored either bare or as {"value": …}."""
    v = get_setting(db, key)
    if isinstance(v, dict):
        v = v.get("value")
    return str(v) if v not in (None, "") else default


MAINTENANCE_KEY = "maintenance_mode"


def is_maintenance_mode(db: Session) -> bool:
    """True when the maintenance_mode setting holds true (bare, {"value": …} or the string "true")."""
    v = get_setting(db, MAINTENANCE_KEY)
    if isinstance(v, dict):
        v = v.get("value")
    return v is True or (isinstance(v, str) and v.lower() == "true")


def _upsert(db: Session, key: str, value: Any, group: str) -> SettingDB:
    s = db.query(SettingDB).filter_by(key=key).first()
    if s is None:
        s = SettingDB(key=key, value=value, group=group)
        db.add(s)
    else:
        s.value = value
        s.group = group
    return s


@service_action("Gagal menyimpan pengaturan")
def set_setting(db: Session, ctx: RequestContext, key: str, value: Any, group: str = "general") -> ActionResult:
    require_role(ctx, Role.ADMIN)
    values = validate(SettingInput, {"key": key, "value": value, "group": group})
    _upsert(db, values["key"], values["value"], values["group"])
    db.commit()
    ctx.invalidate("/admin/settings", "/")
    return ActionResult.ok(message="Pengaturan berhasil disimpan")


@service_action("Gagal menyimpan pengaturan")
def set_settings(db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
    """Batch upsert in a single commit."""
    require_role(ctx, Role.ADMIN)
    if not isinstance(items, list):
        raise ValidationFailed("Data pengaturan tidak valid")
    for raw in items:
        values = validate(SettingInput, {**raw, "group": raw.get("group") or "general"})
        _upsert(db, values["key"], values["value"], values["group"])
    db.commit()
    ctx.invalidate("/admin/settings", "/")
    return ActionResult.ok({"saved": len(items)}, "Pengaturan berhasil disimpan")


def save_group(db: Session, ctx: RequestContext, group: str, values: Dict[str, Any]) -> ActionResult:
    """Save a settings form (general/seo/theme/email): every key lands in `group`."""
    action = service_action(GROUP_FAILURES.get(group, "Gagal menyimpan pengaturan"))(_save_group)
    return action(db, ctx, group, values)


def _save_group(db: Session, ctx: RequestContext, group: str, values: Dict[str, Any]) -> ActionResult:
    require_role(ctx, Role.ADMIN)
    if not isinstance(values, dict):
        raise ValidationFailed("Data pengaturan tidak valid")
    for key, value in values.items():
        _upsert(db, key, value, group)
    db.commit()
    ctx.invalidate("/admin/settings", "/")
    return ActionResult.ok(message="Pengaturan berhasil disimpan")


@service_action("Gagal menghapus pengaturan")
def delete_setting(db: Session, ctx: RequestContext, key: str) -> ActionResult:
    require_role(ctx, Role.ADMIN)
    s = db.query(SettingDB).filter_by(key=key).first()
    if s is None:
        raise NotFound("Pengaturan tidak ditemukan")
    db.delete(s); db.commit()
    ctx.invalidate("/admin/settings")
    return ActionResult.ok(message="Pengaturan berhasil dihapus")
