"""
PPDB (penerimaan peserta didik baru) — admission periods and registrations.

At most one period is active. Public registrations go into the active period
while today lies inside its date range and its quota is not exhausted.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, selectinload

from ..context import RequestContext, require_role
from ..errors import ActionResult, Blocked, Conflict, ValidationFailed, service_action
from ..models import PPDBPeriodDB, PPDBRegistrationDB
from ..schemas import PPDBPeriodInput, PPDBRegistrationInput, RegistrationStatusInput
from ..utils import generate_registration_no, utcnow
from ._crud import apply, get_or_404, paginate, search_filter, validate, validate_update

log = logging.getLogger(__name__)

PERIOD_NOT_FOUND = "Periode tidak ditemukan"


def _deactivate_others(db: Session, keep_id: Optional[str] = None):
    q = db.query(PPDBPeriodDB).filter(PPDBPeriodDB.is_active.is_(True))
    if keep_id:
        q = q.filter(PPDBPeriodDB.id != keep_id)
    q.update({PPDBPeriodDB.is_active: False}, synchronize_session="fetch")


def _period_dict(p: PPDBPeriodDB) -> dict:
    return {**p.to_dict(), "registration_count": len(p.registrations)}


def _registration_dict(r: PPDBRegistrationDB) -> dict:
    d = r.to_dict()
    d["period"] = {"name": r.period.name, "academic_year": r.period.academic_year} if r.period else None
    return d


# ── Periods ────────────────────────────────────────────────────────────

def list_periods(db: Session, page: int = 1, limit: int = 10,
                 is_active: Optional[bool] = None) -> Dict[str, Any]:
    q = db.query(PPDBPeriodDB).options(selectinload(PPDBPeriodDB.registrations))
    if is_active is not None:
        q = q.filter(PPDBPeriodDB.is_active == is_active)
    return paginate(q.order_by(PPDBPeriodDB.start_date.desc()), page, limit, _period_dict)


def get_period(db: Session, period_id: str) -> Optional[dict]:
    p = db.get(PPDBPeriodDB, period_id)
    return _period_dict(p) if p else None


def get_active_period(db: Session) -> Optional[PPDBPeriodDB]:
    return db.query(PPDBPeriodDB).filter_by(is_active=True).first()


def is_open(period: Optional[PPDBPeriodDB], now=None) -> bool:
    now = now or utcnow()
    return bool(period and period.is_active and period.start_date <= now <= period.end_date)


@service_action("Gagal membuat periode PPDB")
def create_period(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    values = validate(PPDBPeriodInput, data)
    if values["is_active"]:
        _deactivate_others(db)
    period = PPDBPeriodDB(**values)
    db.add(period); db.commit(); db.refresh(period)
    ctx.invalidate("/admin/ppdb", "/ppdb")
    log.info("PPDB period created: %s (%s)", period.name, period.academic_year)
    return ActionResult.ok(period.to_dict(), "Periode PPDB berhasil dibuat")


@service_action("Gagal memperbarui periode PPDB")
def update_period(db: Session, ctx: RequestContext, period_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    period = get_or_404(db, PPDBPeriodDB, period_id, PERIOD_NOT_FOUND)
    values = validate_update(PPDBPeriodInput, period, partial)
    if values.get("is_active"):
        _deactivate_others(db, keep_id=period.id)
    apply(period, values)
    db.commit(); db.refresh(period)
    ctx.invalidate("/admin/ppdb", "/ppdb")
    return ActionResult.ok(period.to_dict(), "Periode PPDB berhasil diperbarui")


@service_action("Gagal menghapus periode PPDB")
def delete_period(db: Session, ctx: RequestContext, period_id: str) -> ActionResult:
    require_role(ctx)
    period = get_or_404(db, PPDBPeriodDB, period_id, PERIOD_NOT_FOUND)
    count = db.query(PPDBRegistrationDB).filter_by(period_id=period.id).count()
    if count:
        raise Blocked(f"Periode memiliki {count} pendaftaran. Hapus pendaftaran terlebih dahulu.", count)
    db.delete(period); db.commit()
    ctx.invalidate("/admin/ppdb", "/ppdb")
    return ActionResult.ok(message="Periode PPDB berhasil dihapus")


@service_action("Gagal mengubah status periode")
def toggle_period_active(db: Session, ctx: RequestContext, period_id: str) -> ActionResult:
    require_role(ctx)
    period = get_or_404(db, PPDBPeriodDB, period_id, PERIOD_NOT_FOUND)
    if not period.is_active:
        _deactivate_others(db, keep_id=period.id)
    period.is_active = not period.is_active
    db.commit()
    ctx.invalidate("/admin/ppdb", "/ppdb")
    msg = "Periode PPDB diaktifkan" if period.is_active else "Periode PPDB dinonaktifkan"
    return ActionResult.ok({"is_active": period.is_active}, msg)


def close_expired_periods(db: Session, now=None) -> int:
    """Deactivate active periods whose end date has passed. Returns how many were closed."""
    now = now or utcnow()
    expired = db.query(PPDBPeriodDB).filter(
        PPDBPeriodDB.is_active.is_(True), PPDBPeriodDB.end_date < now,
    ).all()
    for p in expired:
        p.is_active = False
        log.info("PPDB period closed (ended %s): %s", p.end_date.isoformat(), p.name)
    db.commit()
    return len(expired)


# ── Registrations ──────────────────────────────────────────────────────

def list_registrations(db: Session, page: int = 1, limit: int = 10, period_id: Optional[str] = None,
                       status: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(PPDBRegistrationDB).options(selectinload(PPDBRegistrationDB.period))
    if period_id:
        q = q.filter(PPDBRegistrationDB.period_id == period_id)
    if status:
        q = q.filter(PPDBRegistrationDB.status == status)
    cond = search_filter(PPDBRegistrationDB, search, "student_name", "guardian_email", "registration_number")
    if cond is not None:
        q = q.filter(cond)
    return paginate(q.order_by(PPDBRegistrationDB.created_at.desc()), page, limit, _registration_dict)


def get_registration(db: Session, registration_id: str) -> Optional[dict]:
    r = db.get(PPDBRegistrationDB, registration_id)
    return _registration_dict(r) if r else None


@service_action("Gagal mengirim pendaftaran")
def submit_registration(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    """Public form. No actor required."""
    period = get_active_period(db)
    if not is_open(period):
        raise ValidationFailed("Pendaftaran PPDB sedang tidak dibuka")
    values = validate(PPDBRegistrationInput, data)
    if period.quota:
        taken = db.query(PPDBRegistrationDB).filter_by(period_id=period.id).count()
        if taken >= period.quota:
            raise Conflict("Kuota pendaftaran sudah penuh")

    number = generate_registration_no()
    while db.query(PPDBRegistrationDB).filter_by(registration_number=number).first():
        number = generate_registration_no()

    reg = PPDBRegistrationDB(**values, period_id=period.id, registration_number=number)
    db.add(reg); db.commit(); db.refresh(reg)
    ctx.invalidate("/admin/ppdb/registrations")
    log.info("PPDB registration %s received for period %s", number, period.name)
    return ActionResult.ok({"id": reg.id, "registration_number": number},
                           f"Pendaftaran berhasil dikirim. Nomor pendaftaran: {number}")


@service_action("Gagal memperbarui status pendaftaran")
def update_registration_status(db: Session, ctx: RequestContext, registration_id: str,
                               status: str, notes: Optional[str] = None) -> ActionResult:
    require_role(ctx)
    reg = get_or_404(db, PPDBRegistrationDB, registration_id, "Pendaftaran tidak ditemukan")
    values = validate(RegistrationStatusInput, {"status": status, "notes": notes})
    reg.status = values["status"]
    reg.notes = values["notes"]
    db.commit(); db.refresh(reg)
    ctx.invalidate("/admin/ppdb/registrations")
    return ActionResult.ok(reg.to_dict(), "Status pendaftaran berhasil diperbarui")


@service_action("Gagal menghapus pendaftaran")
def delete_registration(db: Session, ctx: RequestContext, registration_id: str) -> ActionResult:
    require_role(ctx)
    reg = get_or_404(db, PPDBRegistrationDB, registration_id, "Pendaftaran tidak ditemukan")
    db.delete(reg); db.commit()
    ctx.invalidate("/admin/ppdb/registrations")
    return ActionResult.ok(message="Pendaftaran berhasil dihapus")
