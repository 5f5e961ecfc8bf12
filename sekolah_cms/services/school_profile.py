"""The school profile: a single row with id "default"."""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, service_action
from ..models import Role, SchoolProfileDB
from ..schemas import SchoolProfileInput
from ._crud import apply, validate, validate_update

PROFILE_ID = "default"


def get_school_profile(db: Session) -> Optional[SchoolProfileDB]:
    return db.get(SchoolProfileDB, PROFILE_ID)


@service_action("Gagal memperbarui profil sekolah")
def update_school_profile(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx, Role.ADMIN)
    profile = get_school_profile(db)
    if profile is None:
        profile = SchoolProfileDB(id=PROFILE_ID, **validate(SchoolProfileInput, data))
        db.add(profile)
    else:
        apply(profile, validate_update(SchoolProfileInput, profile, data))
    db.commit(); db.refresh(profile)
    ctx.invalidate("/admin/school-profile", "/", "/profil", "/kontak")
    return ActionResult.ok(profile.to_dict(), "Profil sekolah berhasil diperbarui")
