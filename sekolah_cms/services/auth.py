"""Login: email + bcrypt password → signed session token."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..context import Actor
from ..errors import ActionResult, Unauthorized, service_action
from ..models import UserDB
from ..schemas import LoginInput
from ..security import create_session_token, read_session_token, verify_password
from ._crud import validate

log = logging.getLogger(__name__)

BAD_CREDENTIALS = "Email atau password salah"


def authenticate(db: Session, email: str, password: str) -> Optional[UserDB]:
    user = db.query(UserDB).filter_by(email=(email or "").lower()).first()
    if user is None or not user.is_active or not verify_password(password or "", user.password):
        return None
    return user


@service_action("Terjadi kesalahan")
def login(db: Session, data: Dict[str, Any]) -> ActionResult:
    values = validate(LoginInput, data)
    user = authenticate(db, values["email"], values["password"])
    if user is None:
        log.warning("Failed login for %s", values["email"])
        raise Unauthorized(BAD_CREDENTIALS)
    token = create_session_token(user.id)
    return ActionResult.ok({"token": token, "user": user.to_dict()}, "Login berhasil")


def actor_from_token(db: Session, token: Optional[str]) -> Optional[Actor]:
    """Actor for a valid session token whose user still exists and is active."""
    uid = read_session_token(token or "")
    if not uid:
        return None
    user = db.get(UserDB, uid)
    if user is None or not user.is_active:
        return None
    return Actor.from_user(user)
