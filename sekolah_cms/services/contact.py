"""Messages sent through the public contact form."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, service_action
from ..models import ContactMessageDB
from ..schemas import ContactInput
from ._crud import get_or_404, paginate, search_filter, validate

log = logging.getLogger(__name__)

NOT_FOUND = "Pesan tidak ditemukan"


@service_action("Gagal mengirim pesan")
def submit_contact_message(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    """Public: no actor needed."""
    msg = ContactMessageDB(**validate(ContactInput, data))
    db.add(msg); db.commit()
    ctx.invalidate("/admin/messages")
    log.info("Contact message received from %s", msg.email)
    return ActionResult.ok(message="Pesan berhasil dikirim")


def list_contact_messages(db: Session, page: int = 1, limit: int = 10,
                          is_read: Optional[bool] = None, search: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(ContactMessageDB)
    if is_read is not None:
        q = q.filter(ContactMessageDB.is_read == is_read)
    cond = search_filter(ContactMessageDB, search, "name", "email", "subject")
    if cond is not None:
        q = q.filter(cond)
    return paginate(q.order_by(ContactMessageDB.created_at.desc()), page, limit)


def unread_count(db: Session) -> int:
    return db.query(ContactMessageDB).filter_by(is_read=False).count()


@service_action("Gagal memperbarui status pesan")
def mark_message_as_read(db: Session, ctx: RequestContext, message_id: str) -> ActionResult:
    require_role(ctx)
    msg = get_or_404(db, ContactMessageDB, message_id, NOT_FOUND)
    msg.is_read = True
    db.commit()
    ctx.invalidate("/admin/messages")
    return ActionResult.ok(message="Pesan ditandai sudah dibaca")


@service_action("Gagal menghapus pesan")
def delete_contact_message(db: Session, ctx: RequestContext, message_id: str) -> ActionResult:
    require_role(ctx)
    msg = get_or_404(db, ContactMessageDB, message_id, NOT_FOUND)
    db.delete(msg); db.commit()
    ctx.invalidate("/admin/messages")
    return ActionResult.ok(message="Pesan berhasil dihapus")
