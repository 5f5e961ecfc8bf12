"""Admin dashboard figures."""
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..context import RequestContext, has_role
from ..models import ContactMessageDB, PageDB, PostDB, PPDBRegistrationDB, Role, Status, UserDB

EMPTY = {
    "counts": {"posts": 0, "pages": 0, "registrations": 0, "messages": 0, "users": 0},
    "recent_registrations": [],
    "recent_messages": [],
    "recent_posts": [],
}


def get_dashboard_stats(db: Session, ctx: RequestContext) -> Dict[str, Any]:
    """Counts and the five latest registrations/messages/published posts. EDITOR and up; empty otherwise."""
    if not has_role(ctx, Role.EDITOR):
        return {**EMPTY, "counts": dict(EMPTY["counts"])}

    registrations = db.query(PPDBRegistrationDB).order_by(PPDBRegistrationDB.created_at.desc()).limit(5).all()
    messages = db.query(ContactMessageDB).order_by(ContactMessageDB.created_at.desc()).limit(5).all()
    posts = db.query(PostDB).filter_by(status=Status.PUBLISHED.value) \
        .order_by(PostDB.published_at.desc()).limit(5).all()

    return {
        "counts": {
            "posts":         db.query(PostDB).count(),
            "pages":         db.query(PageDB).count(),
            "registrations": db.query(PPDBRegistrationDB).count(),
            "messages":      db.query(ContactMessageDB).count(),
            "users":         db.query(UserDB).count(),
        },
        "recent_registrations": [
            {"id": r.id, "registration_number": r.registration_number, "student_name": r.student_name,
             "status": r.status,
             "created_at": r.created_at.isoformat()} for r in registrations
        ],
        "recent_messages": [
            {"id": m.id, "name": m.name, "subject": m.subject, "is_read": m.is_read,
             "created_at": m.created_at.isoformat()} for m in messages
        ],
        "recent_posts": [
            {"id": p.id, "title": p.title, "slug": p.slug, "views": p.views,
             "published_at": p.published_at.isoformat() if p.published_at else None} for p in posts
        ],
    }
