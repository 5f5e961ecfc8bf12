"""
Back office: dashboard, users, settings, school profile, contact inbox.

GET    /admin                               → dashboard (HTML)
GET    /api/admin/dashboard                 → counts + recent items + scheduler jobs
GET    /api/admin/users                     → paginated users (ADMIN+)
POST   /api/admin/users                     → create user
PATCH  /api/admin/users/{id}                → update user
POST   /api/admin/users/{id}/toggle         → activate / deactivate
DELETE /api/admin/users/{id}                → delete user (SUPERADMIN)
GET    /api/admin/settings[?group=]         → settings (flat, or grouped when no group)
PUT    /api/admin/settings/{group}          → save one group {key: value}
PUT    /api/admin/settings                  → batch [{key, value, group}]
DELETE /api/admin/settings/{key}
GET    /api/admin/school-profile
PUT    /api/admin/school-profile
GET    /api/admin/messages                  → contact inbox
POST   /api/admin/messages/{id}/read
DELETE /api/admin/messages/{id}
"""
from html import escape
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...context import RequestContext
from ...database import get_db
from ...scheduler import scheduler_status
from ...services import contact, dashboard, school_profile, settings, users
from ..deps import found_or_404, require_admin, require_editor, respond

router = APIRouter(tags=["Admin"])


# ── Dashboard ────────────────────────────────────────────────────────────────

@router.get("/admin", response_class=HTMLResponse)
def admin_home(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    stats = dashboard.get_dashboard_stats(db, ctx)
    c = stats["counts"]
    cards = "".join(
        f'<div class="card"><div class="n">{v}</div><div class="l">{escape(k)}</div></div>'
        for k, v in c.items()
    )
    regs = "".join(
        f"<tr><td>{escape(r['registration_number'])}</td><td>{escape(r['student_name'])}</td>"
        f"<td>{escape(r['status'])}</td></tr>"
        for r in stats["recent_registrations"]
    ) or '<tr><td colspan="3">Belum ada pendaftaran</td></tr>'
    msgs = "".join(
        f"<tr><td>{escape(m['name'])}</td><td>{escape(m.get('subject') or '-')}</td>"
        f"<td>{'' if m['is_read'] else 'baru'}</td></tr>"
        for m in stats["recent_messages"]
    ) or '<tr><td colspan="3">Belum ada pesan</td></tr>'
    return HTMLResponse(f"""<!DOCTYPE html><html lang="id"><head>
<meta charset="UTF-8"><title>Dashboard — Sekolah CMS</title>
<style>
body{{font-family:'Segoe UI',sans-serif;background:#f8fafc;color:#0f172a;margin:0;padding:32px}}
.grid{{display:flex;gap:16px;flex-wrap:wrap;margin:24px 0}}
.card{{background:#fff;border:1px solid #e2e8f0;border-radius:10px;padding:20px;min-width:140px}}
.n{{font-size:1.8rem;font-weight:700}} .l{{color:#64748b;font-size:13px}}
table{{background:#fff;border-collapse:collapse;width:100%;margin-bottom:32px}}
td,th{{border-bottom:1px solid #e2e8f0;padding:8px 12px;text-align:left}}
</style></head><body>
<h1>Halo, {escape(ctx.actor.name)}</h1>
<p><a href="/admin/logout">Keluar</a></p>
<div class="grid">{cards}</div>
<h2>Pendaftaran terbaru</h2><table>{regs}</table>
<h2>Pesan terbaru</h2><table>{msgs}</table>
</body></html>""")


@router.get("/api/admin/dashboard")
def dashboard_stats(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return {**dashboard.get_dashboard_stats(db, ctx), "jobs": scheduler_status()}


# ── Users ────────────────────────────────────────────────────────────────────

@router.get("/api/admin/users")
def list_users(page: int = 1, limit: int = 10, search: Optional[str] = None,
               db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return users.list_users(db, ctx, page, limit, search)


@router.get("/api/admin/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return found_or_404(users.get_user(db, ctx, user_id), "User tidak ditemukan")


@router.post("/api/admin/users")
def create_user(payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_admin)):
    return respond(users.create_user(db, ctx, payload), ctx)


@router.patch("/api/admin/users/{user_id}")
def update_user(user_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_admin)):
    return respond(users.update_user(db, ctx, user_id, payload), ctx)


@router.post("/api/admin/users/{user_id}/toggle")
def toggle_user(user_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return respond(users.toggle_user_status(db, ctx, user_id), ctx)


@router.delete("/api/admin/users/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return respond(users.delete_user(db, ctx, user_id), ctx)


# ── Settings ─────────────────────────────────────────────────────────────────

@router.get("/api/admin/settings")
def get_settings(group: Optional[str] = None, db: Session = Depends(get_db),
                 ctx: RequestContext = Depends(require_editor)):
    return settings.get_settings(db, group) if group else settings.get_settings_by_group(db)


@router.put("/api/admin/settings")
def set_settings(items: list = Body(...), db: Session = Depends(get_db),
                 ctx: RequestContext = Depends(require_admin)):
    return respond(settings.set_settings(db, ctx, items), ctx)


@router.put("/api/admin/settings/{group}")
def save_settings_group(group: str, values: dict = Body(...), db: Session = Depends(get_db),
                        ctx: RequestContext = Depends(require_admin)):
    return respond(settings.save_group(db, ctx, group, values), ctx)


@router.delete("/api/admin/settings/{key}")
def delete_setting(key: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_admin)):
    return respond(settings.delete_setting(db, ctx, key), ctx)


# ── School profile ───────────────────────────────────────────────────────────

@router.get("/api/admin/school-profile")
def get_school_profile(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    profile = school_profile.get_school_profile(db)
    return profile.to_dict() if profile else {}


@router.put("/api/admin/school-profile")
def update_school_profile(payload: dict = Body(...), db: Session = Depends(get_db),
                          ctx: RequestContext = Depends(require_admin)):
    return respond(school_profile.update_school_profile(db, ctx, payload), ctx)


# ── Contact inbox ────────────────────────────────────────────────────────────

@router.get("/api/admin/messages")
def list_messages(page: int = 1, limit: int = 10, is_read: Optional[bool] = Query(None),
                  search: Optional[str] = None, db: Session = Depends(get_db),
                  ctx: RequestContext = Depends(require_editor)):
    return {**contact.list_contact_messages(db, page, limit, is_read, search), "unread": contact.unread_count(db)}


@router.post("/api/admin/messages/{message_id}/read")
def mark_read(message_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(contact.mark_message_as_read(db, ctx, message_id), ctx)


@router.delete("/api/admin/messages/{message_id}")
def delete_message(message_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(contact.delete_contact_message(db, ctx, message_id), ctx)
