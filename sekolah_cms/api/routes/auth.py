"""
Login / logout — email + password, signed session token in a cookie.

GET  /admin/login     → login form
POST /admin/login     → form login, sets the session cookie, redirects to /admin
GET  /admin/logout    → clears the cookie, redirects to /admin/login
POST /api/auth/login  → JSON login {email, password}; token in body and cookie
GET  /api/auth/me     → current actor
"""
from html import escape
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from ... import config
from ...context import RequestContext
from ...database import get_db
from ...services import auth as auth_service
from ..deps import SESSION_COOKIE, get_context, respond

router = APIRouter(tags=["Auth"])

_CSS = """
*{box-sizing:border-box;margin:0;padding:0}
body{font-family:'Segoe UI',sans-serif;background:#f1f5f9;color:#0f172a;
  display:flex;align-items:center;justify-content:center;min-height:100vh}
.card{background:#fff;border:1px solid #e2e8f0;border-radius:12px;
  padding:48px 40px;width:100%;max-width:380px}
.logo{font-size:1.4rem;font-weight:bold;text-align:center;margin-bottom:4px}
.sub{color:#64748b;font-size:13px;text-align:center;margin-bottom:32px}
label{display:block;color:#475569;font-size:12px;margin:14px 0 6px}
input{width:100%;border:1px solid #cbd5e1;border-radius:6px;padding:12px 14px;font-size:15px;font-family:inherit}
input:focus{outline:none;border-color:#3b82f6}
.btn{display:block;width:100%;margin-top:24px;background:#3b82f6;color:#fff;
  border:none;padding:14px;border-radius:8px;font-size:15px;font-weight:700;cursor:pointer}
.err{color:#dc2626;font-size:13px;margin-top:14px;text-align:center}
"""


def _set_session(resp, token: str):
    resp.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=config.is_production(),
        max_age=config.session_ttl_hours() * 3600,
    )


@router.get("/admin/login", response_class=HTMLResponse)
def login_page(error: str = ""):
    err_html = f'<p class="err">{escape(error)}</p>' if error else ""
    return HTMLResponse(f"""<!DOCTYPE html><html lang="id"><head>
<meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>Masuk — Sekolah CMS</title>
<style>{_CSS}</style>
</head><body>
<div class="card">
  <div class="logo">Sekolah CMS</div>
  <p class="sub">Panel administrasi</p>
  <form method="POST" action="/admin/login">
    <label>Email</label>
    <input type="email" name="email" autofocus required>
    <label>Password</label>
    <input type="password" name="password" required>
    <button class="btn" type="submit">Masuk</button>
  </form>
  {err_html}
</div>
</body></html>""")


@router.post("/admin/login")
async def login_submit(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    result = auth_service.login(db, {"email": form.get("email", ""), "password": form.get("password", "")})
    if not result.success:
        return RedirectResponse(f"/admin/login?error={quote(result.error or '')}", status_code=303)
    resp = RedirectResponse("/admin", status_code=303)
    _set_session(resp, result.data["token"])
    return resp


@router.get("/admin/logout")
def logout():
    resp = RedirectResponse("/admin/login", status_code=303)
    resp.delete_cookie(SESSION_COOKIE)
    return resp


@router.post("/api/auth/login")
def api_login(payload: dict, db: Session = Depends(get_db)):
    result = auth_service.login(db, payload)
    resp = respond(result)
    if result.success:
        _set_session(resp, result.data["token"])
    return resp


@router.get("/api/auth/me")
def me(ctx: RequestContext = Depends(get_context)):
    if ctx.actor is None:
        return JSONResponse({"authenticated": False}, status_code=401)
    a = ctx.actor
    return {"authenticated": True, "id": a.id, "name": a.name, "email": a.email, "role": a.role}
