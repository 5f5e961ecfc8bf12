"""
Shared FastAPI dependencies: request context from the session cookie or
Bearer token, role guards, and the ActionResult → JSON response mapping.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..context import RequestContext, has_role
from ..database import get_db
from ..errors import ActionResult
from ..models import Role
from ..services.auth import actor_from_token

SESSION_COOKIE = "session"
INVALIDATED_HEADER = "X-Invalidated-Paths"


def token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return request.cookies.get(SESSION_COOKIE)


def get_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    locale = "en" if request.headers.get("accept-language", "").lower().startswith("en") else "id"
    return RequestContext(actor=actor_from_token(db, token_from_request(request)), locale=locale)


def _guard(minimum: Role):
    def dep(ctx: RequestContext = Depends(get_context)) -> RequestContext:
        if not has_role(ctx, minimum):
            raise HTTPException(403, "Akses ditolak")
        return ctx
    return dep


require_editor = _guard(Role.EDITOR)
require_admin = _guard(Role.ADMIN)


def respond(result: ActionResult, ctx: Optional[RequestContext] = None) -> JSONResponse:
    """200 on success, 403 for Unauthorized, 400 for any other failure."""
    if result.success:
        status = 200
    elif result.error == "Unauthorized":
        status = 403
    else:
        status = 400
    headers = {}
    if ctx is not None and ctx.invalidated_paths:
        headers[INVALIDATED_HEADER] = ",".join(ctx.invalidated_paths)
    return JSONResponse(result.to_json(), status_code=status, headers=headers)


def found_or_404(obj, message: str = "Data tidak ditemukan"):
    if obj is None:
        raise HTTPException(404, message)
    return obj
