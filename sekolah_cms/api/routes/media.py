"""
Media library.

GET    /api/admin/media[?folder=&type=]   → paginated library + folder list
POST   /api/admin/media                   → multipart upload (file, folder, alt)
PATCH  /api/admin/media/{id}              → {alt}
DELETE /api/admin/media/{id}
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...context import RequestContext
from ...database import get_db
from ...services import media
from ..deps import require_editor, respond

router = APIRouter(tags=["Media"])


@router.get("/api/admin/media")
def list_media(page: int = 1, limit: int = 24, folder: Optional[str] = None, type: Optional[str] = None,
               db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return {**media.list_media(db, page, limit, folder, type), "folders": media.list_folders(db)}


@router.post("/api/admin/media")
def upload_media(
    file: UploadFile = File(...),
    folder: str = Form("general"),
    alt: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_editor),
):
    content = file.file.read()
    mime_type = file.content_type or "application/octet-stream"
    result = media.upload_media(db, ctx, file.filename or "", mime_type, content, folder, alt)
    return respond(result, ctx)


@router.patch("/api/admin/media/{media_id}")
def update_media(media_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                 ctx: RequestContext = Depends(require_editor)):
    return respond(media.update_media_alt(db, ctx, media_id, payload.get("alt", "")), ctx)


@router.delete("/api/admin/media/{media_id}")
def delete_media(media_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(media.delete_media(db, ctx, media_id), ctx)
