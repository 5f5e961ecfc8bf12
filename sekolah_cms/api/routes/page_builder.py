"""
Page builder — block catalogue, editing operations and live preview.

GET  /api/admin/page-builder/blocks        → registered block types with default payloads
POST /api/admin/page-builder/preview       → {content, ops?} → {content, html}
GET  /admin/pages/{id}/preview             → draft page rendered as HTML
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...context import RequestContext
from ...database import get_db
from ...models import PageDB
from ...page_builder.blocks import BLOCK_TYPES, EMBED_BLOCK_TYPES, default_data, dump_blocks, load_blocks
from ...page_builder.editor import apply_ops
from ...page_builder.renderer import render_blocks
from ...services.embeds import resolve_embeds
from ..deps import require_editor
from .public import layout

log = logging.getLogger(__name__)

router = APIRouter(tags=["Page builder"])


@router.get("/api/admin/page-builder/blocks")
def block_catalogue(ctx: RequestContext = Depends(require_editor)):
    return [
        {"type": t, "embed": t in EMBED_BLOCK_TYPES, "default": default_data(t)}
        for t in BLOCK_TYPES
    ]


@router.post("/api/admin/page-builder/preview")
def preview(payload: dict = Body(...), db: Session = Depends(get_db),
            ctx: RequestContext = Depends(require_editor)):
    blocks = load_blocks(payload.get("content") or [])
    ops = payload.get("ops") or []
    if not isinstance(ops, list):
        raise HTTPException(400, "ops harus berupa list")
    try:
        blocks = apply_ops(blocks, ops)
    except (KeyError, ValueError, TypeError) as e:
        log.warning("Rejected editor ops: %s", e)
        raise HTTPException(400, f"Operasi tidak valid: {e}")
    return {"content": dump_blocks(blocks), "html": render_blocks(blocks, resolve_embeds(db, blocks))}


@router.get("/admin/pages/{page_id}/preview", response_class=HTMLResponse)
def page_preview(page_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    page = db.get(PageDB, page_id)
    if page is None:
        raise HTTPException(404, "Halaman tidak ditemukan")
    blocks = load_blocks(page.content)
    body = render_blocks(blocks, resolve_embeds(db, blocks))
    return HTMLResponse(layout(db, f"[Pratinjau] {page.title}", body))
