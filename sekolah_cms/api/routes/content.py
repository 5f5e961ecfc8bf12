"""
Admin JSON API — documents (pages, posts), taxonomy and navigation menus.

Pages      /api/admin/pages            GET list · POST create
           /api/admin/pages/select     GET id/title/slug for pickers
           /api/admin/pages/reorder    PUT [{id, order}]
           /api/admin/pages/{id}       GET · PATCH · DELETE
           /api/admin/pages/{id}/duplicate  POST
Posts      /api/admin/posts            GET list · POST create
           /api/admin/posts/reorder    PUT [{id, order}]
           /api/admin/posts/{id}       GET · PATCH · DELETE
           /api/admin/posts/{id}/featured   POST toggle
           /api/admin/posts/{id}/duplicate  POST
Categories /api/admin/categories       GET · POST;  /{id} PATCH · DELETE
Tags       /api/admin/tags             GET · POST;  /{id} DELETE
Menus      /api/admin/menus            GET · POST;  /{id} GET · PATCH · DELETE
           /api/admin/menu-items       POST;  /reorder PUT;  /{id} PATCH · DELETE;  /{id}/visibility POST
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ...context import RequestContext
from ...database import get_db
from ...services import menus, pages, posts
from ..deps import found_or_404, require_editor, respond

router = APIRouter(tags=["Content"])


# ── Pages ────────────────────────────────────────────────────────────────────

@router.get("/api/admin/pages")
def list_pages(page: int = 1, limit: int = 10, search: Optional[str] = None, status: Optional[str] = None,
               db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return pages.list_pages(db, page, limit, search, status)


@router.get("/api/admin/pages/select")
def pages_for_select(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return pages.pages_for_select(db)


@router.put("/api/admin/pages/reorder")
def reorder_pages(items: list = Body(...), db: Session = Depends(get_db),
                  ctx: RequestContext = Depends(require_editor)):
    return respond(pages.reorder_pages(db, ctx, items), ctx)


@router.get("/api/admin/pages/{page_id}")
def get_page(page_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return found_or_404(pages.get_page(db, page_id), "Halaman tidak ditemukan")


@router.post("/api/admin/pages")
def create_page(payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(pages.create_page(db, ctx, payload), ctx)


@router.patch("/api/admin/pages/{page_id}")
def update_page(page_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(pages.update_page(db, ctx, page_id, payload), ctx)


@router.delete("/api/admin/pages/{page_id}")
def delete_page(page_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(pages.delete_page(db, ctx, page_id), ctx)


@router.post("/api/admin/pages/{page_id}/duplicate")
def duplicate_page(page_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(pages.duplicate_page(db, ctx, page_id), ctx)


# ── Posts ────────────────────────────────────────────────────────────────────

@router.get("/api/admin/posts")
def list_posts(page: int = 1, limit: int = 10, search: Optional[str] = None, status: Optional[str] = None,
               category_id: Optional[str] = None, featured: Optional[bool] = None,
               db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return posts.list_posts(db, page, limit, search, status, category_id, featured)


@router.put("/api/admin/posts/reorder")
def reorder_posts(items: list = Body(...), db: Session = Depends(get_db),
                  ctx: RequestContext = Depends(require_editor)):
    return respond(posts.reorder_posts(db, ctx, items), ctx)


@router.get("/api/admin/posts/{post_id}")
def get_post(post_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return found_or_404(posts.get_post(db, post_id), "Berita tidak ditemukan")


@router.post("/api/admin/posts")
def create_post(payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(posts.create_post(db, ctx, payload), ctx)


@router.patch("/api/admin/posts/{post_id}")
def update_post(post_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(posts.update_post(db, ctx, post_id, payload), ctx)


@router.delete("/api/admin/posts/{post_id}")
def delete_post(post_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(posts.delete_post(db, ctx, post_id), ctx)


@router.post("/api/admin/posts/{post_id}/featured")
def toggle_featured(post_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(posts.toggle_post_featured(db, ctx, post_id), ctx)


@router.post("/api/admin/posts/{post_id}/duplicate")
def duplicate_post(post_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(posts.duplicate_post(db, ctx, post_id), ctx)


# ── Categories / tags ────────────────────────────────────────────────────────

@router.get("/api/admin/categories")
def list_categories(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return posts.list_categories(db)


@router.post("/api/admin/categories")
def create_category(payload: dict = Body(...), db: Session = Depends(get_db),
                    ctx: RequestContext = Depends(require_editor)):
    return respond(posts.create_category(db, ctx, payload), ctx)


@router.patch("/api/admin/categories/{category_id}")
def update_category(category_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                    ctx: RequestContext = Depends(require_editor)):
    return respond(posts.update_category(db, ctx, category_id, payload), ctx)


@router.delete("/api/admin/categories/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db),
                    ctx: RequestContext = Depends(require_editor)):
    return respond(posts.delete_category(db, ctx, category_id), ctx)


@router.get("/api/admin/tags")
def list_tags(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return posts.list_tags(db)


@router.post("/api/admin/tags")
def create_tag(payload: dict = Body(...), db: Session = Depends(get_db),
               ctx: RequestContext = Depends(require_editor)):
    return respond(posts.create_tag(db, ctx, payload), ctx)


@router.delete("/api/admin/tags/{tag_id}")
def delete_tag(tag_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(posts.delete_tag(db, ctx, tag_id), ctx)


# ── Menus ────────────────────────────────────────────────────────────────────

@router.get("/api/admin/menus")
def list_menus(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return menus.list_menus(db)


@router.get("/api/admin/menus/{menu_id}")
def get_menu(menu_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return found_or_404(menus.get_menu(db, menu_id), "Menu tidak ditemukan")


@router.post("/api/admin/menus")
def create_menu(payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(menus.create_menu(db, ctx, payload), ctx)


@router.patch("/api/admin/menus/{menu_id}")
def update_menu(menu_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return respond(menus.update_menu(db, ctx, menu_id, payload), ctx)


@router.delete("/api/admin/menus/{menu_id}")
def delete_menu(menu_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(menus.delete_menu(db, ctx, menu_id), ctx)


@router.post("/api/admin/menu-items")
def create_menu_item(payload: dict = Body(...), db: Session = Depends(get_db),
                     ctx: RequestContext = Depends(require_editor)):
    return respond(menus.create_menu_item(db, ctx, payload), ctx)


@router.put("/api/admin/menu-items/reorder")
def reorder_menu_items(items: list = Body(...), db: Session = Depends(get_db),
                       ctx: RequestContext = Depends(require_editor)):
    return respond(menus.reorder_menu_items(db, ctx, items), ctx)


@router.patch("/api/admin/menu-items/{item_id}")
def update_menu_item(item_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                     ctx: RequestContext = Depends(require_editor)):
    return respond(menus.update_menu_item(db, ctx, item_id, payload), ctx)


@router.delete("/api/admin/menu-items/{item_id}")
def delete_menu_item(item_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(menus.delete_menu_item(db, ctx, item_id), ctx)


@router.post("/api/admin/menu-items/{item_id}/visibility")
def toggle_menu_item(item_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(menus.toggle_menu_item_visibility(db, ctx, item_id), ctx)
