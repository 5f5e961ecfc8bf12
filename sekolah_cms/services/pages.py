"""Pages — hierarchical block documents served at /{slug}."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, Blocked, ValidationFailed, service_action
from ..models import PageDB, Status
from ..schemas import PageInput
from ..utils import unique_copy_slug
from ._crud import (
    apply, apply_reorder, ensure_acyclic, ensure_unique, get_or_404, normalize_content, paginate,
    resolve_published_at, search_filter, validate, validate_update,
)

log = logging.getLogger(__name__)

NOT_FOUND = "Halaman tidak ditemukan"


def _path(slug: str) -> str:
    return f"/{slug}"


def _check_parent(db: Session, parent_id: Optional[str], self_id: Optional[str] = None):
    if not parent_id:
        return
    if parent_id == self_id:
        raise ValidationFailed("Halaman tidak dapat menjadi induk dirinya sendiri")
    get_or_404(db, PageDB, parent_id, "Halaman induk tidak ditemukan")
    if self_id:
        ensure_acyclic(db, PageDB, self_id, parent_id, "Halaman tidak dapat dipindahkan ke dalam sub-halamannya sendiri")


# ── Reads ──────────────────────────────────────────────────────────────

def list_pages(db: Session, page: int = 1, limit: int = 10,
               search: Optional[str] = None, status: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(PageDB)
    cond = search_filter(PageDB, search, "title", "slug")
    if cond is not None:
        q = q.filter(cond)
    if status:
        q = q.filter(PageDB.status == status)
    return paginate(q.order_by(PageDB.order, PageDB.created_at.desc()), page, limit)


def get_page(db: Session, page_id: str) -> Optional[dict]:
    p = db.get(PageDB, page_id)
    return p.to_dict() if p else None


def get_page_by_slug(db: Session, slug: str) -> Optional[PageDB]:
    """Published page for the public site."""
    return db.query(PageDB).filter_by(slug=slug, status=Status.PUBLISHED.value).first()


def pages_for_select(db: Session) -> List[dict]:
    rows = db.query(PageDB).order_by(PageDB.title).all()
    return [{"id": p.id, "title": p.title, "slug": p.slug, "parent_id": p.parent_id} for p in rows]


# ── Mutations ──────────────────────────────────────────────────────────

@service_action("Gagal membuat halaman")
def create_page(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    actor = require_role(ctx)
    values = validate(PageInput, data)
    ensure_unique(db, PageDB, "slug", values["slug"])
    _check_parent(db, values.get("parent_id"))

    page = PageDB(**values)
    page.content = normalize_content(values["content"])
    page.author_id = actor.id
    page.published_at = resolve_published_at(page.status, None)
    db.add(page); db.commit(); db.refresh(page)

    ctx.invalidate("/admin/pages", _path(page.slug))
    log.info("Page created: %s (%s)", page.slug, page.status)
    return ActionResult.ok(page.to_dict(), "Halaman berhasil dibuat")


@service_action("Gagal memperbarui halaman")
def update_page(db: Session, ctx: RequestContext, page_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    page = get_or_404(db, PageDB, page_id, NOT_FOUND)
    values = validate_update(PageInput, page, partial)
    old_slug = page.slug

    if "slug" in values and values["slug"] != old_slug:
        ensure_unique(db, PageDB, "slug", values["slug"], exclude_id=page.id)
    if "parent_id" in values:
        _check_parent(db, values["parent_id"], page.id)
    if "content" in values:
        values["content"] = normalize_content(values["content"])

    apply(page, values)
    page.published_at = resolve_published_at(page.status, page.published_at)
    db.commit(); db.refresh(page)

    ctx.invalidate("/admin/pages", _path(old_slug), _path(page.slug))
    return ActionResult.ok(page.to_dict(), "Halaman berhasil diperbarui")


@service_action("Gagal menghapus halaman")
def delete_page(db: Session, ctx: RequestContext, page_id: str) -> ActionResult:
    require_role(ctx)
    page = get_or_404(db, PageDB, page_id, NOT_FOUND)
    children = db.query(PageDB).filter_by(parent_id=page.id).count()
    if children:
        raise Blocked(f"Halaman memiliki {children} sub-halaman. Hapus atau pindahkan terlebih dahulu.", children)
    slug = page.slug
    db.delete(page); db.commit()
    ctx.invalidate("/admin/pages", _path(slug))
    log.info("Page deleted: %s", slug)
    return ActionResult.ok(message="Halaman berhasil dihapus")


@service_action("Gagal menduplikasi halaman")
def duplicate_page(db: Session, ctx: RequestContext, page_id: str) -> ActionResult:
    actor = require_role(ctx)
    src = get_or_404(db, PageDB, page_id, NOT_FOUND)
    slug = unique_copy_slug(src.slug, lambda s: db.query(PageDB).filter_by(slug=s).first() is not None)

    copy = PageDB(
        title=f"{src.title} (Copy)", slug=slug, content=normalize_content(src.content),
        excerpt=src.excerpt, featured_img=src.featured_img, status=Status.DRAFT.value,
        template=src.template, seo_title=src.seo_title, seo_desc=src.seo_desc,
        seo_keywords=src.seo_keywords, og_image=src.og_image, locale=src.locale,
        parent_id=src.parent_id, order=src.order, author_id=actor.id, published_at=None,
    )
    db.add(copy); db.commit(); db.refresh(copy)
    ctx.invalidate("/admin/pages")
    return ActionResult.ok(copy.to_dict(), "Halaman berhasil diduplikasi")


@service_action("Gagal mengubah urutan halaman")
def reorder_pages(db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
    require_role(ctx)
    apply_reorder(db, PageDB, items)
    ctx.invalidate("/admin/pages")
    return ActionResult.ok(message="Urutan halaman berhasil diperbarui")
