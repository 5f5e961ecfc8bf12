"""Posts (berita) with their categories and tags."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from ..context import RequestContext, require_role
from ..database import new_session
from ..errors import ActionResult, Blocked, Conflict, ValidationFailed, service_action
from ..models import CategoryDB, PostDB, Status, TagDB
from ..schemas import CategoryInput, PostInput, TagInput
from ..utils import slugify, unique_copy_slug
from ._crud import (
    apply, apply_reorder, ensure_unique, get_or_404, normalize_content, paginate, resolve_published_at,
    search_filter, validate, validate_update,
)

log = logging.getLogger(__name__)

NOT_FOUND = "Berita tidak ditemukan"


def _path(slug: str) -> str:
    return f"/berita/{slug}"


def _with_slug(data: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(data or {})
    if not data.get("slug") and data.get("name"):
        data["slug"] = slugify(data["name"])
    return data


def _resolve_tags(db: Session, tag_ids: List[str]) -> List[TagDB]:
    tags = db.query(TagDB).filter(TagDB.id.in_(tag_ids)).all() if tag_ids else []
    if len(tags) != len(set(tag_ids)):
        raise ValidationFailed("Tag tidak ditemukan")
    return tags


def _check_category(db: Session, category_id: str):
    get_or_404(db, CategoryDB, category_id, "Kategori tidak ditemukan")


# ── Posts: reads ───────────────────────────────────────────────────────

def list_posts(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None,
               status: Optional[str] = None, category_id: Optional[str] = None,
               featured: Optional[bool] = None) -> Dict[str, Any]:
    q = db.query(PostDB).options(selectinload(PostDB.category), selectinload(PostDB.tags))
    cond = search_filter(PostDB, search, "title", "excerpt")
    if cond is not None:
        q = q.filter(cond)
    if status:
        q = q.filter(PostDB.status == status)
    if category_id:
        q = q.filter(PostDB.category_id == category_id)
    if featured is not None:
        q = q.filter(PostDB.is_featured == featured)
    return paginate(q.order_by(PostDB.order, PostDB.created_at.desc()), page, limit)


def list_published_posts(db: Session, page: int = 1, limit: int = 9,
                         category_slug: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(PostDB).filter(PostDB.status == Status.PUBLISHED.value)
    if category_slug:
        q = q.join(PostDB.category).filter(CategoryDB.slug == category_slug)
    return paginate(q.order_by(PostDB.published_at.desc()), page, limit)


def get_post(db: Session, post_id: str) -> Optional[dict]:
    p = db.get(PostDB, post_id)
    return p.to_dict() if p else None


def get_post_by_slug(db: Session, slug: str) -> Optional[PostDB]:
    """Published post for the public site. Views are counted separately (increment_views)."""
    return db.query(PostDB).filter_by(slug=slug, status=Status.PUBLISHED.value).first()


def increment_views(post_id: str):
    """Own session, run after the response is sent."""
    db = new_session()
    try:
        db.query(PostDB).filter_by(id=post_id).update({PostDB.views: PostDB.views + 1})
        db.commit()
    except Exception as e:
        db.rollback()
        log.warning("View count not updated for %s: %s", post_id, e)
    finally:
        db.close()


# ── Posts: mutations ───────────────────────────────────────────────────

@service_action("Gagal membuat berita")
def create_post(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    actor = require_role(ctx)
    values = validate(PostInput, data)
    ensure_unique(db, PostDB, "slug", values["slug"])
    _check_category(db, values["category_id"])
    tags = _resolve_tags(db, values.pop("tag_ids"))

    post = PostDB(**values)
    post.content = normalize_content(values["content"])
    post.author_id = actor.id
    post.tags = tags
    post.published_at = resolve_published_at(post.status, None)
    db.add(post); db.commit(); db.refresh(post)

    ctx.invalidate("/admin/posts", "/berita", _path(post.slug))
    log.info("Post created: %s (%s)", post.slug, post.status)
    return ActionResult.ok(post.to_dict(), "Berita berhasil dibuat")


@service_action("Gagal memperbarui berita")
def update_post(db: Session, ctx: RequestContext, post_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    post = get_or_404(db, PostDB, post_id, NOT_FOUND)
    current = {**post.to_dict(), "tag_ids": [t.id for t in post.tags]}
    partial = partial or {}
    merged = PostInput.model_validate({**current, **partial}).model_dump()
    values = {k: merged[k] for k in partial if k in merged}
    old_slug = post.slug

    if "slug" in values and values["slug"] != old_slug:
        ensure_unique(db, PostDB, "slug", values["slug"], exclude_id=post.id)
    if "category_id" in values:
        _check_category(db, values["category_id"])
    if "content" in values:
        values["content"] = normalize_content(values["content"])
    # tags are replaced as a whole, in the same commit as the other fields
    if "tag_ids" in values:
        post.tags = _resolve_tags(db, values.pop("tag_ids"))

    apply(post, values)
    post.published_at = resolve_published_at(post.status, post.published_at)
    db.commit(); db.refresh(post)

    ctx.invalidate("/admin/posts", "/berita", _path(old_slug), _path(post.slug))
    return ActionResult.ok(post.to_dict(), "Berita berhasil diperbarui")


@service_action("Gagal menghapus berita")
def delete_post(db: Session, ctx: RequestContext, post_id: str) -> ActionResult:
    require_role(ctx)
    post = get_or_404(db, PostDB, post_id, NOT_FOUND)
    slug = post.slug
    db.delete(post); db.commit()
    ctx.invalidate("/admin/posts", "/berita", _path(slug))
    return ActionResult.ok(message="Berita berhasil dihapus")


@service_action("Gagal menduplikasi berita")
def duplicate_post(db: Session, ctx: RequestContext, post_id: str) -> ActionResult:
    actor = require_role(ctx)
    src = get_or_404(db, PostDB, post_id, NOT_FOUND)
    slug = unique_copy_slug(src.slug, lambda s: db.query(PostDB).filter_by(slug=s).first() is not None)

    copy = PostDB(
        title=f"{src.title} (Copy)", slug=slug, content=normalize_content(src.content),
        excerpt=src.excerpt, featured_img=src.featured_img, status=Status.DRAFT.value,
        category_id=src.category_id, is_featured=False, seo_title=src.seo_title,
        seo_desc=src.seo_desc, locale=src.locale, order=src.order, author_id=actor.id,
        published_at=None,
    )
    copy.tags = list(src.tags)
    db.add(copy); db.commit(); db.refresh(copy)
    ctx.invalidate("/admin/posts")
    return ActionResult.ok(copy.to_dict(), "Berita berhasil diduplikasi")


@service_action("Gagal mengubah urutan berita")
def reorder_posts(db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
    require_role(ctx)
    apply_reorder(db, PostDB, items)
    ctx.invalidate("/admin/posts", "/berita")
    return ActionResult.ok(message="Urutan berita berhasil diperbarui")


@service_action("Gagal mengubah status unggulan")
def toggle_post_featured(db: Session, ctx: RequestContext, post_id: str) -> ActionResult:
    require_role(ctx)
    post = get_or_404(db, PostDB, post_id, NOT_FOUND)
    post.is_featured = not post.is_featured
    db.commit()
    ctx.invalidate("/admin/posts", "/")
    msg = "Berita ditandai sebagai unggulan" if post.is_featured else "Berita dihapus dari unggulan"
    return ActionResult.ok({"is_featured": post.is_featured}, msg)


# ── Categories ─────────────────────────────────────────────────────────

def list_categories(db: Session) -> List[dict]:
    rows = db.query(CategoryDB).options(selectinload(CategoryDB.posts)).order_by(CategoryDB.order).all()
    return [{**c.to_dict(), "post_count": len(c.posts)} for c in rows]


@service_action("Gagal membuat kategori")
def create_category(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    values = validate(CategoryInput, _with_slug(data))
    ensure_unique(db, CategoryDB, "slug", values["slug"])
    cat = CategoryDB(**values)
    db.add(cat); db.commit(); db.refresh(cat)
    ctx.invalidate("/admin/posts/categories")
    return ActionResult.ok(cat.to_dict(), "Kategori berhasil dibuat")


@service_action("Gagal memperbarui kategori")
def update_category(db: Session, ctx: RequestContext, category_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    cat = get_or_404(db, CategoryDB, category_id, "Kategori tidak ditemukan")
    values = validate_update(CategoryInput, cat, partial)
    if "slug" in values and values["slug"] != cat.slug:
        ensure_unique(db, CategoryDB, "slug", values["slug"], exclude_id=cat.id)
    apply(cat, values)
    db.commit(); db.refresh(cat)
    ctx.invalidate("/admin/posts/categories", "/berita")
    return ActionResult.ok(cat.to_dict(), "Kategori berhasil diperbarui")


@service_action("Gagal menghapus kategori")
def delete_category(db: Session, ctx: RequestContext, category_id: str) -> ActionResult:
    require_role(ctx)
    cat = get_or_404(db, CategoryDB, category_id, "Kategori tidak ditemukan")
    count = db.query(PostDB).filter_by(category_id=cat.id).count()
    if count:
        raise Blocked(f"Kategori masih memiliki {count} berita. Pindahkan atau hapus berita terlebih dahulu.", count)
    db.delete(cat); db.commit()
    ctx.invalidate("/admin/posts/categories")
    return ActionResult.ok(message="Kategori berhasil dihapus")


# ── Tags ───────────────────────────────────────────────────────────────

def list_tags(db: Session) -> List[dict]:
    rows = db.query(TagDB).options(selectinload(TagDB.posts)).order_by(TagDB.name).all()
    return [{**t.to_dict(), "post_count": len(t.posts)} for t in rows]


@service_action("Gagal membuat tag")
def create_tag(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    values = validate(TagInput, _with_slug(data))
    if db.query(TagDB).filter_by(slug=values["slug"]).first():
        raise Conflict("Tag sudah ada")
    tag = TagDB(**values)
    db.add(tag); db.commit(); db.refresh(tag)
    ctx.invalidate("/admin/posts/tags")
    return ActionResult.ok(tag.to_dict(), "Tag berhasil dibuat")


@service_action("Gagal menghapus tag")
def delete_tag(db: Session, ctx: RequestContext, tag_id: str) -> ActionResult:
    require_role(ctx)
    tag = get_or_404(db, TagDB, tag_id, "Tag tidak ditemukan")
    db.delete(tag); db.commit()
    ctx.invalidate("/admin/posts/tags")
    return ActionResult.ok(message="Tag berhasil dihapus")
