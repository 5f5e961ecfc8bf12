"""Photo/video galleries and their items."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from ..context import RequestContext, require_role
from ..errors import ActionResult, ValidationFailed, service_action
from ..models import GalleryDB, GalleryItemDB
from ..schemas import GalleryInput, GalleryItemInput
from ._crud import apply_reorder, get_or_404, next_order, paginate, search_filter
from ._resource import Resource

log = logging.getLogger(__name__)

galleries = Resource(GalleryDB, GalleryInput, {
    "not_found":   "Galeri tidak ditemukan",
    "created":     "Galeri berhasil dibuat",
    "create_fail": "Gagal membuat galeri",
    "updated":     "Galeri berhasil diperbarui",
    "update_fail": "Gagal memperbarui galeri",
    "deleted":     "Galeri berhasil dihapus",
    "delete_fail": "Gagal menghapus galeri",
    "toggled_on":  "Galeri berhasil dipublikasikan",
    "toggled_off": "Galeri berhasil disembunyikan",
    "toggle_fail": "Gagal mengubah status galeri",
}, admin_path="/admin/galleries", public_paths=("/galeri",), toggle_field="is_published")

create_gallery = galleries.create
update_gallery = galleries.update
delete_gallery = galleries.delete
toggle_gallery_publish = galleries.toggle

ITEM_NOT_FOUND = "Item tidak ditemukan"


def _gallery_dict(g: GalleryDB, with_items: bool = False) -> dict:
    d = {**g.to_dict(), "item_count": len(g.items)}
    if with_items:
        d["items"] = [i.to_dict() for i in g.items]
    return d


# ── Reads ──────────────────────────────────────────────────────────────

def list_galleries(db: Session, page: int = 1, limit: int = 12, search: Optional[str] = None,
                   published_only: bool = False) -> Dict[str, Any]:
    q = db.query(GalleryDB).options(selectinload(GalleryDB.items))
    cond = search_filter(GalleryDB, search, "title", "description")
    if cond is not None:
        q = q.filter(cond)
    if published_only:
        q = q.filter(GalleryDB.is_published.is_(True))
    return paginate(q.order_by(GalleryDB.event_date.desc(), GalleryDB.created_at.desc()),
                    page, limit, _gallery_dict)


def get_gallery(db: Session, gallery_id: str) -> Optional[dict]:
    g = db.get(GalleryDB, gallery_id)
    return _gallery_dict(g, with_items=True) if g else None


def get_gallery_by_slug(db: Session, slug: str) -> Optional[GalleryDB]:
    return db.query(GalleryDB).filter_by(slug=slug, is_published=True).first()


# ── Items ──────────────────────────────────────────────────────────────

@service_action("Gagal menambahkan item galeri")
def add_gallery_items(db: Session, ctx: RequestContext, gallery_id: str,
                      items: List[Dict[str, Any]]) -> ActionResult:
    """Append items after the current last one; the first new item becomes the cover if none is set."""
    require_role(ctx)
    gallery = get_or_404(db, GalleryDB, gallery_id, "Galeri tidak ditemukan")
    if not items:
        raise ValidationFailed("Tidak ada item untuk ditambahkan")
    parsed = [GalleryItemInput.model_validate(i).model_dump() for i in items]

    start = next_order(db, GalleryItemDB.order, GalleryItemDB.gallery_id == gallery.id)
    for offset, values in enumerate(parsed):
        db.add(GalleryItemDB(**values, gallery_id=gallery.id, order=start + offset))
    if not gallery.cover_image:
        gallery.cover_image = parsed[0]["url"]
    db.commit()

    ctx.invalidate("/admin/galleries", f"/admin/galleries/{gallery.id}", "/galeri", f"/galeri/{gallery.slug}")
    return ActionResult.ok({"added": len(parsed)}, f"{len(parsed)} item berhasil ditambahkan")


@service_action("Gagal memperbarui item")
def update_gallery_item(db: Session, ctx: RequestContext, item_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    item = get_or_404(db, GalleryItemDB, item_id, ITEM_NOT_FOUND)
    partial = partial or {}
    if "caption" in partial:
        item.caption = partial["caption"] or None
    if "order" in partial:
        item.order = int(partial["order"])
    db.commit()
    ctx.invalidate("/admin/galleries", "/galeri")
    return ActionResult.ok(item.to_dict(), "Item berhasil diperbarui")


@service_action("Gagal menghapus item")
def delete_gallery_item(db: Session, ctx: RequestContext, item_id: str) -> ActionResult:
    require_role(ctx)
    item = get_or_404(db, GalleryItemDB, item_id, ITEM_NOT_FOUND)
    db.delete(item); db.commit()
    ctx.invalidate("/admin/galleries", "/galeri")
    return ActionResult.ok(message="Item berhasil dihapus")


@service_action("Gagal mengubah urutan")
def reorder_gallery_items(db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
    require_role(ctx)
    apply_reorder(db, GalleryItemDB, items)
    ctx.invalidate("/admin/galleries", "/galeri")
    return ActionResult.ok(message="Urutan berhasil diperbarui")
