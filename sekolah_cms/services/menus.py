"""Navigation menus (header, footer, …) and their nested items."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, NotFound, ValidationFailed, service_action
from ..models import MenuDB, MenuItemDB
from ..schemas import MenuInput, MenuItemInput
from ._crud import (
    CYCLE, apply, apply_reorder, ensure_acyclic, ensure_unique, get_or_404, next_order,
    validate, validate_update,
)

log = logging.getLogger(__name__)

LOCATION_TAKEN = "Menu dengan lokasi tersebut sudah ada"
ITEM_NOT_FOUND = "Item menu tidak ditemukan"
MAX_DEPTH = 3


def _item_dict(item: MenuItemDB, depth: int, visible_only: bool) -> dict:
    d = item.to_dict()
    if depth < MAX_DEPTH:
        children = [c for c in item.children if c.is_visible or not visible_only]
        d["children"] = [_item_dict(c, depth + 1, visible_only) for c in sorted(children, key=lambda c: c.order)]
    else:
        d["children"] = []
    return d


def _tree(menu: MenuDB, visible_only: bool) -> dict:
    roots = [i for i in menu.items if i.parent_id is None and (i.is_visible or not visible_only)]
    return {**menu.to_dict(), "items": [_item_dict(i, 1, visible_only) for i in sorted(roots, key=lambda i: i.order)]}


def _descendant_ids(db: Session, item_id: str) -> List[str]:
    seen = {item_id}
    ids, frontier = [], [item_id]
    while frontier:
        rows = db.query(MenuItemDB.id).filter(MenuItemDB.parent_id.in_(frontier)).all()
        kids = [r[0] for r in rows if r[0] not in seen]
        seen.update(kids)
        ids.extend(kids)
        frontier = kids
    return ids


# ── Reads ──────────────────────────────────────────────────────────────

def list_menus(db: Session) -> List[dict]:
    return [_tree(m, visible_only=False) for m in db.query(MenuDB).order_by(MenuDB.name).all()]


def get_menu(db: Session, menu_id: str) -> Optional[dict]:
    menu = db.get(MenuDB, menu_id)
    return _tree(menu, visible_only=False) if menu else None


def get_menu_by_location(db: Session, location: str) -> Optional[dict]:
    """Public tree: visible items only, three levels deep."""
    menu = db.query(MenuDB).filter_by(location=location).first()
    return _tree(menu, visible_only=True) if menu else None


# ── Menus ──────────────────────────────────────────────────────────────

@service_action("Gagal membuat menu")
def create_menu(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    values = validate(MenuInput, data)
    ensure_unique(db, MenuDB, "location", values["location"], LOCATION_TAKEN)
    menu = MenuDB(**values)
    db.add(menu); db.commit(); db.refresh(menu)
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(menu.to_dict(), "Menu berhasil dibuat")


@service_action("Gagal memperbarui menu")
def update_menu(db: Session, ctx: RequestContext, menu_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    menu = get_or_404(db, MenuDB, menu_id, "Menu tidak ditemukan")
    values = validate_update(MenuInput, menu, partial)
    if "location" in values and values["location"] != menu.location:
        ensure_unique(db, MenuDB, "location", values["location"], LOCATION_TAKEN, exclude_id=menu.id)
    apply(menu, values)
    db.commit(); db.refresh(menu)
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(menu.to_dict(), "Menu berhasil diperbarui")


@service_action("Gagal menghapus menu")
def delete_menu(db: Session, ctx: RequestContext, menu_id: str) -> ActionResult:
    require_role(ctx)
    menu = get_or_404(db, MenuDB, menu_id, "Menu tidak ditemukan")
    db.query(MenuItemDB).filter(MenuItemDB.menu_id == menu.id).delete(synchronize_session=False)
    db.query(MenuDB).filter_by(id=menu.id).delete(synchronize_session=False)
    db.commit()
    db.expire_all()
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(message="Menu berhasil dihapus")


# ── Items ──────────────────────────────────────────────────────────────

def _check_item_parent(db: Session, menu_id: str, parent_id: Optional[str], self_id: Optional[str] = None):
    if not parent_id:
        return
    if parent_id == self_id:
        raise ValidationFailed("Item tidak dapat menjadi induk dirinya sendiri")
    parent = db.get(MenuItemDB, parent_id)
    if parent is None or parent.menu_id != menu_id:
        raise NotFound("Item induk tidak ditemukan")
    if self_id:
        ensure_acyclic(db, MenuItemDB, self_id, parent_id, CYCLE)


@service_action("Gagal menambahkan item menu")
def create_menu_item(db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    values = validate(MenuItemInput, data)
    get_or_404(db, MenuDB, values["menu_id"], "Menu tidak ditemukan")
    _check_item_parent(db, values["menu_id"], values.get("parent_id"))

    parent_cond = (MenuItemDB.parent_id == values["parent_id"]) if values.get("parent_id") \
        else MenuItemDB.parent_id.is_(None)
    item = MenuItemDB(**values)
    item.order = next_order(db, MenuItemDB.order, MenuItemDB.menu_id == values["menu_id"], parent_cond)
    db.add(item); db.commit(); db.refresh(item)
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(item.to_dict(), "Item menu berhasil ditambahkan")


@service_action("Gagal memperbarui item menu")
def update_menu_item(db: Session, ctx: RequestContext, item_id: str, partial: Dict[str, Any]) -> ActionResult:
    require_role(ctx)
    item = get_or_404(db, MenuItemDB, item_id, ITEM_NOT_FOUND)
    values = validate_update(MenuItemInput, item, partial)
    values.pop("menu_id", None)
    if "parent_id" in values:
        _check_item_parent(db, item.menu_id, values["parent_id"], item.id)
    apply(item, values)
    if "order" in (partial or {}):
        item.order = int(partial["order"])
    db.commit(); db.refresh(item)
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(item.to_dict(), "Item menu berhasil diperbarui")


@service_action("Gagal menghapus item menu")
def delete_menu_item(db: Session, ctx: RequestContext, item_id: str) -> ActionResult:
    """Removes the item together with its whole subtree."""
    require_role(ctx)
    item = get_or_404(db, MenuItemDB, item_id, ITEM_NOT_FOUND)
    doomed = _descendant_ids(db, item.id)
    if doomed:
        db.query(MenuItemDB).filter(MenuItemDB.id.in_(doomed)).delete(synchronize_session=False)
    db.query(MenuItemDB).filter_by(id=item.id).delete(synchronize_session=False)
    db.commit()
    db.expire_all()
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(message="Item menu berhasil dihapus")


@service_action("Gagal mengubah visibilitas menu")
def toggle_menu_item_visibility(db: Session, ctx: RequestContext, item_id: str) -> ActionResult:
    require_role(ctx)
    item = get_or_404(db, MenuItemDB, item_id, ITEM_NOT_FOUND)
    item.is_visible = not item.is_visible
    db.commit()
    ctx.invalidate("/admin/menus", "/")
    msg = "Item menu ditampilkan" if item.is_visible else "Item menu disembunyikan"
    return ActionResult.ok({"is_visible": item.is_visible}, msg)


@service_action("Gagal mengubah urutan menu")
def reorder_menu_items(db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
    """[{id, order, parent_id?}] applied in one commit; any unknown id cancels the batch."""
    require_role(ctx)
    apply_reorder(db, MenuItemDB, items, reparent=True, scope="menu_id")
    ctx.invalidate("/admin/menus", "/")
    return ActionResult.ok(message="Urutan menu berhasil diperbarui")
