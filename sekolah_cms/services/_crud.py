"""Shared building blocks for the entity services."""
import math
from typing import Any, Dict, Iterable, List, Optional, Type

import sqlalchemy as sa
from pydantic import BaseModel
from sqlalchemy.orm import Query, Session

from ..errors import Conflict, NotFound, ValidationFailed
from ..models import Status
from ..page_builder import dump_blocks, load_blocks
from ..schemas import ReorderItem
from ..utils import utcnow

SLUG_TAKEN = "Slug sudah digunakan"
SELF_PARENT = "Item tidak dapat menjadi induk dirinya sendiri"
CYCLE = "Item tidak dapat dipindahkan ke dalam sub-itemnya sendiri"


def validate(schema: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    return schema.model_validate(data or {}).model_dump()


def validate_update(schema: Type[BaseModel], obj, partial: Dict[str, Any]) -> Dict[str, Any]:
    """Validate `partial` merged over the stored record; only the keys sent come back."""
    partial = partial or {}
    merged = schema.model_validate({**obj.to_dict(), **partial}).model_dump()
    return {k: merged[k] for k in partial if k in merged}


def apply(obj, values: Dict[str, Any], skip: Iterable[str] = ()):
    for k, v in values.items():
        if k not in skip:
            setattr(obj, k, v)
    return obj


def get_or_404(db: Session, model, obj_id: str, message: str):
    obj = db.get(model, obj_id) if obj_id else None
    if obj is None:
        raise NotFound(message)
    return obj


def ensure_unique(db: Session, model, field: str, value: Any,
                  message: str = SLUG_TAKEN, exclude_id: Optional[str] = None):
    q = db.query(model).filter(getattr(model, field) == value)
    if exclude_id:
        q = q.filter(model.id != exclude_id)
    if q.first() is not None:
        raise Conflict(message)


def next_order(db: Session, column, *criteria) -> int:
    current = db.query(sa.func.max(column)).filter(*criteria).scalar()
    return (current if current is not None else -1) + 1


def toggle(db: Session, obj, field: str) -> bool:
    setattr(obj, field, not getattr(obj, field))
    db.commit()
    return getattr(obj, field)


def ensure_acyclic(db: Session, model, item_id: str, parent_id: Optional[str], message: str):
    """Walk up from `parent_id`; meeting `item_id` on the way means the move closes a loop."""
    seen = set()
    current = parent_id
    while current and current not in seen:
        if current == item_id:
            raise ValidationFailed(message)
        seen.add(current)
        parent = db.get(model, current)
        current = parent.parent_id if parent is not None else None


def parse_reorder(items: List[Any]) -> List[ReorderItem]:
    if not isinstance(items, list) or not items:
        raise ValidationFailed("Data urutan tidak valid")
    return [ReorderItem.model_validate(i) for i in items]


def apply_reorder(db: Session, model, items: List[Any], reparent: bool = False,
                  scope: Optional[str] = None) -> int:
    """One batch, one commit: every id must exist or nothing is written.

    With `reparent`, items may also move under a new parent. The parent must
    share the item's `scope` column (e.g. menu_id) and may not be one of the
    item's own descendants once the whole batch is applied.
    """
    parsed = parse_reorder(items)
    ids = [i.id for i in parsed]
    found = {o.id: o for o in db.query(model).filter(model.id.in_(ids)).all()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFound(f"Item tidak ditemukan: {', '.join(missing)}")
    moved = []
    for item in parsed:
        obj = found[item.id]
        obj.order = item.order
        if reparent and "parent_id" in item.model_fields_set:
            if item.parent_id == item.id:
                raise ValidationFailed(SELF_PARENT)
            if item.parent_id:
                parent = db.get(model, item.parent_id)
                if parent is None or (scope and getattr(parent, scope) != getattr(obj, scope)):
                    raise NotFound(f"Item induk tidak ditemukan: {item.parent_id}")
            obj.parent_id = item.parent_id
            moved.append(obj)
    for obj in moved:
        ensure_acyclic(db, model, obj.id, obj.parent_id, CYCLE)
    db.commit()
    return len(parsed)


def paginate(query: Query, page: int = 1, limit: int = 10, serialize=None) -> Dict[str, Any]:
    page = max(1, int(page or 1))
    limit = max(1, min(int(limit or 10), 100))
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    serialize = serialize or (lambda o: o.to_dict())
    return {
        "items":       [serialize(r) for r in rows],
        "total":       total,
        "page":        page,
        "limit":       limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


def search_filter(model, search: Optional[str], *fields: str):
    if not search:
        return None
    like = f"%{search}%"
    return sa.or_(*(getattr(model, f).ilike(like) for f in fields))


def resolve_published_at(status: str, current):
    """PUBLISHED keeps an existing timestamp or starts a new one; any other status clears it."""
    if status == Status.PUBLISHED.value:
        return current or utcnow()
    return None


def normalize_content(raw) -> list:
    """Stored block list: malformed entries dropped, unknown types kept."""
    return dump_blocks(load_blocks(raw or []))
