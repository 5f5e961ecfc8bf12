"""
Resource — the create/update/delete/toggle/reorder set shared by the flat
school entities (staff, programs, facilities, …). Each entity module builds
one with its model, input schema and Indonesian messages, and re-exports the
bound operations under its own names.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..context import RequestContext, require_role
from ..errors import ActionResult, service_action
from ._crud import (
    apply, apply_reorder, ensure_unique, get_or_404, normalize_content, validate, validate_update,
)

log = logging.getLogger(__name__)


class Resource:

    def __init__(self, model, schema: Type[BaseModel], messages: Dict[str, str], *,
                 admin_path: str, public_paths: Iterable[str] = (),
                 toggle_field: Optional[str] = None, slug_field: Optional[str] = "slug"):
        self.model = model
        self.schema = schema
        self.msg = messages
        self.admin_path = admin_path
        self.public_paths = tuple(public_paths)
        self.toggle_field = toggle_field
        self.slug_field = slug_field if slug_field and slug_field in schema.model_fields else None

        self.create = service_action(messages["create_fail"])(self._create)
        self.update = service_action(messages["update_fail"])(self._update)
        self.delete = service_action(messages["delete_fail"])(self._delete)
        self.toggle = service_action(messages.get("toggle_fail", "Gagal mengubah status"))(self._toggle)
        self.reorder = service_action(messages.get("reorder_fail", "Gagal mengubah urutan"))(self._reorder)

    def _touch(self, ctx: RequestContext, *extra: str):
        ctx.invalidate(self.admin_path, *self.public_paths, *extra)

    def _prepare(self, values: Dict[str, Any]) -> Dict[str, Any]:
        # block documents only; testimonials and announcements carry plain text
        if isinstance(values.get("content"), list):
            values["content"] = normalize_content(values["content"])
        return values

    def get(self, db: Session, obj_id: str):
        return get_or_404(db, self.model, obj_id, self.msg["not_found"])

    def _create(self, db: Session, ctx: RequestContext, data: Dict[str, Any]) -> ActionResult:
        require_role(ctx)
        values = self._prepare(validate(self.schema, data))
        if self.slug_field:
            ensure_unique(db, self.model, self.slug_field, values[self.slug_field])
        obj = self.model(**values)
        db.add(obj); db.commit(); db.refresh(obj)
        self._touch(ctx)
        log.info("%s created: %s", self.model.__tablename__, obj.id)
        return ActionResult.ok(obj.to_dict(), self.msg["created"])

    def _update(self, db: Session, ctx: RequestContext, obj_id: str, partial: Dict[str, Any]) -> ActionResult:
        require_role(ctx)
        obj = self.get(db, obj_id)
        values = self._prepare(validate_update(self.schema, obj, partial))
        if self.slug_field and self.slug_field in values and values[self.slug_field] != getattr(obj, self.slug_field):
            ensure_unique(db, self.model, self.slug_field, values[self.slug_field], exclude_id=obj.id)
        apply(obj, values)
        db.commit(); db.refresh(obj)
        self._touch(ctx)
        return ActionResult.ok(obj.to_dict(), self.msg["updated"])

    def _delete(self, db: Session, ctx: RequestContext, obj_id: str) -> ActionResult:
        require_role(ctx)
        obj = self.get(db, obj_id)
        db.delete(obj); db.commit()
        self._touch(ctx)
        return ActionResult.ok(message=self.msg["deleted"])

    def _toggle(self, db: Session, ctx: RequestContext, obj_id: str) -> ActionResult:
        require_role(ctx)
        obj = self.get(db, obj_id)
        field = self.toggle_field
        setattr(obj, field, not getattr(obj, field))
        db.commit()
        self._touch(ctx)
        state = getattr(obj, field)
        return ActionResult.ok({field: state}, self.msg["toggled_on"] if state else self.msg["toggled_off"])

    def _reorder(self, db: Session, ctx: RequestContext, items: List[Dict[str, Any]]) -> ActionResult:
        require_role(ctx)
        apply_reorder(db, self.model, items)
        self._touch(ctx)
        return ActionResult.ok(message=self.msg.get("reordered", "Urutan berhasil diperbarui"))
