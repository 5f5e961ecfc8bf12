"""Testimonials from parents, students and alumni."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..models import TestimonialDB
from ..schemas import TestimonialInput
from ._crud import paginate, search_filter
from ._resource import Resource

testimonials = Resource(TestimonialDB, TestimonialInput, {
    "not_found":    "Testimoni tidak ditemukan",
    "created":      "Testimoni berhasil ditambahkan",
    "create_fail":  "Gagal menambahkan testimoni",
    "updated":      "Testimoni berhasil diperbarui",
    "update_fail":  "Gagal memperbarui testimoni",
    "deleted":      "Testimoni berhasil dihapus",
    "delete_fail":  "Gagal menghapus testimoni",
    "toggled_on":   "Testimoni berhasil dipublikasikan",
    "toggled_off":  "Testimoni berhasil disembunyikan",
    "toggle_fail":  "Gagal mengubah status testimoni",
}, admin_path="/admin/testimonials", public_paths=("/",), toggle_field="is_published")

create_testimonial = testimonials.create
update_testimonial = testimonials.update
delete_testimonial = testimonials.delete
toggle_testimonial_publish = testimonials.toggle
reorder_testimonials = testimonials.reorder


def list_testimonials(db: Session, page: int = 1, limit: int = 10, search: Optional[str] = None) -> Dict[str, Any]:
    q = db.query(TestimonialDB)
    cond = search_filter(TestimonialDB, search, "name", "content")
    if cond is not None:
        q = q.filter(cond)
    return paginate(q.order_by(TestimonialDB.order, TestimonialDB.created_at.desc()), page, limit)


def published_testimonials(db: Session, limit: Optional[int] = None) -> List[TestimonialDB]:
    q = db.query(TestimonialDB).filter_by(is_published=True).order_by(TestimonialDB.order)
    return q.limit(limit).all() if limit else q.all()
