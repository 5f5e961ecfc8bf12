"""
Resolve the data behind school embed blocks (staff-grid, news-list, …) so the
renderer can stay free of I/O. Output: {block id: [record dict, …]}.
"""
import logging
from typing import Any, Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import GalleryItemDB, PostDB, Status
from ..page_builder.blocks import Block, ColumnsData, EMBED_BLOCK_TYPES, load_blocks, parse_data
from ..utils import format_file_size
from . import achievements, downloads, events, facilities, programs, school_profile, staff, testimonials

log = logging.getLogger(__name__)

Records = List[Dict[str, Any]]


def _date(v) -> str:
    return v.strftime("%d/%m/%Y") if v else ""


def _staff(db: Session, d) -> Records:
    rows = staff.active_staff(db, None if d.show_all else d.limit)
    return [{"name": s.name, "position": s.position, "photo": s.photo} for s in rows]


def _news(db: Session, d) -> Records:
    q = db.query(PostDB).filter_by(status=Status.PUBLISHED.value)
    if d.category_id:
        q = q.filter(PostDB.category_id == d.category_id)
    rows = q.order_by(PostDB.published_at.desc()).limit(d.limit).all()
    return [{"slug": p.slug, "title": p.title, "excerpt": p.excerpt,
             "published_at": _date(p.published_at), "featured_img": p.featured_img} for p in rows]


def _gallery(db: Session, d) -> Records:
    if not d.gallery_id:
        return []
    rows = db.query(GalleryItemDB).filter_by(gallery_id=d.gallery_id).order_by(GalleryItemDB.order).all()
    return [{"url": i.url, "caption": i.caption} for i in rows]


def _testimonials(db: Session, d) -> Records:
    return [{"content": t.content, "rating": t.rating, "name": t.name, "role": t.role}
            for t in testimonials.published_testimonials(db, d.limit)]


def _location(db: Session, d) -> Records:
    p = school_profile.get_school_profile(db)
    if p is None or p.latitude is None or p.longitude is None:
        return []
    return [{"latitude": p.latitude, "longitude": p.longitude, "address": p.address}]


def _programs(db: Session, d) -> Records:
    return [{"slug": p.slug, "name": p.name, "description": p.description, "image": p.image}
            for p in programs.active_programs(db, d.type or None, d.limit)]


def _facilities(db: Session, d) -> Records:
    return [{"icon": f.icon, "name": f.name, "description": f.description}
            for f in facilities.published_facilities(db, d.limit)]


def _events(db: Session, d) -> Records:
    return [{"start_date": _date(e.start_date), "slug": e.slug, "title": e.title, "location": e.location}
            for e in events.upcoming_events(db, d.limit)]


def _downloads(db: Session, d) -> Records:
    return [{"id": r.id, "title": r.title, "file_size": format_file_size(r.file_size or 0)}
            for r in downloads.published_downloads(db, d.category or None, d.limit)]


def _achievements(db: Session, d) -> Records:
    return [{"title": a.title, "level": a.level, "date": _date(a.date), "image": a.image}
            for a in achievements.published_achievements(db, d.limit)]


RESOLVERS: Dict[str, Callable[[Session, Any], Records]] = {
    "staff-grid":         _staff,
    "news-list":          _news,
    "gallery-embed":      _gallery,
    "testimonial-slider": _testimonials,
    "contact-form":       _location,
    "google-map":         _location,
    "program-cards":      _programs,
    "facility-showcase":  _facilities,
    "event-calendar":     _events,
    "download-list":      _downloads,
    "achievement-list":   _achievements,
}

if set(RESOLVERS) != set(EMBED_BLOCK_TYPES):
    raise RuntimeError(f"Embed resolvers out of sync: {sorted(set(EMBED_BLOCK_TYPES) ^ set(RESOLVERS))}")


def _walk(blocks: List[Block]):
    for b in blocks:
        yield b
        if b.type == "columns":
            data = parse_data(b)
            if isinstance(data, ColumnsData):
                for cell in data.cells:
                    yield from _walk(load_blocks(cell))


def resolve_embeds(db: Session, blocks: List[Block]) -> Dict[str, Records]:
    """Records for every embed block in `blocks`, nested column cells included."""
    out: Dict[str, Records] = {}
    for b in _walk(blocks):
        resolver = RESOLVERS.get(b.type)
        if resolver is None:
            continue
        try:
            out[b.id] = resolver(db, parse_data(b))
        except SQLAlchemyError:
            db.rollback()
            log.exception("Embed %s (%s) could not be resolved", b.id, b.type)
            out[b.id] = []
    return out
