"""Sitemap entries for the public site: fixed sections plus every published document."""
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session

from ..models import EventDB, GalleryDB, PageDB, PostDB, ProgramDB, Status


class SitemapEntry(NamedTuple):
    path: str
    lastmod: Optional[str]
    changefreq: str
    priority: float


STATIC = (
    ("/", "daily", 1.0),
    ("/berita", "daily", 0.9),
    ("/ppdb", "monthly", 0.9),
    ("/guru", "weekly", 0.8),
    ("/fasilitas", "monthly", 0.7),
    ("/galeri", "weekly", 0.7),
    ("/agenda", "weekly", 0.7),
    ("/prestasi", "monthly", 0.6),
    ("/alumni", "monthly", 0.5),
    ("/unduhan", "weekly", 0.6),
    ("/kontak", "monthly", 0.7),
)

HOME_SLUG = "beranda"


def _day(dt) -> Optional[str]:
    return dt.date().isoformat() if dt else None


def sitemap_entries(db: Session) -> List[SitemapEntry]:
    entries = [SitemapEntry(path, None, freq, prio) for path, freq, prio in STATIC]

    published = Status.PUBLISHED.value
    for p in db.query(PageDB).filter(PageDB.status == published).order_by(PageDB.order, PageDB.slug):
        if p.slug != HOME_SLUG:
            entries.append(SitemapEntry(f"/{p.slug}", _day(p.updated_at), "weekly", 0.7))
    for p in db.query(PostDB).filter(PostDB.status == published).order_by(PostDB.published_at.desc()):
        entries.append(SitemapEntry(f"/berita/{p.slug}", _day(p.updated_at), "weekly", 0.6))
    for g in db.query(GalleryDB).filter(GalleryDB.is_published.is_(True)).order_by(GalleryDB.slug):
        entries.append(SitemapEntry(f"/galeri/{g.slug}", _day(g.updated_at), "monthly", 0.5))
    for p in db.query(ProgramDB).filter(ProgramDB.is_active.is_(True)).order_by(ProgramDB.order, ProgramDB.slug):
        entries.append(SitemapEntry(f"/program/{p.slug}", _day(p.updated_at), "monthly", 0.6))
    for e in db.query(EventDB).filter(EventDB.is_published.is_(True)).order_by(EventDB.start_date.desc()):
        entries.append(SitemapEntry(f"/agenda/{e.slug}", _day(e.updated_at), "weekly", 0.5))
    return entries
