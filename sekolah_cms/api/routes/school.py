"""
Admin JSON API — school entities and PPDB.

Every flat entity gets the same set under /api/admin/{name}:
  POST create · PATCH /{id} · DELETE /{id} · POST /{id}/toggle · PUT /reorder (where ordered)
plus its own GET list with the filters it supports.

Galleries  /api/admin/galleries/{id}/items      POST add items
           /api/admin/gallery-items/{id}        PATCH · DELETE;  /reorder PUT
Announcements  /api/admin/announcements/{id}    GET (plus the flat set above)
PPDB       /api/admin/ppdb/periods              GET · POST;  /{id} GET · PATCH · DELETE;  /{id}/toggle POST
           /api/admin/ppdb/registrations        GET;  /{id} GET · DELETE;  /{id}/status PUT {status, notes}
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ...context import RequestContext
from ...database import get_db
from ...services import (
    achievements, alumni, announcements, downloads, events, facilities, galleries, grade_levels, ppdb, programs,
    staff, testimonials,
)
from ...services._resource import Resource
from ..deps import found_or_404, require_editor, respond

router = APIRouter(tags=["School"])


def _resource_routes(name: str, resource: Resource, ordered: bool = False):
    """Register create/update/delete/toggle (and reorder) routes for one Resource."""
    base = f"/api/admin/{name}"

    if ordered:
        @router.put(f"{base}/reorder", name=f"reorder_{name}")
        def reorder(items: list = Body(...), db: Session = Depends(get_db),
                    ctx: RequestContext = Depends(require_editor)):
            return respond(resource.reorder(db, ctx, items), ctx)

    @router.post(base, name=f"create_{name}")
    def create(payload: dict = Body(...), db: Session = Depends(get_db),
               ctx: RequestContext = Depends(require_editor)):
        return respond(resource.create(db, ctx, payload), ctx)

    @router.patch(f"{base}/{{obj_id}}", name=f"update_{name}")
    def update(obj_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
               ctx: RequestContext = Depends(require_editor)):
        return respond(resource.update(db, ctx, obj_id, payload), ctx)

    @router.delete(f"{base}/{{obj_id}}", name=f"delete_{name}")
    def delete(obj_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
        return respond(resource.delete(db, ctx, obj_id), ctx)

    @router.post(f"{base}/{{obj_id}}/toggle", name=f"toggle_{name}")
    def toggle(obj_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
        return respond(resource.toggle(db, ctx, obj_id), ctx)


# ── Lists ────────────────────────────────────────────────────────────────────

@router.get("/api/admin/staff")
def list_staff(page: int = 1, limit: int = 10, search: Optional[str] = None, department: Optional[str] = None,
               is_teacher: Optional[bool] = None, db: Session = Depends(get_db),
               ctx: RequestContext = Depends(require_editor)):
    return staff.list_staff(db, page, limit, search, department, is_teacher)


@router.get("/api/admin/programs")
def list_programs(page: int = 1, limit: int = 10, search: Optional[str] = None, type: Optional[str] = None,
                  db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return programs.list_programs(db, page, limit, search, type)


@router.get("/api/admin/facilities")
def list_facilities(page: int = 1, limit: int = 10, search: Optional[str] = None,
                    db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return facilities.list_facilities(db, page, limit, search)


@router.get("/api/admin/testimonials")
def list_testimonials(page: int = 1, limit: int = 10, search: Optional[str] = None,
                      db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return testimonials.list_testimonials(db, page, limit, search)


@router.get("/api/admin/grade-levels")
def list_grade_levels(db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return grade_levels.list_grade_levels(db)


@router.get("/api/admin/achievements")
def list_achievements(page: int = 1, limit: int = 10, search: Optional[str] = None, level: Optional[str] = None,
                      db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return achievements.list_achievements(db, page, limit, search, level)


@router.get("/api/admin/alumni")
def list_alumni(page: int = 1, limit: int = 10, search: Optional[str] = None,
                graduation_year: Optional[int] = None, db: Session = Depends(get_db),
                ctx: RequestContext = Depends(require_editor)):
    return {**alumni.list_alumni(db, page, limit, search, graduation_year),
            "graduation_years": alumni.graduation_years(db)}


@router.get("/api/admin/downloads")
def list_downloads(page: int = 1, limit: int = 10, search: Optional[str] = None, category: Optional[str] = None,
                   db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return {**downloads.list_downloads(db, page, limit, search, category),
            "categories": downloads.download_categories(db)}


@router.get("/api/admin/events")
def list_events(page: int = 1, limit: int = 10, search: Optional[str] = None, type: Optional[str] = None,
                db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return events.list_events(db, page, limit, search, type)


@router.get("/api/admin/events/month/{year}/{month}")
def events_by_month(year: int, month: int, db: Session = Depends(get_db),
                    ctx: RequestContext = Depends(require_editor)):
    return [e.to_dict() for e in events.events_by_month(db, year, month)]


@router.get("/api/admin/galleries")
def list_galleries(page: int = 1, limit: int = 12, search: Optional[str] = None,
                   db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return galleries.list_galleries(db, page, limit, search)


@router.get("/api/admin/galleries/{gallery_id}")
def get_gallery(gallery_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return found_or_404(galleries.get_gallery(db, gallery_id), "Galeri tidak ditemukan")


@router.get("/api/admin/announcements")
def list_announcements(page: int = 1, limit: int = 10, search: Optional[str] = None,
                       is_active: Optional[bool] = None, db: Session = Depends(get_db),
                       ctx: RequestContext = Depends(require_editor)):
    return announcements.list_announcements(db, page, limit, search, is_active)


@router.get("/api/admin/announcements/{announcement_id}")
def get_announcement(announcement_id: str, db: Session = Depends(get_db),
                     ctx: RequestContext = Depends(require_editor)):
    return found_or_404(announcements.get_announcement(db, announcement_id), "Pengumuman tidak ditemukan")


# ── Create / update / delete / toggle / reorder ──────────────────────────────

_resource_routes("staff", staff.staff, ordered=True)
_resource_routes("programs", programs.programs, ordered=True)
_resource_routes("facilities", facilities.facilities, ordered=True)
_resource_routes("testimonials", testimonials.testimonials, ordered=True)
_resource_routes("grade-levels", grade_levels.grade_levels)
_resource_routes("achievements", achievements.achievements)
_resource_routes("alumni", alumni.alumni)
_resource_routes("downloads", downloads.downloads, ordered=True)
_resource_routes("events", events.events)
_resource_routes("galleries", galleries.galleries)
_resource_routes("announcements", announcements.announcements, ordered=True)


# ── Gallery items ────────────────────────────────────────────────────────────

@router.post("/api/admin/galleries/{gallery_id}/items")
def add_gallery_items(gallery_id: str, items: list = Body(...), db: Session = Depends(get_db),
                      ctx: RequestContext = Depends(require_editor)):
    return respond(galleries.add_gallery_items(db, ctx, gallery_id, items), ctx)


@router.put("/api/admin/gallery-items/reorder")
def reorder_gallery_items(items: list = Body(...), db: Session = Depends(get_db),
                          ctx: RequestContext = Depends(require_editor)):
    return respond(galleries.reorder_gallery_items(db, ctx, items), ctx)


@router.patch("/api/admin/gallery-items/{item_id}")
def update_gallery_item(item_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                        ctx: RequestContext = Depends(require_editor)):
    return respond(galleries.update_gallery_item(db, ctx, item_id, payload), ctx)


@router.delete("/api/admin/gallery-items/{item_id}")
def delete_gallery_item(item_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(galleries.delete_gallery_item(db, ctx, item_id), ctx)


# ── PPDB ─────────────────────────────────────────────────────────────────────

@router.get("/api/admin/ppdb/periods")
def list_periods(page: int = 1, limit: int = 10, is_active: Optional[bool] = None,
                 db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return ppdb.list_periods(db, page, limit, is_active)


@router.get("/api/admin/ppdb/periods/{period_id}")
def get_period(period_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return found_or_404(ppdb.get_period(db, period_id), "Periode PPDB tidak ditemukan")


@router.post("/api/admin/ppdb/periods")
def create_period(payload: dict = Body(...), db: Session = Depends(get_db),
                  ctx: RequestContext = Depends(require_editor)):
    return respond(ppdb.create_period(db, ctx, payload), ctx)


@router.patch("/api/admin/ppdb/periods/{period_id}")
def update_period(period_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                  ctx: RequestContext = Depends(require_editor)):
    return respond(ppdb.update_period(db, ctx, period_id, payload), ctx)


@router.delete("/api/admin/ppdb/periods/{period_id}")
def delete_period(period_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(ppdb.delete_period(db, ctx, period_id), ctx)


@router.post("/api/admin/ppdb/periods/{period_id}/toggle")
def toggle_period(period_id: str, db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return respond(ppdb.toggle_period_active(db, ctx, period_id), ctx)


@router.get("/api/admin/ppdb/registrations")
def list_registrations(page: int = 1, limit: int = 10, period_id: Optional[str] = None,
                       status: Optional[str] = None, search: Optional[str] = None,
                       db: Session = Depends(get_db), ctx: RequestContext = Depends(require_editor)):
    return ppdb.list_registrations(db, page, limit, period_id, status, search)


@router.get("/api/admin/ppdb/registrations/{registration_id}")
def get_registration(registration_id: str, db: Session = Depends(get_db),
                     ctx: RequestContext = Depends(require_editor)):
    return found_or_404(ppdb.get_registration(db, registration_id), "Pendaftaran tidak ditemukan")


@router.put("/api/admin/ppdb/registrations/{registration_id}/status")
def update_registration_status(registration_id: str, payload: dict = Body(...), db: Session = Depends(get_db),
                               ctx: RequestContext = Depends(require_editor)):
    result = ppdb.update_registration_status(db, ctx, registration_id, payload.get("status", ""),
                                             payload.get("notes"))
    return respond(result, ctx)


@router.delete("/api/admin/ppdb/registrations/{registration_id}")
def delete_registration(registration_id: str, db: Session = Depends(get_db),
                        ctx: RequestContext = Depends(require_editor)):
    return respond(ppdb.delete_registration(db, ctx, registration_id), ctx)
