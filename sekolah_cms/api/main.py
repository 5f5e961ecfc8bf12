"""
Sekolah CMS — FastAPI app
Run: uvicorn sekolah_cms.api.main:app --reload --port 8000
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from .. import __version__, config
from ..database import new_session
from ..services import settings
from ..services.auth import actor_from_token
from .deps import token_from_request
from .routes import admin, auth, content, media, page_builder, public, school

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="Sekolah CMS", version=__version__, docs_url="/docs")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"],
                   expose_headers=["X-Invalidated-Paths"])


@app.middleware("http")
async def redirect_403_to_login(request: Request, call_next):
    """Browsers hitting a protected /admin page without a session go to the login form."""
    response = await call_next(request)
    path = request.url.path
    is_browser = "text/html" in request.headers.get("accept", "")
    if response.status_code == 403 and path.startswith("/admin") and is_browser:
        return RedirectResponse("/admin/login", status_code=303)
    return response


# Reachable while the public site is in maintenance
MAINTENANCE_OPEN = ("/maintenance", "/admin", "/api", "/health", "/docs", "/openapi.json", "/robots.txt")


def _maintenance_blocks(request: Request) -> bool:
    """Maintenance mode is on and the visitor is not signed in."""
    db = new_session()
    try:
        if not settings.is_maintenance_mode(db):
            return False
        return actor_from_token(db, token_from_request(request)) is None
    except SQLAlchemyError as e:
        log.warning("Maintenance check failed, serving normally: %s", e)
        return False
    finally:
        db.close()


@app.middleware("http")
async def maintenance_gate(request: Request, call_next):
    """Public pages redirect to /maintenance while the maintenance_mode setting is on."""
    path = request.url.path
    if not path.startswith(MAINTENANCE_OPEN + (config.media_base_url(),)) and _maintenance_blocks(request):
        return RedirectResponse("/maintenance", status_code=307)
    return await call_next(request)


@app.on_event("startup")
def startup():
    from ..database import init_db
    config.secret_key()
    init_db()

    if config.scheduler_enabled():
        try:
            from ..scheduler import start_scheduler
            start_scheduler()
        except Exception as e:
            log.warning("Scheduler not started: %s", e)

    uploads = config.uploads_dir()
    try:
        uploads.mkdir(parents=True, exist_ok=True)
        app.mount(config.media_base_url(), StaticFiles(directory=str(uploads)), name="uploads")
        log.info("Uploads mounted on %s from %s", config.media_base_url(), uploads)
    except Exception as e:
        log.warning("Could not mount %s: %s", config.media_base_url(), e)


@app.on_event("shutdown")
def shutdown():
    from ..scheduler import stop_scheduler
    stop_scheduler()


@app.get("/health")
def health():
    return {"status": "ok", "service": "sekolah_cms", "version": __version__}


app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(content.router)
app.include_router(school.router)
app.include_router(media.router)
app.include_router(page_builder.router)
# Catch-all /{slug} page route, registered last
app.include_router(public.router)
