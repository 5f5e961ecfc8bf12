"""
Public site (server-rendered HTML).

GET  /                      → home (page `beranda` if published, else default sections)
GET  /berita[?kategori=]    → news list;   /berita/{slug} → article (views counted in background)
GET  /agenda                → upcoming events;  /agenda/{slug}
GET  /galeri                → albums;  /galeri/{slug}
GET  /program/{slug}        → program detail
GET  /guru · /fasilitas · /prestasi · /alumni
GET  /unduhan               → downloads;  /unduhan/{id} → counts and redirects to the file
GET  /ppdb · POST /ppdb     → active period + registration form
GET  /kontak · POST /kontak → contact form
GET  /maintenance           → shown to visitors while the maintenance_mode setting is on
GET  /robots.txt · /sitemap.xml
GET  /{slug}                → published page built from blocks
"""
from html import escape
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from sqlalchemy.orm import Session

from ... import config
from ...context import RequestContext
from ...database import get_db
from ...page_builder.blocks import load_blocks
from ...page_builder.renderer import render_blocks
from ...services import (
    achievements, alumni, announcements, downloads, events, facilities, galleries, grade_levels, menus, pages,
    posts, ppdb, programs, school_profile, settings, sitemap, staff, testimonials,
)
from ...services.contact import submit_contact_message
from ...services.embeds import resolve_embeds
from ..deps import INVALIDATED_HEADER

router = APIRouter(tags=["Public"])

HOME_SLUG = "beranda"

_CSS = """
*{box-sizing:border-box}
body{font-family:'Segoe UI',sans-serif;margin:0;color:#0f172a;line-height:1.6}
a{color:var(--primary)}
header{background:var(--primary);color:#fff;padding:14px 32px;display:flex;align-items:center;gap:32px}
header a{color:#fff;text-decoration:none}
nav ul{list-style:none;margin:0;padding:0;display:flex;gap:18px}
nav li{position:relative}
nav li ul{display:none;position:absolute;background:#fff;padding:8px 12px;flex-direction:column;z-index:10}
nav li ul a{color:#0f172a}
nav li:hover>ul{display:flex}
main{max-width:1100px;margin:0 auto;padding:32px 20px}
footer{background:#0f172a;color:#cbd5e1;padding:24px 32px;font-size:14px}
footer a{color:#cbd5e1}
.embed__card,.card{border:1px solid #e2e8f0;border-radius:10px;padding:16px;margin-bottom:16px}
.btn{display:inline-block;background:var(--primary);color:#fff;padding:10px 18px;border-radius:8px;border:none;
  text-decoration:none;cursor:pointer}
form input,form textarea,form select{display:block;width:100%;margin:6px 0 12px;padding:10px;
  border:1px solid #cbd5e1;border-radius:6px;font-family:inherit}
.alert{padding:12px 16px;border-radius:8px;margin-bottom:16px}
.alert--ok{background:#dcfce7} .alert--err{background:#fee2e2}
.announcement{padding:8px 32px;font-size:14px;background:#dbeafe}
.announcement--warning{background:#fef9c3} .announcement--success{background:#dcfce7} .announcement--error{background:#fee2e2}
img{max-width:100%}
"""


# ── Layout ───────────────────────────────────────────────────────────────────

def _href(item: dict) -> str:
    if item.get("type") == "page" and item.get("page_slug"):
        return f"/{item['page_slug']}"
    return item.get("url") or "#"


def _menu_html(items: List[dict]) -> str:
    if not items:
        return ""
    lis = []
    for i in items:
        target = ' target="_blank" rel="noopener"' if i.get("open_new") else ""
        lis.append(f'<li><a href="{escape(_href(i), quote=True)}"{target}>{escape(i["label"])}</a>'
                   f'{_menu_html(i.get("children") or [])}</li>')
    return f"<ul>{''.join(lis)}</ul>"


def _announcement_bar(db: Session, path: Optional[str]) -> str:
    bars = []
    for a in announcements.active_announcements(db, path):
        link = ""
        if a.link:
            link = f' <a href="{escape(a.link, quote=True)}">{escape(a.link_text or "Selengkapnya")}</a>'
        bars.append(f'<div class="announcement announcement--{escape(a.type, quote=True)}">'
                    f'<strong>{escape(a.title)}</strong> {escape(a.content)}{link}</div>')
    return "".join(bars)


def layout(db: Session, title: str, body: str, description: str = "", path: Optional[str] = None) -> str:
    site = settings.setting_text(db, "site_name", "Sekolah")
    primary = settings.setting_text(db, "primary_color", "#3B82F6")
    meta_desc = description or settings.setting_text(db, "meta_description")
    header_menu = menus.get_menu_by_location(db, "header")
    footer_menu = menus.get_menu_by_location(db, "footer")
    profile = school_profile.get_school_profile(db)
    contact = ""
    if profile is not None:
        contact = " · ".join(escape(v) for v in (profile.address, profile.phone, profile.email) if v)
    return f"""<!DOCTYPE html><html lang="id"><head>
<meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>{escape(title)} — {escape(site)}</title>
<meta name="description" content="{escape(meta_desc, quote=True)}">
<style>:root{{--primary:{escape(primary, quote=True)}}}{_CSS}</style>
</head><body>
{_announcement_bar(db, path)}
<header><a href="/"><strong>{escape(site)}</strong></a>
<nav>{_menu_html(header_menu["items"] if header_menu else [])}</nav></header>
<main>
{body}
</main>
<footer><nav>{_menu_html(footer_menu["items"] if footer_menu else [])}</nav><p>{contact}</p></footer>
</body></html>"""


def _blocks_html(db: Session, content) -> str:
    blocks = load_blocks(content)
    return render_blocks(blocks, resolve_embeds(db, blocks))


def _alert(ok: Optional[str], err: Optional[str]) -> str:
    if ok:
        return f'<div class="alert alert--ok">{escape(ok)}</div>'
    if err:
        return f'<div class="alert alert--err">{escape(err)}</div>'
    return ""


def _fmt(d) -> str:
    return d.strftime("%d/%m/%Y") if d else ""


def _public_ctx() -> RequestContext:
    return RequestContext(actor=None)


# ── Home ─────────────────────────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse)
def home(db: Session = Depends(get_db)):
    page = pages.get_page_by_slug(db, HOME_SLUG)
    if page is not None:
        return HTMLResponse(layout(db, page.seo_title or page.title, _blocks_html(db, page.content), page.seo_desc or "", path="/"))

    profile = school_profile.get_school_profile(db)
    name = profile.name if profile else settings.setting_text(db, "site_name", "Sekolah")
    tagline = profile.tagline if profile and profile.tagline else settings.setting_text(db, "site_tagline")
    latest = posts.list_published_posts(db, 1, 3)["items"]
    news = "".join(
        f'<article class="card"><h3><a href="/berita/{escape(p["slug"], quote=True)}">{escape(p["title"])}</a></h3>'
        f'<p>{escape(p.get("excerpt") or "")}</p></article>'
        for p in latest
    ) or "<p>Belum ada berita.</p>"
    agenda = "".join(
        f'<li>{_fmt(e.start_date)} · <a href="/agenda/{escape(e.slug, quote=True)}">{escape(e.title)}</a></li>'
        for e in events.upcoming_events(db, 5)
    ) or "<li>Belum ada agenda.</li>"
    progs = "".join(
        f'<article class="card"><h3><a href="/program/{escape(p.slug, quote=True)}">{escape(p.name)}</a></h3>'
        f'<p>{escape(p.description or "")}</p></article>'
        for p in programs.active_programs(db, limit=6)
    )
    quotes = "".join(
        f'<blockquote class="card">{escape(t.content)}<footer>{escape(t.name)} — {escape(t.role)}</footer></blockquote>'
        for t in testimonials.published_testimonials(db, 3)
    )
    body = f"""<section><h1>{escape(name)}</h1><p>{escape(tagline or "")}</p>
<a class="btn" href="/ppdb">Info PPDB</a></section>
<section><h2>Berita terbaru</h2>{news}</section>
<section><h2>Agenda</h2><ul>{agenda}</ul></section>
<section><h2>Program</h2>{progs}</section>
<section><h2>Testimoni</h2>{quotes}</section>"""
    return HTMLResponse(layout(db, "Beranda", body, path="/"))


# ── News ─────────────────────────────────────────────────────────────────────

@router.get("/berita", response_class=HTMLResponse)
def news_list(page: int = 1, kategori: Optional[str] = None, db: Session = Depends(get_db)):
    result = posts.list_published_posts(db, page, 9, kategori)
    cards = "".join(
        f'<article class="card">'
        + (f'<img src="{escape(p["featured_img"], quote=True)}" alt="" loading="lazy">' if p.get("featured_img") else "")
        + f'<h3><a href="/berita/{escape(p["slug"], quote=True)}">{escape(p["title"])}</a></h3>'
        f'<p>{escape(p.get("excerpt") or "")}</p><small>{escape((p.get("published_at") or "")[:10])}</small></article>'
        for p in result["items"]
    ) or "<p>Belum ada berita.</p>"
    cats = " · ".join(
        f'<a href="/berita?kategori={escape(c["slug"], quote=True)}">{escape(c["name"])}</a>'
        for c in posts.list_categories(db)
    )
    pager = ""
    if result["total_pages"] > 1:
        q = f"&kategori={escape(kategori, quote=True)}" if kategori else ""
        if page > 1:
            pager += f'<a href="/berita?page={page - 1}{q}">« Sebelumnya</a> '
        if page < result["total_pages"]:
            pager += f'<a href="/berita?page={page + 1}{q}">Berikutnya »</a>'
    body = f"<h1>Berita</h1><p>{cats}</p>{cards}<p>{pager}</p>"
    return HTMLResponse(layout(db, "Berita", body, path="/berita"))


@router.get("/berita/{slug}", response_class=HTMLResponse)
def news_detail(slug: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    post = posts.get_post_by_slug(db, slug)
    if post is None:
        raise HTTPException(404, "Berita tidak ditemukan")
    background_tasks.add_task(posts.increment_views, post.id)
    category = f'<a href="/berita?kategori={escape(post.category.slug, quote=True)}">{escape(post.category.name)}</a>' \
        if post.category else ""
    body = (f"<article><h1>{escape(post.title)}</h1><p><small>{_fmt(post.published_at)} · {category}</small></p>"
            + (f'<img src="{escape(post.featured_img, quote=True)}" alt="">' if post.featured_img else "")
            + f"{_blocks_html(db, post.content)}</article>")
    return HTMLResponse(layout(db, post.seo_title or post.title, body, post.seo_desc or post.excerpt or "",
                               path=f"/berita/{slug}"))


# ── Events / galleries / programs ────────────────────────────────────────────

@router.get("/agenda", response_class=HTMLResponse)
def agenda(db: Session = Depends(get_db)):
    rows = "".join(
        f'<article class="card"><time>{_fmt(e.start_date)}</time>'
        f'<h3><a href="/agenda/{escape(e.slug, quote=True)}">{escape(e.title)}</a></h3>'
        f'<p>{escape(e.location or "")}</p></article>'
        for e in events.upcoming_events(db, 50)
    ) or "<p>Belum ada agenda mendatang.</p>"
    return HTMLResponse(layout(db, "Agenda", f"<h1>Agenda</h1>{rows}", path="/agenda"))


@router.get("/agenda/{slug}", response_class=HTMLResponse)
def agenda_detail(slug: str, db: Session = Depends(get_db)):
    e = events.get_event_by_slug(db, slug)
    if e is None:
        raise HTTPException(404, "Agenda tidak ditemukan")
    when = _fmt(e.start_date) + (f" – {_fmt(e.end_date)}" if e.end_date else "")
    body = (f"<h1>{escape(e.title)}</h1><p>{when} · {escape(e.location or '')}</p>"
            f"<p>{escape(e.description or '')}</p>{_blocks_html(db, e.content)}")
    return HTMLResponse(layout(db, e.title, body, e.description or "", path=f"/agenda/{slug}"))


@router.get("/galeri", response_class=HTMLResponse)
def gallery_list(page: int = 1, db: Session = Depends(get_db)):
    result = galleries.list_galleries(db, page, 12, published_only=True)
    cards = "".join(
        f'<article class="card">'
        + (f'<img src="{escape(g["cover_image"], quote=True)}" alt="" loading="lazy">' if g.get("cover_image") else "")
        + f'<h3><a href="/galeri/{escape(g["slug"], quote=True)}">{escape(g["title"])}</a></h3></article>'
        for g in result["items"]
    ) or "<p>Belum ada galeri.</p>"
    return HTMLResponse(layout(db, "Galeri", f"<h1>Galeri</h1>{cards}", path="/galeri"))


@router.get("/galeri/{slug}", response_class=HTMLResponse)
def gallery_detail(slug: str, db: Session = Depends(get_db)):
    g = galleries.get_gallery_by_slug(db, slug)
    if g is None:
        raise HTTPException(404, "Galeri tidak ditemukan")
    items = "".join(
        f'<figure><img src="{escape(i.url, quote=True)}" alt="{escape(i.caption or "", quote=True)}" loading="lazy">'
        + (f"<figcaption>{escape(i.caption)}</figcaption>" if i.caption else "") + "</figure>"
        for i in g.items
    )
    return HTMLResponse(layout(db, g.title, f"<h1>{escape(g.title)}</h1><p>{escape(g.description or '')}</p>{items}", path=f"/galeri/{slug}"))


@router.get("/program/{slug}", response_class=HTMLResponse)
def program_detail(slug: str, db: Session = Depends(get_db)):
    p = programs.get_program_by_slug(db, slug)
    if p is None:
        raise HTTPException(404, "Program tidak ditemukan")
    body = f"<h1>{escape(p.name)}</h1><p>{escape(p.description or '')}</p>{_blocks_html(db, p.content)}"
    return HTMLResponse(layout(db, p.name, body, p.description or "", path=f"/program/{slug}"))


# ── Directory pages ──────────────────────────────────────────────────────────

@router.get("/guru", response_class=HTMLResponse)
def staff_page(db: Session = Depends(get_db)):
    cards = "".join(
        f'<article class="card">'
        + (f'<img src="{escape(s.photo, quote=True)}" alt="{escape(s.name, quote=True)}" loading="lazy">' if s.photo else "")
        + f"<h3>{escape(s.name)}</h3><p>{escape(s.position)}</p></article>"
        for s in staff.active_staff(db)
    ) or "<p>Belum ada data guru.</p>"
    return HTMLResponse(layout(db, "Guru & Staff", f"<h1>Guru &amp; Staff</h1>{cards}", path="/guru"))


@router.get("/fasilitas", response_class=HTMLResponse)
def facilities_page(db: Session = Depends(get_db)):
    cards = "".join(
        f'<article class="card"><h3>{escape(f.name)}</h3><p>{escape(f.description or "")}</p></article>'
        for f in facilities.published_facilities(db)
    ) or "<p>Belum ada data fasilitas.</p>"
    return HTMLResponse(layout(db, "Fasilitas", f"<h1>Fasilitas</h1>{cards}", path="/fasilitas"))


@router.get("/prestasi", response_class=HTMLResponse)
def achievements_page(db: Session = Depends(get_db)):
    cards = "".join(
        f'<article class="card"><h3>{escape(a.title)}</h3>'
        f'<p>{escape(a.level or "")} · {_fmt(a.date)}</p><p>{escape(a.description or "")}</p></article>'
        for a in achievements.published_achievements(db)
    ) or "<p>Belum ada data prestasi.</p>"
    return HTMLResponse(layout(db, "Prestasi", f"<h1>Prestasi</h1>{cards}", path="/prestasi"))


@router.get("/alumni", response_class=HTMLResponse)
def alumni_page(db: Session = Depends(get_db)):
    cards = "".join(
        f'<article class="card"><h3>{escape(a.name)}</h3><p>Lulusan {a.graduation_year}'
        f'{" · " + escape(a.current_status) if a.current_status else ""}</p>'
        f'<p>{escape(a.testimonial or "")}</p></article>'
        for a in alumni.published_alumni(db)
    ) or "<p>Belum ada data alumni.</p>"
    return HTMLResponse(layout(db, "Alumni", f"<h1>Alumni</h1>{cards}", path="/alumni"))


@router.get("/unduhan", response_class=HTMLResponse)
def downloads_page(kategori: Optional[str] = None, db: Session = Depends(get_db)):
    rows = "".join(
        f'<li><a href="/unduhan/{escape(d.id, quote=True)}">{escape(d.title)}</a> '
        f'<small>{escape(d.category or "")}</small></li>'
        for d in downloads.published_downloads(db, kategori)
    ) or "<li>Belum ada file.</li>"
    return HTMLResponse(layout(db, "Unduhan", f"<h1>Unduhan</h1><ul>{rows}</ul>", path="/unduhan"))


@router.get("/unduhan/{download_id}")
def download_file(download_id: str, db: Session = Depends(get_db)):
    result = downloads.increment_download_count(db, download_id)
    if not result.success:
        raise HTTPException(404, result.error)
    return RedirectResponse(result.data["file"], status_code=302)


# ── PPDB ─────────────────────────────────────────────────────────────────────

def _ppdb_page(db: Session, ok: Optional[str] = None, err: Optional[str] = None) -> str:
    period = ppdb.get_active_period(db)
    levels = "".join(
        f"<li>{escape(g.name)}{' (' + escape(g.age_range) + ')' if g.age_range else ''}</li>"
        for g in grade_levels.active_grade_levels(db)
    )
    if not ppdb.is_open(period):
        info = "<p>Pendaftaran PPDB sedang tidak dibuka.</p>"
        if period is not None:
            info += f"<p>Periode {escape(period.name)}: {_fmt(period.start_date)} – {_fmt(period.end_date)}</p>"
        return f"<h1>PPDB</h1>{_alert(ok, err)}{info}<ul>{levels}</ul>"
    reqs = "".join(f"<li>{escape(str(r))}</li>" for r in (period.requirements or []))
    form = """<form method="post" action="/ppdb">
<label>Nama lengkap siswa</label><input name="student_name" required>
<label>NISN</label><input name="nisn" maxlength="10">
<label>Tempat lahir</label><input name="birth_place" required>
<label>Tanggal lahir</label><input name="birth_date" type="date" required>
<label>Jenis kelamin</label><select name="gender"><option value="MALE">Laki-laki</option><option value="FEMALE">Perempuan</option></select>
<label>Agama</label><input name="religion">
<label>Alamat</label><textarea name="address" required></textarea>
<label>Asal sekolah</label><input name="previous_school">
<label>Nama ayah</label><input name="father_name">
<label>No. HP ayah</label><input name="father_phone">
<label>Nama ibu</label><input name="mother_name">
<label>No. HP ibu</label><input name="mother_phone">
<label>Email wali</label><input name="guardian_email" type="email">
<button class="btn" type="submit">Daftar</button>
</form>"""
    return (f"<h1>PPDB {escape(period.academic_year)}</h1>{_alert(ok, err)}"
            f"<p>{escape(period.name)}: {_fmt(period.start_date)} – {_fmt(period.end_date)}</p>"
            f"<h2>Jenjang</h2><ul>{levels}</ul><h2>Persyaratan</h2><ul>{reqs}</ul>{form}")


@router.get("/ppdb", response_class=HTMLResponse)
def ppdb_page(db: Session = Depends(get_db)):
    return HTMLResponse(layout(db, "PPDB", _ppdb_page(db), path="/ppdb"))


@router.post("/ppdb", response_class=HTMLResponse)
async def ppdb_submit(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    ctx = _public_ctx()
    result = ppdb.submit_registration(db, ctx, {k: v for k, v in form.items() if isinstance(v, str)})
    body = _ppdb_page(db, result.message if result.success else None, result.error)
    headers = {INVALIDATED_HEADER: ",".join(ctx.invalidated_paths)} if ctx.invalidated_paths else None
    return HTMLResponse(layout(db, "PPDB", body, path="/ppdb"), status_code=200 if result.success else 400, headers=headers)


# ── Contact ──────────────────────────────────────────────────────────────────

def _contact_page(db: Session, ok: Optional[str] = None, err: Optional[str] = None) -> str:
    profile = school_profile.get_school_profile(db)
    info = ""
    if profile is not None:
        info = "".join(f"<p>{escape(v)}</p>" for v in (profile.address, profile.phone, profile.email) if v)
    form = """<form method="post" action="/kontak">
<label>Nama</label><input name="name" required>
<label>Email</label><input name="email" type="email" required>
<label>No. Telepon</label><input name="phone">
<label>Subjek</label><input name="subject">
<label>Pesan</label><textarea name="message" required></textarea>
<button class="btn" type="submit">Kirim Pesan</button>
</form>"""
    return f"<h1>Kontak</h1>{_alert(ok, err)}{info}{form}"


@router.get("/kontak", response_class=HTMLResponse)
def contact_page(db: Session = Depends(get_db)):
    return HTMLResponse(layout(db, "Kontak", _contact_page(db), path="/kontak"))


@router.post("/kontak", response_class=HTMLResponse)
async def contact_submit(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    result = submit_contact_message(db, _public_ctx(), {k: v for k, v in form.items() if isinstance(v, str)})
    body = _contact_page(db, result.message if result.success else None, result.error)
    return HTMLResponse(layout(db, "Kontak", body, path="/kontak"), status_code=200 if result.success else 400)


# ── Maintenance, robots, sitemap ─────────────────────────────────────────────

@router.get("/maintenance", response_class=HTMLResponse)
def maintenance_page(db: Session = Depends(get_db)):
    site = settings.setting_text(db, "site_name", "Sekolah")
    profile = school_profile.get_school_profile(db)
    contact = ""
    if profile is not None:
        contact = " · ".join(escape(v) for v in (profile.email, profile.phone) if v)
    return HTMLResponse(f"""<!DOCTYPE html><html lang="id"><head>
<meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<meta name="robots" content="noindex"><title>Sedang Dalam Perbaikan — {escape(site)}</title>
<style>body{{font-family:'Segoe UI',sans-serif;background:#0f172a;color:#fff;display:flex;min-height:100vh;
align-items:center;justify-content:center;text-align:center;margin:0;padding:16px}}p{{color:#cbd5e1}}</style>
</head><body><main><h1>Sedang Dalam Perbaikan</h1>
<p>Kami sedang melakukan pemeliharaan terjadwal pada {escape(site)}. Kami akan segera kembali.
Terima kasih atas kesabaran Anda.</p><p>{contact}</p></main></body></html>""", status_code=503)


def _origin(request: Request) -> str:
    return config.site_url() or str(request.base_url).rstrip("/")


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots_txt(request: Request):
    return PlainTextResponse(
        "User-agent: *\nAllow: /\nDisallow: /admin/\nDisallow: /api/\n\n"
        f"Sitemap: {_origin(request)}/sitemap.xml\n"
    )


@router.get("/sitemap.xml")
def sitemap_xml(request: Request, db: Session = Depends(get_db)):
    origin = _origin(request)
    urls = []
    for e in sitemap.sitemap_entries(db):
        lastmod = f"<lastmod>{e.lastmod}</lastmod>" if e.lastmod else ""
        urls.append(f"<url><loc>{escape(origin + e.path)}</loc>{lastmod}"
                    f"<changefreq>{e.changefreq}</changefreq><priority>{e.priority:.1f}</priority></url>")
    xml = ('<?xml version="1.0" encoding="UTF-8"?>\n'
           '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
           + "".join(urls) + "</urlset>")
    return Response(xml, media_type="application/xml")


# ── Pages (catch-all, keep last) ─────────────────────────────────────────────

@router.get("/{slug}", response_class=HTMLResponse)
def page_detail(slug: str, db: Session = Depends(get_db)):
    page = pages.get_page_by_slug(db, slug)
    if page is None:
        raise HTTPException(404, "Halaman tidak ditemukan")
    return HTMLResponse(layout(db, page.seo_title or page.title, _blocks_html(db, page.content),
                               page.seo_desc or page.excerpt or "", path=f"/{slug}"))
