"""
Bootstrap data: admin account, school profile, categories, menus, pages and
sample school content. Every row is upserted on its natural key, so running
the seed again leaves row counts unchanged.

Usage: SEED_ADMIN_EMAIL=... SEED_ADMIN_PASSWORD=... python -m sekolah_cms.seed
"""
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .database import init_db, new_session
from .models import (
    CategoryDB, FacilityDB, GradeLevelDB, MenuDB, MenuItemDB, PageDB, ProgramDB, ProgramType, Role,
    SchoolProfileDB, SettingDB, StaffDB, Status, TestimonialDB, UserDB,
)
from .security import hash_password
from .utils import utcnow

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class SeedError(Exception):
    pass


# ── Data ───────────────────────────────────────────────────────────────────────

PROFILE = {
    "name": "Sekolah Contoh",
    "tagline": "Mendidik Generasi Unggul dan Berkarakter",
    "school_level": "SD",
    "email": "info@sekolah.sch.id",
    "phone": "(021) 1234567",
    "whatsapp": "6281234567890",
    "address": "Jl. Pendidikan No. 1, Jakarta",
    "latitude": -6.2088,
    "longitude": 106.8456,
    "vision": "Menjadi sekolah unggulan yang menghasilkan lulusan berkarakter, cerdas, dan berwawasan global.",
    "mission": "1. Menyelenggarakan pendidikan berkualitas\n2. Mengembangkan karakter siswa\n"
               "3. Memfasilitasi pengembangan bakat dan minat",
    "accreditation": "A",
    "founded_year": 2000,
    "social_media": {
        "facebook": "https://facebook.com/sekolahcontoh",
        "instagram": "https://instagram.com/sekolahcontoh",
        "youtube": "https://youtube.com/@sekolahcontoh",
    },
}

CATEGORIES = [
    {"name": "Berita",     "slug": "berita",     "description": "Berita terbaru sekolah",     "color": "#3B82F6"},
    {"name": "Pengumuman", "slug": "pengumuman", "description": "Pengumuman resmi sekolah",   "color": "#EF4444"},
    {"name": "Kegiatan",   "slug": "kegiatan",   "description": "Kegiatan dan acara sekolah", "color": "#10B981"},
    {"name": "Prestasi",   "slug": "prestasi",   "description": "Prestasi siswa dan sekolah", "color": "#F59E0B"},
    {"name": "Artikel",    "slug": "artikel",    "description": "Artikel edukatif",           "color": "#8B5CF6"},
]

MENUS = {
    "header": ("Menu Utama", [
        {"label": "Beranda", "url": "/"},
        {"label": "Profil", "type": "dropdown", "children": [
            {"label": "Profil Sekolah", "type": "page", "page_slug": "profil"},
            {"label": "Visi dan Misi",  "type": "page", "page_slug": "visi-misi"},
            {"label": "Sejarah",        "type": "page", "page_slug": "sejarah"},
        ]},
        {"label": "Berita",  "url": "/berita"},
        {"label": "Agenda",  "url": "/agenda"},
        {"label": "Galeri",  "url": "/galeri"},
        {"label": "PPDB",    "url": "/ppdb"},
        {"label": "Kontak",  "url": "/kontak"},
    ]),
    "footer": ("Menu Footer", [
        {"label": "Profil Sekolah", "type": "page", "page_slug": "profil"},
        {"label": "Unduhan",        "url": "/unduhan"},
        {"label": "Kontak",         "url": "/kontak"},
    ]),
}


def _heading(text: str) -> Dict[str, Any]:
    return {"id": "h1", "type": "heading", "data": {"level": 1, "text": text, "align": "center"}}


PAGES = [
    {"title": "Profil Sekolah", "slug": "profil", "template": "profile",
     "excerpt": "Mengenal lebih dekat tentang sekolah kami",
     "content": [_heading("Profil Sekolah"),
                 {"id": "p1", "type": "paragraph", "data": {"text": "Selamat datang di halaman profil sekolah kami."}}]},
    {"title": "Visi dan Misi", "slug": "visi-misi", "excerpt": "Visi dan misi sekolah kami",
     "content": [_heading("Visi dan Misi")]},
    {"title": "Sejarah", "slug": "sejarah", "excerpt": "Sejarah berdirinya sekolah kami",
     "content": [_heading("Sejarah Sekolah")]},
]

STAFF = [
    {"name": "Dr. Budi Santoso, M.Pd", "position": "Kepala Sekolah", "department": "Pimpinan",
     "bio": "Memiliki pengalaman lebih dari 20 tahun di bidang pendidikan.", "is_teacher": False},
    {"name": "Siti Aminah, S.Pd", "position": "Wakil Kepala Sekolah Bidang Kurikulum",
     "department": "Pimpinan", "is_teacher": True},
    {"name": "Ahmad Hidayat, S.Pd", "position": "Guru Matematika", "department": "Guru",
     "is_teacher": True, "subjects": ["Matematika"]},
    {"name": "Dewi Lestari, S.Pd", "position": "Guru Bahasa Indonesia", "department": "Guru",
     "is_teacher": True, "subjects": ["Bahasa Indonesia"]},
]

PROGRAMS = [
    {"name": "Kurikulum Merdeka", "slug": "kurikulum-merdeka", "type": ProgramType.CURRICULUM.value,
     "description": "Implementasi Kurikulum Merdeka dengan pendekatan berpusat pada siswa."},
    {"name": "Pramuka", "slug": "pramuka", "type": ProgramType.EXTRACURRICULAR.value,
     "description": "Kegiatan kepramukaan untuk membangun karakter dan kepemimpinan."},
    {"name": "Paduan Suara", "slug": "paduan-suara", "type": ProgramType.EXTRACURRICULAR.value,
     "description": "Mengembangkan bakat seni musik dan vokal siswa.", "order": 1},
    {"name": "Program Tahfidz", "slug": "program-tahfidz", "type": ProgramType.FEATURED.value,
     "description": "Program unggulan menghafal Al-Quran bagi siswa."},
]

FACILITIES = [
    {"name": "Ruang Kelas Ber-AC", "slug": "ruang-kelas", "icon": "School",
     "description": "Ruang kelas nyaman dengan AC dan proyektor interaktif."},
    {"name": "Perpustakaan", "slug": "perpustakaan", "icon": "BookOpen",
     "description": "Perpustakaan lengkap dengan koleksi buku yang beragam."},
    {"name": "Laboratorium Komputer", "slug": "lab-komputer", "icon": "Monitor",
     "description": "Lab komputer modern dengan internet berkecepatan tinggi."},
    {"name": "Lapangan Olahraga", "slug": "lapangan-olahraga", "icon": "Dumbbell",
     "description": "Lapangan multifungsi untuk berbagai kegiatan olahraga."},
    {"name": "Masjid/Musholla", "slug": "masjid", "icon": "Building",
     "description": "Tempat ibadah yang nyaman untuk siswa dan guru."},
]

TESTIMONIALS = [
    {"name": "Ahmad Fauzi", "role": "Alumni 2023", "rating": 5,
     "content": "Sekolah ini memberikan pendidikan terbaik dan membentuk karakter saya menjadi lebih baik."},
    {"name": "Ibu Sari", "role": "Orang Tua Siswa", "rating": 5,
     "content": "Anak saya sangat senang bersekolah di sini. Guru-gurunya ramah dan profesional."},
]

GRADE_LEVELS = [
    {"name": f"Kelas {n}", "slug": f"kelas-{n}", "min_age": n + 5, "max_age": n + 6, "age_range": f"{n + 5}-{n + 6} tahun"}
    for n in range(1, 7)
]

SETTINGS = [
    ("site_name",        "Sekolah Contoh",                                 "general"),
    ("site_tagline",     "Mendidik Generasi Unggul",                       "general"),
    ("site_language",    "id",                                             "general"),
    ("meta_title",       "Sekolah Contoh - Website Resmi",                 "seo"),
    ("meta_description", "Website resmi Sekolah Contoh. Mendidik generasi unggul dan berkarakter.", "seo"),
    ("primary_color",    "#3B82F6",                                        "theme"),
    ("secondary_color",  "#10B981",                                        "theme"),
]


# ── Upsert helpers ─────────────────────────────────────────────────────────────

def _get_or_create(db: Session, model, keys: Dict[str, Any], values: Dict[str, Any]):
    """Existing row matching `keys`, else a new one built from keys + values. Existing rows are not modified."""
    obj = db.query(model).filter_by(**keys).first()
    if obj is None:
        obj = model(**keys, **values)
        db.add(obj)
        db.flush()
    return obj


def _seed_menu_items(db: Session, menu: MenuDB, items: List[Dict[str, Any]], parent_id: Optional[str] = None):
    for order, item in enumerate(items):
        item = dict(item)
        children = item.pop("children", [])
        label = item.pop("label")
        row = _get_or_create(db, MenuItemDB, {"menu_id": menu.id, "parent_id": parent_id, "label": label},
                             {"order": order, "type": item.pop("type", "link"), **item})
        _seed_menu_items(db, menu, children, row.id)


# ── Seed ───────────────────────────────────────────────────────────────────────

def check_credentials(email: Optional[str], password: Optional[str]):
    if not email or not password:
        raise SeedError("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SeedError(f"SEED_ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters")


def run_seed(db: Session, email: Optional[str], password: Optional[str]) -> Dict[str, int]:
    """Seed everything in one transaction. Raises SeedError before any write on bad credentials."""
    check_credentials(email, password)
    email = email.strip().lower()
    now = utcnow()

    admin = _get_or_create(db, UserDB, {"email": email}, {
        "name": "Administrator", "password": hash_password(password),
        "role": Role.SUPERADMIN.value, "is_active": True,
    })
    log.info("Admin user: %s", admin.email)

    _get_or_create(db, SchoolProfileDB, {"id": "default"}, PROFILE)

    for i, c in enumerate(CATEGORIES):
        _get_or_create(db, CategoryDB, {"slug": c["slug"]}, {**{k: v for k, v in c.items() if k != "slug"}, "order": i})

    for location, (name, items) in MENUS.items():
        menu = _get_or_create(db, MenuDB, {"location": location}, {"name": name})
        _seed_menu_items(db, menu, items)

    for i, p in enumerate(PAGES):
        _get_or_create(db, PageDB, {"slug": p["slug"]}, {
            **{k: v for k, v in p.items() if k != "slug"},
            "status": Status.PUBLISHED.value, "published_at": now, "author_id": admin.id, "order": i,
        })

    for i, s in enumerate(STAFF):
        _get_or_create(db, StaffDB, {"name": s["name"]}, {**{k: v for k, v in s.items() if k != "name"}, "order": i})

    for p in PROGRAMS:
        _get_or_create(db, ProgramDB, {"slug": p["slug"]}, {k: v for k, v in p.items() if k != "slug"})

    for i, f in enumerate(FACILITIES):
        _get_or_create(db, FacilityDB, {"slug": f["slug"]}, {**{k: v for k, v in f.items() if k != "slug"}, "order": i})

    for i, t in enumerate(TESTIMONIALS):
        _get_or_create(db, TestimonialDB, {"name": t["name"], "role": t["role"]},
                       {"content": t["content"], "rating": t["rating"], "order": i})

    for i, g in enumerate(GRADE_LEVELS):
        _get_or_create(db, GradeLevelDB, {"slug": g["slug"]}, {**{k: v for k, v in g.items() if k != "slug"}, "order": i})

    for key, value, group in SETTINGS:
        row = _get_or_create(db, SettingDB, {"key": key}, {"value": {"value": value}, "group": group})
        row.value = {"value": value}

    db.commit()

    counts = {
        "users": db.query(UserDB).count(),
        "categories": db.query(CategoryDB).count(),
        "menu_items": db.query(MenuItemDB).count(),
        "pages": db.query(PageDB).count(),
        "staff": db.query(StaffDB).count(),
        "programs": db.query(ProgramDB).count(),
        "facilities": db.query(FacilityDB).count(),
        "testimonials": db.query(TestimonialDB).count(),
        "grade_levels": db.query(GradeLevelDB).count(),
        "settings": db.query(SettingDB).count(),
    }
    log.info("Seed done: %s", ", ".join(f"{k}={v}" for k, v in counts.items()))
    return counts


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
    email = os.getenv("SEED_ADMIN_EMAIL")
    password = os.getenv("SEED_ADMIN_PASSWORD")
    try:
        check_credentials(email, password)
    except SeedError as e:
        log.error("Seed aborted: %s", e)
        return 1

    init_db()
    db = new_session()
    try:
        run_seed(db, email, password)
    except Exception:
        db.rollback()
        log.exception("Seed failed")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
