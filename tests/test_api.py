"""
Tests the HTTP layer: auth cookie, role guards, JSON result mapping,
invalidation header, page builder endpoints, public site.
"""
import io
from datetime import timedelta

import pytest
from PIL import Image

from conftest import make_user
from sekolah_cms.models import CategoryDB, ContactMessageDB, PageDB, PostDB, PPDBPeriodDB, SettingDB
from sekolah_cms.utils import utcnow

PASSWORD = "rahasia123"


def _login(client, email):
    r = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return r


@pytest.fixture
def editor_client(client, db):
    make_user(db, "EDITOR", email="editor@sekolah.sch.id", password=PASSWORD)
    _login(client, "editor@sekolah.sch.id")
    return client


@pytest.fixture
def admin_client(client, db):
    make_user(db, "ADMIN", email="admin@sekolah.sch.id", password=PASSWORD)
    _login(client, "admin@sekolah.sch.id")
    return client


class TestHealthAndAuth:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_login_sets_cookie(self, client, db):
        make_user(db, "EDITOR", email="editor@sekolah.sch.id", password=PASSWORD)
        r = _login(client, "editor@sekolah.sch.id")
        assert r.json()["success"] is True
        assert "session" in r.cookies
        me = client.get("/api/auth/me").json()
        assert me["authenticated"] is True
        assert me["role"] == "EDITOR"

    def test_bad_login(self, client, db):
        make_user(db, "EDITOR", email="editor@sekolah.sch.id", password=PASSWORD)
        r = client.post("/api/auth/login", json={"email": "editor@sekolah.sch.id", "password": "salah-sekali"})
        assert r.status_code == 400
        assert r.json() == {"success": False, "error": "Email atau password salah"}

    def test_me_anonymous(self, client):
        r = client.get("/api/auth/me")
        assert r.status_code == 401

    def test_bearer_token(self, client, db):
        make_user(db, "EDITOR", email="editor@sekolah.sch.id", password=PASSWORD)
        token = _login(client, "editor@sekolah.sch.id").json()["data"]["token"]
        client.cookies.clear()
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.json()["authenticated"] is True

    def test_form_login_redirects(self, client, db):
        make_user(db, "EDITOR", email="editor@sekolah.sch.id", password=PASSWORD)
        r = client.post("/admin/login", data={"email": "editor@sekolah.sch.id", "password": PASSWORD},
                        follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/admin"

    def test_form_login_error(self, client):
        r = client.post("/admin/login", data={"email": "x@sekolah.sch.id", "password": "salah-sekali"},
                        follow_redirects=False)
        assert r.headers["location"].startswith("/admin/login?error=")

    def test_login_page_escapes_error(self, client):
        r = client.get("/admin/login", params={"error": "<b>x</b>"})
        assert "&lt;b&gt;" in r.text


class TestGuards:

    def test_no_session_forbidden(self, client):
        r = client.get("/api/admin/pages")
        assert r.status_code == 403

    def test_browser_redirected_to_login(self, client):
        r = client.get("/admin", headers={"accept": "text/html"}, follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/admin/login"

    def test_editor_cannot_manage_users(self, editor_client):
        assert editor_client.get("/api/admin/users").status_code == 403

    def test_admin_lists_users(self, admin_client):
        r = admin_client.get("/api/admin/users")
        assert r.status_code == 200
        assert r.json()["total"] == 1


class TestContentApi:

    def test_create_page_sets_invalidation_header(self, editor_client):
        r = editor_client.post("/api/admin/pages", json={"title": "Profil", "slug": "profil", "status": "PUBLISHED"})
        assert r.status_code == 200
        assert r.json()["data"]["slug"] == "profil"
        assert "/profil" in r.headers["X-Invalidated-Paths"].split(",")

    def test_failure_is_400(self, editor_client):
        editor_client.post("/api/admin/pages", json={"title": "Profil", "slug": "profil"})
        r = editor_client.post("/api/admin/pages", json={"title": "Profil", "slug": "profil"})
        assert r.status_code == 400
        assert r.json()["error"] == "Slug sudah digunakan"

    def test_get_missing_page(self, editor_client):
        assert editor_client.get("/api/admin/pages/ghost").status_code == 404

    def test_menu_reorder(self, editor_client):
        menu_id = editor_client.post("/api/admin/menus", json={"name": "Header", "location": "header"}).json()["data"]["id"]
        a = editor_client.post("/api/admin/menu-items", json={"menu_id": menu_id, "label": "A"}).json()["data"]["id"]
        b = editor_client.post("/api/admin/menu-items", json={"menu_id": menu_id, "label": "B"}).json()["data"]["id"]
        r = editor_client.put("/api/admin/menu-items/reorder", json=[{"id": a, "order": 1}, {"id": b, "order": 0}])
        assert r.status_code == 200
        items = editor_client.get(f"/api/admin/menus/{menu_id}").json()["items"]
        assert [i["label"] for i in items] == ["B", "A"]

    def test_staff_routes(self, editor_client):
        r = editor_client.post("/api/admin/staff", json={"name": "Bu Sari", "position": "Guru"})
        sid = r.json()["data"]["id"]
        assert editor_client.post(f"/api/admin/staff/{sid}/toggle").json()["data"] == {"is_active": False}
        assert editor_client.get("/api/admin/staff").json()["total"] == 1

    def test_media_upload(self, editor_client):
        buf = io.BytesIO()
        Image.new("RGB", (8, 6)).save(buf, format="PNG")
        r = editor_client.post("/api/admin/media", files={"file": ("foto.png", buf.getvalue(), "image/png")},
                               data={"folder": "guru"})
        assert r.status_code == 200, r.text
        assert r.json()["data"]["width"] == 8
        listing = editor_client.get("/api/admin/media").json()
        assert listing["folders"] == ["guru"]

    def test_settings_need_admin(self, editor_client):
        r = editor_client.put("/api/admin/settings/general", json={"site_name": {"value": "SD Maju"}})
        assert r.status_code == 403


class TestPageBuilderApi:

    def test_catalogue(self, editor_client):
        blocks = editor_client.get("/api/admin/page-builder/blocks").json()
        by_type = {b["type"]: b for b in blocks}
        assert by_type["staff-grid"]["embed"] is True
        assert by_type["heading"]["embed"] is False

    def test_preview_applies_ops(self, editor_client):
        r = editor_client.post("/api/admin/page-builder/preview", json={
            "content": [], "ops": [{"op": "insert", "type": "heading"}],
        })
        assert r.status_code == 200
        body = r.json()
        assert body["content"][0]["type"] == "heading"
        assert "block--heading" in body["html"]

    def test_preview_rejects_bad_op(self, editor_client):
        r = editor_client.post("/api/admin/page-builder/preview", json={"content": [], "ops": [{"op": "explode"}]})
        assert r.status_code == 400


class TestPublicSite:

    def test_published_page(self, client, db):
        db.add(PageDB(title="Profil", slug="profil", status="PUBLISHED", published_at=utcnow(),
                      content=[{"id": "h", "type": "heading", "data": {"text": "Sejarah Sekolah"}}]))
        db.commit()
        r = client.get("/profil")
        assert r.status_code == 200
        assert "Sejarah Sekolah" in r.text

    def test_draft_page_404(self, client, db):
        db.add(PageDB(title="Draft", slug="draft", status="DRAFT", content=[]))
        db.commit()
        assert client.get("/draft").status_code == 404

    def test_home_default_sections(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "Berita terbaru" in r.text

    def test_contact_submit(self, client, db):
        r = client.post("/kontak", data={"name": "Budi", "email": "budi@sekolah.sch.id",
                                         "message": "Mohon info jadwal PPDB."})
        assert r.status_code == 200
        assert "Pesan berhasil dikirim" in r.text
        assert db.query(ContactMessageDB).count() == 1

    def test_contact_invalid(self, client):
        r = client.post("/kontak", data={"name": "B", "email": "budi@sekolah.sch.id", "message": "Mohon info jadwal"})
        assert r.status_code == 400

    def test_ppdb_closed(self, client):
        r = client.post("/ppdb", data={"student_name": "Ahmad"})
        assert r.status_code == 400
        assert "Pendaftaran PPDB sedang tidak dibuka" in r.text

    def test_ppdb_submit(self, client, db):
        now = utcnow()
        db.add(PPDBPeriodDB(name="PPDB 2025", academic_year="2025/2026", is_active=True,
                            start_date=now - timedelta(days=1), end_date=now + timedelta(days=30)))
        db.commit()
        r = client.post("/ppdb", data={
            "student_name": "Ahmad Fauzi", "birth_place": "Bandung", "birth_date": "2018-05-01",
            "gender": "MALE", "address": "Jl. Merdeka No. 1",
        })
        assert r.status_code == 200
        assert "Nomor pendaftaran: PPDB" in r.text
        assert r.headers["X-Invalidated-Paths"] == "/admin/ppdb/registrations"

    def test_download_redirect(self, editor_client):
        did = editor_client.post("/api/admin/downloads", json={"title": "Kalender", "file": "/uploads/k.pdf"}).json()["data"]["id"]
        r = editor_client.get(f"/unduhan/{did}", follow_redirects=False)
        assert r.status_code == 302
        assert r.headers["location"] == "/uploads/k.pdf"
        assert editor_client.get("/unduhan/ghost", follow_redirects=False).status_code == 404

    def test_unpublished_download_404(self, editor_client):
        did = editor_client.post("/api/admin/downloads", json={"title": "Soal", "file": "/uploads/soal.pdf",
                                                              "is_published": False}).json()["data"]["id"]
        assert editor_client.get(f"/unduhan/{did}", follow_redirects=False).status_code == 404
        assert editor_client.get("/api/admin/downloads").json()["items"][0]["download_count"] == 0


class TestMaintenance:

    @pytest.fixture
    def maintenance_on(self, db):
        db.add(SettingDB(key="maintenance_mode", value=True, group="general"))
        db.commit()

    def test_visitor_redirected(self, client, maintenance_on):
        r = client.get("/berita", follow_redirects=False)
        assert r.status_code == 307
        assert r.headers["location"] == "/maintenance"
        page = client.get("/berita")
        assert page.status_code == 503
        assert "Sedang Dalam Perbaikan" in page.text

    def test_signed_in_user_passes(self, editor_client, maintenance_on):
        assert editor_client.get("/berita", follow_redirects=False).status_code == 200

    def test_api_admin_and_robots_stay_open(self, client, maintenance_on):
        assert client.get("/health").status_code == 200
        assert client.get("/robots.txt").status_code == 200
        assert client.post("/api/auth/login", json={"email": "x@y.id", "password": "salah"}).status_code != 307
        assert client.get("/admin/login", follow_redirects=False).status_code != 307

    def test_off_serves_normally(self, client, db):
        db.add(SettingDB(key="maintenance_mode", value={"value": False}, group="general"))
        db.commit()
        assert client.get("/berita", follow_redirects=False).status_code == 200


class TestCrawlers:

    def test_robots(self, client, monkeypatch):
        monkeypatch.setenv("SITE_URL", "https://smpn1.sch.id/")
        r = client.get("/robots.txt")
        assert r.headers["content-type"].startswith("text/plain")
        assert "Disallow: /admin/" in r.text
        assert "Disallow: /api/" in r.text
        assert "Sitemap: https://smpn1.sch.id/sitemap.xml" in r.text

    def test_sitemap_lists_published_only(self, client, db):
        now = utcnow()
        cat = CategoryDB(name="Prestasi", slug="prestasi")
        db.add(cat); db.flush()
        db.add_all([
            PageDB(title="Profil", slug="profil", status="PUBLISHED", published_at=now, content=[]),
            PageDB(title="Draft", slug="rahasia", status="DRAFT", content=[]),
            PostDB(title="Juara", slug="juara-olimpiade", status="PUBLISHED", published_at=now, content=[],
                   category_id=cat.id),
            PostDB(title="Belum", slug="belum-terbit", status="DRAFT", content=[], category_id=cat.id),
        ])
        db.commit()
        r = client.get("/sitemap.xml")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("application/xml")
        assert "<loc>http://testserver/profil</loc>" in r.text
        assert "<loc>http://testserver/berita/juara-olimpiade</loc>" in r.text
        assert "<loc>http://testserver/ppdb</loc>" in r.text
        assert "rahasia" not in r.text
        assert "belum-terbit" not in r.text
