"""
Tests announcements: CRUD through Resource, toggling, the date window,
per-page targeting, and the bar on the public site.
"""
from datetime import timedelta

from sekolah_cms.models import AnnouncementDB
from sekolah_cms.services import announcements
from sekolah_cms.utils import utcnow


def _create(db, ctx, **extra):
    data = {"title": "Libur Semester", "content": "Sekolah libur mulai 20 Desember."}
    data.update(extra)
    return announcements.create_announcement(db, ctx, data)


class TestCrud:

    def test_create(self, db, editor):
        res = _create(db, editor, link="/agenda", link_text="Lihat agenda")
        assert res.success
        assert res.message == "Pengumuman berhasil dibuat"
        assert res.data["type"] == "info"
        assert "/" in editor.invalidated_paths

    def test_invalid_type(self, db, editor):
        assert _create(db, editor, type="urgent").error == "Tipe pengumuman tidak valid"
        assert db.query(AnnouncementDB).count() == 0

    def test_invalid_link(self, db, editor):
        assert _create(db, editor, link="javascript:alert(1)").error == "Link tidak valid"

    def test_end_before_start(self, db, editor):
        now = utcnow()
        res = _create(db, editor, start_date=now, end_date=now - timedelta(days=1))
        assert res.error == "Tanggal selesai harus setelah tanggal mulai"

    def test_update_and_delete(self, db, editor):
        aid = _create(db, editor).data["id"]
        res = announcements.update_announcement(db, editor, aid, {"type": "warning"})
        assert res.data["type"] == "warning"
        assert announcements.delete_announcement(db, editor, aid).message == "Pengumuman berhasil dihapus"
        assert announcements.get_announcement(db, aid) is None

    def test_update_missing(self, db, editor):
        assert announcements.update_announcement(db, editor, "ghost", {"title": "x"}).error == \
            "Pengumuman tidak ditemukan"

    def test_toggle(self, db, editor):
        aid = _create(db, editor).data["id"]
        res = announcements.toggle_announcement_status(db, editor, aid)
        assert res.data == {"is_active": False}
        assert res.message == "Pengumuman berhasil dinonaktifkan"
        assert announcements.list_announcements(db, is_active=True)["total"] == 0

    def test_requires_actor(self, db, anon):
        assert _create(db, anon).error == "Unauthorized"

    def test_reorder(self, db, editor):
        a = _create(db, editor, title="A").data["id"]
        b = _create(db, editor, title="B").data["id"]
        assert announcements.reorder_announcements(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0}]).success
        assert [x.title for x in announcements.active_announcements(db)] == ["B", "A"]


class TestActive:

    def test_date_window(self, db, editor):
        now = utcnow()
        _create(db, editor, title="Berjalan", start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))
        _create(db, editor, title="Nanti", start_date=now + timedelta(days=2))
        _create(db, editor, title="Lewat", end_date=now - timedelta(days=1))
        _create(db, editor, title="Terus")
        assert sorted(a.title for a in announcements.active_announcements(db)) == ["Berjalan", "Terus"]
        later = now + timedelta(days=3)
        assert sorted(a.title for a in announcements.active_announcements(db, now=later)) == ["Nanti", "Terus"]

    def test_inactive_hidden(self, db, editor):
        _create(db, editor, is_active=False)
        assert announcements.active_announcements(db) == []

    def test_show_on_pages(self, db, editor):
        _create(db, editor, title="Semua")
        _create(db, editor, title="PPDB", show_on_pages=["/ppdb"])
        assert sorted(a.title for a in announcements.active_announcements(db, "/ppdb")) == ["PPDB", "Semua"]
        assert [a.title for a in announcements.active_announcements(db, "/berita")] == ["Semua"]


class TestPublicBar:

    def test_bar_on_targeted_page_only(self, client, db, editor):
        _create(db, editor, title="Pendaftaran Dibuka", content="Daftar <segera>", show_on_pages=["/ppdb"],
                type="success")
        r = client.get("/ppdb")
        assert "Pendaftaran Dibuka" in r.text
        assert "Daftar &lt;segera&gt;" in r.text
        assert "announcement--success" in r.text
        assert "Pendaftaran Dibuka" not in client.get("/kontak").text

    def test_admin_routes(self, client, db):
        from conftest import make_user
        make_user(db, "EDITOR", email="editor@sekolah.sch.id", password="rahasia123")
        client.post("/api/auth/login", json={"email": "editor@sekolah.sch.id", "password": "rahasia123"})
        r = client.post("/api/admin/announcements", json={"title": "Rapat", "content": "Rapat wali murid."})
        assert r.status_code == 200
        aid = r.json()["data"]["id"]
        assert client.get(f"/api/admin/announcements/{aid}").json()["title"] == "Rapat"
        assert client.post(f"/api/admin/announcements/{aid}/toggle").json()["data"] == {"is_active": False}
        assert client.get("/api/admin/announcements", params={"is_active": False}).json()["total"] == 1
        assert client.get("/api/admin/announcements/ghost").status_code == 404
