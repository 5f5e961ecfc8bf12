"""
Tests pages service: create/update/delete/duplicate/reorder, publishing and
slug rules, parent guard.
"""
from datetime import datetime
from unittest.mock import patch

from sekolah_cms.models import PageDB
from sekolah_cms.services import pages


def _create(db, ctx, **kw):
    data = {"title": "Profil Sekolah", "slug": "profil", **kw}
    return pages.create_page(db, ctx, data)


class TestCreate:

    def test_profil_page(self, db, editor):
        res = _create(db, editor, status="PUBLISHED",
                      content=[{"id": "h1", "type": "heading", "data": {"text": "Profil"}}])
        assert res.success
        assert res.data["slug"] == "profil"
        assert res.data["published_at"] is not None
        assert "/profil" in editor.invalidated_paths
        assert pages.get_page_by_slug(db, "profil") is not None

    def test_draft_has_no_published_at(self, db, editor):
        res = _create(db, editor)
        assert res.data["status"] == "DRAFT"
        assert res.data["published_at"] is None
        assert pages.get_page_by_slug(db, "profil") is None

    def test_requires_actor(self, db, anon):
        res = _create(db, anon)
        assert not res.success
        assert res.error == "Unauthorized"
        assert db.query(PageDB).count() == 0

    def test_duplicate_slug_writes_nothing(self, db, editor):
        _create(db, editor)
        res = _create(db, editor, title="Lain")
        assert not res.success
        assert res.error == "Slug sudah digunakan"
        assert db.query(PageDB).count() == 1

    def test_invalid_slug(self, db, editor):
        res = _create(db, editor, slug="Profil Sekolah")
        assert not res.success
        assert db.query(PageDB).count() == 0

    def test_malformed_content_entries_dropped(self, db, editor):
        res = _create(db, editor, content=[{"id": "a", "type": "heading", "data": {}}, {"type": "x"}])
        assert [b["id"] for b in res.data["content"]] == ["a"]

    def test_unknown_parent(self, db, editor):
        res = _create(db, editor, parent_id="nope")
        assert not res.success
        assert res.error == "Halaman induk tidak ditemukan"


class TestPublishing:

    def test_unpublish_clears_timestamp(self, db, editor):
        page_id = _create(db, editor, status="PUBLISHED").data["id"]
        res = pages.update_page(db, editor, page_id, {"status": "DRAFT"})
        assert res.success
        assert res.data["published_at"] is None

    def test_republish_keeps_existing_timestamp_on_edit(self, db, editor):
        created = _create(db, editor, status="PUBLISHED").data
        res = pages.update_page(db, editor, created["id"], {"title": "Profil Baru"})
        assert res.data["published_at"] == created["published_at"]

    def test_republish_gets_fresh_timestamp(self, db, editor):
        created = _create(db, editor, status="PUBLISHED").data
        pages.update_page(db, editor, created["id"], {"status": "ARCHIVED"})
        with patch("sekolah_cms.services._crud.utcnow", return_value=datetime(2030, 1, 1)):
            res = pages.update_page(db, editor, created["id"], {"status": "PUBLISHED"})
        assert res.data["published_at"] == "2030-01-01T00:00:00"
        assert res.data["published_at"] != created["published_at"]

    def test_publish_later(self, db, editor):
        page_id = _create(db, editor).data["id"]
        res = pages.update_page(db, editor, page_id, {"status": "PUBLISHED"})
        assert res.data["published_at"] is not None


class TestUpdate:

    def test_slug_change_invalidates_both_paths(self, db, editor):
        page_id = _create(db, editor).data["id"]
        editor.invalidated_paths.clear()
        res = pages.update_page(db, editor, page_id, {"slug": "tentang-kami"})
        assert res.success
        assert "/profil" in editor.invalidated_paths
        assert "/tentang-kami" in editor.invalidated_paths

    def test_slug_taken_by_other(self, db, editor):
        _create(db, editor)
        other = _create(db, editor, title="Visi", slug="visi-misi").data["id"]
        res = pages.update_page(db, editor, other, {"slug": "profil"})
        assert res.error == "Slug sudah digunakan"
        assert db.get(PageDB, other).slug == "visi-misi"

    def test_self_parent_rejected(self, db, editor):
        page_id = _create(db, editor).data["id"]
        res = pages.update_page(db, editor, page_id, {"parent_id": page_id})
        assert not res.success

    def test_move_under_own_child_rejected(self, db, editor):
        parent = _create(db, editor).data["id"]
        child = _create(db, editor, title="Sejarah", slug="sejarah", parent_id=parent).data["id"]
        res = pages.update_page(db, editor, parent, {"parent_id": child})
        assert res.error == "Halaman tidak dapat dipindahkan ke dalam sub-halamannya sendiri"
        db.expire_all()
        assert db.get(PageDB, parent).parent_id is None
        assert pages.delete_page(db, editor, child).success
        assert pages.delete_page(db, editor, parent).success

    def test_not_found(self, db, editor):
        res = pages.update_page(db, editor, "missing", {"title": "x"})
        assert res.error == "Halaman tidak ditemukan"


class TestDelete:

    def test_blocked_by_children(self, db, editor):
        parent = _create(db, editor).data["id"]
        _create(db, editor, title="Sejarah", slug="sejarah", parent_id=parent)
        _create(db, editor, title="Visi", slug="visi-misi", parent_id=parent)
        res = pages.delete_page(db, editor, parent)
        assert not res.success
        assert res.error == "Halaman memiliki 2 sub-halaman. Hapus atau pindahkan terlebih dahulu."
        assert db.get(PageDB, parent) is not None

    def test_delete_leaf(self, db, editor):
        page_id = _create(db, editor).data["id"]
        assert pages.delete_page(db, editor, page_id).success
        assert db.query(PageDB).count() == 0


class TestDuplicate:

    def test_copy_slugs(self, db, editor):
        src = _create(db, editor, status="PUBLISHED").data["id"]
        first = pages.duplicate_page(db, editor, src)
        second = pages.duplicate_page(db, editor, src)
        assert first.data["slug"] == "profil-copy"
        assert second.data["slug"] == "profil-copy-2"
        assert first.data["title"] == "Profil Sekolah (Copy)"
        assert first.data["status"] == "DRAFT"
        assert first.data["published_at"] is None


class TestReorder:

    def test_reorder(self, db, editor):
        a = _create(db, editor, title="A", slug="a").data["id"]
        b = _create(db, editor, title="B", slug="b").data["id"]
        res = pages.reorder_pages(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0}])
        assert res.success
        assert db.get(PageDB, a).order == 1
        assert db.get(PageDB, b).order == 0

    def test_unknown_id_aborts(self, db, editor):
        a = _create(db, editor, title="A", slug="a").data["id"]
        res = pages.reorder_pages(db, editor, [{"id": a, "order": 5}, {"id": "ghost", "order": 0}])
        assert not res.success
        assert "ghost" in res.error
        assert db.get(PageDB, a).order == 0

    def test_commit_failure_rolls_back(self, db, editor):
        a = _create(db, editor, title="A", slug="a").data["id"]
        with patch.object(db, "commit", side_effect=RuntimeError("disk full")):
            res = pages.reorder_pages(db, editor, [{"id": a, "order": 7}])
        assert not res.success
        assert res.error == "Gagal mengubah urutan halaman"
        db.expire_all()
        assert db.get(PageDB, a).order == 0


class TestReads:

    def test_list_search_and_paginate(self, db, editor):
        for i in range(12):
            _create(db, editor, title=f"Halaman {i}", slug=f"halaman-{i}")
        out = pages.list_pages(db, page=2, limit=5)
        assert out["total"] == 12
        assert out["total_pages"] == 3
        assert len(out["items"]) == 5
        assert pages.list_pages(db, search="Halaman 11")["total"] == 1

    def test_select_options(self, db, editor):
        _create(db, editor)
        opts = pages.pages_for_select(db)
        assert opts[0]["slug"] == "profil"
        assert set(opts[0]) == {"id", "title", "slug", "parent_id"}
