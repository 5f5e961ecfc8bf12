"""
Tests posts, categories and tags.
"""
from sekolah_cms.models import PostDB
from sekolah_cms.services import posts


def _category(db, ctx, name="Berita Sekolah", slug="berita-sekolah"):
    return posts.create_category(db, ctx, {"name": name, "slug": slug}).data["id"]


def _tag(db, ctx, name):
    return posts.create_tag(db, ctx, {"name": name, "slug": name.lower()}).data["id"]


class TestPosts:

    def test_create_with_tags(self, db, editor):
        cat = _category(db, editor)
        t1, t2 = _tag(db, editor, "Lomba"), _tag(db, editor, "Juara")
        res = posts.create_post(db, editor, {
            "title": "Juara Lomba Sains", "slug": "juara-lomba-sains",
            "category_id": cat, "tag_ids": [t1, t2], "status": "PUBLISHED",
        })
        assert res.success
        assert res.data["category"]["slug"] == "berita-sekolah"
        assert {t["slug"] for t in res.data["tags"]} == {"lomba", "juara"}
        assert res.data["published_at"] is not None
        assert "/berita/juara-lomba-sains" in editor.invalidated_paths

    def test_unknown_category(self, db, editor):
        res = posts.create_post(db, editor, {"title": "X", "slug": "x", "category_id": "nope"})
        assert res.error == "Kategori tidak ditemukan"
        assert db.query(PostDB).count() == 0

    def test_unknown_tag(self, db, editor):
        cat = _category(db, editor)
        res = posts.create_post(db, editor, {"title": "X", "slug": "x", "category_id": cat, "tag_ids": ["ghost"]})
        assert res.error == "Tag tidak ditemukan"

    def test_replace_tags(self, db, editor):
        cat = _category(db, editor)
        t1, t2 = _tag(db, editor, "Lomba"), _tag(db, editor, "Juara")
        post_id = posts.create_post(db, editor, {"title": "X", "slug": "x", "category_id": cat,
                                                 "tag_ids": [t1]}).data["id"]
        res = posts.update_post(db, editor, post_id, {"tag_ids": [t2]})
        assert [t["id"] for t in res.data["tags"]] == [t2]

    def test_toggle_featured(self, db, editor):
        cat = _category(db, editor)
        post_id = posts.create_post(db, editor, {"title": "X", "slug": "x", "category_id": cat}).data["id"]
        assert posts.toggle_post_featured(db, editor, post_id).data == {"is_featured": True}
        assert posts.toggle_post_featured(db, editor, post_id).data == {"is_featured": False}

    def test_published_listing_by_category(self, db, editor):
        cat = _category(db, editor)
        other = _category(db, editor, "Pengumuman", "pengumuman")
        posts.create_post(db, editor, {"title": "A", "slug": "a", "category_id": cat, "status": "PUBLISHED"})
        posts.create_post(db, editor, {"title": "B", "slug": "b", "category_id": other, "status": "PUBLISHED"})
        posts.create_post(db, editor, {"title": "C", "slug": "c", "category_id": cat})
        assert posts.list_published_posts(db)["total"] == 2
        out = posts.list_published_posts(db, category_slug="pengumuman")
        assert [p["slug"] for p in out["items"]] == ["b"]


class TestDuplicateAndReorder:

    def _post(self, db, ctx, **kw):
        cat = _category(db, ctx)
        tag = _tag(db, ctx, "Lomba")
        data = {"title": "Juara Lomba", "slug": "juara-lomba", "category_id": cat,
                "tag_ids": [tag], "status": "PUBLISHED", **kw}
        return posts.create_post(db, ctx, data).data

    def test_copy_is_draft_with_tags(self, db, editor):
        src = self._post(db, editor, is_featured=True)
        res = posts.duplicate_post(db, editor, src["id"])
        assert res.success
        assert res.data["slug"] == "juara-lomba-copy"
        assert res.data["title"] == "Juara Lomba (Copy)"
        assert res.data["status"] == "DRAFT"
        assert res.data["published_at"] is None
        assert res.data["is_featured"] is False
        assert [t["slug"] for t in res.data["tags"]] == ["lomba"]
        assert res.data["category"]["id"] == src["category_id"]

    def test_copy_slugs_count_up(self, db, editor):
        src = self._post(db, editor)
        posts.duplicate_post(db, editor, src["id"])
        posts.duplicate_post(db, editor, src["id"])
        res = posts.duplicate_post(db, editor, src["id"])
        assert res.data["slug"] == "juara-lomba-copy-3"
        assert db.query(PostDB).count() == 4

    def test_duplicate_unknown(self, db, editor):
        assert posts.duplicate_post(db, editor, "missing").error == "Berita tidak ditemukan"

    def test_reorder(self, db, editor):
        cat = _category(db, editor)
        a = posts.create_post(db, editor, {"title": "A", "slug": "a", "category_id": cat}).data["id"]
        b = posts.create_post(db, editor, {"title": "B", "slug": "b", "category_id": cat}).data["id"]
        assert posts.reorder_posts(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0}]).success
        assert [p["slug"] for p in posts.list_posts(db)["items"]] == ["b", "a"]

    def test_reorder_unknown_id_applies_nothing(self, db, editor):
        cat = _category(db, editor)
        a = posts.create_post(db, editor, {"title": "A", "slug": "a", "category_id": cat}).data["id"]
        res = posts.reorder_posts(db, editor, [{"id": a, "order": 5}, {"id": "ghost", "order": 0}])
        assert res.error == "Item tidak ditemukan: ghost"
        db.expire_all()
        assert db.get(PostDB, a).order == 0


class TestCategories:

    def test_delete_blocked_with_count(self, db, editor):
        cat = _category(db, editor)
        posts.create_post(db, editor, {"title": "A", "slug": "a", "category_id": cat})
        res = posts.delete_category(db, editor, cat)
        assert not res.success
        assert res.error.startswith("Kategori masih memiliki 1 berita")

    def test_delete_empty(self, db, editor):
        cat = _category(db, editor)
        assert posts.delete_category(db, editor, cat).success
        assert posts.list_categories(db) == []

    def test_duplicate_tag(self, db, editor):
        _tag(db, editor, "Lomba")
        res = posts.create_tag(db, editor, {"name": "Lomba", "slug": "lomba"})
        assert not res.success
