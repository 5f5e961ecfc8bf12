"""
Tests menus: nested items, visibility, subtree delete, all-or-nothing reorder.
"""
from unittest.mock import patch

from sekolah_cms.models import MenuItemDB
from sekolah_cms.services import menus


def _menu(db, ctx, location="header"):
    return menus.create_menu(db, ctx, {"name": location.title(), "location": location}).data["id"]


def _item(db, ctx, menu_id, label, **kw):
    res = menus.create_menu_item(db, ctx, {"menu_id": menu_id, "label": label, **kw})
    assert res.success, res.error
    return res.data["id"]


class TestMenus:

    def test_location_unique(self, db, editor):
        _menu(db, editor)
        res = menus.create_menu(db, editor, {"name": "Lain", "location": "header"})
        assert res.error == "Menu dengan lokasi tersebut sudah ada"

    def test_items_get_next_order(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "Beranda", url="/")
        b = _item(db, editor, m, "Berita", url="/berita")
        assert db.get(MenuItemDB, a).order == 0
        assert db.get(MenuItemDB, b).order == 1

    def test_invalid_item_type(self, db, editor):
        m = _menu(db, editor)
        res = menus.create_menu_item(db, editor, {"menu_id": m, "label": "X", "type": "iframe"})
        assert res.error == "Tipe item menu tidak valid"

    def test_parent_from_other_menu(self, db, editor):
        header, footer = _menu(db, editor), _menu(db, editor, "footer")
        parent = _item(db, editor, footer, "Kontak")
        res = menus.create_menu_item(db, editor, {"menu_id": header, "label": "X", "parent_id": parent})
        assert res.error == "Item induk tidak ditemukan"

    def test_public_tree_hides_invisible(self, db, editor):
        m = _menu(db, editor)
        profil = _item(db, editor, m, "Profil", type="dropdown")
        _item(db, editor, m, "Visi Misi", type="page", page_slug="visi-misi", parent_id=profil)
        hidden = _item(db, editor, m, "Sejarah", type="page", page_slug="sejarah", parent_id=profil)
        _item(db, editor, m, "Rahasia", url="/rahasia", is_visible=False)
        menus.toggle_menu_item_visibility(db, editor, hidden)

        tree = menus.get_menu_by_location(db, "header")
        assert [i["label"] for i in tree["items"]] == ["Profil"]
        assert [c["label"] for c in tree["items"][0]["children"]] == ["Visi Misi"]

        admin_tree = menus.get_menu(db, m)
        assert len(admin_tree["items"]) == 2
        assert len(admin_tree["items"][0]["children"]) == 2

    def test_unknown_location(self, db):
        assert menus.get_menu_by_location(db, "sidebar") is None

    def test_delete_item_removes_subtree(self, db, editor):
        m = _menu(db, editor)
        root = _item(db, editor, m, "Profil", type="dropdown")
        child = _item(db, editor, m, "Visi", parent_id=root)
        _item(db, editor, m, "Misi", parent_id=child)
        _item(db, editor, m, "Kontak", url="/kontak")
        assert menus.delete_menu_item(db, editor, root).success
        assert [i.label for i in db.query(MenuItemDB).all()] == ["Kontak"]

    def test_move_under_own_child_rejected(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "Profil", type="dropdown")
        b = _item(db, editor, m, "Visi", parent_id=a)
        res = menus.update_menu_item(db, editor, a, {"parent_id": b})
        assert res.error == "Item tidak dapat dipindahkan ke dalam sub-itemnya sendiri"
        db.expire_all()
        assert db.get(MenuItemDB, a).parent_id is None
        assert [i["label"] for i in menus.get_menu(db, m)["items"]] == ["Profil"]

    def test_move_under_grandchild_rejected(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "Profil", type="dropdown")
        b = _item(db, editor, m, "Visi", parent_id=a)
        c = _item(db, editor, m, "Misi", parent_id=b)
        assert not menus.update_menu_item(db, editor, a, {"parent_id": c}).success

    def test_delete_terminates_on_existing_loop(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B", parent_id=a)
        # loop written behind the service's back
        db.query(MenuItemDB).filter_by(id=a).update({"parent_id": b})
        db.commit()
        assert sorted(menus._descendant_ids(db, a)) == [b]
        assert menus.delete_menu_item(db, editor, a).success
        assert db.query(MenuItemDB).count() == 0

    def test_delete_menu_removes_items(self, db, editor):
        m = _menu(db, editor)
        _item(db, editor, m, "Beranda", url="/")
        assert menus.delete_menu(db, editor, m).success
        assert db.query(MenuItemDB).count() == 0
        assert menus.list_menus(db) == []


class TestReorder:

    def test_swap(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B")
        res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0}])
        assert res.success
        tree = menus.get_menu(db, m)
        assert [i["label"] for i in tree["items"]] == ["B", "A"]

    def test_unknown_id_applies_nothing(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B")
        res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0},
                                                     {"id": "ghost", "order": 2}])
        assert not res.success
        assert res.error == "Item tidak ditemukan: ghost"
        db.expire_all()
        assert db.get(MenuItemDB, a).order == 0
        assert db.get(MenuItemDB, b).order == 1

    def test_commit_failure_applies_nothing(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B")
        with patch.object(db, "commit", side_effect=RuntimeError("locked")):
            res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 1}, {"id": b, "order": 0}])
        assert not res.success
        db.expire_all()
        assert db.get(MenuItemDB, a).order == 0
        assert db.get(MenuItemDB, b).order == 1

    def test_reparent(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B")
        res = menus.reorder_menu_items(db, editor, [{"id": b, "order": 0, "parent_id": a}])
        assert res.success
        assert db.get(MenuItemDB, b).parent_id == a

    def test_self_parent_rejected(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 0, "parent_id": a}])
        assert not res.success

    def test_reparent_into_descendant_rejected(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B", parent_id=a)
        res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 0, "parent_id": b}])
        assert res.error == "Item tidak dapat dipindahkan ke dalam sub-itemnya sendiri"
        db.expire_all()
        assert db.get(MenuItemDB, a).parent_id is None

    def test_swap_parents_in_one_batch_rejected(self, db, editor):
        m = _menu(db, editor)
        a = _item(db, editor, m, "A")
        b = _item(db, editor, m, "B")
        res = menus.reorder_menu_items(db, editor, [{"id": a, "order": 0, "parent_id": b},
                                                     {"id": b, "order": 0, "parent_id": a}])
        assert not res.success
        db.expire_all()
        assert db.get(MenuItemDB, a).parent_id is None
        assert db.get(MenuItemDB, b).parent_id is None

    def test_parent_from_other_menu_rejected(self, db, editor):
        header, footer = _menu(db, editor), _menu(db, editor, "footer")
        item = _item(db, editor, header, "Beranda")
        foreign = _item(db, editor, footer, "Kontak")
        res = menus.reorder_menu_items(db, editor, [{"id": item, "order": 0, "parent_id": foreign}])
        assert res.error == f"Item induk tidak ditemukan: {foreign}"
        db.expire_all()
        assert db.get(MenuItemDB, item).parent_id is None

    def test_empty_batch(self, db, editor):
        assert menus.reorder_menu_items(db, editor, []).error == "Data urutan tidak valid"
