"""
Tests the bootstrap seed: idempotence, credential checks, menu structure.
"""
import pytest

from sekolah_cms import seed
from sekolah_cms.models import MenuDB, MenuItemDB, PageDB, SettingDB, UserDB
from sekolah_cms.security import verify_password

EMAIL = "Admin@Sekolah.sch.id"
PASSWORD = "rahasia-admin"


class TestRunSeed:

    def test_idempotent(self, db):
        first = seed.run_seed(db, EMAIL, PASSWORD)
        second = seed.run_seed(db, EMAIL, PASSWORD)
        assert first == second
        assert first["users"] == 1
        assert first["pages"] == len(seed.PAGES)

    def test_admin_account(self, db):
        seed.run_seed(db, EMAIL, PASSWORD)
        admin = db.query(UserDB).one()
        assert admin.email == "admin@sekolah.sch.id"
        assert admin.role == "SUPERADMIN"
        assert verify_password(PASSWORD, admin.password)

    def test_existing_admin_not_overwritten(self, db):
        seed.run_seed(db, EMAIL, PASSWORD)
        seed.run_seed(db, EMAIL, "password-lain")
        admin = db.query(UserDB).one()
        assert verify_password(PASSWORD, admin.password)

    def test_header_menu_has_dropdown(self, db):
        seed.run_seed(db, EMAIL, PASSWORD)
        header = db.query(MenuDB).filter_by(location="header").one()
        roots = db.query(MenuItemDB).filter_by(menu_id=header.id, parent_id=None).all()
        dropdown = next(i for i in roots if i.type == "dropdown")
        children = db.query(MenuItemDB).filter_by(parent_id=dropdown.id).all()
        assert children
        assert all(c.type == "page" for c in children)
        slugs = {p.slug for p in db.query(PageDB).all()}
        assert {c.page_slug for c in children} <= slugs

    def test_pages_published(self, db):
        seed.run_seed(db, EMAIL, PASSWORD)
        assert all(p.status == "PUBLISHED" and p.published_at for p in db.query(PageDB).all())

    def test_setting_values_wrapped(self, db):
        seed.run_seed(db, EMAIL, PASSWORD)
        row = db.query(SettingDB).filter_by(key="site_name").one()
        assert "value" in row.value

    @pytest.mark.parametrize("email,password", [(None, PASSWORD), (EMAIL, None), (EMAIL, "pendek")])
    def test_bad_credentials_write_nothing(self, db, email, password):
        with pytest.raises(seed.SeedError):
            seed.run_seed(db, email, password)
        assert db.query(UserDB).count() == 0
        assert db.query(PageDB).count() == 0


class TestMain:

    def test_missing_env(self, db, monkeypatch):
        monkeypatch.delenv("SEED_ADMIN_EMAIL", raising=False)
        monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)
        assert seed.main() == 1
        assert db.query(UserDB).count() == 0

    def test_short_password(self, db, monkeypatch):
        monkeypatch.setenv("SEED_ADMIN_EMAIL", EMAIL)
        monkeypatch.setenv("SEED_ADMIN_PASSWORD", "1234567")
        assert seed.main() == 1
        assert db.query(UserDB).count() == 0

    def test_success(self, db, monkeypatch):
        monkeypatch.setenv("SEED_ADMIN_EMAIL", EMAIL)
        monkeypatch.setenv("SEED_ADMIN_PASSWORD", PASSWORD)
        assert seed.main() == 0
        assert seed.main() == 0
        db.expire_all()
        assert db.query(UserDB).count() == 1
