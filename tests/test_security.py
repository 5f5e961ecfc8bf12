"""
Tests password hashing, session tokens, upload validation, sanitising.
"""
from unittest.mock import patch

import pytest

from sekolah_cms import config, security


class TestPasswords:

    def test_roundtrip(self):
        h = security.hash_password("rahasia123")
        assert h != "rahasia123"
        assert security.verify_password("rahasia123", h)
        assert not security.verify_password("salah", h)

    def test_missing_or_garbage_hash(self):
        assert not security.verify_password("x", None)
        assert not security.verify_password("x", "not-a-bcrypt-hash")


class TestTokens:

    def test_valid_token(self):
        token = security.create_session_token("user-1")
        assert security.read_session_token(token) == "user-1"

    def test_tampered(self):
        token = security.create_session_token("user-1")
        body, sig = token.rsplit(".", 1)
        assert security.read_session_token(f"{body}x.{sig}") is None
        assert security.read_session_token("garbage") is None

    def test_other_secret(self, monkeypatch):
        token = security.create_session_token("user-1")
        monkeypatch.setenv("SECRET_KEY", "rotated")
        assert security.read_session_token(token) is None

    def test_expired(self):
        token = security.create_session_token("user-1", ttl_hours=1)
        with patch("sekolah_cms.security.time.time", return_value=10 ** 11):
            assert security.read_session_token(token) is None


class TestSecretKey:

    def test_default_refused_in_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.delenv("SECRET_KEY")
        with pytest.raises(RuntimeError):
            config.secret_key()
        with pytest.raises(RuntimeError):
            security.create_session_token("user-1")

    def test_explicit_default_refused_in_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("SECRET_KEY", config.DEFAULT_SECRET)
        with pytest.raises(RuntimeError):
            config.secret_key()

    def test_private_key_accepted_in_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("SECRET_KEY", "k3y-from-vault")
        assert config.secret_key() == "k3y-from-vault"

    def test_default_allowed_in_development(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY")
        assert config.secret_key() == config.DEFAULT_SECRET


class TestValidateFile:

    def test_image_ok(self):
        check = security.validate_file("foto.jpg", "image/jpeg", 1000)
        assert check.valid and check.file_type == "image"

    def test_size_limit(self):
        check = security.validate_file("a.pdf", "application/pdf", 3 * 1024 * 1024, max_size_mb=2)
        assert check.error == "Ukuran file maksimal 2MB"

    def test_extension_mismatch(self):
        assert not security.validate_file("foto.pdf", "image/png", 10).valid

    def test_double_extension(self):
        check = security.validate_file("tugas.exe.pdf", "application/pdf", 10)
        assert check.error == "Nama file tidak valid"

    def test_restricted_types(self):
        check = security.validate_file("a.pdf", "application/pdf", 10, allowed_types=["image"])
        assert check.error == "Tipe file tidak diizinkan"


class TestSanitise:

    def test_clean_text(self):
        assert security.clean_text("  a\x00b ") == "ab"
        assert security.clean_text(None) == ""

    def test_sanitize_url(self):
        assert security.sanitize_url("javascript:alert(1)") == ""
        assert security.sanitize_url("https://sekolah.sch.id") == "https://sekolah.sch.id"
        assert security.sanitize_url("/berita") == "/berita"
        assert security.sanitize_url("mailto:tu@sekolah.sch.id") == "mailto:tu@sekolah.sch.id"
