"""
Tests media uploads: validation, storage selection (R2 / local fallback),
image dimensions, deletion.
"""
import io
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from sekolah_cms.errors import StorageError
from sekolah_cms.models import MediaDB
from sekolah_cms.services import media


def _png(w=40, h=30) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (w, h), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def r2_env(monkeypatch):
    monkeypatch.setenv("R2_ENDPOINT", "https://acc.r2.cloudflarestorage.com")
    monkeypatch.setenv("R2_ACCESS_KEY", "key")
    monkeypatch.setenv("R2_SECRET_KEY", "secret")
    monkeypatch.setenv("R2_BUCKET", "sekolah")
    monkeypatch.setenv("R2_PUBLIC_URL", "https://cdn.sekolah.sch.id")


def _uploads() -> list:
    root = Path(os.environ["UPLOADS_DIR"])
    return [p for p in root.rglob("*") if p.is_file()] if root.exists() else []


class TestValidation:

    def test_oversize_writes_nothing(self, db, editor, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_MB", "1")
        res = media.upload_media(db, editor, "brosur.pdf", "application/pdf", b"x" * (1024 * 1024 + 1))
        assert res.error == "Ukuran file maksimal 1MB"
        assert db.query(MediaDB).count() == 0
        assert _uploads() == []

    def test_disallowed_type(self, db, editor):
        res = media.upload_media(db, editor, "setup.exe", "application/x-msdownload", b"MZ")
        assert res.error == "Tipe file tidak diizinkan"
        assert db.query(MediaDB).count() == 0

    def test_requires_actor(self, db, anon):
        res = media.upload_media(db, anon, "foto.png", "image/png", _png())
        assert res.error == "Unauthorized"


class TestLocal:

    def test_upload_reads_dimensions(self, db, editor):
        res = media.upload_media(db, editor, "Foto Kelas.png", "image/png", _png(40, 30), folder="Galeri!")
        assert res.success
        assert res.data["storage"] == "local"
        assert res.data["type"] == "image"
        assert (res.data["width"], res.data["height"]) == (40, 30)
        assert res.data["folder"] == "galeri"
        assert res.data["url"].startswith("/uploads/galeri/")
        assert len(_uploads()) == 1

    def test_document_has_no_dimensions(self, db, editor):
        res = media.upload_media(db, editor, "kalender.pdf", "application/pdf", b"%PDF-1.4")
        assert res.data["type"] == "document"
        assert res.data["width"] is None

    def test_delete_removes_file(self, db, editor):
        media_id = media.upload_media(db, editor, "foto.png", "image/png", _png()).data["id"]
        assert media.delete_media(db, editor, media_id).success
        assert db.query(MediaDB).count() == 0
        assert _uploads() == []

    def test_alt_text(self, db, editor):
        media_id = media.upload_media(db, editor, "foto.png", "image/png", _png()).data["id"]
        res = media.update_media_alt(db, editor, media_id, "  Upacara bendera  ")
        assert res.data["alt"] == "Upacara bendera"

    def test_folders_listing(self, db, editor):
        media.upload_media(db, editor, "a.png", "image/png", _png(), folder="guru")
        media.upload_media(db, editor, "b.png", "image/png", _png(), folder="berita")
        assert media.list_folders(db) == ["berita", "guru"]
        assert media.list_media(db, folder="guru")["total"] == 1

    def test_failed_commit_removes_written_file(self, db, editor):
        with patch.object(db, "commit", side_effect=RuntimeError("disk full")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.error == "Gagal mengupload file"
        assert _uploads() == []
        assert db.query(MediaDB).count() == 0


class TestRemote:

    def test_r2_used_when_configured(self, db, editor, r2_env):
        client = MagicMock()
        with patch("sekolah_cms.storage.r2.boto3.client", return_value=client) as factory:
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.success
        assert res.data["storage"] == "r2"
        assert res.data["url"].startswith("https://cdn.sekolah.sch.id/general/")
        assert factory.call_args.kwargs["endpoint_url"] == "https://acc.r2.cloudflarestorage.com"
        kwargs = client.upload_fileobj.call_args.kwargs
        assert kwargs["Bucket"] == "sekolah"
        assert kwargs["ExtraArgs"] == {"ContentType": "image/png"}
        assert _uploads() == []

    def test_dev_falls_back_to_local(self, db, editor, r2_env):
        with patch("sekolah_cms.storage.r2.save", side_effect=StorageError("Gagal mengupload file")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.success
        assert res.data["storage"] == "local"
        assert len(_uploads()) == 1

    def test_production_remote_failure_is_error(self, db, editor, r2_env, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        with patch("sekolah_cms.storage.r2.save", side_effect=StorageError("Gagal mengupload file")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.error == "Gagal mengupload file"
        assert db.query(MediaDB).count() == 0
        assert _uploads() == []

    def test_production_without_remote_refused(self, db, editor, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.error == "Penyimpanan media belum dikonfigurasi"
        assert db.query(MediaDB).count() == 0

    def test_delete_goes_to_r2(self, db, editor, r2_env):
        client = MagicMock()
        with patch("sekolah_cms.storage.r2.boto3.client", return_value=client):
            media_id = media.upload_media(db, editor, "foto.png", "image/png", _png()).data["id"]
            assert media.delete_media(db, editor, media_id).success
        assert client.delete_object.call_args.kwargs["Bucket"] == "sekolah"

    def test_failed_commit_removes_remote_object(self, db, editor, r2_env):
        client = MagicMock()
        with patch("sekolah_cms.storage.r2.boto3.client", return_value=client), \
                patch.object(db, "commit", side_effect=RuntimeError("disk full")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.error == "Gagal mengupload file"
        key = client.upload_fileobj.call_args.kwargs["Key"]
        assert client.delete_object.call_args.kwargs["Key"] == key

    def test_malformed_endpoint_falls_back_in_dev(self, db, editor, r2_env):
        with patch("sekolah_cms.storage.r2.boto3.client", side_effect=ValueError("Invalid endpoint: acc r2")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.success
        assert res.data["storage"] == "local"
        assert len(_uploads()) == 1

    def test_malformed_endpoint_is_error_in_production(self, db, editor, r2_env, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        with patch("sekolah_cms.storage.r2.boto3.client", side_effect=ValueError("Invalid endpoint: acc r2")):
            res = media.upload_media(db, editor, "foto.png", "image/png", _png())
        assert res.error == "Konfigurasi penyimpanan media tidak valid"
        assert _uploads() == []
