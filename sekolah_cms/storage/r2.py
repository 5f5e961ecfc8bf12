"""Cloudflare R2 (S3-compatible) backend through boto3."""
import io
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import config
from ..errors import StorageError

log = logging.getLogger(__name__)

NAME = "r2"


def _get_s3_client():
    s = config.r2_settings()
    try:
        return boto3.client(
            "s3",
            endpoint_url=s["endpoint"],
            aws_access_key_id=s["access_key"],
            aws_secret_access_key=s["secret_key"],
            region_name="auto",
        )
    except (ValueError, BotoCoreError) as e:
        log.error("R2 client could not be built for endpoint %r: %s", s["endpoint"], e)
        raise StorageError("Konfigurasi penyimpanan media tidak valid") from e


def public_url(key: str) -> str:
    s = config.r2_settings()
    base = s["public_url"] or f"{s['endpoint'].rstrip('/')}/{s['bucket']}"
    return f"{base}/{key}"


def save(key: str, data: bytes, content_type: str) -> str:
    s3 = _get_s3_client()
    try:
        s3.upload_fileobj(
            Fileobj=io.BytesIO(data),
            Bucket=config.r2_settings()["bucket"],
            Key=key,
            ExtraArgs={"ContentType": content_type or "application/octet-stream"},
        )
    except (ClientError, BotoCoreError) as e:
        log.error("R2 upload failed for %s: %s", key, e)
        raise StorageError("Gagal mengupload file") from e
    return public_url(key)


def delete(key: str):
    s3 = _get_s3_client()
    try:
        s3.delete_object(Bucket=config.r2_settings()["bucket"], Key=key)
    except (ClientError, BotoCoreError) as e:
        raise StorageError("Gagal menghapus file") from e
