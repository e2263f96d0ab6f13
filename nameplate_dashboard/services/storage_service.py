# nameplate_dashboard/services/storage_service.py
"""
S3-compatible object storage for rendered nameplate images.

Uploads a PNG under ``nameplate-{identifier}-{timestamp}.png`` and returns the
public URL stored on the nameplate record.
"""
import re
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from nameplate_dashboard.errors import (
    StorageConfigurationError,
    StorageError,
    StorageUnavailableError,
)
from nameplate_dashboard.logger import get_logger

logger = get_logger(__name__)

PNG_CONTENT_TYPE = "image/png"


def sanitize_identifier(identifier: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", identifier or "") or "nameplate"


def build_image_key(identifier: str, timestamp_ms: Optional[int] = None) -> str:
    """``nameplate-{identifier}-{timestamp}.png`` with non-alphanumerics replaced by ``_``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"nameplate-{sanitize_identifier(identifier)}-{timestamp_ms}.png"


@dataclass(frozen=True)
class StorageConfig:
    bucket: str
    access_key: str
    secret_key: str
    endpoint_url: Optional[str] = None
    region: Optional[str] = None
    public_url: Optional[str] = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> Optional["StorageConfig"]:
        """Build from Flask config; None when storage is not configured."""
        access_key = (config.get("STORAGE_ACCESS_KEY") or "").strip()
        bucket = (config.get("STORAGE_BUCKET") or "").strip()
        if not access_key or not bucket:
            return None
        return cls(
            bucket=bucket,
            access_key=access_key,
            secret_key=(config.get("STORAGE_SECRET_KEY") or access_key).strip(),
            endpoint_url=config.get("STORAGE_ENDPOINT_URL") or None,
            region=config.get("STORAGE_REGION") or None,
            public_url=config.get("STORAGE_PUBLIC_URL") or None,
        )


class ObjectStorage:
    """
    Thin wrapper over a boto3 S3 client.

    ``client`` is injectable so tests never touch the network.
    """

    def __init__(self, config: StorageConfig, *, client=None):
        if not config.bucket:
            raise StorageConfigurationError("Storage bucket is required")
        self.config = config
        if client is not None:
            self._client = client
            return
        self._client = boto3.client(
            "s3",
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            endpoint_url=config.endpoint_url,
        )

    def public_url(self, key: str) -> str:
        if self.config.public_url:
            base = self.config.public_url.rstrip("/")
        elif self.config.endpoint_url:
            base = f"{self.config.endpoint_url.rstrip('/')}/{self.config.bucket}"
        else:
            base = f"https://{self.config.bucket}.s3.amazonaws.com"
        return f"{base}/{key}"

    def upload_image(self, data: bytes, *, identifier: str, content_type: str = PNG_CONTENT_TYPE) -> str:
        """
        Upload rendered image bytes and return their public URL.

        :param data: Image bytes
        :param identifier: Used in the object key (usually the officer name)
        :raises StorageUnavailableError: endpoint unreachable / timing out
        :raises StorageError: any other storage failure
        """
        if not data:
            raise StorageError("Empty image")
        key = build_image_key(identifier)
        try:
            self._client.put_object(
                Bucket=self.config.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="max-age=3600",
            )
        except (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError) as exc:
            logger.warning(f"storage unavailable key={key}: {exc}")
            raise StorageUnavailableError("Object storage unavailable") from exc
        except ClientError as exc:
            code = (exc.response.get("Error") or {}).get("Code") or ""
            logger.error(f"storage upload failed key={key} code={code}")
            raise StorageError(f"Upload failed ({code})") from exc
        except BotoCoreError as exc:
            logger.exception(f"storage upload failed key={key}")
            raise StorageError("Upload failed") from exc

        url = self.public_url(key)
        logger.info(f"uploaded {key} ({len(data)} bytes)")
        return url


def build_object_storage(config: Mapping[str, Any]) -> Optional[ObjectStorage]:
    storage_config = StorageConfig.from_mapping(config)
    if storage_config is None:
        logger.warning("object storage not configured; uploads are disabled")
        return None
    return ObjectStorage(storage_config)
