# nameplate_dashboard/tests/test_upload.py
import io
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from conftest import login

from nameplate_dashboard.errors import StorageError, StorageUnavailableError
from nameplate_dashboard.services.storage_service import (
    ObjectStorage,
    StorageConfig,
    build_image_key,
    build_object_storage,
)

KEY_PATTERN = re.compile(r"^nameplate-[A-Za-z0-9_]+-\d{13}\.png$")


def _storage(client=None, **overrides):
    config = dict(bucket="nameplates", access_key="anon", secret_key="anon",
                  endpoint_url="https://store.example.com/storage/v1/s3")
    config.update(overrides)
    return ObjectStorage(StorageConfig(**config), client=client or MagicMock())


def test_image_key_sanitizes_identifier():
    assert build_image_key("R. Sharma & Co", timestamp_ms=1700000000000) == \
        "nameplate-R__Sharma___Co-1700000000000.png"
    assert KEY_PATTERN.match(build_image_key("Officer One"))


def test_storage_is_disabled_without_credentials():
    assert build_object_storage({"STORAGE_BUCKET": "nameplates"}) is None


def test_public_url_prefers_configured_base():
    storage = _storage(public_url="https://cdn.example.com/public/nameplates/")
    assert storage.public_url("k.png") == "https://cdn.example.com/public/nameplates/k.png"
    assert _storage().public_url("k.png") == "https://store.example.com/storage/v1/s3/nameplates/k.png"


def test_upload_puts_png_object():
    s3 = MagicMock()
    url = _storage(s3).upload_image(b"\x89PNG...", identifier="Officer One")

    s3.put_object.assert_called_once()
    kwargs = s3.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "nameplates"
    assert kwargs["ContentType"] == "image/png"
    assert KEY_PATTERN.match(kwargs["Key"])
    assert url.endswith(kwargs["Key"])


def test_unreachable_endpoint_maps_to_unavailable():
    s3 = MagicMock()
    s3.put_object.side_effect = EndpointConnectionError(endpoint_url="https://store.example.com")
    with pytest.raises(StorageUnavailableError):
        _storage(s3).upload_image(b"png", identifier="x")


def test_client_error_maps_to_storage_error():
    s3 = MagicMock()
    s3.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")
    with pytest.raises(StorageError, match="AccessDenied"):
        _storage(s3).upload_image(b"png", identifier="x")


def test_upload_route_without_storage_is_503(client, officer):
    login(client, officer)
    response = client.post("/api/upload", data={"file": (io.BytesIO(b"png"), "x.png")},
                           content_type="multipart/form-data")
    assert response.status_code == 503


def test_upload_route_returns_url(app, client, officer):
    s3 = MagicMock()
    app.extensions["object_storage"] = _storage(s3)
    login(client, officer)

    response = client.post(
        "/api/upload",
        data={"file": (io.BytesIO(b"\x89PNG"), "plate.png", "image/png"), "identifier": "Officer One"},
        content_type="multipart/form-data",
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert "nameplate-Officer_One-" in body["url"]


def test_upload_route_requires_file(app, client, officer):
    app.extensions["object_storage"] = _storage()
    login(client, officer)
    response = client.post("/api/upload", data={}, content_type="multipart/form-data")
    assert response.status_code == 400


def test_upload_route_maps_storage_failure(app, client, officer):
    s3 = MagicMock()
    s3.put_object.side_effect = EndpointConnectionError(endpoint_url="https://store.example.com")
    app.extensions["object_storage"] = _storage(s3)
    login(client, officer)

    response = client.post("/api/upload", data={"file": (io.BytesIO(b"png"), "x.png")},
                           content_type="multipart/form-data")
    assert response.status_code == 503
