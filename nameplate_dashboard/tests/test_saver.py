# nameplate_dashboard/tests/test_saver.py
import json

import httpx
import pytest

from nameplate_dashboard.editor import store
from nameplate_dashboard.editor.client import ApiError, NameplateApiClient
from nameplate_dashboard.editor.saver import FAILED, INVALID, PARTIAL, SAVED, save, save_all


def fake_renderer(draft, loader=None):
    return b"\x89PNG" + draft.house_name.encode()


class FakeApi:
    """Records calls; ``fail_upload`` / ``fail_create`` hold house names to reject."""

    def __init__(self, fail_upload=(), fail_create=()):
        self.fail_upload = set(fail_upload)
        self.fail_create = set(fail_create)
        self.created = []
        self.uploads = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/upload":
            self.uploads += 1
            if any(name.encode() in request.content for name in self.fail_upload):
                return httpx.Response(503, json={"success": False, "error": "Image storage is not configured"})
            return httpx.Response(200, json={"success": True, "url": f"https://cdn/x-{self.uploads}.png"})

        payload = json.loads(request.content)
        if payload["houseName"] in self.fail_create:
            return httpx.Response(400, json={"success": False, "error": "Missing fields: theme"})
        self.created.append((request.url.path, payload))
        return httpx.Response(201, json={"success": True, "data": {"id": f"np-{len(self.created)}"}})

    def client(self):
        return NameplateApiClient("http://testserver", token="t", transport=httpx.MockTransport(self.handler))


def _state(*house_names):
    state = store.initial_state(rmo="RMO1", officer="OFF11", lot="LOT-1", officer_name="Officer One",
                                email="off@example.com", mobile_number="9876543210")
    state = store.update(state, house_name=house_names[0])
    for name in house_names[1:]:
        state = store.update(store.add(state), house_name=name)
    return state


def test_save_uploads_then_creates_record():
    api = FakeApi()
    result = save(_state("Sunrise").active, client=api.client(), renderer=fake_renderer)

    assert result.outcome == SAVED
    assert result.url == "https://cdn/x-1.png"
    assert result.record_id == "np-1"
    path, payload = api.created[0]
    assert path == "/api/OFF11/lots/LOT-1/createNameplate"
    assert payload["image_url"] == "https://cdn/x-1.png"
    assert payload["houseName"] == "Sunrise"


def test_invalid_draft_sends_nothing():
    api = FakeApi()
    state = store.update(_state("Sunrise"), email="not-an-email")
    result = save(state.active, client=api.client(), renderer=fake_renderer)

    assert result.outcome == INVALID
    assert result.errors == ["Invalid email format"]
    assert api.uploads == 0


def test_record_failure_after_upload_is_partial():
    api = FakeApi(fail_create={"Sunrise"})
    result = save(_state("Sunrise").active, client=api.client(), renderer=fake_renderer)

    assert result.outcome == PARTIAL
    assert result.url == "https://cdn/x-1.png"
    assert "HTTP 400" in result.errors[0]


def test_upload_failure_is_failed():
    api = FakeApi(fail_upload={"Sunrise"})
    result = save(_state("Sunrise").active, client=api.client(), renderer=fake_renderer)
    assert result.outcome == FAILED
    assert api.created == []


def test_save_all_continues_after_failures_and_waits_between_drafts():
    api = FakeApi(fail_upload={"Broken"}, fail_create={"Half"})
    state = _state("One", "Broken", "Half", "Two")
    state = store.add(state)
    state = store.update(state, email="")
    delays = []

    final, summary = save_all(state, client=api.client(), renderer=fake_renderer, sleep=delays.append)

    assert [r.outcome for r in summary.results] == [SAVED, FAILED, PARTIAL, SAVED, INVALID]
    assert delays == [0.3] * 5
    assert summary.as_dict()["saved"] == 2
    assert final.active_id == state.drafts[-1].id
    assert [p["houseName"] for _, p in api.created] == ["One", "Two"]


def test_client_raises_on_success_false():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"success": False, "error": "nope"}))
    client = NameplateApiClient("http://testserver", transport=transport)
    with pytest.raises(ApiError, match="nope"):
        client.me()


def test_client_raises_on_non_json():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))
    client = NameplateApiClient("http://testserver", transport=transport)
    with pytest.raises(ApiError) as exc_info:
        client.upload_image(b"png", identifier="x")
    assert exc_info.value.status_code == 502
