# nameplate_dashboard/tests/test_nameplate_api.py
from conftest import login, make_user, nameplate_payload

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.models.unverified_nameplate import UnverifiedNameplate


def _create_url(officer, lot="LOT-1"):
    return f"/api/{officer.officer_number}/lots/{lot}/createNameplate"


def _count_nameplates():
    db = get_session()
    try:
        return db.query(UnverifiedNameplate).count()
    finally:
        db.close()


def test_create_requires_login(client, officer):
    response = client.post(_create_url(officer), json=nameplate_payload(officer))
    assert response.status_code == 401


def test_create_stores_unverified_record(client, officer):
    login(client, officer)
    response = client.post(_create_url(officer), json=nameplate_payload(officer))

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["verified"] is False
    assert data["stage"] == "unverified"
    assert data["houseName"] == "Sunrise Villa"
    assert data["mobileNumber"] == "9876543210"
    assert data["imageUrl"].endswith(".png")


def test_missing_fields_are_all_reported_and_nothing_stored(client, officer):
    login(client, officer)
    payload = nameplate_payload(officer, houseName="", ownerName=None, theme="  ")

    response = client.post(_create_url(officer), json=payload)

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert set(body["missing"]) == {"theme", "houseName", "ownerName"}
    assert _count_nameplates() == 0


def test_invalid_email_is_rejected(client, officer):
    login(client, officer)
    response = client.post(_create_url(officer), json=nameplate_payload(officer, email="not-an-email"))
    assert response.status_code == 400
    assert "Invalid email format" in response.get_json()["errors"]


def test_path_values_fill_missing_officer_and_lot(client, officer):
    login(client, officer)
    payload = nameplate_payload(officer)
    del payload["officer"]
    del payload["lot"]

    response = client.post(_create_url(officer, lot="LOT-9"), json=payload)

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["officer"] == officer.officer_number
    assert data["lot"] == "LOT-9"


def test_identical_payloads_create_two_records(client, officer):
    login(client, officer)
    first = client.post(_create_url(officer), json=nameplate_payload(officer))
    second = client.post(_create_url(officer), json=nameplate_payload(officer))

    assert first.status_code == second.status_code == 201
    assert first.get_json()["data"]["id"] != second.get_json()["data"]["id"]
    assert _count_nameplates() == 2


def test_malformed_json_is_a_server_error(client, officer):
    login(client, officer)
    response = client.post(_create_url(officer), data="{not json", content_type="application/json")
    assert response.status_code == 500
    assert response.get_json()["success"] is False


def test_officer_cannot_submit_under_another_code(client, officer):
    other = make_user(UserRole.officer, rmo="RMO1", name="Officer Two")
    login(client, officer)
    response = client.post(_create_url(other), json=nameplate_payload(other))
    assert response.status_code == 403


def test_body_cannot_move_record_to_another_officer_or_rmo(client, officer):
    login(client, officer)

    for overrides in (
        {"rmo": "RMO2", "officer": "OFF21"},
        {"rmo": "RMO2"},
        {"officer": "OFF21"},
        {"lot": "LOT-2"},
    ):
        response = client.post(_create_url(officer), json=nameplate_payload(officer, **overrides))
        assert response.status_code == 403, overrides

    assert _count_nameplates() == 0


def test_rmo_is_taken_from_the_session(client, officer):
    login(client, officer)
    payload = nameplate_payload(officer)
    del payload["rmo"]

    response = client.post(_create_url(officer), json=payload)

    assert response.status_code == 201
    assert response.get_json()["data"]["rmo"] == "RMO1"


def test_non_string_field_is_rejected_before_saving(client, officer):
    login(client, officer)
    response = client.post(_create_url(officer), json=nameplate_payload(officer, houseName=123))

    assert response.status_code == 400
    assert "houseName must be a string" in response.get_json()["errors"]
    assert _count_nameplates() == 0


def test_listing_is_paginated_newest_first(client, officer):
    login(client, officer)
    for i in range(3):
        client.post(_create_url(officer), json=nameplate_payload(officer, houseName=f"House {i}"))

    response = client.get("/api/unverify?limit=2&offset=0")
    body = response.get_json()

    assert body["count"] == 3
    assert len(body["data"]) == 2
    assert body["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    last_page = client.get("/api/unverify?limit=2&offset=2").get_json()
    assert len(last_page["data"]) == 1
    assert last_page["pagination"]["hasMore"] is False


def test_officer_listing_is_scoped_to_own_records(client, officer):
    other = make_user(UserRole.officer, rmo="RMO2", name="Elsewhere")
    login(client, other)
    client.post(_create_url(other), json=nameplate_payload(other))
    client.post("/api/auth/logout")

    login(client, officer)
    client.post(_create_url(officer), json=nameplate_payload(officer))

    body = client.get("/api/unverify?rmo=RMO2").get_json()
    assert body["count"] == 1
    assert body["data"][0]["officer"] == officer.officer_number


def test_officer_lots_and_stats(client, officer):
    login(client, officer)
    client.post(_create_url(officer, "A"), json=nameplate_payload(officer, lot="A"))
    client.post(_create_url(officer, "B"), json=nameplate_payload(officer, lot="B"))

    lots = client.get(f"/api/{officer.officer_number}/lots?lot=A").get_json()["nameplates"]
    assert [n["lot"] for n in lots] == ["A"]

    stats = client.get(f"/api/{officer.officer_number}/stats").get_json()["data"]
    assert stats == {"total": 2, "unverified": 2, "verified": 0, "printed": 0}


def test_stats_for_unknown_officer_is_404(client, admin):
    login(client, admin)
    assert client.get("/api/OFF999/stats").status_code == 404
