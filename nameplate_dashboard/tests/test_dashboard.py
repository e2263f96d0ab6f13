# nameplate_dashboard/tests/test_dashboard.py
from conftest import login, make_user, nameplate_payload

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.services.dashboard_service import DashboardService
from nameplate_dashboard.services.nameplate_service import NameplateService


def test_officers_per_rmo_single_grouping(db):
    make_user(UserRole.officer, rmo="RMO1", name="A")
    make_user(UserRole.officer, rmo="RMO1", name="B")
    make_user(UserRole.officer, rmo="RMO2", name="C")
    make_user(UserRole.rmo, rmo="RMO3", name="Reviewer")

    assert DashboardService(db).officers_per_rmo() == {"RMO1": 2, "RMO2": 1}


def test_admin_stats(client, admin, officer):
    db = get_session()
    try:
        service = NameplateService(db)
        first = service.create_nameplate(nameplate_payload(officer))
        service.create_nameplate(nameplate_payload(officer))
        db.flush()
        service.verify(nameplate_id=first.id, rmo="RMO1", officer=officer.officer_number, lot="LOT-1")
        db.commit()
    finally:
        db.close()

    login(client, admin)
    data = client.get("/api/dashboard/stats").get_json()["data"]

    assert data["totalOfficers"] == 1
    assert data["officersPerRmo"] == {"RMO1": 1}
    assert data["totalUsers"] == 2
    assert data["nameplates"] == {"total": 2, "unverified": 1, "verified": 1, "awaitingPrint": 1, "printed": 0}


def test_rmo_stats_are_scoped(client, reviewer, officer):
    make_user(UserRole.officer, rmo="RMO2", name="Elsewhere")
    login(client, reviewer)
    data = client.get("/api/dashboard/stats").get_json()["data"]
    assert data["officersPerRmo"] == {"RMO1": 1}
    assert "totalUsers" not in data


def test_notifications_feed(client, admin, officer):
    login(client, officer)
    created = client.post("/api/notifications", json={"message": "Lot A ready", "type": "success"})
    assert created.status_code == 201
    assert client.post("/api/notifications", json={"message": "  "}).status_code == 400
    assert client.post("/api/notifications", json={"message": "x", "type": "loud"}).status_code == 400

    mine = client.get("/api/notifications").get_json()["notifications"]
    assert [n["message"] for n in mine] == ["Lot A ready"]

    login(client, admin)
    feed = client.get("/api/notifications").get_json()["notifications"]
    assert "Lot A ready" in [n["message"] for n in feed]


def test_rmo_listing(client, admin, reviewer, officer):
    make_user(UserRole.officer, rmo="RMO2", name="Elsewhere")

    login(client, admin)
    assert client.get("/api/rmo").get_json()["rmos"] == ["RMO1", "RMO2"]

    login(client, reviewer)
    assert client.get("/api/rmo").get_json()["rmos"] == ["RMO1"]
    assert client.get("/api/rmo/RMO2/officers").status_code == 403
    officers = client.get("/api/rmo/RMO1/officers").get_json()["officers"]
    assert [o["officerNumber"] for o in officers] == [officer.officer_number]
