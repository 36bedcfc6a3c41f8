"""Timetable management and the rider-facing timetable views."""

import pytest

TRAIN = {
    "routeName": "Harbour Line", "sourceStation": "CSMT", "destinationStation": "Panvel",
    "departureTime": "08:15", "arrivalTime": "09:30", "trainNumber": "MUM-003",
}
BUS = {
    "routeName": "Worli Connector", "routeNumber": "BUS-307", "sourceStop": "Worli",
    "destinationStop": "BKC", "departureTime": "09:00", "arrivalTime": "10:15",
    "frequency": "every 20 min", "fare": "₹45",
}


@pytest.mark.parametrize("kind, payload", [("train-routes", TRAIN), ("bus-routes", BUS)])
def test_route_crud(admin_client, kind, payload) -> None:
    created = admin_client.post(f"/api/admin/{kind}", json=payload)
    assert created.status_code == 201
    route = created.get_json()
    assert route["id"] == 1 and route["isActive"] is True
    assert route["createdAt"] == route["updatedAt"]

    fetched = admin_client.get(f"/api/admin/{kind}/{route['id']}")
    assert fetched.get_json() == route

    updated = admin_client.put(f"/api/admin/{kind}/{route['id']}", json={"isActive": False})
    assert updated.status_code == 200
    assert updated.get_json()["isActive"] is False
    assert updated.get_json()["routeName"] == payload["routeName"]

    assert admin_client.delete(f"/api/admin/{kind}/{route['id']}").status_code == 204
    assert admin_client.get(f"/api/admin/{kind}/{route['id']}").status_code == 404
    assert admin_client.delete(f"/api/admin/{kind}/{route['id']}").status_code == 404


def test_train_route_defaults(admin_client) -> None:
    route = admin_client.post("/api/admin/train-routes", json=TRAIN).get_json()
    assert route["status"] == "on-time"
    assert route["trainType"] == "local"


def test_missing_required_field_is_400(admin_client) -> None:
    payload = {k: v for k, v in TRAIN.items() if k != "trainNumber"}
    resp = admin_client.post("/api/admin/train-routes", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "trainNumber"


def test_update_of_missing_route_is_404(admin_client, storage) -> None:
    resp = admin_client.put("/api/admin/bus-routes/42", json={"fare": "₹10"})
    assert resp.status_code == 404
    assert storage.get_bus_routes() == []


def test_null_in_update_leaves_field_alone(admin_client) -> None:
    route = admin_client.post("/api/admin/train-routes", json=TRAIN).get_json()
    resp = admin_client.put(f"/api/admin/train-routes/{route['id']}", json={"status": None, "trainType": "fast"})
    assert resp.get_json()["status"] == "on-time"
    assert resp.get_json()["trainType"] == "fast"


def test_riders_only_see_active_routes(admin_client, rider_client) -> None:
    admin_client.post("/api/admin/train-routes", json=TRAIN)
    admin_client.post("/api/admin/train-routes", json={**TRAIN, "trainNumber": "MUM-004", "isActive": False})
    admin_client.post("/api/admin/bus-routes", json=BUS)

    trains = rider_client.get("/api/transit/train-routes").get_json()
    assert [t["trainNumber"] for t in trains] == ["MUM-003"]
    assert len(rider_client.get("/api/transit/bus-routes").get_json()) == 1
    assert len(admin_client.get("/api/admin/train-routes").get_json()) == 2


def test_route_changes_are_audited(admin_client, admin_user, storage) -> None:
    route = admin_client.post("/api/admin/train-routes", json=TRAIN).get_json()
    admin_client.delete(f"/api/admin/train-routes/{route['id']}")

    trail = storage.get_activities_by_user_id(admin_user.id)
    assert [a.action for a in trail] == ["Added train route Harbour Line", f"Deleted train route #{route['id']}"]
    assert {a.category for a in trail} == {"Route management"}
