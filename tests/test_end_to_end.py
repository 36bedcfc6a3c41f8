"""A new rider signs up, is refused the back office, and is promoted."""

from conftest import login


def test_register_login_promote(app, client, admin_client) -> None:
    registered = client.post("/api/register", json={"username": "alice", "password": "pw123456"})
    assert registered.status_code == 201
    alice_id = registered.get_json()["id"]

    client.post("/api/logout")
    assert login(client, "alice", "pw123456").status_code == 200
    assert client.get("/api/admin/users").status_code == 403

    promoted = admin_client.patch(f"/api/admin/users/{alice_id}", json={"role": "admin"})
    assert promoted.status_code == 200

    resp = client.get("/api/admin/users")
    assert resp.status_code == 200
    users = resp.get_json()
    alice = next(u for u in users if u["username"] == "alice")
    assert alice["role"] == "admin"
    assert all("password" not in u for u in users)


def test_seeded_app_accepts_default_admin(app_factory) -> None:
    app = app_factory(SEED_REFERENCE_DATA=True, ADMIN_PASSWORD="admin123")
    client = app.test_client()

    assert login(client, "admin", "admin123").status_code == 200
    assert len(client.get("/api/admin/train-routes").get_json()) == 5
    assert len(client.get("/api/transit/bus-routes").get_json()) == 5
    assert client.get("/api/admin/app-settings/general/siteName").get_json()["value"] == "Transit App"


def test_sql_backend_serves_the_same_api(app_factory) -> None:
    app = app_factory(STORAGE_BACKEND="sql", SQLALCHEMY_DATABASE_URI="sqlite://", SEED_REFERENCE_DATA=True)
    client = app.test_client()

    assert client.post("/api/register", json={"username": "alice", "password": "pw123456"}).status_code == 201
    assert client.get("/api/user").get_json()["username"] == "alice"
    assert client.get("/api/admin/users").status_code == 403

    admin = app.test_client()
    assert login(admin, "admin", "admin123").status_code == 200
    users = admin.get("/api/admin/users").get_json()
    assert [u["username"] for u in users] == ["admin", "alice"]
