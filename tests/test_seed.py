"""Reference and demo data."""

from passwords import verify_password
from seed import APP_SETTINGS, BUS_ROUTES, TRAIN_ROUTES, seed_demo_data, seed_reference_data
from storage import MemStorage


def test_reference_data_on_empty_store() -> None:
    storage = MemStorage()
    assert seed_reference_data(storage, "s3cret") is True

    admin = storage.get_user_by_username("admin")
    assert admin.role == "admin"
    assert verify_password("s3cret", admin.password)
    assert len(storage.get_train_routes()) == len(TRAIN_ROUTES)
    assert len(storage.get_bus_routes()) == len(BUS_ROUTES)
    assert len(storage.get_app_settings_by_category("general")) == 3
    assert sum(len(storage.get_app_settings_by_category(c)) for c in ("general", "email", "security")) \
        == len(APP_SETTINGS)


def test_reference_data_skips_populated_store() -> None:
    storage = MemStorage()
    storage.create_user({"username": "someone", "password": "digest"})

    assert seed_reference_data(storage, "s3cret") is False
    assert storage.get_user_by_username("admin") is None
    assert storage.get_train_routes() == []


def test_demo_data_belongs_to_user() -> None:
    storage = MemStorage()
    seed_reference_data(storage, "s3cret")
    admin = storage.get_user_by_username("admin")

    seed_demo_data(storage, admin)
    assert len(storage.get_activities_by_user_id(admin.id)) == 3
    assert len(storage.get_documents_by_user_id(admin.id)) == 2
    assert {c.author for c in storage.get_contents()} == {"Admin User"}


def test_seed_endpoint(app_factory) -> None:
    app = app_factory(SEED_REFERENCE_DATA=True)
    resp = app.test_client().post("/api/seed-demo-data")

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Demo data created successfully"}
    assert len(app.extensions["storage"].get_contents()) == 3


def test_seed_endpoint_without_admin(client) -> None:
    assert client.post("/api/seed-demo-data").status_code == 404


def test_seed_endpoint_absent_in_production(app_factory) -> None:
    app = app_factory(ENV="production")
    assert app.test_client().post("/api/seed-demo-data").status_code == 404
    assert "dev" not in app.blueprints
