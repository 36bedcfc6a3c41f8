"""Behaviour every IStorage backend must share."""

import threading

import pytest

from storage import DuplicateUsernameError, MemStorage, get_storage

TRAIN = dict(route_name="Western Line", source_station="Churchgate", destination_station="Borivali",
             departure_time="07:30", arrival_time="08:45", train_number="MUM-002")
BUS = dict(route_name="Bandra Local", route_number="BUS-211", source_stop="Bandra", destination_stop="Kurla",
           departure_time="08:00", arrival_time="09:15", frequency="every 10 min", fare="₹25")


@pytest.fixture(params=["memory", "sql"])
def store(request, app_factory):
    if request.param == "memory":
        yield MemStorage()
        return
    app = app_factory(STORAGE_BACKEND="sql", SQLALCHEMY_DATABASE_URI="sqlite://")
    with app.app_context():
        yield get_storage()


def _user(store, username="alice", role="user"):
    return store.create_user({"username": username, "password": "digest", "role": role})


# ---------- identifiers ----------
def test_ids_start_at_one_and_increase_per_type(store) -> None:
    assert _user(store, "a").id == 1
    assert _user(store, "b").id == 2
    assert store.create_train_route(TRAIN).id == 1
    assert store.create_bus_route(BUS).id == 1


def test_deleted_ids_are_not_reused(store) -> None:
    first = store.create_train_route(TRAIN)
    second = store.create_train_route(TRAIN)
    assert store.delete_train_route(second.id)
    third = store.create_train_route(TRAIN)
    assert third.id not in (first.id, second.id)


# ---------- create / get ----------
def test_create_then_get_returns_equal_entities(store) -> None:
    user = _user(store)
    assert store.get_user(user.id) == user
    assert store.get_user_by_username("alice") == user

    route = store.create_train_route(TRAIN)
    assert store.get_train_route(route.id) == route
    bus = store.create_bus_route(BUS)
    assert store.get_bus_route(bus.id) == bus

    ad = store.create_ad_setting({"ad_type": "banner", "updated_by": user.id})
    assert store.get_ad_setting(ad.id) == ad

    setting = store.upsert_app_setting("general", "siteName", "Transit", user.id)
    assert store.get_app_setting("general", "siteName") == setting


def test_create_fills_server_defaults(store) -> None:
    user = store.create_user({"username": "bob", "password": "digest"})
    assert user.role == "user"
    assert user.full_name is None

    route = store.create_train_route(TRAIN)
    assert route.status == "on-time"
    assert route.train_type == "local"
    assert route.is_active is True
    assert route.created_at == route.updated_at

    ad = store.create_ad_setting({"ad_type": "banner", "updated_by": user.id})
    assert (ad.frequency, ad.position, ad.is_active) == (5, "bottom", True)
    assert ad.last_updated


def test_missing_records_return_none(store) -> None:
    assert store.get_user(99) is None
    assert store.get_user_by_username("nobody") is None
    assert store.get_train_route(99) is None
    assert store.get_bus_route(99) is None
    assert store.get_ad_setting(99) is None
    assert store.get_app_setting("general", "missing") is None


# ---------- update ----------
def test_update_merges_and_refreshes_timestamp(store) -> None:
    route = store.create_train_route(TRAIN)
    updated = store.update_train_route(route.id, {"status": "delayed"})

    assert updated.status == "delayed"
    assert updated.route_name == route.route_name
    assert updated.created_at == route.created_at
    assert updated.updated_at >= route.updated_at
    assert store.get_train_route(route.id) == updated


def test_update_of_missing_id_does_not_create(store) -> None:
    _user(store)
    assert store.update_user(42, {"full_name": "Ghost"}) is None
    assert len(store.get_users()) == 1

    assert store.update_train_route(42, {"status": "delayed"}) is None
    assert store.update_bus_route(42, {"fare": "₹1"}) is None
    assert store.update_ad_setting(42, {"position": "top"}) is None
    assert store.get_train_routes() == []
    assert store.get_bus_routes() == []
    assert store.get_ad_settings() == []


def test_update_cannot_change_id_or_username(store) -> None:
    user = _user(store)
    updated = store.update_user(user.id, {"id": 7, "username": "mallory", "role": "admin"})
    assert updated.id == user.id
    assert updated.username == "alice"
    assert updated.role == "admin"


# ---------- usernames ----------
def test_duplicate_username_is_refused(store) -> None:
    first = _user(store, "alice")
    with pytest.raises(DuplicateUsernameError):
        _user(store, "alice", role="admin")

    assert store.get_users() == [first]
    # the store stays usable after a refused insert
    assert _user(store, "bob").username == "bob"


# ---------- delete ----------
@pytest.mark.parametrize("kind", ["train", "bus", "app_setting", "user"])
def test_delete_is_true_exactly_once(store, kind) -> None:
    if kind == "train":
        row_id, delete = store.create_train_route(TRAIN).id, store.delete_train_route
    elif kind == "bus":
        row_id, delete = store.create_bus_route(BUS).id, store.delete_bus_route
    elif kind == "app_setting":
        row_id, delete = store.upsert_app_setting("email", "smtpPort", "587").id, store.delete_app_setting
    else:
        row_id, delete = _user(store).id, store.delete_user

    assert delete(row_id) is True
    assert delete(row_id) is False
    assert delete(row_id) is False


# ---------- crowd reports ----------
def test_crowd_reports_start_unapproved_and_approve_idempotently(store) -> None:
    report = store.create_crowd_report({
        "user_id": 1, "station_name": "Dadar", "crowd_level": "high",
        "transport_type": "train", "route_id": 2, "is_approved": True,
    })
    assert report.is_approved is False
    assert report.timestamp

    once = store.approve_crowd_report(report.id)
    twice = store.approve_crowd_report(report.id)
    assert once.is_approved and twice.is_approved
    assert twice == once
    assert store.approve_crowd_report(999) is None


def test_crowd_report_queries(store) -> None:
    for user_id, station in ((1, "Dadar"), (2, "Dadar"), (1, "Thane")):
        store.create_crowd_report({"user_id": user_id, "station_name": station,
                                   "crowd_level": "low", "transport_type": "train"})

    assert len(store.get_crowd_reports()) == 3
    assert {r.station_name for r in store.get_crowd_reports_by_user_id(1)} == {"Dadar", "Thane"}
    assert {r.user_id for r in store.get_crowd_reports_by_station("Dadar")} == {1, 2}
    assert store.get_crowd_reports_by_station("Nowhere") == []


# ---------- app settings ----------
def test_upsert_keeps_one_row_per_category_and_key(store) -> None:
    first = store.upsert_app_setting("general", "siteName", "Transit App", 1)
    second = store.upsert_app_setting("general", "siteName", "Metro App", 2)

    rows = store.get_app_settings_by_category("general")
    assert len(rows) == 1
    assert second.id == first.id
    assert rows[0].value == "Metro App"
    assert rows[0].updated_by == 2


def test_save_app_setting_reports_insert(store) -> None:
    created, inserted = store.save_app_setting("general", "siteName", "Transit App", 1)
    updated, inserted_again = store.save_app_setting("general", "siteName", "Metro App", 1)

    assert (inserted, inserted_again) == (True, False)
    assert updated.id == created.id


def test_same_key_in_other_category_is_separate(store) -> None:
    store.upsert_app_setting("general", "name", "a")
    store.upsert_app_setting("email", "name", "b")
    assert store.get_app_setting("general", "name").value == "a"
    assert store.get_app_setting("email", "name").value == "b"


# ---------- owned rows ----------
def test_activities_and_documents_are_scoped_by_user(store) -> None:
    store.create_activity({"user_id": 1, "action": "Logged in", "category": "Account", "status": "Info"})
    store.create_activity({"user_id": 2, "action": "Logged in", "category": "Account", "status": "Info"})
    store.create_document({"user_id": 1, "title": "Guide", "category": "Guides", "type": "DOC"})

    assert [a.user_id for a in store.get_activities_by_user_id(1)] == [1]
    assert len(store.get_activities()) == 2
    docs = store.get_documents_by_user_id(1)
    assert len(docs) == 1 and docs[0].status == "public" and docs[0].last_updated
    assert store.get_documents_by_user_id(2) == []


def test_contents_are_listed_in_creation_order(store) -> None:
    store.create_content({"title": "One", "summary": "s", "author": "A"})
    store.create_content({"title": "Two", "summary": "s", "author": "A", "views": 3})
    contents = store.get_contents()
    assert [c.title for c in contents] == ["One", "Two"]
    assert contents[0].views == 0 and contents[1].views == 3


# ---------- memory backend only ----------
def test_concurrent_creates_get_distinct_ids() -> None:
    store = MemStorage()
    ids = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            route = store.create_train_route(TRAIN)
            with lock:
                ids.append(route.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ids) == 400
    assert len(set(ids)) == 400


def test_stores_are_independent() -> None:
    first, second = MemStorage(), MemStorage()
    _user(first)
    assert second.get_users() == []


def test_concurrent_registrations_keep_usernames_unique() -> None:
    store = MemStorage()
    barrier = threading.Barrier(8)
    created, refused = [], []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            user = _user(store, "dupe")
        except DuplicateUsernameError:
            with lock:
                refused.append(1)
        else:
            with lock:
                created.append(user)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(created) == 1
    assert len(refused) == 7
    assert [u.username for u in store.get_users()] == ["dupe"]
