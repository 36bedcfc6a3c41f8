"""Reference backend: one dict and one id counter per entity type."""

import dataclasses
import threading
from typing import Any, Callable, Iterator, Mapping, Optional

from models import (
    ROLE_USER,
    Activity,
    AdSetting,
    AppSetting,
    BusRoute,
    Content,
    CrowdReport,
    Document,
    TrainRoute,
    User,
    utcnow_iso,
)
from storage.base import (
    IMMUTABLE_USER_FIELDS,
    DuplicateUsernameError,
    IStorage,
    SessionStore,
    mutable_changes,
)
from storage.session_store import DEFAULT_SWEEP_INTERVAL, DEFAULT_TTL, MemorySessionStore


class _Table:
    """A map plus its counter, guarded by one lock.

    Ids come from the counter only, so a deleted id is never handed out again.
    """

    def __init__(self) -> None:
        self._rows: dict[int, Any] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def insert(self, build: Callable[[int], Any]):
        with self._lock:
            row_id = self._next_id
            self._next_id += 1
            row = build(row_id)
            self._rows[row_id] = row
            return row

    def get(self, row_id: int):
        return self._rows.get(row_id)

    def all(self) -> list:
        with self._lock:
            return list(self._rows.values())

    def where(self, predicate: Callable[[Any], bool]) -> list:
        return [row for row in self.all() if predicate(row)]

    def replace(self, row_id: int, change: Callable[[Any], Any]):
        with self._lock:
            row = self._rows.get(row_id)
            if row is None:
                return None
            updated = change(row)
            self._rows[row_id] = updated
            return updated

    def delete(self, row_id: int) -> bool:
        with self._lock:
            return self._rows.pop(row_id, None) is not None

    def __iter__(self) -> Iterator:
        return iter(self.all())


class MemStorage(IStorage):
    """Process-local storage. Construct one per app (or per test)."""

    def __init__(
        self,
        session_store: Optional[SessionStore] = None,
        session_ttl: int = DEFAULT_TTL,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._users = _Table()
        # username check and insert must not interleave
        self._users_create = threading.Lock()
        self._activities = _Table()
        self._documents = _Table()
        self._contents = _Table()
        self._train_routes = _Table()
        self._bus_routes = _Table()
        self._crowd_reports = _Table()
        self._ad_settings = _Table()
        self._app_settings = _Table()
        # upsert is check-then-insert across the table, so it needs its own lock
        self._app_settings_upsert = threading.Lock()

        self._session_store = session_store or MemorySessionStore(
            ttl=session_ttl, sweep_interval=sweep_interval
        )

    @property
    def session_store(self) -> SessionStore:
        return self._session_store

    # ---- users ----
    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users:
            if user.username == username:
                return user
        return None

    def get_users(self) -> list[User]:
        return self._users.all()

    def create_user(self, data: Mapping[str, Any]) -> User:
        username = data["username"]
        with self._users_create:
            if any(user.username == username for user in self._users):
                raise DuplicateUsernameError(username)
            return self._users.insert(lambda new_id: User(
                id=new_id,
                username=username,
                password=data["password"],
                full_name=data.get("full_name"),
                role=data.get("role") or ROLE_USER,
            ))

    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        changes = mutable_changes(changes, IMMUTABLE_USER_FIELDS)
        return self._users.replace(user_id, lambda user: dataclasses.replace(user, **changes))

    def delete_user(self, user_id: int) -> bool:
        return self._users.delete(user_id)

    # ---- activities ----
    def get_activities(self) -> list[Activity]:
        return self._activities.all()

    def get_activities_by_user_id(self, user_id: int) -> list[Activity]:
        return self._activities.where(lambda a: a.user_id == user_id)

    def create_activity(self, data: Mapping[str, Any]) -> Activity:
        values = {"timestamp": utcnow_iso(), **mutable_changes(data)}
        return self._activities.insert(lambda new_id: Activity(**values, id=new_id))

    # ---- documents ----
    def get_documents_by_user_id(self, user_id: int) -> list[Document]:
        return self._documents.where(lambda d: d.user_id == user_id)

    def create_document(self, data: Mapping[str, Any]) -> Document:
        values = {"last_updated": utcnow_iso(), **mutable_changes(data)}
        return self._documents.insert(lambda new_id: Document(**values, id=new_id))

    # ---- contents ----
    def get_contents(self) -> list[Content]:
        return self._contents.all()

    def create_content(self, data: Mapping[str, Any]) -> Content:
        values = {"published_date": utcnow_iso(), **mutable_changes(data)}
        return self._contents.insert(lambda new_id: Content(**values, id=new_id))

    # ---- train routes ----
    def get_train_routes(self) -> list[TrainRoute]:
        return self._train_routes.all()

    def get_train_route(self, route_id: int) -> Optional[TrainRoute]:
        return self._train_routes.get(route_id)

    def create_train_route(self, data: Mapping[str, Any]) -> TrainRoute:
        now = utcnow_iso()
        values = mutable_changes(data)
        return self._train_routes.insert(
            lambda new_id: TrainRoute(**{**values, "id": new_id, "created_at": now, "updated_at": now})
        )

    def update_train_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[TrainRoute]:
        return self._train_routes.replace(route_id, self._touch(changes, "updated_at"))

    def delete_train_route(self, route_id: int) -> bool:
        return self._train_routes.delete(route_id)

    # ---- bus routes ----
    def get_bus_routes(self) -> list[BusRoute]:
        return self._bus_routes.all()

    def get_bus_route(self, route_id: int) -> Optional[BusRoute]:
        return self._bus_routes.get(route_id)

    def create_bus_route(self, data: Mapping[str, Any]) -> BusRoute:
        now = utcnow_iso()
        values = mutable_changes(data)
        return self._bus_routes.insert(
            lambda new_id: BusRoute(**{**values, "id": new_id, "created_at": now, "updated_at": now})
        )

    def update_bus_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[BusRoute]:
        return self._bus_routes.replace(route_id, self._touch(changes, "updated_at"))

    def delete_bus_route(self, route_id: int) -> bool:
        return self._bus_routes.delete(route_id)

    # ---- crowd reports ----
    def get_crowd_reports(self) -> list[CrowdReport]:
        return self._crowd_reports.all()

    def get_crowd_reports_by_user_id(self, user_id: int) -> list[CrowdReport]:
        return self._crowd_reports.where(lambda r: r.user_id == user_id)

    def get_crowd_reports_by_station(self, station_name: str) -> list[CrowdReport]:
        return self._crowd_reports.where(lambda r: r.station_name == station_name)

    def create_crowd_report(self, data: Mapping[str, Any]) -> CrowdReport:
        values = {"timestamp": utcnow_iso(), **mutable_changes(data)}
        values["is_approved"] = False
        return self._crowd_reports.insert(lambda new_id: CrowdReport(**values, id=new_id))

    def approve_crowd_report(self, report_id: int) -> Optional[CrowdReport]:
        return self._crowd_reports.replace(
            report_id, lambda report: dataclasses.replace(report, is_approved=True)
        )

    # ---- ad settings ----
    def get_ad_settings(self) -> list[AdSetting]:
        return self._ad_settings.all()

    def get_ad_setting(self, setting_id: int) -> Optional[AdSetting]:
        return self._ad_settings.get(setting_id)

    def create_ad_setting(self, data: Mapping[str, Any]) -> AdSetting:
        values = mutable_changes(data)
        values["last_updated"] = utcnow_iso()
        return self._ad_settings.insert(lambda new_id: AdSetting(**values, id=new_id))

    def update_ad_setting(self, setting_id: int, changes: Mapping[str, Any]) -> Optional[AdSetting]:
        return self._ad_settings.replace(setting_id, self._touch(changes, "last_updated"))

    # ---- app settings ----
    def get_app_settings_by_category(self, category: str) -> list[AppSetting]:
        return self._app_settings.where(lambda s: s.category == category)

    def get_app_setting(self, category: str, key: str) -> Optional[AppSetting]:
        for setting in self._app_settings:
            if setting.category == category and setting.key == key:
                return setting
        return None

    def save_app_setting(
        self, category: str, key: str, value: str, updated_by: Optional[int] = None
    ) -> tuple[AppSetting, bool]:
        with self._app_settings_upsert:
            now = utcnow_iso()
            existing = self.get_app_setting(category, key)
            if existing is not None:
                updated = self._app_settings.replace(
                    existing.id,
                    lambda s: dataclasses.replace(s, value=value, updated_by=updated_by, updated_at=now),
                )
                if updated is not None:
                    return updated, False
            created = self._app_settings.insert(lambda new_id: AppSetting(
                id=new_id,
                category=category,
                key=key,
                value=value,
                updated_by=updated_by,
                updated_at=now,
            ))
            return created, True

    def delete_app_setting(self, setting_id: int) -> bool:
        with self._app_settings_upsert:
            return self._app_settings.delete(setting_id)

    @staticmethod
    def _touch(changes: Mapping[str, Any], stamp_field: str):
        changes = mutable_changes(changes)

        def apply(row):
            return dataclasses.replace(row, **{**changes, stamp_field: utcnow_iso()})

        return apply
