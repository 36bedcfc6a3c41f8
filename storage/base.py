"""The persistence seam between route handlers and a storage backend.

Handlers depend on ``IStorage`` only. Every backend honours the same rules:

* ``get_*`` returns the entity or ``None``; absence is never an exception.
* ``create_*`` assigns a fresh id and returns the stored entity.
* ``update_*`` returns the merged entity, or ``None`` for an unknown id. It
  never inserts.
* ``delete_*`` returns whether a record existed and was removed.
* ``create_user`` refuses a taken username with ``DuplicateUsernameError``,
  checked atomically with the insert.

Stores assume validated input; validation lives in ``schemas``.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from models import (
    Activity,
    AdSetting,
    AppSetting,
    BusRoute,
    Content,
    CrowdReport,
    Document,
    TrainRoute,
    User,
)

# Fields an update may never touch.
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
IMMUTABLE_USER_FIELDS = IMMUTABLE_FIELDS | {"username"}


def mutable_changes(changes: Mapping[str, Any], immutable=IMMUTABLE_FIELDS) -> dict:
    return {k: v for k, v in changes.items() if k not in immutable}


class DuplicateUsernameError(ValueError):
    """Raised by ``create_user`` when the username is already taken."""


class SessionStore(ABC):
    """Server-side session data keyed by the opaque id in the session cookie.

    Entries older than the store's TTL are treated as absent.
    """

    @abstractmethod
    def get(self, sid: str) -> Optional[dict]: ...

    @abstractmethod
    def set(self, sid: str, data: Mapping[str, Any]) -> None: ...

    @abstractmethod
    def destroy(self, sid: str) -> bool: ...

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired entries and return how many were removed."""


class IStorage(ABC):

    @property
    @abstractmethod
    def session_store(self) -> SessionStore: ...

    # ---- users ----
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_users(self) -> list[User]: ...

    @abstractmethod
    def create_user(self, data: Mapping[str, Any]) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]: ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    # ---- activities (append-only) ----
    @abstractmethod
    def get_activities(self) -> list[Activity]: ...

    @abstractmethod
    def get_activities_by_user_id(self, user_id: int) -> list[Activity]: ...

    @abstractmethod
    def create_activity(self, data: Mapping[str, Any]) -> Activity: ...

    # ---- documents ----
    @abstractmethod
    def get_documents_by_user_id(self, user_id: int) -> list[Document]: ...

    @abstractmethod
    def create_document(self, data: Mapping[str, Any]) -> Document: ...

    # ---- contents ----
    @abstractmethod
    def get_contents(self) -> list[Content]: ...

    @abstractmethod
    def create_content(self, data: Mapping[str, Any]) -> Content: ...

    # ---- train routes ----
    @abstractmethod
    def get_train_routes(self) -> list[TrainRoute]: ...

    @abstractmethod
    def get_train_route(self, route_id: int) -> Optional[TrainRoute]: ...

    @abstractmethod
    def create_train_route(self, data: Mapping[str, Any]) -> TrainRoute: ...

    @abstractmethod
    def update_train_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[TrainRoute]: ...

    @abstractmethod
    def delete_train_route(self, route_id: int) -> bool: ...

    # ---- bus routes ----
    @abstractmethod
    def get_bus_routes(self) -> list[BusRoute]: ...

    @abstractmethod
    def get_bus_route(self, route_id: int) -> Optional[BusRoute]: ...

    @abstractmethod
    def create_bus_route(self, data: Mapping[str, Any]) -> BusRoute: ...

    @abstractmethod
    def update_bus_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[BusRoute]: ...

    @abstractmethod
    def delete_bus_route(self, route_id: int) -> bool: ...

    # ---- crowd reports ----
    @abstractmethod
    def get_crowd_reports(self) -> list[CrowdReport]: ...

    @abstractmethod
    def get_crowd_reports_by_user_id(self, user_id: int) -> list[CrowdReport]: ...

    @abstractmethod
    def get_crowd_reports_by_station(self, station_name: str) -> list[CrowdReport]: ...

    @abstractmethod
    def create_crowd_report(self, data: Mapping[str, Any]) -> CrowdReport:
        """Store a new report; it always starts unapproved."""

    @abstractmethod
    def approve_crowd_report(self, report_id: int) -> Optional[CrowdReport]:
        """Mark a report approved. Approving twice is a no-op."""

    # ---- ad settings ----
    @abstractmethod
    def get_ad_settings(self) -> list[AdSetting]: ...

    @abstractmethod
    def get_ad_setting(self, setting_id: int) -> Optional[AdSetting]: ...

    @abstractmethod
    def create_ad_setting(self, data: Mapping[str, Any]) -> AdSetting: ...

    @abstractmethod
    def update_ad_setting(self, setting_id: int, changes: Mapping[str, Any]) -> Optional[AdSetting]: ...

    # ---- app settings ----
    @abstractmethod
    def get_app_settings_by_category(self, category: str) -> list[AppSetting]: ...

    @abstractmethod
    def get_app_setting(self, category: str, key: str) -> Optional[AppSetting]: ...

    @abstractmethod
    def save_app_setting(
        self, category: str, key: str, value: str, updated_by: Optional[int] = None
    ) -> tuple[AppSetting, bool]:
        """Upsert and report whether a new row was inserted."""

    def upsert_app_setting(
        self, category: str, key: str, value: str, updated_by: Optional[int] = None
    ) -> AppSetting:
        """Insert, or update in place when (category, key) already exists."""
        return self.save_app_setting(category, key, value, updated_by)[0]

    @abstractmethod
    def delete_app_setting(self, setting_id: int) -> bool: ...
