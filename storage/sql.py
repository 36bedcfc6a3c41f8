"""Durable backend on Flask-SQLAlchemy.

Needs an application context, like every ``db.session`` user. Ids come from the
database's autoincrement, so concurrent creates never share an id.
"""

import dataclasses
import json
import time
from typing import Any, Callable, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from extensions import db
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
    field_names,
    utcnow_iso,
)
from storage.base import (
    IMMUTABLE_USER_FIELDS,
    DuplicateUsernameError,
    IStorage,
    SessionStore,
    mutable_changes,
)
from storage.session_store import DEFAULT_SWEEP_INTERVAL, DEFAULT_TTL
from storage.sql_models import (
    ActivityRow,
    AdSettingRow,
    AppSettingRow,
    BusRouteRow,
    ContentRow,
    CrowdReportRow,
    DocumentRow,
    SessionRow,
    TrainRouteRow,
    UserRow,
)


def _to_entity(entity_cls, row):
    if row is None:
        return None
    return entity_cls(**{name: getattr(row, name) for name in field_names(entity_cls)})


def _insert(row_cls, entity):
    """Persist ``entity`` (whose id is a placeholder) and return it with its id."""
    values = dataclasses.asdict(entity)
    values.pop("id")
    row = row_cls(**values)
    db.session.add(row)
    db.session.commit()
    return dataclasses.replace(entity, id=row.id)


def _update(row_cls, entity_cls, row_id: int, changes: Mapping[str, Any]):
    row = db.session.get(row_cls, row_id)
    if row is None:
        return None
    for name, value in changes.items():
        setattr(row, name, value)
    db.session.commit()
    return _to_entity(entity_cls, row)


def _delete(row_cls, row_id: int) -> bool:
    row = db.session.get(row_cls, row_id)
    if row is None:
        return False
    db.session.delete(row)
    db.session.commit()
    return True


class SqlSessionStore(SessionStore):
    """Session rows with an absolute ``expires_at`` (epoch seconds)."""

    def __init__(
        self,
        ttl: int = DEFAULT_TTL,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._last_sweep = clock()

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self.sweep_interval:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        removed = SessionRow.query.filter(SessionRow.expires_at <= now).delete()
        db.session.commit()
        self._last_sweep = now
        return removed

    def get(self, sid: str) -> Optional[dict]:
        now = self._clock()
        self._maybe_sweep(now)
        row = db.session.get(SessionRow, sid)
        if row is None:
            return None
        if row.expires_at <= now:
            db.session.delete(row)
            db.session.commit()
            return None
        return json.loads(row.data)

    def set(self, sid: str, data: Mapping[str, Any]) -> None:
        now = self._clock()
        self._maybe_sweep(now)
        row = db.session.get(SessionRow, sid)
        if row is None:
            row = SessionRow(sid=sid)
            db.session.add(row)
        row.data = json.dumps(dict(data))
        row.expires_at = now + self.ttl
        db.session.commit()

    def destroy(self, sid: str) -> bool:
        return _delete(SessionRow, sid)

    def sweep(self) -> int:
        return self._sweep(self._clock())


class SqlStorage(IStorage):

    def __init__(
        self,
        session_store: Optional[SessionStore] = None,
        session_ttl: int = DEFAULT_TTL,
        sweep_interval: int = DEFAULT_SWEEP_INTERVAL,
    ) -> None:
        self._session_store = session_store or SqlSessionStore(
            ttl=session_ttl, sweep_interval=sweep_interval
        )

    @property
    def session_store(self) -> SessionStore:
        return self._session_store

    # ---- users ----
    def get_user(self, user_id: int) -> Optional[User]:
        return _to_entity(User, db.session.get(UserRow, user_id))

    def get_user_by_username(self, username: str) -> Optional[User]:
        return _to_entity(User, UserRow.query.filter_by(username=username).first())

    def get_users(self) -> list[User]:
        return [_to_entity(User, row) for row in UserRow.query.order_by(UserRow.id).all()]

    def create_user(self, data: Mapping[str, Any]) -> User:
        try:
            return _insert(UserRow, User(
                id=None,
                username=data["username"],
                password=data["password"],
                full_name=data.get("full_name"),
                role=data.get("role") or ROLE_USER,
            ))
        except IntegrityError as exc:
            db.session.rollback()
            raise DuplicateUsernameError(data["username"]) from exc

    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        return _update(UserRow, User, user_id, mutable_changes(changes, IMMUTABLE_USER_FIELDS))

    def delete_user(self, user_id: int) -> bool:
        return _delete(UserRow, user_id)

    # ---- activities ----
    def get_activities(self) -> list[Activity]:
        return [_to_entity(Activity, row) for row in ActivityRow.query.order_by(ActivityRow.id).all()]

    def get_activities_by_user_id(self, user_id: int) -> list[Activity]:
        rows = ActivityRow.query.filter_by(user_id=user_id).order_by(ActivityRow.id).all()
        return [_to_entity(Activity, row) for row in rows]

    def create_activity(self, data: Mapping[str, Any]) -> Activity:
        values = {"timestamp": utcnow_iso(), **mutable_changes(data)}
        return _insert(ActivityRow, Activity(id=None, **values))

    # ---- documents ----
    def get_documents_by_user_id(self, user_id: int) -> list[Document]:
        rows = DocumentRow.query.filter_by(user_id=user_id).order_by(DocumentRow.id).all()
        return [_to_entity(Document, row) for row in rows]

    def create_document(self, data: Mapping[str, Any]) -> Document:
        values = {"last_updated": utcnow_iso(), **mutable_changes(data)}
        return _insert(DocumentRow, Document(id=None, **values))

    # ---- contents ----
    def get_contents(self) -> list[Content]:
        return [_to_entity(Content, row) for row in ContentRow.query.order_by(ContentRow.id).all()]

    def create_content(self, data: Mapping[str, Any]) -> Content:
        values = {"published_date": utcnow_iso(), **mutable_changes(data)}
        return _insert(ContentRow, Content(id=None, **values))

    # ---- train routes ----
    def get_train_routes(self) -> list[TrainRoute]:
        return [_to_entity(TrainRoute, row) for row in TrainRouteRow.query.order_by(TrainRouteRow.id).all()]

    def get_train_route(self, route_id: int) -> Optional[TrainRoute]:
        return _to_entity(TrainRoute, db.session.get(TrainRouteRow, route_id))

    def create_train_route(self, data: Mapping[str, Any]) -> TrainRoute:
        now = utcnow_iso()
        values = {**mutable_changes(data), "created_at": now, "updated_at": now}
        return _insert(TrainRouteRow, TrainRoute(id=None, **values))

    def update_train_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[TrainRoute]:
        changes = {**mutable_changes(changes), "updated_at": utcnow_iso()}
        return _update(TrainRouteRow, TrainRoute, route_id, changes)

    def delete_train_route(self, route_id: int) -> bool:
        return _delete(TrainRouteRow, route_id)

    # ---- bus routes ----
    def get_bus_routes(self) -> list[BusRoute]:
        return [_to_entity(BusRoute, row) for row in BusRouteRow.query.order_by(BusRouteRow.id).all()]

    def get_bus_route(self, route_id: int) -> Optional[BusRoute]:
        return _to_entity(BusRoute, db.session.get(BusRouteRow, route_id))

    def create_bus_route(self, data: Mapping[str, Any]) -> BusRoute:
        now = utcnow_iso()
        values = {**mutable_changes(data), "created_at": now, "updated_at": now}
        return _insert(BusRouteRow, BusRoute(id=None, **values))

    def update_bus_route(self, route_id: int, changes: Mapping[str, Any]) -> Optional[BusRoute]:
        changes = {**mutable_changes(changes), "updated_at": utcnow_iso()}
        return _update(BusRouteRow, BusRoute, route_id, changes)

    def delete_bus_route(self, route_id: int) -> bool:
        return _delete(BusRouteRow, route_id)

    # ---- crowd reports ----
    def get_crowd_reports(self) -> list[CrowdReport]:
        rows = CrowdReportRow.query.order_by(CrowdReportRow.id).all()
        return [_to_entity(CrowdReport, row) for row in rows]

    def get_crowd_reports_by_user_id(self, user_id: int) -> list[CrowdReport]:
        rows = CrowdReportRow.query.filter_by(user_id=user_id).order_by(CrowdReportRow.id).all()
        return [_to_entity(CrowdReport, row) for row in rows]

    def get_crowd_reports_by_station(self, station_name: str) -> list[CrowdReport]:
        rows = CrowdReportRow.query.filter_by(station_name=station_name).order_by(CrowdReportRow.id).all()
        return [_to_entity(CrowdReport, row) for row in rows]

    def create_crowd_report(self, data: Mapping[str, Any]) -> CrowdReport:
        values = {"timestamp": utcnow_iso(), **mutable_changes(data), "is_approved": False}
        return _insert(CrowdReportRow, CrowdReport(id=None, **values))

    def approve_crowd_report(self, report_id: int) -> Optional[CrowdReport]:
        return _update(CrowdReportRow, CrowdReport, report_id, {"is_approved": True})

    # ---- ad settings ----
    def get_ad_settings(self) -> list[AdSetting]:
        return [_to_entity(AdSetting, row) for row in AdSettingRow.query.order_by(AdSettingRow.id).all()]

    def get_ad_setting(self, setting_id: int) -> Optional[AdSetting]:
        return _to_entity(AdSetting, db.session.get(AdSettingRow, setting_id))

    def create_ad_setting(self, data: Mapping[str, Any]) -> AdSetting:
        values = {**mutable_changes(data), "last_updated": utcnow_iso()}
        return _insert(AdSettingRow, AdSetting(id=None, **values))

    def update_ad_setting(self, setting_id: int, changes: Mapping[str, Any]) -> Optional[AdSetting]:
        changes = {**mutable_changes(changes), "last_updated": utcnow_iso()}
        return _update(AdSettingRow, AdSetting, setting_id, changes)

    # ---- app settings ----
    def get_app_settings_by_category(self, category: str) -> list[AppSetting]:
        rows = AppSettingRow.query.filter_by(category=category).order_by(AppSettingRow.id).all()
        return [_to_entity(AppSetting, row) for row in rows]

    def get_app_setting(self, category: str, key: str) -> Optional[AppSetting]:
        return _to_entity(AppSetting, AppSettingRow.query.filter_by(category=category, key=key).first())

    def save_app_setting(
        self, category: str, key: str, value: str, updated_by: Optional[int] = None
    ) -> tuple[AppSetting, bool]:
        now = utcnow_iso()
        row = AppSettingRow.query.filter_by(category=category, key=key).first()
        if row is None:
            try:
                created = _insert(AppSettingRow, AppSetting(
                    id=None, category=category, key=key, value=value, updated_by=updated_by, updated_at=now,
                ))
                return created, True
            except IntegrityError:
                # lost the race to a concurrent insert of the same key
                db.session.rollback()
                row = AppSettingRow.query.filter_by(category=category, key=key).one()
        row.value = value
        row.updated_by = updated_by
        row.updated_at = now
        db.session.commit()
        return _to_entity(AppSetting, row), False

    def delete_app_setting(self, setting_id: int) -> bool:
        return _delete(AppSettingRow, setting_id)
