"""Entity types shared by every storage backend.

Entities are plain dataclasses. Stores build them with the constructor and
fill the server-assigned fields (id, timestamps, approval flag), so a record
never leaves storage with a missing field.
"""

from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from typing import Optional

from flask_login import UserMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def utcnow_iso() -> str:
    """UTC timestamp in the ``2024-01-31T12:00:00.000Z`` form."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def field_names(entity_cls) -> list[str]:
    return [f.name for f in fields(entity_cls)]


def to_json(entity, exclude=()) -> dict:
    """Serialize an entity with camelCase keys, as the dashboard expects."""
    return {_camel(k): v for k, v in asdict(entity).items() if k not in exclude}


@dataclass
class User(UserMixin):
    """An account; ``password`` holds the digest, never the plaintext."""

    id: int
    username: str
    password: str
    full_name: Optional[str] = None
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def public(self) -> dict:
        return to_json(self, exclude=("password",))

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.username}>"


@dataclass
class Activity:
    id: int
    user_id: int
    action: str
    category: str
    timestamp: str
    status: str


@dataclass
class Document:
    id: int
    user_id: int
    title: str
    category: str
    type: str
    last_updated: str
    status: str = "public"


@dataclass
class Content:
    id: int
    title: str
    published_date: str
    summary: str
    author: str
    status: str = "public"
    views: int = 0


@dataclass
class TrainRoute:
    id: int
    route_name: str
    source_station: str
    destination_station: str
    departure_time: str
    arrival_time: str
    train_number: str
    created_at: str
    updated_at: str
    status: str = "on-time"
    train_type: str = "local"
    is_active: bool = True


@dataclass
class BusRoute:
    id: int
    route_name: str
    route_number: str
    source_stop: str
    destination_stop: str
    departure_time: str
    arrival_time: str
    frequency: str
    fare: str
    created_at: str
    updated_at: str
    bus_type: str = "regular"
    is_active: bool = True


@dataclass
class CrowdReport:
    """A rider's observation; hidden from other riders until approved."""

    id: int
    user_id: int
    station_name: str
    crowd_level: str
    transport_type: str
    timestamp: str
    route_id: Optional[int] = None
    is_approved: bool = False


@dataclass
class AdSetting:
    id: int
    ad_type: str
    last_updated: str
    updated_by: int
    is_active: bool = True
    frequency: int = 5
    position: str = "bottom"


@dataclass
class AppSetting:
    id: int
    category: str
    key: str
    value: str
    updated_at: str
    updated_by: Optional[int] = None
