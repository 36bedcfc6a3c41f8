"""Request bodies. The dashboard sends camelCase; handlers get snake_case dicts."""

from typing import Annotated, Literal, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from errors import ValidationFailed

Role = Literal["user", "admin"]
CrowdLevel = Literal["low", "medium", "high"]
TransportType = Literal["train", "bus", "metro"]
AdType = Literal["banner", "interstitial", "rewarded", "native"]

USERNAME_MIN = 3
PASSWORD_MIN = 6

_CAMEL_CASE = dict(alias_generator=to_camel, populate_by_name=True)

Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class ApiModel(BaseModel):
    model_config = ConfigDict(**_CAMEL_CASE, str_strip_whitespace=True)


class CredentialsModel(BaseModel):
    # passwords are hashed byte for byte; only the name fields are trimmed
    model_config = ConfigDict(**_CAMEL_CASE)


def parse_body(schema: type[BaseModel]) -> BaseModel:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return schema.model_validate(data)


def values(model: BaseModel, partial: bool = False) -> dict:
    """Fields for storage; a partial update only carries what was sent."""
    if partial:
        return model.model_dump(exclude_unset=True, exclude_none=True)
    return model.model_dump(exclude_none=True)


# ---- auth / users ----
class LoginIn(CredentialsModel):
    username: Trimmed = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterIn(CredentialsModel):
    username: Trimmed = Field(min_length=USERNAME_MIN, max_length=150)
    password: str = Field(min_length=PASSWORD_MIN)
    full_name: Optional[Trimmed] = None
    role: Optional[Role] = None


class UserCreateIn(RegisterIn):
    role: Role = "user"


class UserUpdateIn(CredentialsModel):
    # username is immutable; an incoming value is ignored
    full_name: Optional[Trimmed] = None
    role: Optional[Role] = None
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN)


# ---- transit ----
class TrainRouteIn(ApiModel):
    route_name: str = Field(min_length=1)
    source_station: str = Field(min_length=1)
    destination_station: str = Field(min_length=1)
    departure_time: str = Field(min_length=1)
    arrival_time: str = Field(min_length=1)
    train_number: str = Field(min_length=1)
    status: Optional[str] = None
    train_type: Optional[str] = None
    is_active: Optional[bool] = None


class TrainRoutePatch(ApiModel):
    route_name: Optional[str] = Field(default=None, min_length=1)
    source_station: Optional[str] = Field(default=None, min_length=1)
    destination_station: Optional[str] = Field(default=None, min_length=1)
    departure_time: Optional[str] = Field(default=None, min_length=1)
    arrival_time: Optional[str] = Field(default=None, min_length=1)
    train_number: Optional[str] = Field(default=None, min_length=1)
    status: Optional[str] = None
    train_type: Optional[str] = None
    is_active: Optional[bool] = None


class BusRouteIn(ApiModel):
    route_name: str = Field(min_length=1)
    route_number: str = Field(min_length=1)
    source_stop: str = Field(min_length=1)
    destination_stop: str = Field(min_length=1)
    departure_time: str = Field(min_length=1)
    arrival_time: str = Field(min_length=1)
    frequency: str = Field(min_length=1)
    fare: str = Field(min_length=1)
    bus_type: Optional[str] = None
    is_active: Optional[bool] = None


class BusRoutePatch(ApiModel):
    route_name: Optional[str] = Field(default=None, min_length=1)
    route_number: Optional[str] = Field(default=None, min_length=1)
    source_stop: Optional[str] = Field(default=None, min_length=1)
    destination_stop: Optional[str] = Field(default=None, min_length=1)
    departure_time: Optional[str] = Field(default=None, min_length=1)
    arrival_time: Optional[str] = Field(default=None, min_length=1)
    frequency: Optional[str] = Field(default=None, min_length=1)
    fare: Optional[str] = Field(default=None, min_length=1)
    bus_type: Optional[str] = None
    is_active: Optional[bool] = None


class CrowdReportIn(ApiModel):
    station_name: str = Field(min_length=2)
    crowd_level: CrowdLevel
    transport_type: TransportType
    route_id: Optional[int] = None


# ---- back office ----
class ContentIn(ApiModel):
    title: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    status: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = None
    views: Optional[int] = Field(default=None, ge=0)


class AdSettingIn(ApiModel):
    ad_type: AdType
    is_active: Optional[bool] = None
    frequency: Optional[int] = Field(default=None, ge=1)
    position: Optional[str] = None


class AdSettingPatch(ApiModel):
    ad_type: Optional[AdType] = None
    is_active: Optional[bool] = None
    frequency: Optional[int] = Field(default=None, ge=1)
    position: Optional[str] = None


class AppSettingIn(ApiModel):
    category: str = Field(min_length=1)
    key: str = Field(min_length=1)
    value: str
