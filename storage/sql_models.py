"""SQLAlchemy tables for the durable backend.

Column names match the entity dataclass fields one to one, so rows convert
without a mapping table. ``sqlite_autoincrement`` keeps SQLite from reusing
the id of a deleted last row.
"""

from sqlalchemy import UniqueConstraint

from extensions import db

_AUTOINCREMENT = {"sqlite_autoincrement": True}


class UserRow(db.Model):
    __tablename__ = "users"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(150))
    role = db.Column(db.String(50), nullable=False, default="user")  # user, admin


class ActivityRow(db.Model):
    __tablename__ = "activities"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    action = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=False)
    timestamp = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(50), nullable=False)


class DocumentRow(db.Model):
    __tablename__ = "documents"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    last_updated = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="public")


class ContentRow(db.Model):
    __tablename__ = "contents"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    published_date = db.Column(db.String(32), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(150), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="public")
    views = db.Column(db.Integer, nullable=False, default=0)


class TrainRouteRow(db.Model):
    __tablename__ = "train_routes"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    route_name = db.Column(db.String(150), nullable=False)
    source_station = db.Column(db.String(150), nullable=False)
    destination_station = db.Column(db.String(150), nullable=False)
    departure_time = db.Column(db.String(16), nullable=False)
    arrival_time = db.Column(db.String(16), nullable=False)
    train_number = db.Column(db.String(50), nullable=False)
    created_at = db.Column(db.String(32), nullable=False)
    updated_at = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="on-time")
    train_type = db.Column(db.String(50), nullable=False, default="local")
    is_active = db.Column(db.Boolean, nullable=False, default=True)


class BusRouteRow(db.Model):
    __tablename__ = "bus_routes"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    route_name = db.Column(db.String(150), nullable=False)
    route_number = db.Column(db.String(50), nullable=False)
    source_stop = db.Column(db.String(150), nullable=False)
    destination_stop = db.Column(db.String(150), nullable=False)
    departure_time = db.Column(db.String(16), nullable=False)
    arrival_time = db.Column(db.String(16), nullable=False)
    frequency = db.Column(db.String(50), nullable=False)
    fare = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.String(32), nullable=False)
    updated_at = db.Column(db.String(32), nullable=False)
    bus_type = db.Column(db.String(50), nullable=False, default="regular")
    is_active = db.Column(db.Boolean, nullable=False, default=True)


class CrowdReportRow(db.Model):
    __tablename__ = "crowd_reports"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    station_name = db.Column(db.String(150), nullable=False, index=True)
    crowd_level = db.Column(db.String(20), nullable=False)  # low, medium, high
    transport_type = db.Column(db.String(20), nullable=False)  # train, bus, metro
    timestamp = db.Column(db.String(32), nullable=False)
    route_id = db.Column(db.Integer)
    is_approved = db.Column(db.Boolean, nullable=False, default=False)


class AdSettingRow(db.Model):
    __tablename__ = "ad_settings"
    __table_args__ = _AUTOINCREMENT

    id = db.Column(db.Integer, primary_key=True)
    ad_type = db.Column(db.String(50), nullable=False)  # banner, interstitial, rewarded
    last_updated = db.Column(db.String(32), nullable=False)
    updated_by = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    frequency = db.Column(db.Integer, nullable=False, default=5)
    position = db.Column(db.String(50), nullable=False, default="bottom")


class AppSettingRow(db.Model):
    __tablename__ = "app_settings"
    __table_args__ = (
        UniqueConstraint("category", "key", name="uq_app_setting_category_key"),
        _AUTOINCREMENT,
    )

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(100), nullable=False)
    key = db.Column(db.String(100), nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.String(32), nullable=False)
    updated_by = db.Column(db.Integer)


class SessionRow(db.Model):
    __tablename__ = "sessions"

    sid = db.Column(db.String(128), primary_key=True)
    data = db.Column(db.Text, nullable=False)
    expires_at = db.Column(db.Float, nullable=False, index=True)
