"""Reference data for a fresh store and demo rows for development."""

import logging
from datetime import datetime, timedelta, timezone

from models import ROLE_ADMIN
from passwords import hash_password

logger = logging.getLogger(__name__)

TRAIN_ROUTES = [
    dict(route_name="Central Line Express", source_station="Mumbai Central", destination_station="Thane",
         departure_time="06:00", arrival_time="07:15", status="on-time", train_number="MUM-001",
         train_type="express"),
    dict(route_name="Western Line", source_station="Churchgate", destination_station="Borivali",
         departure_time="07:30", arrival_time="08:45", status="on-time", train_number="MUM-002",
         train_type="local"),
    dict(route_name="Harbour Line", source_station="CSMT", destination_station="Panvel",
         departure_time="08:15", arrival_time="09:30", status="delayed", train_number="MUM-003",
         train_type="local"),
    dict(route_name="Mumbai-Delhi Rajdhani", source_station="Mumbai Central", destination_station="New Delhi",
         departure_time="16:35", arrival_time="08:35", status="on-time", train_number="12951",
         train_type="rajdhani"),
    dict(route_name="Mumbai-Pune Intercity", source_station="Mumbai CSMT", destination_station="Pune",
         departure_time="07:15", arrival_time="10:25", status="on-time", train_number="12123",
         train_type="intercity"),
]

BUS_ROUTES = [
    dict(route_name="Mumbai Express", route_number="BUS-123", source_stop="Dadar", destination_stop="Sion",
         departure_time="07:30", arrival_time="08:45", frequency="every 15 min", bus_type="express", fare="₹35"),
    dict(route_name="Bandra Local", route_number="BUS-211", source_stop="Bandra", destination_stop="Kurla",
         departure_time="08:00", arrival_time="09:15", frequency="every 10 min", bus_type="local", fare="₹25"),
    dict(route_name="Worli Connector", route_number="BUS-307", source_stop="Worli", destination_stop="BKC",
         departure_time="09:00", arrival_time="10:15", frequency="every 20 min", bus_type="air-conditioned",
         fare="₹45"),
    dict(route_name="South Mumbai Loop", route_number="BUS-500", source_stop="CSMT",
         destination_stop="Nariman Point", departure_time="06:30", arrival_time="07:15",
         frequency="every 30 min", bus_type="mini", fare="₹20"),
    dict(route_name="Airport Express", route_number="BUS-A1", source_stop="Andheri", destination_stop="T2 Airport",
         departure_time="05:00", arrival_time="05:45", frequency="every 60 min", bus_type="premium", fare="₹100"),
]

APP_SETTINGS = [
    ("general", "siteName", "Transit App"),
    ("general", "siteDescription", "Real-time transit information and crowd reporting platform"),
    ("general", "primaryColor", "#1976D2"),
    ("email", "smtpServer", "smtp.example.com"),
    ("email", "smtpPort", "587"),
    ("security", "passwordMinLength", "8"),
]


def seed_reference_data(storage, admin_password: str) -> bool:
    """Populate an empty store. Returns False if users already exist."""
    if storage.get_users():
        return False

    admin = storage.create_user({
        "username": "admin",
        "password": hash_password(admin_password),
        "full_name": "Admin User",
        "role": ROLE_ADMIN,
    })
    for route in TRAIN_ROUTES:
        storage.create_train_route(route)
    for route in BUS_ROUTES:
        storage.create_bus_route(route)
    for category, key, value in APP_SETTINGS:
        storage.upsert_app_setting(category, key, value, admin.id)

    logger.info("seeded reference data: admin user, %d train routes, %d bus routes, %d settings",
                len(TRAIN_ROUTES), len(BUS_ROUTES), len(APP_SETTINGS))
    return True


def _ago(**delta) -> str:
    when = datetime.now(timezone.utc) - timedelta(**delta)
    return when.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def seed_demo_data(storage, user) -> None:
    """Sample activity, documents and content owned by ``user``."""
    for action, category, status, delta in (
        ("Updated profile information", "Account settings", "Completed", dict(hours=2)),
        ("Viewed document", "Annual Report", "Info", dict(days=1)),
        ("Changed password", "Security", "Completed", dict(days=3)),
    ):
        storage.create_activity({
            "user_id": user.id, "action": action, "category": category,
            "status": status, "timestamp": _ago(**delta),
        })

    storage.create_document({"user_id": user.id, "title": "Annual Report 2023", "category": "Reports",
                             "type": "PDF", "last_updated": _ago(weeks=2), "status": "public"})
    storage.create_document({"user_id": user.id, "title": "User Guide", "category": "Guides",
                             "type": "DOC", "last_updated": _ago(days=30), "status": "public"})

    author = user.full_name or user.username
    for title, summary, status, views, delta in (
        ("2023 Annual Report", "Annual financial report with all the highlights from fiscal year 2023...",
         "public", 428, dict(days=15)),
        ("New Feature Announcement", "Announcing our latest platform features launching next month...",
         "public", 1024, dict(days=20)),
        ("Employee Handbook", "Updated employee handbook with new policies and guidelines...",
         "internal", 76, dict(days=25)),
    ):
        storage.create_content({"title": title, "summary": summary, "status": status, "views": views,
                                "author": author, "published_date": _ago(**delta)})
