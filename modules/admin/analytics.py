"""Back-office summary numbers computed from storage."""

from collections import Counter
from datetime import datetime, timedelta, timezone

from flask import jsonify, request

from errors import ValidationFailed
from models import ROLES
from permissions import admin_required
from storage import get_storage

from . import bp

TIME_RANGES = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def summarize(storage, since: datetime) -> dict:
    users = storage.get_users()
    reports = storage.get_crowd_reports()
    recent = [a for a in storage.get_activities() if _parse_iso(a.timestamp) >= since]

    roles = Counter(u.role for u in users)
    levels = Counter(r.crowd_level for r in reports)
    return {
        "users": {"total": len(users), **{role: roles.get(role, 0) for role in ROLES}},
        "routes": {
            "train": sum(1 for r in storage.get_train_routes() if r.is_active),
            "bus": sum(1 for r in storage.get_bus_routes() if r.is_active),
        },
        "crowdReports": {
            "total": len(reports),
            "approved": sum(1 for r in reports if r.is_approved),
            "pending": sum(1 for r in reports if not r.is_approved),
            "byLevel": dict(levels),
        },
        "activities": {
            "total": len(recent),
            "byCategory": dict(Counter(a.category for a in recent)),
        },
    }


@bp.route("/analytics")
@admin_required
def analytics():
    time_range = request.args.get("timeRange", "30d")
    if time_range not in TIME_RANGES:
        raise ValidationFailed(f"timeRange must be one of {', '.join(TIME_RANGES)}")

    since = datetime.now(timezone.utc) - TIME_RANGES[time_range]
    return jsonify(timeRange=time_range, **summarize(get_storage(), since))
