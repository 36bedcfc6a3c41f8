"""Crowd report moderation."""

from flask import jsonify
from flask_login import current_user

from audit import record_activity
from errors import found
from models import to_json
from permissions import admin_required
from storage import get_storage

from . import bp


@bp.route("/crowd-reports")
@admin_required
def list_crowd_reports():
    return jsonify([to_json(r) for r in get_storage().get_crowd_reports()])


@bp.route("/crowd-reports/<int:report_id>/approve", methods=["PUT"])
@admin_required
def approve_crowd_report(report_id: int):
    report = found(get_storage().approve_crowd_report(report_id), "Crowd report")
    record_activity(current_user.id, f"Approved crowd report #{report.id}", "Crowd report moderation")
    return jsonify(to_json(report))
