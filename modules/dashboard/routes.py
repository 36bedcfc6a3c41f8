"""HTTP routes for signed-in riders."""

from flask import jsonify
from flask_login import current_user, login_required

from audit import record_activity
from models import CrowdReport, to_json
from permissions import is_admin
from schemas import CrowdReportIn, parse_body, values
from storage import get_storage

from . import bp


def visible_reports(reports: list[CrowdReport]) -> list[CrowdReport]:
    """Admins see every report; everyone else only approved ones."""
    if is_admin():
        return reports
    return [r for r in reports if r.is_approved]


@bp.route("/activities")
@login_required
def activities():
    rows = get_storage().get_activities_by_user_id(current_user.id)
    return jsonify([to_json(a) for a in rows])


@bp.route("/documents")
@login_required
def documents():
    rows = get_storage().get_documents_by_user_id(current_user.id)
    return jsonify([to_json(d) for d in rows])


# ---------- timetables ----------
@bp.route("/transit/train-routes")
@login_required
def train_routes():
    routes = [r for r in get_storage().get_train_routes() if r.is_active]
    return jsonify([to_json(r) for r in routes])


@bp.route("/transit/bus-routes")
@login_required
def bus_routes():
    routes = [r for r in get_storage().get_bus_routes() if r.is_active]
    return jsonify([to_json(r) for r in routes])


@bp.route("/transit/crowd-reports/<transport_type>/<int:route_id>")
@login_required
def route_crowd_reports(transport_type: str, route_id: int):
    reports = [
        r for r in get_storage().get_crowd_reports()
        if r.transport_type == transport_type and r.route_id == route_id
    ]
    return jsonify([to_json(r) for r in visible_reports(reports)])


# ---------- crowd reports ----------
@bp.route("/crowd-reports", methods=["POST"])
@login_required
def submit_crowd_report():
    body = parse_body(CrowdReportIn)
    report = get_storage().create_crowd_report({**values(body), "user_id": current_user.id})
    record_activity(current_user.id, f"Reported {report.crowd_level} crowd at {report.station_name}", "Crowd report")
    return jsonify(to_json(report)), 201


@bp.route("/crowd-reports/mine")
@login_required
def my_crowd_reports():
    reports = get_storage().get_crowd_reports_by_user_id(current_user.id)
    return jsonify([to_json(r) for r in reports])


@bp.route("/crowd-reports/station/<path:station_name>")
@login_required
def station_crowd_reports(station_name: str):
    reports = get_storage().get_crowd_reports_by_station(station_name)
    return jsonify([to_json(r) for r in visible_reports(reports)])
