"""Train and bus timetable management."""

from flask import jsonify
from flask_login import current_user

from audit import record_activity
from errors import NotFound, found
from models import to_json
from permissions import admin_required
from schemas import BusRouteIn, BusRoutePatch, TrainRouteIn, TrainRoutePatch, parse_body, values
from storage import get_storage

from . import bp

CATEGORY = "Route management"


# ---------- train routes ----------
@bp.route("/train-routes")
@admin_required
def list_train_routes():
    return jsonify([to_json(r) for r in get_storage().get_train_routes()])


@bp.route("/train-routes/<int:route_id>")
@admin_required
def get_train_route(route_id: int):
    return jsonify(to_json(found(get_storage().get_train_route(route_id), "Train route")))


@bp.route("/train-routes", methods=["POST"])
@admin_required
def create_train_route():
    route = get_storage().create_train_route(values(parse_body(TrainRouteIn)))
    record_activity(current_user.id, f"Added train route {route.route_name}", CATEGORY)
    return jsonify(to_json(route)), 201


@bp.route("/train-routes/<int:route_id>", methods=["PUT"])
@admin_required
def update_train_route(route_id: int):
    changes = values(parse_body(TrainRoutePatch), partial=True)
    route = found(get_storage().update_train_route(route_id, changes), "Train route")
    record_activity(current_user.id, f"Updated train route {route.route_name}", CATEGORY)
    return jsonify(to_json(route))


@bp.route("/train-routes/<int:route_id>", methods=["DELETE"])
@admin_required
def delete_train_route(route_id: int):
    if not get_storage().delete_train_route(route_id):
        raise NotFound("Train route not found")
    record_activity(current_user.id, f"Deleted train route #{route_id}", CATEGORY)
    return "", 204


# ---------- bus routes ----------
@bp.route("/bus-routes")
@admin_required
def list_bus_routes():
    return jsonify([to_json(r) for r in get_storage().get_bus_routes()])


@bp.route("/bus-routes/<int:route_id>")
@admin_required
def get_bus_route(route_id: int):
    return jsonify(to_json(found(get_storage().get_bus_route(route_id), "Bus route")))


@bp.route("/bus-routes", methods=["POST"])
@admin_required
def create_bus_route():
    route = get_storage().create_bus_route(values(parse_body(BusRouteIn)))
    record_activity(current_user.id, f"Added bus route {route.route_number}", CATEGORY)
    return jsonify(to_json(route)), 201


@bp.route("/bus-routes/<int:route_id>", methods=["PUT"])
@admin_required
def update_bus_route(route_id: int):
    changes = values(parse_body(BusRoutePatch), partial=True)
    route = found(get_storage().update_bus_route(route_id, changes), "Bus route")
    record_activity(current_user.id, f"Updated bus route {route.route_number}", CATEGORY)
    return jsonify(to_json(route))


@bp.route("/bus-routes/<int:route_id>", methods=["DELETE"])
@admin_required
def delete_bus_route(route_id: int):
    if not get_storage().delete_bus_route(route_id):
        raise NotFound("Bus route not found")
    record_activity(current_user.id, f"Deleted bus route #{route_id}", CATEGORY)
    return "", 204
