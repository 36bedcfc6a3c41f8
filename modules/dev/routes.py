"""Development-only endpoint that fills the store with demo rows."""

from flask import jsonify

from errors import NotFound
from seed import seed_demo_data
from storage import get_storage

from . import bp


@bp.route("/seed-demo-data", methods=["POST"])
def seed_demo():
    storage = get_storage()
    admin = storage.get_user_by_username("admin")
    if admin is None:
        raise NotFound("Admin user not found")
    seed_demo_data(storage, admin)
    return jsonify(message="Demo data created successfully")
