"""User management."""

from flask import jsonify
from flask_login import current_user

from audit import record_activity
from errors import NotFound, ValidationFailed, found
from modules.auth.service import create_account
from passwords import hash_password
from permissions import admin_required
from schemas import UserCreateIn, UserUpdateIn, parse_body, values
from storage import get_storage

from . import bp

CATEGORY = "User management"


@bp.route("/users")
@admin_required
def list_users():
    return jsonify([u.public() for u in get_storage().get_users()])


@bp.route("/users", methods=["POST"])
@admin_required
def create_user():
    body = parse_body(UserCreateIn)
    user = create_account(body.username, body.password, body.full_name, body.role)
    record_activity(current_user.id, f"Created user {user.username}", CATEGORY)
    return jsonify(user.public()), 201


@bp.route("/users/<int:user_id>", methods=["PATCH"])
@admin_required
def update_user(user_id: int):
    changes = values(parse_body(UserUpdateIn), partial=True)
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    user = found(get_storage().update_user(user_id, changes), "User")
    record_activity(current_user.id, f"Updated user {user.username}", CATEGORY)
    return jsonify(user.public())


@bp.route("/users/<int:user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id: int):
    if user_id == current_user.id:
        raise ValidationFailed("You cannot delete your own account")

    if not get_storage().delete_user(user_id):
        raise NotFound("User not found")
    record_activity(current_user.id, f"Deleted user #{user_id}", CATEGORY)
    return "", 204
