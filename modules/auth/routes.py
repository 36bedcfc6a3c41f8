"""HTTP routes for authentication."""

from flask import jsonify
from flask_login import current_user, login_required

from extensions import login_manager
from models import User
from schemas import LoginIn, RegisterIn, parse_body
from storage import get_storage

from . import bp
from . import service


@login_manager.user_loader
def load_user(user_id: str | None) -> User | None:
    """Resolve the session's user id; a deleted user means no user."""
    if not user_id:
        return None
    try:
        return get_storage().get_user(int(user_id))
    except ValueError:
        return None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify(message="Not authenticated"), 401


@bp.route("/login", methods=["POST"])
def login():
    body = parse_body(LoginIn)
    user = service.login(body.username, body.password)
    return jsonify(user.public())


@bp.route("/register", methods=["POST"])
def register():
    body = parse_body(RegisterIn)
    user = service.register(body.username, body.password, body.full_name, body.role)
    return jsonify(user.public()), 201


@bp.route("/logout", methods=["POST"])
def logout():
    service.logout()
    return jsonify(message="Logged out")


@bp.route("/user")
@login_required
def user():
    return jsonify(current_user.public())
