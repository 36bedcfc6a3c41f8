"""Published content."""

from flask import jsonify
from flask_login import current_user

from audit import record_activity
from models import to_json
from permissions import admin_required
from schemas import ContentIn, parse_body, values
from storage import get_storage

from . import bp


@bp.route("/contents")
@admin_required
def list_contents():
    return jsonify([to_json(c) for c in get_storage().get_contents()])


@bp.route("/contents", methods=["POST"])
@admin_required
def create_content():
    data = values(parse_body(ContentIn))
    data.setdefault("author", current_user.full_name or current_user.username)
    content = get_storage().create_content(data)
    record_activity(current_user.id, f"Published {content.title}", "Content management")
    return jsonify(to_json(content)), 201
