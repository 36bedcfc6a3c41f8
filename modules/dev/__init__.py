"""Development-only helpers; create_app skips this blueprint in production."""

from flask import Blueprint

bp = Blueprint("dev", __name__, url_prefix="/api")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
