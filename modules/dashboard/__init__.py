"""Rider dashboard: own activity, documents, routes and crowd reports."""

from flask import Blueprint

bp = Blueprint("dashboard", __name__, url_prefix="/api")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
