"""Back office under /api/admin. Every route is admin-only."""

from flask import Blueprint

bp = Blueprint("admin", __name__, url_prefix="/api/admin")

from . import users  # noqa: E402  pylint: disable=wrong-import-position
from . import transit  # noqa: E402  pylint: disable=wrong-import-position
from . import reports  # noqa: E402  pylint: disable=wrong-import-position
from . import settings  # noqa: E402  pylint: disable=wrong-import-position
from . import contents  # noqa: E402  pylint: disable=wrong-import-position
from . import analytics  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "users", "transit", "reports", "settings", "contents", "analytics"]
