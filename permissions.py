# permissions.py
"""
RBAC for the API.
- role_required([...]) is the main route decorator.
- admin_required is role_required(["admin"]).
- is_admin() / has_role() are helpers for handlers that filter by role.

Roles:
- user   dashboard: routes, own activities/documents, crowd reports
- admin  everything a user can do plus the back office under /api/admin

Order matters: authentication is checked before the role, so an anonymous
caller always gets 401 and never learns that a route is admin-only.
"""

from functools import wraps
from typing import Iterable, Set

from flask_login import current_user, login_required

from errors import NotAuthorized
from models import ROLE_ADMIN


def role_required(allowed_roles: Iterable[str]):
    """
    Restrict a view to the given roles.
    Example:
        @role_required(["admin"])
        def view(): ...

    - Not logged in -> 401 (login_required runs first).
    - Logged in with another role -> 403.
    """
    if isinstance(allowed_roles, str):
        allowed: Set[str] = {allowed_roles}
    else:
        allowed = set(allowed_roles or [])

    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapped(*args, **kwargs):
            role = getattr(current_user, "role", None)
            if role in allowed:
                return view_func(*args, **kwargs)
            raise NotAuthorized()

        return wrapped
    return decorator


admin_required = role_required([ROLE_ADMIN])


def has_role(role: str) -> bool:
    """True if the current user is logged in with exactly ``role``."""
    return bool(current_user.is_authenticated and getattr(current_user, "role", None) == role)


def is_admin() -> bool:
    return has_role(ROLE_ADMIN)
