"""Session lifecycle on top of Flask-Login and the server-side session store.

Unknown usernames, wrong passwords and corrupt stored digests all fail the
same way, so a caller cannot probe which usernames exist.
"""

import logging
from functools import lru_cache
from typing import Optional

from flask import session
from flask_login import current_user, login_user, logout_user

from audit import record_activity
from errors import AuthenticationFailed, Conflict
from models import ROLE_ADMIN, ROLE_USER, User
from passwords import MalformedDigestError, hash_password, verify_password
from sessions import rotate_session_id
from storage import get_storage
from storage.base import DuplicateUsernameError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
USERNAME_TAKEN = "Username already exists"


@lru_cache(maxsize=1)
def _dummy_digest() -> str:
    return hash_password("not-a-real-password")


def authenticate(username: str, password: str) -> User:
    """Return the user for a valid username/password pair."""
    user = get_storage().get_user_by_username(username)
    if user is None:
        # same scrypt cost as a real check
        verify_password(password, _dummy_digest())
        logger.warning("login failed: unknown username %r", username)
        raise AuthenticationFailed(INVALID_CREDENTIALS)

    try:
        valid = verify_password(password, user.password)
    except MalformedDigestError as exc:
        logger.error("login failed: stored digest for user #%s is malformed (%s)", user.id, exc)
        valid = False

    if not valid:
        logger.warning("login failed: wrong password for user #%s", user.id)
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    return user


def start_session(user: User) -> None:
    rotate_session_id(session)
    login_user(user)


def login(username: str, password: str) -> User:
    user = authenticate(username, password)
    start_session(user)
    logger.info("user #%s logged in", user.id)
    return user


def create_account(
    username: str,
    password: str,
    full_name: Optional[str] = None,
    role: str = ROLE_USER,
) -> User:
    """Hash the password and store a new user; duplicate usernames are refused."""
    storage = get_storage()
    if storage.get_user_by_username(username) is not None:
        raise Conflict(USERNAME_TAKEN)
    try:
        return storage.create_user({
            "username": username,
            "password": hash_password(password),
            "full_name": full_name,
            "role": role,
        })
    except DuplicateUsernameError:
        # a concurrent request took the name after the check above
        raise Conflict(USERNAME_TAKEN) from None


def register(
    username: str,
    password: str,
    full_name: Optional[str] = None,
    role: Optional[str] = None,
) -> User:
    """Create an account and log straight into it.

    A requested role is honoured only when an admin is the caller.
    """
    caller_is_admin = current_user.is_authenticated and current_user.role == ROLE_ADMIN
    granted = role if (role and caller_is_admin) else ROLE_USER

    user = create_account(username, password, full_name, granted)
    record_activity(user.id, "Created account", "Account")
    start_session(user)
    logger.info("registered user #%s (%s)", user.id, user.role)
    return user


def logout() -> None:
    """Drop the session; a no-op without one."""
    logout_user()
    session.clear()
