"""Storage backends and the per-app storage handle."""

from flask import current_app

from storage.base import DuplicateUsernameError, IStorage, SessionStore
from storage.memory import MemStorage
from storage.session_store import MemorySessionStore

EXTENSION_KEY = "storage"
BACKENDS = ("memory", "sql")


def build_storage(config) -> IStorage:
    """Create the backend named by ``STORAGE_BACKEND``."""
    backend = config.get("STORAGE_BACKEND", "memory")
    options = dict(
        session_ttl=config.get("SESSION_TTL", 24 * 60 * 60),
        sweep_interval=config.get("SESSION_SWEEP_INTERVAL", 60 * 60),
    )
    if backend == "memory":
        return MemStorage(**options)
    if backend == "sql":
        from storage.sql import SqlStorage

        return SqlStorage(**options)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {BACKENDS}")


def get_storage() -> IStorage:
    """Storage attached to the current app by ``create_app``."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "EXTENSION_KEY",
    "DuplicateUsernameError",
    "IStorage",
    "SessionStore",
    "MemStorage",
    "MemorySessionStore",
    "build_storage",
    "get_storage",
]
