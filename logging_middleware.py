"""Logging setup and a one-line-per-request access log."""

import logging
from time import time

from flask import Flask, g, request
from flask_login import current_user

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARK = "_transit_handler"


def configure_logging(app: Flask) -> None:
    """Attach handlers to the root logger once, at the configured level."""
    root = logging.getLogger()
    root.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if any(getattr(h, _HANDLER_MARK, False) for h in root.handlers):
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if app.config.get("LOG_FILE"):
        handlers.append(logging.FileHandler(app.config["LOG_FILE"]))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)


def add_request_logging(app: Flask) -> None:
    logger = logging.getLogger("transit.access")

    @app.before_request
    def _start_timer():
        g._request_started = time()

    @app.after_request
    def _log_request(response):
        started = g.pop("_request_started", None)
        duration_ms = (time() - started) * 1000 if started else 0.0
        user_id = current_user.get_id() if current_user.is_authenticated else "-"
        logger.info(
            "%s %s | status=%s | user=%s | client=%s | duration=%.2fms",
            request.method,
            request.path,
            response.status_code,
            user_id,
            request.remote_addr or "unknown",
            duration_ms,
        )
        return response
