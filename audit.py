"""Audit trail: one Activity row per mutating action."""

import logging

from storage import get_storage

logger = logging.getLogger(__name__)

COMPLETED = "Completed"


def record_activity(user_id: int, action: str, category: str, status: str = COMPLETED):
    """Append an Activity for ``user_id``.

    Called after the storage change succeeds and before the response is sent.
    Failures propagate: an action without its audit row is an error.
    """
    activity = get_storage().create_activity({
        "user_id": user_id,
        "action": action,
        "category": category,
        "status": status,
    })
    logger.debug("activity #%s user=%s %s [%s]", activity.id, user_id, action, category)
    return activity
