"""Notification feed lookups for a recipient."""

import structlog
from protean.utils.globals import current_domain

from marketplace.notification.notification import Notification
from marketplace.utils.paging import fetch_all

logger = structlog.get_logger(__name__)


def notifications_for(recipient_id) -> list[Notification]:
    """The recipient's notifications, newest first; empty if the store cannot be read."""
    repo = current_domain.repository_for(Notification)
    try:
        items = fetch_all(repo._dao.query.filter(recipient_id=str(recipient_id)))
    except Exception:
        logger.warning("Notification read failed, treating as empty", recipient_id=str(recipient_id), exc_info=True)
        return []
    return sorted(items, key=lambda n: n.created_at, reverse=True)


def unread_count(recipient_id) -> int:
    return sum(1 for n in notifications_for(recipient_id) if not n.is_read)
