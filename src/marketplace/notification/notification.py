"""Notification aggregate (CQRS) — a user-facing message about something that happened.

Notifications are created only as side effects of order events. The
recipient toggles them between read and unread; nothing deletes them.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.notification.events import (
    NotificationCreated,
    NotificationMarkedUnread,
    NotificationRead,
)
from marketplace.notification.templates import render_message

# Recipient id under which platform administrators receive notices
ADMIN_RECIPIENT = "admin"


class NotificationType(Enum):
    ORDER_UPDATE = "order_update"
    NEW_ORDER = "new_order"
    SELLER_RATED = "seller_rated"


@marketplace.aggregate
class Notification:
    recipient_id = Identifier(required=True)
    notification_type = String(choices=NotificationType, required=True)

    # Content: a template key plus the values substituted into it
    message_key = String(required=True, max_length=200)
    replacements = Text(sanitize=False)  # JSON object
    link = String(max_length=500, sanitize=False)

    source_event_type = String(max_length=200)

    is_read = Boolean(default=False)
    created_at = DateTime()
    read_at = DateTime()

    @classmethod
    def create(
        cls,
        recipient_id,
        notification_type,
        message_key,
        replacements=None,
        link=None,
        source_event_type=None,
    ):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=str(recipient_id),
            notification_type=notification_type,
            message_key=message_key,
            replacements=json.dumps(replacements or {}),
            link=link,
            source_event_type=source_event_type,
            is_read=False,
            created_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                message_key=message_key,
                link=link,
                created_at=now,
            )
        )
        return notification

    @property
    def replacement_values(self) -> dict:
        return json.loads(self.replacements) if self.replacements else {}

    def render(self) -> str:
        return render_message(self.message_key, self.replacement_values)

    def mark_read(self):
        if self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now

        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )

    def mark_unread(self):
        if not self.is_read:
            return

        now = datetime.now(UTC)
        self.is_read = False
        self.read_at = None

        self.raise_(
            NotificationMarkedUnread(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                marked_at=now,
            )
        )
