"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Notification")
class NotificationCreated:
    """A notification was queued for a recipient."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    notification_type = String(required=True)
    message_key = String(required=True)
    link = String(sanitize=False)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationRead:
    """The recipient opened a notification."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    read_at = DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationMarkedUnread:
    """The recipient flagged a notification as unread again."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    marked_at = DateTime(required=True)
