"""Read/unread management — commands and handler.

Only the recipient may toggle a notification; anyone else is refused.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import UnauthorizedActionError
from marketplace.notification.notification import Notification
from marketplace.utils.paging import fetch_all


@marketplace.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command(part_of="Notification")
class MarkNotificationUnread:
    notification_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command(part_of="Notification")
class MarkAllNotificationsRead:
    actor_id = Identifier(required=True)


def _load_for_recipient(repo, notification_id, actor_id):
    notification = repo.get(notification_id)
    if str(notification.recipient_id) != str(actor_id):
        raise UnauthorizedActionError({"actor": ["Only the recipient can change a notification"]})
    return notification


@marketplace.command_handler(part_of=Notification)
class NotificationReadingHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = _load_for_recipient(repo, command.notification_id, command.actor_id)
        notification.mark_read()
        repo.add(notification)

    @handle(MarkNotificationUnread)
    def mark_unread(self, command):
        repo = current_domain.repository_for(Notification)
        notification = _load_for_recipient(repo, command.notification_id, command.actor_id)
        notification.mark_unread()
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        received = fetch_all(repo._dao.query.filter(recipient_id=str(command.actor_id)))
        unread = [n for n in received if not n.is_read]
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)
