"""Application tests for toggling notifications read and unread."""

import pytest
from marketplace.errors import UnauthorizedActionError
from marketplace.notification.fanout import notify_order_update
from marketplace.notification.notification import Notification
from marketplace.notification.queries import notifications_for, unread_count
from marketplace.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    MarkNotificationUnread,
)
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _notify_buyer(order_id="1712345678901234"):
    # Seller acted, so only the buyer is notified
    return notify_order_update(order_id, buyer_id="2", seller_id="99", acting_user_id="99", status="Shipped")[0]


class TestNotificationReading:
    def test_mark_read(self):
        notification_id = _notify_buyer()
        current_domain.process(MarkNotificationRead(notification_id=notification_id, actor_id="2"), asynchronous=False)

        notification = current_domain.repository_for(Notification).get(notification_id)
        assert notification.is_read is True
        assert unread_count("2") == 0

    def test_mark_unread(self):
        notification_id = _notify_buyer()
        current_domain.process(MarkNotificationRead(notification_id=notification_id, actor_id="2"), asynchronous=False)
        current_domain.process(
            MarkNotificationUnread(notification_id=notification_id, actor_id="2"),
            asynchronous=False,
        )

        assert unread_count("2") == 1

    def test_only_recipient_may_toggle(self):
        notification_id = _notify_buyer()
        with pytest.raises(UnauthorizedActionError):
            current_domain.process(
                MarkNotificationRead(notification_id=notification_id, actor_id="99"),
                asynchronous=False,
            )
        assert unread_count("2") == 1

    def test_unknown_notification(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(MarkNotificationRead(notification_id="missing", actor_id="2"), asynchronous=False)

    def test_mark_all_read(self):
        _notify_buyer("1712345678900001")
        _notify_buyer("1712345678900002")
        _notify_buyer("1712345678900003")
        notify_order_update("1712345678900004", buyer_id="5", seller_id="99", acting_user_id="99", status="Shipped")

        marked = current_domain.process(MarkAllNotificationsRead(actor_id="2"), asynchronous=False)

        assert marked == 3
        assert unread_count("2") == 0
        # Other users' notifications are untouched
        assert unread_count("5") == 1

    def test_mark_all_read_when_nothing_unread(self):
        assert current_domain.process(MarkAllNotificationsRead(actor_id="2"), asynchronous=False) == 0

    def test_feed_contains_rendered_messages(self):
        _notify_buyer("1712345678905555")
        assert notifications_for("2")[0].render() == "Order #905555 is now Shipped."

    def test_mark_all_read_covers_more_than_one_page(self):
        for n in range(105):
            _notify_buyer(f"1712345678{n:06d}")

        marked = current_domain.process(MarkAllNotificationsRead(actor_id="2"), asynchronous=False)

        assert marked == 105
        assert unread_count("2") == 0
        assert len(notifications_for("2")) == 105
