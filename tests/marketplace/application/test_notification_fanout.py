"""Application tests for notifications created as side effects of Order events."""

import json

import pytest
from marketplace.notification.notification import ADMIN_RECIPIENT, NotificationType
from marketplace.notification.queries import notifications_for, unread_count
from marketplace.order.placement import PlaceOrder
from marketplace.order.rating import RateSeller
from marketplace.order.receipt import ConfirmReceipt
from marketplace.order.shipment import MarkAsShipped
from protean import current_domain
from protean.exceptions import ValidationError


class TestOrderNotifications:
    @pytest.fixture(autouse=True)
    def _order(self, secure_item, shipping_address):
        self.order_id = current_domain.process(
            PlaceOrder(
                buyer_id="2",
                items=json.dumps([secure_item]),
                total=199.99,
                shipping_address=json.dumps(shipping_address),
            ),
            asynchronous=False,
        )
        self.reference = self.order_id[-6:]

    def _complete(self):
        current_domain.process(MarkAsShipped(order_id=self.order_id, actor_id="99"), asynchronous=False)
        current_domain.process(ConfirmReceipt(order_id=self.order_id, actor_id="2"), asynchronous=False)

    def test_new_order_announced_to_admin(self):
        notices = notifications_for(ADMIN_RECIPIENT)
        assert len(notices) == 1
        notice = notices[0]
        assert notice.notification_type == NotificationType.NEW_ORDER.value
        assert notice.render() == f"New order #{self.reference} placed for €199.99"
        assert notice.link == f"/admin?tab=orders&highlight={self.order_id}"

    def test_placement_does_not_notify_participants(self):
        assert notifications_for("2") == []
        assert notifications_for("99") == []

    def test_shipping_notifies_only_buyer(self):
        current_domain.process(MarkAsShipped(order_id=self.order_id, actor_id="99"), asynchronous=False)

        buyer_notices = notifications_for("2")
        assert len(buyer_notices) == 1
        notice = buyer_notices[0]
        assert notice.notification_type == NotificationType.ORDER_UPDATE.value
        assert notice.message_key == "notification_order_update"
        assert notice.replacement_values == {"orderId": self.reference, "status": "Shipped"}
        assert notice.link == "/profile/orders"
        assert notice.is_read is False
        assert notifications_for("99") == []

    def test_receipt_notifies_only_seller(self):
        self._complete()

        seller_notices = notifications_for("99")
        assert len(seller_notices) == 1
        assert seller_notices[0].replacement_values["status"] == "Completed"
        assert unread_count("2") == 1

    def test_scored_rating_notifies_seller(self):
        self._complete()
        current_domain.process(RateSeller(order_id=self.order_id, actor_id="2", rating=5), asynchronous=False)

        rated = [n for n in notifications_for("99") if n.notification_type == NotificationType.SELLER_RATED.value]
        assert len(rated) == 1
        assert "5-star" in rated[0].render()

    def test_unscored_rating_is_silent(self):
        self._complete()
        current_domain.process(RateSeller(order_id=self.order_id, actor_id="2"), asynchronous=False)

        assert len(notifications_for("99")) == 1

    def test_failed_transition_creates_no_notification(self):
        with pytest.raises(ValidationError):
            current_domain.process(ConfirmReceipt(order_id=self.order_id, actor_id="2"), asynchronous=False)

        assert notifications_for("99") == []
