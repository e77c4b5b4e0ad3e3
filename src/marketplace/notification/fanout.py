"""Notification fan-out — Notifications react to Order events.

Every status change notifies the participants who did not perform it:
the buyer when someone else acted, the seller when someone else acted. An
actor who is neither (an administrator or an automated job) notifies both.
New orders are also announced to the administrators.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notification.notification import (
    ADMIN_RECIPIENT,
    Notification,
    NotificationType,
)
from marketplace.order.events import (
    OrderPlaced,
    OrderShipped,
    ReceiptConfirmed,
    SellerRated,
)
from marketplace.order.order import OrderStatus

logger = structlog.get_logger(__name__)

ORDERS_LINK = "/profile/orders"


def order_reference(order_id) -> str:
    """Short human reference for an order: the last six characters of its id."""
    return str(order_id)[-6:]


def recipients_for(buyer_id, seller_id, acting_user_id) -> list[str]:
    """Participants to notify about a change made by ``acting_user_id``."""
    recipients = []
    if str(acting_user_id) != str(buyer_id):
        recipients.append(str(buyer_id))
    if str(acting_user_id) != str(seller_id) and str(seller_id) not in recipients:
        recipients.append(str(seller_id))
    return recipients


def notify_order_update(order_id, buyer_id, seller_id, acting_user_id, status, source_event_type=None):
    """Create one ``order_update`` notification per non-acting participant.

    Returns:
        List of notification IDs created.
    """
    repo = current_domain.repository_for(Notification)
    notification_ids = []

    for recipient_id in recipients_for(buyer_id, seller_id, acting_user_id):
        notification = Notification.create(
            recipient_id=recipient_id,
            notification_type=NotificationType.ORDER_UPDATE.value,
            message_key="notification_order_update",
            replacements={"orderId": order_reference(order_id), "status": status},
            link=ORDERS_LINK,
            source_event_type=source_event_type,
        )
        repo.add(notification)
        notification_ids.append(str(notification.id))

    logger.info(
        "Order update notifications created",
        order_id=str(order_id),
        status=status,
        acting_user_id=str(acting_user_id),
        count=len(notification_ids),
    )
    return notification_ids


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderNotificationsHandler:
    """Turns Order events into user and admin notifications."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notification = Notification.create(
            recipient_id=ADMIN_RECIPIENT,
            notification_type=NotificationType.NEW_ORDER.value,
            message_key="notification_new_order",
            replacements={"orderId": order_reference(event.order_id), "total": f"{event.total:.2f}"},
            link=f"/admin?tab=orders&highlight={event.order_id}",
            source_event_type="Marketplace.OrderPlaced.v1",
        )
        current_domain.repository_for(Notification).add(notification)

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        notify_order_update(
            order_id=event.order_id,
            buyer_id=event.buyer_id,
            seller_id=event.seller_id,
            acting_user_id=event.shipped_by,
            status=OrderStatus.SHIPPED.value,
            source_event_type="Marketplace.OrderShipped.v1",
        )

    @handle(ReceiptConfirmed)
    def on_receipt_confirmed(self, event: ReceiptConfirmed) -> None:
        notify_order_update(
            order_id=event.order_id,
            buyer_id=event.buyer_id,
            seller_id=event.seller_id,
            acting_user_id=event.confirmed_by,
            status=OrderStatus.COMPLETED.value,
            source_event_type="Marketplace.ReceiptConfirmed.v1",
        )

    @handle(SellerRated)
    def on_seller_rated(self, event: SellerRated) -> None:
        """Ratings leave the status untouched; the seller only hears about an actual score."""
        if event.rating is None:
            return

        notification = Notification.create(
            recipient_id=event.seller_id,
            notification_type=NotificationType.SELLER_RATED.value,
            message_key="notification_seller_rated",
            replacements={"orderId": order_reference(event.order_id), "rating": event.rating},
            link=f"/seller/{event.seller_id}",
            source_event_type="Marketplace.SellerRated.v1",
        )
        current_domain.repository_for(Notification).add(notification)
