"""End-to-end escrow journey: checkout, shipment, receipt and rating.

Buyer 2 buys a 199.99 camera from seller 99 in secure mode.
"""

import pytest
from marketplace.ledger.queries import entries_for_order
from marketplace.notification.notification import ADMIN_RECIPIENT
from marketplace.order.order import Order, project_status
from marketplace.storefront import Actor, Storefront
from protean import current_domain


@pytest.fixture()
def buyer():
    return Storefront(Actor(id="2", name="John Doe"))


@pytest.fixture()
def seller():
    return Storefront(Actor(id="99", name="Camera Shop"))


def _assert_ledgers_follow_order(order_id):
    order = current_domain.repository_for(Order).get(order_id)
    for entry in entries_for_order(order_id):
        assert entry.status == project_status(order.status, entry.role)
        assert entry.buyer_rated == order.is_rated


class TestSecureOrderJourney:
    def test_full_journey(self, buyer, seller, secure_item, shipping_address):
        admin = Storefront(Actor(id=ADMIN_RECIPIENT, role="admin"))

        # Checkout
        entry = buyer.place_order([secure_item], 199.99, shipping_address).value
        order_id = entry.order_id
        reference = order_id[-6:]

        assert [e.order_id for e in buyer.orders()] == [order_id]
        assert [e.order_id for e in seller.orders()] == [order_id]
        assert buyer.get_order_by_id(order_id).status == "AwaitingShipment"
        assert seller.get_order_by_id(order_id).status == "PaymentHeld"
        assert [n.render() for n in admin.notifications()] == [f"New order #{reference} placed for €199.99"]
        _assert_ledgers_follow_order(order_id)

        # Seller ships
        assert seller.mark_as_shipped(order_id)
        assert buyer.get_order_by_id(order_id).status == "Shipped"
        assert seller.get_order_by_id(order_id).status == "Shipped"
        assert [n.render() for n in buyer.notifications()] == [f"Order #{reference} is now Shipped."]
        assert seller.notifications() == []
        _assert_ledgers_follow_order(order_id)

        # Buyer confirms receipt
        assert buyer.confirm_receipt(order_id)
        assert buyer.get_order_by_id(order_id).status == "Completed"
        assert seller.get_order_by_id(order_id).status == "Completed"
        assert [n.render() for n in seller.notifications()] == [f"Order #{reference} is now Completed."]
        assert buyer.unread_count() == 1
        _assert_ledgers_follow_order(order_id)

        # Buyer rates the seller, once
        assert buyer.rate_seller(order_id, rating=5, comment="Exactly as described")
        assert not buyer.rate_seller(order_id, rating=1)
        assert buyer.get_order_by_id(order_id).buyer_rated is True
        assert seller.get_order_by_id(order_id).buyer_rated is True
        _assert_ledgers_follow_order(order_id)

        profile = buyer.seller_profile("99")
        assert profile.rating_count == 1
        assert profile.average_rating == 5

        # Admin panel lists the order once
        orders = admin.get_all_orders_for_admin().value
        assert [str(o.id) for o in orders] == [order_id]
        assert orders[0].total == 199.99

    def test_discounted_checkout(self, buyer, secure_item, shipping_address):
        admin = Storefront(Actor(id="1", role="admin"))
        admin.add_discount_code(
            {"code": "SAVE10", "percentage": 10, "start_date": "2000-01-01", "expiry_date": "2999-12-31"}
        )

        total, discount = buyer.price_with_discount(199.99, "save10")
        entry = buyer.place_order([secure_item], total, shipping_address, discount_code=discount.code).value

        assert entry.total == pytest.approx(179.991)
        assert entry.discount_code == "SAVE10"


class TestDirectOrderJourney:
    def test_direct_order_is_final_and_private_to_buyer(self, buyer, direct_item, shipping_address):
        direct_seller = Storefront(Actor(id="77"))

        entry = buyer.place_order([direct_item], 50.0, shipping_address).value

        assert entry.status == "Completed"
        assert direct_seller.orders() == []
        assert not direct_seller.mark_as_shipped(entry.order_id)
        _assert_ledgers_follow_order(entry.order_id)
