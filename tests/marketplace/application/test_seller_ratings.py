"""Application tests for seller profiles built from order ratings."""

import json

import pytest
from marketplace.order.placement import PlaceOrder
from marketplace.order.rating import RateSeller
from marketplace.order.receipt import ConfirmReceipt
from marketplace.order.shipment import MarkAsShipped
from marketplace.seller.order_events import profile_for
from protean import current_domain


@pytest.fixture()
def completed_order_id(secure_item, shipping_address):
    order_id = current_domain.process(
        PlaceOrder(
            buyer_id="2",
            items=json.dumps([secure_item]),
            total=199.99,
            shipping_address=json.dumps(shipping_address),
        ),
        asynchronous=False,
    )
    current_domain.process(MarkAsShipped(order_id=order_id, actor_id="99"), asynchronous=False)
    current_domain.process(ConfirmReceipt(order_id=order_id, actor_id="2"), asynchronous=False)
    return order_id


class TestSellerRatings:
    def test_scored_rating_lands_on_profile(self, completed_order_id):
        current_domain.process(
            RateSeller(
                order_id=completed_order_id,
                actor_id="2",
                rating=4,
                comment="Well packed",
                buyer_name="John Doe",
            ),
            asynchronous=False,
        )

        profile = profile_for("99")
        assert profile is not None
        assert profile.rating_count == 1
        assert profile.average_rating == 4
        rating = profile.ratings[0]
        assert rating.order_id == completed_order_id
        assert rating.comment == "Well packed"
        assert rating.buyer_name == "John Doe"

    def test_comment_kept_verbatim(self, completed_order_id):
        current_domain.process(
            RateSeller(
                order_id=completed_order_id,
                actor_id="2",
                rating=5,
                comment="Fast & careful, <3",
                buyer_name="O'Brien & Co",
            ),
            asynchronous=False,
        )

        rating = profile_for("99").ratings[0]
        assert rating.comment == "Fast & careful, <3"
        assert rating.buyer_name == "O'Brien & Co"

    def test_unscored_rating_leaves_no_profile(self, completed_order_id):
        current_domain.process(RateSeller(order_id=completed_order_id, actor_id="2"), asynchronous=False)

        assert profile_for("99") is None

    def test_unknown_seller(self):
        assert profile_for("12345") is None
