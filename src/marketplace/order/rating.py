"""Seller rating — command and handler.

Rating is a one-time sub-transition of a completed order. The score itself
is optional: without one only the order's rated flag is recorded.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ledger.ledger import sync_ledger
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class RateSeller:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    rating = Integer(min_value=1, max_value=5)
    comment = Text(sanitize=False)
    buyer_name = String(max_length=255, sanitize=False)


@marketplace.command_handler(part_of=Order)
class RateSellerHandler:
    @handle(RateSeller)
    def rate_seller(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_buyer_rating(
            actor_id=command.actor_id,
            rating=command.rating,
            comment=command.comment,
            buyer_name=command.buyer_name,
        )
        sync_ledger(order)
        repo.add(order)
