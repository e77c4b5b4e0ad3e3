"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ledger.ledger import sync_ledger
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of item snapshots
    total = Float(required=True, min_value=0.0)
    shipping_address = Text(required=True, sanitize=False)  # JSON: address dict
    discount_code = String(max_length=50)


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            buyer_id=command.buyer_id,
            items_data=items_data,
            total=command.total,
            shipping_address=shipping_address,
            discount_code=command.discount_code,
        )
        sync_ledger(order)
        current_domain.repository_for(Order).add(order)
        return str(order.id)
