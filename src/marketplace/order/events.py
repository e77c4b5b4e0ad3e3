"""Domain events for the Order aggregate.

Every event carries both participants so that consumers (admin notices,
notification fan-out, seller profiles) never have to load the order again.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A buyer checked out a cart and an order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    selling_mode = String(required=True)
    status = String(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of item snapshots
    total = Float(required=True)
    shipping_address = Text(required=True, sanitize=False)  # JSON: address dict
    discount_code = String()
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderShipped:
    """The seller handed a secure-mode order over for delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    shipped_by = Identifier(required=True)
    shipped_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class ReceiptConfirmed:
    """The buyer confirmed receipt; held funds are released and the order completes."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    confirmed_by = Identifier(required=True)
    completed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class SellerRated:
    """The buyer rated the seller of a completed order."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    rating = Integer()  # 1-5; empty when only the rated flag was recorded
    comment = Text(sanitize=False)
    buyer_name = String(max_length=255, sanitize=False)
    rated_at = DateTime(required=True)
