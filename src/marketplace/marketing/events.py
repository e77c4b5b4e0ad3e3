"""Domain events for the DiscountCode aggregate."""

from protean.fields import Boolean, Date, DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="DiscountCode")
class DiscountCodeAdded:
    """An administrator created a promotional code."""

    __version__ = 1

    discount_code_id = Identifier(required=True)
    code = String(required=True)
    percentage = Integer(required=True)
    start_date = Date(required=True)
    expiry_date = Date(required=True)
    added_at = DateTime(required=True)


@marketplace.event(part_of="DiscountCode")
class DiscountCodeRevised:
    """Code text, percentage or validity window of a promotional code changed."""

    __version__ = 1

    discount_code_id = Identifier(required=True)
    code = String(required=True)
    percentage = Integer(required=True)
    start_date = Date(required=True)
    expiry_date = Date(required=True)
    revised_at = DateTime(required=True)


@marketplace.event(part_of="DiscountCode")
class DiscountCodeActivationChanged:
    """A promotional code was soft-disabled or re-enabled."""

    __version__ = 1

    discount_code_id = Identifier(required=True)
    is_active = Boolean(required=True)
    changed_at = DateTime(required=True)
