"""Domain errors raised by marketplace aggregates and handlers.

All of them are Protean ``ValidationError`` subclasses so that they travel
through command processing like any other business-rule violation; the
storefront tells them apart to report a precise failure kind.
"""

from protean.exceptions import ValidationError


class UnauthorizedActionError(ValidationError):
    """The acting user is not the party allowed to perform the action."""


class DuplicateDiscountCodeError(ValidationError):
    """A discount code with the same case-insensitive text already exists."""
