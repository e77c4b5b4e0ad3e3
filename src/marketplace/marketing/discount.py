"""DiscountCode aggregate — promotional percentage codes with a calendar-day window.

Codes never expire in storage. Whether a code can be used is decided at use
time by ``is_valid_on``: the window is inclusive on both ends, from the start
of ``start_date`` to the last instant of ``expiry_date``, and ``is_active``
acts as a soft-disable switch.
"""

from datetime import UTC, date, datetime, time

from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Integer, String

from marketplace.domain import marketplace
from marketplace.marketing.events import (
    DiscountCodeActivationChanged,
    DiscountCodeAdded,
    DiscountCodeRevised,
)


def normalize_code(code: str) -> str:
    """Case-insensitive key under which a code is unique."""
    return code.strip().upper()


def apply_discount(subtotal: float, percentage: int) -> float:
    """Net amount after taking ``percentage`` percent off; never below zero."""
    return max(0.0, subtotal - subtotal * (percentage / 100))


@marketplace.aggregate
class DiscountCode:
    code = String(required=True, max_length=50)
    lookup_key = String(required=True, max_length=50)
    percentage = Integer(required=True, min_value=1, max_value=100)
    start_date = Date(required=True)
    expiry_date = Date(required=True)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, code, percentage, start_date, expiry_date):
        _assert_window(start_date, expiry_date)
        now = datetime.now(UTC)
        discount = cls(
            code=code.strip(),
            lookup_key=normalize_code(code),
            percentage=percentage,
            start_date=start_date,
            expiry_date=expiry_date,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        discount.raise_(
            DiscountCodeAdded(
                discount_code_id=str(discount.id),
                code=discount.code,
                percentage=discount.percentage,
                start_date=discount.start_date,
                expiry_date=discount.expiry_date,
                added_at=now,
            )
        )
        return discount

    # -------------------------------------------------------------------
    # Validity
    # -------------------------------------------------------------------
    def is_valid_on(self, now) -> bool:
        """True when the code is active and ``now`` falls inside its window."""
        if not self.is_active:
            return False

        today = now.date() if isinstance(now, datetime) else now
        current = datetime.combine(today, time.min)
        start = datetime.combine(_as_date(self.start_date), time.min)
        expiry = datetime.combine(_as_date(self.expiry_date), time.max)
        return start <= current <= expiry

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def revise(self, code=None, percentage=None, start_date=None, expiry_date=None):
        _assert_window(
            start_date if start_date is not None else self.start_date,
            expiry_date if expiry_date is not None else self.expiry_date,
        )
        if code is not None:
            self.code = code.strip()
            self.lookup_key = normalize_code(code)
        if percentage is not None:
            self.percentage = percentage
        if start_date is not None:
            self.start_date = start_date
        if expiry_date is not None:
            self.expiry_date = expiry_date

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            DiscountCodeRevised(
                discount_code_id=str(self.id),
                code=self.code,
                percentage=self.percentage,
                start_date=self.start_date,
                expiry_date=self.expiry_date,
                revised_at=now,
            )
        )

    def set_active(self, is_active):
        if bool(self.is_active) == bool(is_active):
            return

        now = datetime.now(UTC)
        self.is_active = bool(is_active)
        self.updated_at = now

        self.raise_(
            DiscountCodeActivationChanged(
                discount_code_id=str(self.id),
                is_active=self.is_active,
                changed_at=now,
            )
        )


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def _assert_window(start_date, expiry_date):
    if start_date and expiry_date and _as_date(start_date) > _as_date(expiry_date):
        raise ValidationError({"expiry_date": ["Expiry date cannot be before the start date"]})
