"""Discount code lookups — the validity check used at checkout."""

from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from marketplace.marketing.discount import DiscountCode, normalize_code
from marketplace.utils.paging import fetch_all

logger = structlog.get_logger(__name__)


def find_discount_code(code: str) -> DiscountCode | None:
    """Case-insensitive lookup, regardless of validity."""
    if not code or not code.strip():
        return None
    repo = current_domain.repository_for(DiscountCode)
    try:
        matches = fetch_all(repo._dao.query.filter(lookup_key=normalize_code(code)))
    except Exception:
        logger.warning("Discount code read failed, treating as empty", code=code, exc_info=True)
        return None
    return matches[0] if matches else None


def validate_discount_code(code: str, now: datetime | None = None) -> DiscountCode | None:
    """The code if it exists, is active, and ``now`` is inside its window."""
    discount = find_discount_code(code)
    if discount is None:
        return None
    if not discount.is_valid_on(now or datetime.now()):
        return None
    return discount


def list_discount_codes() -> list[DiscountCode]:
    repo = current_domain.repository_for(DiscountCode)
    try:
        codes = fetch_all(repo._dao.query)
    except Exception:
        logger.warning("Discount code read failed, treating as empty", exc_info=True)
        return []
    return sorted(codes, key=lambda d: d.lookup_key)
