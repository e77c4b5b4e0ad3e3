"""Marketplace bounded context — escrow-style order lifecycle for a resale marketplace.

Handles order placement in secure (escrow) and direct selling modes, the
role-specific ledgers of buyers and sellers, counter-party notifications on
every status change, discount codes, and seller ratings.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
