"""Marketplace API package."""

from marketplace.api.routes import (
    admin_router,
    discount_router,
    ledger_router,
    notification_router,
    order_router,
    seller_router,
)

__all__ = [
    "order_router",
    "ledger_router",
    "admin_router",
    "discount_router",
    "notification_router",
    "seller_router",
]
