"""Ledger — each participant's private, role-specific view of their orders.

One LedgerEntry exists per (owner, order). A secure-mode order between two
different users therefore has two entries sharing the same order id: the
buyer's (status shown as AwaitingShipment while payment is held) and the
seller's (PaymentHeld). Direct-mode orders only appear in the buyer's ledger.

Entries are written by the order command handlers through ``sync_ledger``,
in the same unit of work that persists the Order. Either the order and every
entry change together, or nothing is committed.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import ParticipantRole, SellingMode, project_status

logger = structlog.get_logger(__name__)


def entry_id_for(order_id, owner_id) -> str:
    return f"{order_id}:{owner_id}"


@marketplace.projection
class LedgerEntry:
    entry_id = Identifier(identifier=True, required=True)
    owner_id = Identifier(required=True)
    role = String(choices=ParticipantRole, required=True)
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    status = String(required=True)
    selling_mode = String(required=True)
    items = Text(sanitize=False)  # JSON: list of item snapshots
    total = Float()
    shipping_address = Text(sanitize=False)  # JSON: address dict
    discount_code = String(max_length=50)
    buyer_rated = Boolean(default=False)
    placed_at = DateTime()
    updated_at = DateTime()


def ledger_owners(order) -> list[tuple[str, str]]:
    """(owner_id, role) pairs that keep this order in their ledger."""
    owners = [(str(order.buyer_id), ParticipantRole.BUYER.value)]
    if order.selling_mode == SellingMode.SECURE.value and str(order.seller_id) != str(order.buyer_id):
        owners.append((str(order.seller_id), ParticipantRole.SELLER.value))
    return owners


def _address_json(order) -> str:
    address = order.shipping_address
    return json.dumps(
        {
            "full_name": address.full_name,
            "street": address.street,
            "city": address.city,
            "zip_code": address.zip_code,
            "country": address.country,
        }
    )


def sync_ledger(order) -> list[LedgerEntry]:
    """Bring every participant's entry in line with ``order``.

    Must be called from the command handler that mutates the order, before
    the order itself is added, so both land in one unit of work.
    """
    repo = current_domain.repository_for(LedgerEntry)

    entries = []
    for owner_id, role in ledger_owners(order):
        try:
            entry = repo.get(entry_id_for(order.id, owner_id))
        except ObjectNotFoundError:
            entry = LedgerEntry(
                entry_id=entry_id_for(order.id, owner_id),
                owner_id=owner_id,
                role=role,
                order_id=str(order.id),
                buyer_id=str(order.buyer_id),
                seller_id=str(order.seller_id),
                status=project_status(order.status, role),
                selling_mode=order.selling_mode,
                items=json.dumps([item.snapshot() for item in order.items]),
                total=order.total,
                shipping_address=_address_json(order),
                discount_code=order.discount_code,
                placed_at=order.placed_at,
            )

        entry.status = project_status(order.status, role)
        entry.buyer_rated = order.is_rated
        entry.updated_at = order.updated_at
        repo.add(entry)
        entries.append(entry)

    logger.debug("Ledger synced", order_id=str(order.id), status=order.status, entries=len(entries))
    return entries
