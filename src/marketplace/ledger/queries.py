"""Read access to participants' ledgers.

Reads fail open: if the store cannot be read, callers get an empty ledger and
a logged warning instead of an exception, so a broken read never blocks the
storefront. Writes never go through here.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.ledger.ledger import LedgerEntry, entry_id_for
from marketplace.utils.paging import fetch_all

logger = structlog.get_logger(__name__)


def ledger_for(owner_id) -> list[LedgerEntry]:
    """All ledger entries owned by ``owner_id``, newest first."""
    repo = current_domain.repository_for(LedgerEntry)
    try:
        entries = fetch_all(repo._dao.query.filter(owner_id=str(owner_id)))
    except Exception:
        logger.warning("Ledger read failed, treating as empty", owner_id=str(owner_id), exc_info=True)
        return []
    return sorted(entries, key=lambda e: (e.placed_at, str(e.order_id)), reverse=True)


def entries_for_order(order_id) -> list[LedgerEntry]:
    repo = current_domain.repository_for(LedgerEntry)
    try:
        return fetch_all(repo._dao.query.filter(order_id=str(order_id)))
    except Exception:
        logger.warning("Ledger read failed, treating as empty", order_id=str(order_id), exc_info=True)
        return []


def find_entry(order_id, owner_id) -> LedgerEntry | None:
    """The owner's view of one order, or None when it is not in their ledger."""
    repo = current_domain.repository_for(LedgerEntry)
    try:
        return repo.get(entry_id_for(order_id, owner_id))
    except ObjectNotFoundError:
        return None
    except Exception:
        logger.warning(
            "Ledger read failed, treating as empty",
            order_id=str(order_id),
            owner_id=str(owner_id),
            exc_info=True,
        )
        return None
