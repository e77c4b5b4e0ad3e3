"""Receipt confirmation — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ledger.ledger import sync_ledger
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class ConfirmReceipt:
    """The buyer confirms the item arrived, releasing the held payment."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class ConfirmReceiptHandler:
    @handle(ConfirmReceipt)
    def confirm_receipt(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_receipt(actor_id=command.actor_id)
        sync_ledger(order)
        repo.add(order)
