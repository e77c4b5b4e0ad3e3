"""Discount code administration — commands and handler.

Uniqueness of the case-insensitive code spans aggregates, so it is enforced
here with a repository query rather than inside DiscountCode.
"""

from protean import handle
from protean.fields import Boolean, Date, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import DuplicateDiscountCodeError
from marketplace.marketing.discount import DiscountCode, normalize_code
from marketplace.utils.paging import fetch_all


@marketplace.command(part_of="DiscountCode")
class AddDiscountCode:
    code = String(required=True, max_length=50)
    percentage = Integer(required=True, min_value=1, max_value=100)
    start_date = Date(required=True)
    expiry_date = Date(required=True)


@marketplace.command(part_of="DiscountCode")
class UpdateDiscountCode:
    discount_code_id = Identifier(required=True)
    code = String(max_length=50)
    percentage = Integer(min_value=1, max_value=100)
    start_date = Date()
    expiry_date = Date()


@marketplace.command(part_of="DiscountCode")
class SetDiscountCodeActive:
    discount_code_id = Identifier(required=True)
    is_active = Boolean(required=True)


@marketplace.command(part_of="DiscountCode")
class DeleteDiscountCode:
    discount_code_id = Identifier(required=True)


def _assert_code_is_free(code, exclude_id=None):
    repo = current_domain.repository_for(DiscountCode)
    existing = fetch_all(repo._dao.query.filter(lookup_key=normalize_code(code)))
    if any(str(d.id) != str(exclude_id) for d in existing):
        raise DuplicateDiscountCodeError({"code": [f"Discount code {code} already exists"]})


@marketplace.command_handler(part_of=DiscountCode)
class DiscountCodeManagementHandler:
    @handle(AddDiscountCode)
    def add_discount_code(self, command):
        _assert_code_is_free(command.code)

        discount = DiscountCode.create(
            code=command.code,
            percentage=command.percentage,
            start_date=command.start_date,
            expiry_date=command.expiry_date,
        )
        current_domain.repository_for(DiscountCode).add(discount)
        return str(discount.id)

    @handle(UpdateDiscountCode)
    def update_discount_code(self, command):
        repo = current_domain.repository_for(DiscountCode)
        discount = repo.get(command.discount_code_id)
        if command.code:
            _assert_code_is_free(command.code, exclude_id=discount.id)

        discount.revise(
            code=command.code,
            percentage=command.percentage,
            start_date=command.start_date,
            expiry_date=command.expiry_date,
        )
        repo.add(discount)

    @handle(SetDiscountCodeActive)
    def set_discount_code_active(self, command):
        repo = current_domain.repository_for(DiscountCode)
        discount = repo.get(command.discount_code_id)
        discount.set_active(command.is_active)
        repo.add(discount)

    @handle(DeleteDiscountCode)
    def delete_discount_code(self, command):
        repo = current_domain.repository_for(DiscountCode)
        discount = repo.get(command.discount_code_id)
        repo._dao.delete(discount)
