"""Seller profiles react to ratings submitted on orders."""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.order.events import SellerRated
from marketplace.seller.profile import SellerProfile

logger = structlog.get_logger(__name__)


def profile_for(seller_id) -> SellerProfile | None:
    try:
        return current_domain.repository_for(SellerProfile).get(str(seller_id))
    except ObjectNotFoundError:
        return None


@marketplace.event_handler(part_of=SellerProfile, stream_category="marketplace::order")
class SellerRatingsHandler:
    @handle(SellerRated)
    def on_seller_rated(self, event: SellerRated) -> None:
        if event.rating is None:
            return

        repo = current_domain.repository_for(SellerProfile)
        profile = profile_for(event.seller_id) or SellerProfile.open(event.seller_id)

        if not profile.record_rating(
            order_id=event.order_id,
            buyer_id=event.buyer_id,
            rating=event.rating,
            comment=event.comment,
            buyer_name=event.buyer_name,
            rated_at=event.rated_at,
        ):
            logger.info("Rating already recorded", order_id=str(event.order_id), seller_id=str(event.seller_id))
            return

        repo.add(profile)
