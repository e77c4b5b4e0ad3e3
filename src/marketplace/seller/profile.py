"""SellerProfile aggregate — the public reputation of a seller.

Holds the ratings buyers submitted after completed orders. At most one
rating per order is kept.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.entity(part_of="SellerProfile")
class SellerRating:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255, sanitize=False)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text(sanitize=False)
    created_at = DateTime()


@marketplace.aggregate
class SellerProfile:
    ratings = HasMany(SellerRating)
    updated_at = DateTime()

    @classmethod
    def open(cls, seller_id):
        return cls(id=str(seller_id), updated_at=datetime.now(UTC))

    def has_rating_for(self, order_id) -> bool:
        return any(str(r.order_id) == str(order_id) for r in self.ratings)

    def record_rating(self, order_id, buyer_id, rating, comment=None, buyer_name=None, rated_at=None):
        """Add a buyer's rating. Returns False if the order was already rated."""
        if self.has_rating_for(order_id):
            return False

        self.add_ratings(
            SellerRating(
                order_id=str(order_id),
                buyer_id=str(buyer_id),
                buyer_name=buyer_name,
                rating=rating,
                comment=comment,
                created_at=rated_at or datetime.now(UTC),
            )
        )
        self.updated_at = datetime.now(UTC)
        return True

    @property
    def rating_count(self) -> int:
        return len(self.ratings)

    @property
    def average_rating(self) -> float | None:
        if not self.ratings:
            return None
        return round(sum(r.rating for r in self.ratings) / len(self.ratings), 2)
