"""Tests for SellerProfile ratings."""

import pytest
from marketplace.seller.profile import SellerProfile
from protean.exceptions import ValidationError


class TestSellerProfile:
    def test_open_uses_seller_id(self):
        profile = SellerProfile.open("99")
        assert profile.id == "99"
        assert profile.rating_count == 0
        assert profile.average_rating is None

    def test_record_rating(self):
        profile = SellerProfile.open("99")
        assert profile.record_rating(order_id="o-1", buyer_id="2", rating=5, buyer_name="John Doe") is True

        assert profile.rating_count == 1
        rating = profile.ratings[0]
        assert rating.rating == 5
        assert rating.buyer_name == "John Doe"
        assert rating.created_at is not None

    def test_one_rating_per_order(self):
        profile = SellerProfile.open("99")
        profile.record_rating(order_id="o-1", buyer_id="2", rating=5)

        assert profile.record_rating(order_id="o-1", buyer_id="2", rating=1) is False
        assert profile.rating_count == 1
        assert profile.has_rating_for("o-1")

    def test_average_rating(self):
        profile = SellerProfile.open("99")
        profile.record_rating(order_id="o-1", buyer_id="2", rating=5)
        profile.record_rating(order_id="o-2", buyer_id="3", rating=4)
        profile.record_rating(order_id="o-3", buyer_id="4", rating=4)

        assert profile.average_rating == pytest.approx(4.33)

    def test_rating_out_of_range_rejected(self):
        profile = SellerProfile.open("99")
        with pytest.raises(ValidationError):
            profile.record_rating(order_id="o-1", buyer_id="2", rating=9)
