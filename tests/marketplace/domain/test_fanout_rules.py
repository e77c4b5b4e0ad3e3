"""Tests for choosing who hears about an order change."""

from marketplace.notification.fanout import order_reference, recipients_for


class TestRecipients:
    def test_seller_action_notifies_buyer(self):
        assert recipients_for(buyer_id="2", seller_id="99", acting_user_id="99") == ["2"]

    def test_buyer_action_notifies_seller(self):
        assert recipients_for(buyer_id="2", seller_id="99", acting_user_id="2") == ["99"]

    def test_third_party_action_notifies_both(self):
        assert recipients_for(buyer_id="2", seller_id="99", acting_user_id="admin-1") == ["2", "99"]

    def test_self_purchase_notifies_nobody_when_acting(self):
        assert recipients_for(buyer_id="7", seller_id="7", acting_user_id="7") == []

    def test_self_purchase_notified_once_for_admin_action(self):
        assert recipients_for(buyer_id="7", seller_id="7", acting_user_id="admin-1") == ["7"]

    def test_ids_compared_as_strings(self):
        assert recipients_for(buyer_id=2, seller_id=99, acting_user_id="99") == ["2"]


class TestOrderReference:
    def test_last_six_characters(self):
        assert order_reference("1712345678901234") == "901234"

    def test_short_ids_kept_whole(self):
        assert order_reference("42") == "42"
