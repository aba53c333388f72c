"""Tests for the CreateOrder command and its OrderItem value objects."""

import pytest
from protean.exceptions import ValidationError

from trade.order.creation import CreateOrder, OrderItem


def _command(**overrides):
    defaults = {
        "buyer_id": "buyer-001",
        "address_id": "addr-001",
        "items": [OrderItem(variant_id="var-001", quantity=2), OrderItem(variant_id="var-002", quantity=1)],
    }
    defaults.update(overrides)
    return CreateOrder(**defaults)


class TestOrderItem:
    @pytest.mark.parametrize("quantity", [0, -3])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(variant_id="var-001", quantity=quantity)
        assert "quantity" in exc_info.value.messages

    def test_quantity_must_be_a_number(self):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(variant_id="var-001", quantity="two")
        assert "quantity" in exc_info.value.messages

    def test_numeric_string_quantity_is_cast(self):
        assert OrderItem(variant_id="var-001", quantity="2").quantity == 2

    def test_blank_variant_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(variant_id="", quantity=1)
        assert "variant_id" in exc_info.value.messages

    def test_quantity_required(self):
        with pytest.raises(ValidationError):
            OrderItem(variant_id="var-001")


class TestCreateOrderCommand:
    def test_valid_command(self):
        command = _command(coupon_id="coupon-001", remark="Gift wrap")

        assert command.buyer_id == "buyer-001"
        assert command.coupon_id == "coupon-001"
        assert [item.variant_id for item in command.items] == ["var-001", "var-002"]
        assert command.items[0].quantity == 2

    def test_coupon_and_remark_optional(self):
        command = _command()

        assert command.coupon_id is None
        assert command.remark is None

    def test_items_required(self):
        with pytest.raises(ValidationError) as exc_info:
            _command(items=[])
        assert "items" in exc_info.value.messages

    def test_buyer_and_address_required(self):
        with pytest.raises(ValidationError) as exc_info:
            _command(buyer_id="", address_id=None)
        assert "buyer_id" in exc_info.value.messages
        assert "address_id" in exc_info.value.messages

    def test_remark_length_bounded(self):
        with pytest.raises(ValidationError) as exc_info:
            _command(remark="x" * 501)
        assert "remark" in exc_info.value.messages
