"""Tests for the Order and OrderLine aggregates."""

import pytest
from protean.exceptions import ValidationError

from trade.order.events import OrderPlaced
from trade.order.order import (
    AfterSaleStatus,
    DeliveryType,
    Order,
    OrderLine,
    OrderStatus,
    ReceiverAddress,
)


def _receiver():
    return ReceiverAddress(
        name="Li Lei",
        mobile="13800000000",
        area_code="310104",
        detail_address="88 Caoxi North Road, Xuhui",
    )


def _place(**overrides):
    defaults = {
        "buyer_id": "buyer-001",
        "order_no": "20261019120000123456",
        "receiver": _receiver(),
        "buy_price": 150,
        "discount_price": 30,
        "shipping_price": 10,
        "gift_price": 130,
        "remark": "Leave at the door",
        "coupon_id": "coupon-001",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestOrderPlacement:
    def test_new_order_waits_for_payment(self):
        order = _place()
        assert order.status == OrderStatus.WAITING_PAYMENT.value

    def test_nothing_paid_or_refunded(self):
        order = _place()
        assert order.pay_price == 0
        assert order.refund_price == 0

    def test_no_after_sale_and_express_delivery(self):
        order = _place()
        assert order.after_sale_status == AfterSaleStatus.NONE.value
        assert order.delivery_type == DeliveryType.EXPRESS.value

    def test_money_fields_copied(self):
        order = _place()
        assert order.buy_price == 150
        assert order.discount_price == 30
        assert order.shipping_price == 10
        assert order.gift_price == 130

    def test_payable_amount(self):
        order = _place()
        assert order.payable_amount == 150 - 30 + 10

    def test_receiver_snapshot(self):
        order = _place()
        assert order.receiver.name == "Li Lei"
        assert order.receiver.area_code == "310104"

    def test_remark_and_coupon(self):
        order = _place()
        assert order.remark == "Leave at the door"
        assert str(order.coupon_id) == "coupon-001"

    def test_without_coupon(self):
        order = _place(coupon_id=None, discount_price=0, gift_price=160)
        assert order.coupon_id is None

    def test_sets_created_at_and_id(self):
        order = _place()
        assert order.created_at is not None
        assert order.id is not None

    def test_raises_order_placed(self):
        order = _place()
        placed = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(placed) == 1
        event = placed[0]
        assert event.order_id == str(order.id)
        assert event.order_no == "20261019120000123456"
        assert event.buy_price == 150
        assert event.payable_amount == 130

    def test_negative_money_rejected(self):
        with pytest.raises(ValidationError):
            _place(buy_price=-1)


class TestReceiverAddress:
    def test_all_fields_required(self):
        with pytest.raises(ValidationError):
            ReceiverAddress(name="Li Lei", mobile="13800000000", area_code="310104")


class TestOrderLine:
    def _line(self, **overrides):
        defaults = {
            "order_id": "order-001",
            "line_no": 1,
            "variant_id": "var-001",
            "product_id": "prod-001",
            "name": "Canvas Tote",
            "quantity": 2,
            "origin_price": 50,
            "buy_price": 50,
            "gift_value": 50,
            "buy_total": 100,
            "discount_total": 0,
            "gift_total": 100,
        }
        defaults.update(overrides)
        return OrderLine(**defaults)

    def test_defaults(self):
        line = self._line()
        assert line.status == OrderStatus.WAITING_PAYMENT.value
        assert line.refund_total == 0
        assert line.after_sale_status == AfterSaleStatus.NONE.value
        assert line.image is None

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            self._line(quantity=0)

    def test_order_reference_required(self):
        with pytest.raises(ValidationError):
            self._line(order_id=None)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            self._line(status="Teleported")
