"""Order and OrderLine aggregates (CQRS).

An Order is the header of a purchase: who bought, where it ships, and the
order-level money totals. Each requested variant becomes one OrderLine that
points back at its Order. Both are written once, together, by the order
committer; payment, delivery and after-sale flows update them later.

Money fields are integers in minor currency units (cents).
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from trade.domain import trade
from trade.order.events import OrderPlaced


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    WAITING_PAYMENT = "Waiting_Payment"
    WAITING_DELIVERY = "Waiting_Delivery"
    ALREADY_DELIVERY = "Already_Delivery"
    COMPLETED = "Completed"
    CLOSED = "Closed"


class AfterSaleStatus(Enum):
    NONE = "None"
    APPLIED = "Applied"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    REJECTED = "Rejected"


class DeliveryType(Enum):
    EXPRESS = "Express"
    PICK_UP = "Pick_Up"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@trade.value_object(part_of="Order")
class ReceiverAddress:
    """Where the order ships, copied from the buyer's address book at creation.

    Later edits to the address book never reach an order that was already placed.
    """

    name = String(required=True, max_length=64)
    mobile = String(required=True, max_length=32)
    area_code = String(required=True, max_length=16)
    detail_address = String(required=True, max_length=255)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------
@trade.aggregate(schema_name="trade_orders")
class Order:
    buyer_id = Identifier(required=True)
    order_no = String(required=True, max_length=20)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.WAITING_PAYMENT.value,
    )
    remark = String(max_length=500)
    buy_price = Integer(default=0, min_value=0)
    discount_price = Integer(default=0, min_value=0)
    shipping_price = Integer(default=0, min_value=0)
    gift_price = Integer(default=0, min_value=0)
    pay_price = Integer(default=0, min_value=0)
    refund_price = Integer(default=0, min_value=0)
    delivery_type = String(
        choices=DeliveryType,
        default=DeliveryType.EXPRESS.value,
    )
    receiver = ValueObject(ReceiverAddress)
    after_sale_status = String(
        choices=AfterSaleStatus,
        default=AfterSaleStatus.NONE.value,
    )
    coupon_id = Identifier()
    created_at = DateTime()

    @classmethod
    def place(
        cls,
        buyer_id,
        order_no,
        receiver,
        buy_price,
        discount_price,
        shipping_price,
        gift_price,
        remark=None,
        coupon_id=None,
    ):
        """Build a new order header waiting for payment.

        Nothing has been paid or refunded yet and no after-sale request exists.
        """
        now = datetime.now(UTC)
        order = cls(
            buyer_id=buyer_id,
            order_no=order_no,
            status=OrderStatus.WAITING_PAYMENT.value,
            remark=remark,
            buy_price=buy_price,
            discount_price=discount_price,
            shipping_price=shipping_price,
            gift_price=gift_price,
            pay_price=0,
            refund_price=0,
            delivery_type=DeliveryType.EXPRESS.value,
            receiver=receiver,
            after_sale_status=AfterSaleStatus.NONE.value,
            coupon_id=coupon_id,
            created_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_no=order_no,
                buyer_id=str(buyer_id),
                buy_price=buy_price,
                payable_amount=order.payable_amount,
                coupon_id=str(coupon_id) if coupon_id else None,
                placed_at=now,
            )
        )
        return order

    @property
    def payable_amount(self) -> int:
        return self.buy_price - self.discount_price + self.shipping_price


@trade.aggregate(schema_name="trade_order_lines")
class OrderLine:
    """One requested variant of an order, with its price snapshot."""

    order_id = Identifier(required=True)
    line_no = Integer(required=True, min_value=1)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.WAITING_PAYMENT.value,
    )
    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    image = String(max_length=1024)
    quantity = Integer(required=True, min_value=1)
    origin_price = Integer(default=0, min_value=0)
    buy_price = Integer(default=0, min_value=0)
    gift_value = Integer(default=0, min_value=0)
    buy_total = Integer(default=0, min_value=0)
    discount_total = Integer(default=0, min_value=0)
    gift_total = Integer(default=0, min_value=0)
    refund_total = Integer(default=0, min_value=0)
    after_sale_status = String(
        choices=AfterSaleStatus,
        default=AfterSaleStatus.NONE.value,
    )


@trade.repository(part_of=OrderLine)
class OrderLineRepository:
    def add_batch(self, lines):
        for line in lines:
            self.add(line)

    def for_order(self, order_id) -> list[OrderLine]:
        """Lines of one order, in the order they were requested."""
        lines = self._dao.query.filter(order_id=str(order_id)).all().items
        return sorted(lines, key=lambda line: line.line_no)
