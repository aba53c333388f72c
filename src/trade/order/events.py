"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from trade.domain import trade


@trade.event(part_of="Order")
class OrderPlaced:
    """A new order was committed and is waiting for payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_no = String(required=True, max_length=20)
    buyer_id = Identifier(required=True)
    buy_price = Integer(required=True)
    payable_amount = Integer(required=True)
    coupon_id = Identifier()
    placed_at = DateTime(required=True)
