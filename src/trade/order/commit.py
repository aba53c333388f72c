"""Order committer — writes the order header and its lines in one Unit of Work.

The header is added first, then every line in request order. Both writes
belong to the same Unit of Work: if anything fails in between, neither the
header nor any line becomes visible.
"""

import structlog
from protean import UnitOfWork
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from trade.order.errors import InternalInconsistency, OrderCreationError, StorageFailure
from trade.order.numbering import generate_order_no
from trade.order.order import Order, OrderLine, ReceiverAddress

logger = structlog.get_logger(__name__)


def commit_order(command, address, variants, breakdown) -> str:
    """Persist a new order built from validated inputs. Returns the order id."""
    try:
        with UnitOfWork():
            order = _build_header(command, address, breakdown)
            current_domain.repository_for(Order).add(order)

            lines = _build_lines(order, command, variants, breakdown)
            current_domain.repository_for(OrderLine).add_batch(lines)
    except OrderCreationError:
        raise
    except ValidationError as exc:
        logger.error("Order failed validation while being built", error=str(exc))
        raise InternalInconsistency("Resolved data produced an invalid order", errors=exc.messages) from exc
    except Exception as exc:
        logger.error("Order could not be stored", error=str(exc))
        raise StorageFailure("Order could not be stored", error=str(exc)) from exc

    logger.info(
        "Order committed",
        order_id=str(order.id),
        order_no=order.order_no,
        line_count=len(lines),
        buy_price=order.buy_price,
    )
    return str(order.id)


def _build_header(command, address, breakdown) -> Order:
    fee = breakdown.fee
    return Order.place(
        buyer_id=command.buyer_id,
        order_no=generate_order_no(),
        receiver=ReceiverAddress(
            name=address.name,
            mobile=address.mobile,
            area_code=address.area_code,
            detail_address=address.detail_address,
        ),
        buy_price=fee.list_total,
        discount_price=fee.discount_total,
        shipping_price=fee.shipping_total,
        gift_price=fee.gift_value_total,
        remark=command.remark,
        coupon_id=command.coupon_id,
    )


def _build_lines(order, command, variants, breakdown) -> list[OrderLine]:
    price_items = breakdown.items_by_variant()

    lines = []
    for line_no, item in enumerate(command.items, start=1):
        variant_id = str(item.variant_id)
        variant = variants.get(variant_id)
        price = price_items.get(variant_id)
        if variant is None or price is None:
            raise InternalInconsistency(
                "Requested variant missing from resolved data",
                variant_id=variant_id,
                catalogue_hit=variant is not None,
                price_hit=price is not None,
            )

        lines.append(
            OrderLine(
                order_id=str(order.id),
                line_no=line_no,
                status=order.status,
                variant_id=variant_id,
                product_id=str(variant.product_id),
                name=variant.name,
                image=variant.primary_image,
                quantity=item.quantity,
                origin_price=price.origin_price,
                buy_price=price.buy_price,
                gift_value=price.gift_value,
                buy_total=price.buy_total,
                discount_total=price.discount_total,
                gift_total=price.gift_total,
                refund_total=0,
            )
        )

    line_total = sum(line.buy_total for line in lines)
    if line_total != order.buy_price:
        raise InternalInconsistency(
            "Line totals do not add up to the order price",
            line_total=line_total,
            buy_price=order.buy_price,
        )
    return lines
