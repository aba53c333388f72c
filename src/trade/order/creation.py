"""Order creation — command and orchestrator.

Stages run strictly in sequence and none is retried:

    1. Validate address   -> AddressNotFound
    2. Validate catalogue -> CatalogMismatch
    3. Resolve price      -> PricingRejected / PricingUnavailable
    4. Consume coupon     -> CouponConsumptionFailed (only with a coupon)
    5. Commit order       -> StorageFailure / InternalInconsistency
    6. Initiate payment   (handoff to the payment service)

Only stage 5 is transactional. A coupon consumed in stage 4 stays consumed
when stage 5 fails, unless coupon compensation is switched on in settings.
Stock is not deducted anywhere in this flow.

The order is committed before payment is initiated, so a failing payment
handoff is logged and the order id is still returned. The order then waits
for payment like any other unpaid order.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, List, String, ValueObject
from protean.utils.globals import current_domain

from trade.clients import get_clients
from trade.config import get_settings
from trade.domain import trade
from trade.order.commit import commit_order
from trade.order.errors import OrderCreationError
from trade.order.order import Order
from trade.order.pricing import resolve_price
from trade.order.validation import resolve_address, resolve_variants
from trade.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


@trade.value_object(part_of="Order")
class OrderItem:
    """One requested variant and how many of it."""

    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@trade.command(part_of="Order")
class CreateOrder:
    buyer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    items = List(content_type=ValueObject(OrderItem), required=True)
    coupon_id = Identifier()
    remark = String(max_length=500)


def _reject_duplicate_variants(items) -> None:
    """A variant may appear once per order. Duplicates are an error, not merged."""
    variant_ids = [str(item.variant_id) for item in items]
    duplicates = sorted({v for v in variant_ids if variant_ids.count(v) > 1})
    if duplicates:
        raise ValidationError({"items": [f"Variants requested more than once: {', '.join(duplicates)}"]})


def create_order(command: CreateOrder) -> str:
    """Create an order for ``command`` and return its id.

    Raises protean's ValidationError for a malformed request and an
    OrderCreationError subclass when any stage fails.
    """
    _reject_duplicate_variants(command.items)
    clients = get_clients()

    add_context(buyer_id=str(command.buyer_id), address_id=str(command.address_id))
    try:
        logger.info("Creating order", item_count=len(command.items), coupon_id=command.coupon_id)

        address = resolve_address(clients.address_book, command.buyer_id, command.address_id)
        variants = resolve_variants(clients.catalogue, command.items)
        breakdown = resolve_price(clients.pricing, command.buyer_id, command.items, command.coupon_id)

        # TODO: deduct stock through the inventory service before the coupon is consumed
        if command.coupon_id:
            clients.coupons.use_coupon(str(command.buyer_id), str(command.coupon_id))
            logger.info("Coupon consumed", coupon_id=command.coupon_id)

        try:
            order_id = commit_order(command, address, variants, breakdown)
        except OrderCreationError:
            if command.coupon_id and get_settings().compensate_coupon:
                _release_coupon(clients.coupons, command)
            raise

        _initiate_payment(clients.payments, order_id)
        return order_id
    except OrderCreationError as exc:
        logger.warning("Order creation failed", code=exc.code, stage=exc.stage.value if exc.stage else None)
        raise
    finally:
        clear_context()


def _release_coupon(coupons, command) -> None:
    try:
        coupons.release_coupon(str(command.buyer_id), str(command.coupon_id))
    except OrderCreationError as exc:
        logger.error("Coupon could not be released after a failed commit", coupon_id=command.coupon_id, error=str(exc))
    else:
        logger.info("Coupon released after a failed commit", coupon_id=command.coupon_id)


def _initiate_payment(payments, order_id: str) -> None:
    order = current_domain.repository_for(Order).get(order_id)
    try:
        payments.initiate(order_id, order.payable_amount)
    except Exception:
        logger.exception("Payment handoff failed", order_id=order_id, amount=order.payable_amount)
