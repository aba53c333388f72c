"""Price resolution: one call to the pricing engine for the whole order."""

import structlog

from trade.clients.port import PriceBreakdown, PricingEngine, PriceRequestItem

logger = structlog.get_logger(__name__)


def resolve_price(pricing: PricingEngine, buyer_id, items, coupon_id=None) -> PriceBreakdown:
    """Price every requested item together, with the optional coupon applied.

    Each line is sent as selected: partial-cart pricing is not supported. Coupon
    eligibility is the engine's call; its result is trusted as-is.
    """
    request_items = [
        PriceRequestItem(variant_id=str(item.variant_id), quantity=item.quantity, selected=True) for item in items
    ]
    breakdown = pricing.calculate(str(buyer_id), request_items, str(coupon_id) if coupon_id else None)

    logger.info(
        "Order priced",
        list_total=breakdown.fee.list_total,
        discount_total=breakdown.fee.discount_total,
        shipping_total=breakdown.fee.shipping_total,
        coupon_id=coupon_id,
    )
    return breakdown
