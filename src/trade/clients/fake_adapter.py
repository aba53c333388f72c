"""Configurable in-memory collaborators for development and testing.

Every fake records the calls it receives in ``calls`` and can be told to fail,
so tests can assert both on the outcome of an order creation and on which
services were (or were not) contacted along the way.
"""

from collections.abc import Iterable, Sequence

from trade.clients.port import (
    AddressBook,
    Catalogue,
    CouponWallet,
    PaymentHandoff,
    PriceBreakdown,
    PriceFee,
    PriceItem,
    PriceItemGroup,
    PricingEngine,
    PriceRequestItem,
    ResolvedAddress,
    ResolvedVariant,
)
from trade.order.errors import (
    AddressUnavailable,
    CatalogUnavailable,
    CouponConsumptionFailed,
    PricingRejected,
    PricingUnavailable,
)


class FakeAddressBook(AddressBook):
    def __init__(self) -> None:
        self.addresses: dict[tuple[str, str], ResolvedAddress] = {}
        self.available: bool = True
        self.calls: list[dict] = []

    def add(self, address_id: str, buyer_id: str, address: ResolvedAddress) -> None:
        self.addresses[(str(address_id), str(buyer_id))] = address

    def get_address(self, address_id: str, buyer_id: str) -> ResolvedAddress | None:
        self.calls.append({"method": "get_address", "address_id": address_id, "buyer_id": buyer_id})
        if not self.available:
            raise AddressUnavailable("Address book is unavailable", address_id=address_id)
        return self.addresses.get((str(address_id), str(buyer_id)))


class FakeCatalogue(Catalogue):
    def __init__(self) -> None:
        self.variants: dict[str, ResolvedVariant] = {}
        self.available: bool = True
        self.calls: list[dict] = []

    def add(self, variant: ResolvedVariant) -> None:
        self.variants[str(variant.variant_id)] = variant

    def unpublish(self, variant_id: str) -> None:
        self.variants.pop(str(variant_id), None)

    def list_variants(self, variant_ids: Iterable[str], fields: Sequence[str] = ()) -> list[ResolvedVariant]:
        variant_ids = [str(variant_id) for variant_id in variant_ids]
        self.calls.append({"method": "list_variants", "variant_ids": variant_ids, "fields": tuple(fields)})
        if not self.available:
            raise CatalogUnavailable("Catalogue is unavailable")
        return [self.variants[variant_id] for variant_id in variant_ids if variant_id in self.variants]


class FakePricingEngine(PricingEngine):
    """Prices items from a fixed unit price list.

    A coupon's discount is charged against the most expensive line, capped at
    that line's total. The shipping fee is flat.
    """

    def __init__(self) -> None:
        self.unit_prices: dict[str, int] = {}
        self.coupon_discounts: dict[str, int] = {}
        self.shipping_fee: int = 0
        self.failure: str | None = None
        self.calls: list[dict] = []

    def set_price(self, variant_id: str, unit_price: int) -> None:
        self.unit_prices[str(variant_id)] = unit_price

    def configure(self, failure: str | None = None, shipping_fee: int | None = None) -> None:
        """Configure pricing behavior at runtime.

        ``failure`` is None, "rejected" or "unavailable".
        """
        self.failure = failure
        if shipping_fee is not None:
            self.shipping_fee = shipping_fee

    def calculate(
        self,
        buyer_id: str,
        items: Sequence[PriceRequestItem],
        coupon_id: str | None = None,
    ) -> PriceBreakdown:
        self.calls.append(
            {
                "method": "calculate",
                "buyer_id": buyer_id,
                "items": list(items),
                "coupon_id": coupon_id,
            }
        )

        if self.failure == "unavailable":
            raise PricingUnavailable("Pricing engine is unavailable")
        if self.failure == "rejected":
            raise PricingRejected("Pricing engine rejected the request")

        unpriced = [item.variant_id for item in items if str(item.variant_id) not in self.unit_prices]
        if unpriced:
            raise PricingRejected("No price for variants", variant_ids=unpriced)
        if coupon_id is not None and str(coupon_id) not in self.coupon_discounts:
            raise PricingRejected("Coupon is not applicable", coupon_id=coupon_id)

        totals = {str(item.variant_id): self.unit_prices[str(item.variant_id)] * item.quantity for item in items}
        discounts = dict.fromkeys(totals, 0)
        if coupon_id is not None and totals:
            target = max(totals, key=totals.get)
            discounts[target] = min(self.coupon_discounts[str(coupon_id)], totals[target])

        priced = []
        for item in items:
            variant_id = str(item.variant_id)
            unit_price = self.unit_prices[variant_id]
            gift_total = totals[variant_id] - discounts[variant_id]
            priced.append(
                PriceItem(
                    variant_id=variant_id,
                    origin_price=unit_price,
                    buy_price=unit_price,
                    gift_value=gift_total // item.quantity,
                    buy_total=totals[variant_id],
                    discount_total=discounts[variant_id],
                    gift_total=gift_total,
                )
            )

        list_total = sum(totals.values())
        discount_total = sum(discounts.values())
        return PriceBreakdown(
            fee=PriceFee(
                list_total=list_total,
                discount_total=discount_total,
                shipping_total=self.shipping_fee,
                gift_value_total=list_total - discount_total + self.shipping_fee,
            ),
            item_groups=(PriceItemGroup(items=tuple(priced)),),
        )


class FakeCouponWallet(CouponWallet):
    def __init__(self) -> None:
        self.issued: set[tuple[str, str]] = set()
        self.used: set[tuple[str, str]] = set()
        self.should_succeed: bool = True
        self.failure_reason: str = "Coupon service unavailable"
        self.calls: list[dict] = []

    def issue(self, buyer_id: str, coupon_id: str) -> None:
        self.issued.add((str(buyer_id), str(coupon_id)))

    def configure(self, should_succeed: bool, failure_reason: str = "Coupon service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def is_used(self, buyer_id: str, coupon_id: str) -> bool:
        return (str(buyer_id), str(coupon_id)) in self.used

    def use_coupon(self, buyer_id: str, coupon_id: str) -> None:
        self.calls.append({"method": "use_coupon", "buyer_id": buyer_id, "coupon_id": coupon_id})
        key = (str(buyer_id), str(coupon_id))

        if not self.should_succeed:
            raise CouponConsumptionFailed(self.failure_reason, coupon_id=coupon_id)
        if key not in self.issued:
            raise CouponConsumptionFailed("Coupon card not found", coupon_id=coupon_id)
        if key in self.used:
            raise CouponConsumptionFailed("Coupon card already used", coupon_id=coupon_id)
        self.used.add(key)

    def release_coupon(self, buyer_id: str, coupon_id: str) -> None:
        self.calls.append({"method": "release_coupon", "buyer_id": buyer_id, "coupon_id": coupon_id})
        key = (str(buyer_id), str(coupon_id))
        if key not in self.used:
            raise CouponConsumptionFailed("Coupon card was not used", coupon_id=coupon_id)
        self.used.discard(key)


class FakePaymentHandoff(PaymentHandoff):
    def __init__(self) -> None:
        self.calls: list[dict] = []

    def initiate(self, order_id: str, amount: int) -> None:
        self.calls.append({"method": "initiate", "order_id": order_id, "amount": amount})
