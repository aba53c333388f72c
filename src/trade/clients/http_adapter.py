"""HTTP adapters for the collaborating services (httpx).

Every call runs with the client's bounded timeout. Timeouts, transport errors
and unexpected status codes are reported as the failure of the stage that
made the call, never retried.
"""

from collections.abc import Iterable, Sequence

import httpx
import structlog

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

logger = structlog.get_logger(__name__)

# Non-JSON bodies (JSONDecodeError is a ValueError), missing keys and wrongly shaped values
_UNREADABLE_BODY = (ValueError, KeyError, TypeError, AttributeError)


def _client(base_url: str, timeout: float, client: httpx.Client | None) -> httpx.Client:
    return client if client is not None else httpx.Client(base_url=base_url, timeout=timeout)


class HttpAddressBook(AddressBook):
    def __init__(self, base_url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self.client = _client(base_url, timeout, client)

    def get_address(self, address_id: str, buyer_id: str) -> ResolvedAddress | None:
        try:
            response = self.client.get(f"/addresses/{address_id}", params={"buyer_id": str(buyer_id)})
        except httpx.HTTPError as exc:
            raise AddressUnavailable("Address book request failed", address_id=address_id, error=str(exc)) from exc

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise AddressUnavailable(
                "Address book returned an unexpected status",
                address_id=address_id,
                status_code=response.status_code,
            )

        try:
            body = response.json()
            return ResolvedAddress(
                name=body["name"],
                mobile=body["mobile"],
                area_code=str(body["area_code"]),
                detail_address=body["detail_address"],
            )
        except _UNREADABLE_BODY as exc:
            raise AddressUnavailable(
                "Address book returned an unreadable body", address_id=address_id, error=str(exc)
            ) from exc


class HttpCatalogue(Catalogue):
    def __init__(self, base_url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self.client = _client(base_url, timeout, client)

    def list_variants(self, variant_ids: Iterable[str], fields: Sequence[str] = ()) -> list[ResolvedVariant]:
        params = {"ids": ",".join(str(variant_id) for variant_id in variant_ids)}
        if fields:
            params["fields"] = ",".join(fields)

        try:
            response = self.client.get("/variants", params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CatalogUnavailable("Catalogue request failed", error=str(exc)) from exc

        try:
            return [
                ResolvedVariant(
                    variant_id=str(row["variant_id"]),
                    product_id=str(row["product_id"]),
                    name=row["name"],
                    images=tuple(row.get("images") or ()),
                    details=row.get("details") or {},
                )
                for row in response.json()
            ]
        except _UNREADABLE_BODY as exc:
            raise CatalogUnavailable("Catalogue returned an unreadable body", error=str(exc)) from exc


class HttpPricingEngine(PricingEngine):
    def __init__(self, base_url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self.client = _client(base_url, timeout, client)

    def calculate(
        self,
        buyer_id: str,
        items: Sequence[PriceRequestItem],
        coupon_id: str | None = None,
    ) -> PriceBreakdown:
        payload = {
            "buyer_id": str(buyer_id),
            "items": [
                {"variant_id": str(item.variant_id), "quantity": item.quantity, "selected": item.selected}
                for item in items
            ],
            "coupon_id": coupon_id,
        }

        try:
            response = self.client.post("/prices/calculate", json=payload)
        except httpx.HTTPError as exc:
            raise PricingUnavailable("Pricing request failed", error=str(exc)) from exc

        if response.is_client_error:
            raise PricingRejected(
                "Pricing engine rejected the request",
                status_code=response.status_code,
                reason=response.text,
            )
        if response.status_code != 200:
            raise PricingUnavailable("Pricing engine returned an unexpected status", status_code=response.status_code)

        try:
            return _parse_breakdown(response.json())
        except _UNREADABLE_BODY as exc:
            raise PricingUnavailable("Pricing engine returned an unreadable body", error=str(exc)) from exc


def _parse_breakdown(body: dict) -> PriceBreakdown:
    fee = body["fee"]
    return PriceBreakdown(
        fee=PriceFee(
            list_total=int(fee["list_total"]),
            discount_total=int(fee["discount_total"]),
            shipping_total=int(fee["shipping_total"]),
            gift_value_total=int(fee["gift_value_total"]),
        ),
        item_groups=tuple(
            PriceItemGroup(
                activity=group.get("activity"),
                items=tuple(
                    PriceItem(
                        variant_id=str(item["variant_id"]),
                        origin_price=int(item["origin_price"]),
                        buy_price=int(item["buy_price"]),
                        gift_value=int(item["gift_value"]),
                        buy_total=int(item["buy_total"]),
                        discount_total=int(item["discount_total"]),
                        gift_total=int(item["gift_total"]),
                    )
                    for item in group["items"]
                ),
            )
            for group in body["item_groups"]
        ),
    )


class HttpCouponWallet(CouponWallet):
    def __init__(self, base_url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self.client = _client(base_url, timeout, client)

    def _post(self, action: str, buyer_id: str, coupon_id: str) -> None:
        try:
            response = self.client.post(f"/coupon-cards/{coupon_id}/{action}", json={"buyer_id": str(buyer_id)})
        except httpx.HTTPError as exc:
            raise CouponConsumptionFailed(
                f"Coupon {action} request failed", coupon_id=coupon_id, error=str(exc)
            ) from exc

        if not response.is_success:
            raise CouponConsumptionFailed(
                f"Coupon service refused to {action} the card",
                coupon_id=coupon_id,
                status_code=response.status_code,
                reason=response.text,
            )

    def use_coupon(self, buyer_id: str, coupon_id: str) -> None:
        self._post("use", buyer_id, coupon_id)

    def release_coupon(self, buyer_id: str, coupon_id: str) -> None:
        self._post("release", buyer_id, coupon_id)


class NoopPaymentHandoff(PaymentHandoff):
    """Payment transactions are created by the pay service; nothing is sent from here yet."""

    def initiate(self, order_id: str, amount: int) -> None:
        logger.info("Payment handoff skipped", order_id=order_id, amount=amount)
