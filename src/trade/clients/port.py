"""Collaborator ports (abstract interfaces) and the data they exchange.

Order creation depends on five services it does not own. Each one is reached
through a port here, so the fake adapters (dev/test) and the HTTP adapters
(production) can be swapped without touching the creation flow.

All money values are integers in minor currency units.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResolvedAddress:
    """A buyer's shipping address as returned by the address book."""

    name: str
    mobile: str
    area_code: str
    detail_address: str


@dataclass(frozen=True)
class ResolvedVariant:
    """Catalogue details of one purchasable variant (SKU)."""

    variant_id: str
    product_id: str
    name: str
    images: tuple[str, ...] = ()
    details: dict = field(default_factory=dict)

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None


@dataclass(frozen=True)
class PriceRequestItem:
    variant_id: str
    quantity: int
    selected: bool = True


@dataclass(frozen=True)
class PriceFee:
    """Order-level totals."""

    list_total: int
    discount_total: int
    shipping_total: int
    gift_value_total: int


@dataclass(frozen=True)
class PriceItem:
    """Per-variant price decomposition."""

    variant_id: str
    origin_price: int
    buy_price: int
    gift_value: int
    buy_total: int
    discount_total: int
    gift_total: int


@dataclass(frozen=True)
class PriceItemGroup:
    """Items priced together, e.g. under one promotion activity."""

    items: tuple[PriceItem, ...]
    activity: str | None = None


@dataclass(frozen=True)
class PriceBreakdown:
    fee: PriceFee
    item_groups: tuple[PriceItemGroup, ...]

    def items_by_variant(self) -> dict[str, PriceItem]:
        return {str(item.variant_id): item for group in self.item_groups for item in group.items}


class AddressBook(ABC):
    @abstractmethod
    def get_address(self, address_id: str, buyer_id: str) -> ResolvedAddress | None:
        """Return the buyer's address, or None when it does not exist or belongs to someone else."""
        ...


class Catalogue(ABC):
    @abstractmethod
    def list_variants(self, variant_ids: Iterable[str], fields: Sequence[str] = ()) -> list[ResolvedVariant]:
        """Return the published variants among ``variant_ids``. Missing ones are simply absent."""
        ...


class PricingEngine(ABC):
    @abstractmethod
    def calculate(
        self,
        buyer_id: str,
        items: Sequence[PriceRequestItem],
        coupon_id: str | None = None,
    ) -> PriceBreakdown:
        """Price the items, applying promotions and the optional coupon.

        Raises PricingRejected or PricingUnavailable.
        """
        ...


class CouponWallet(ABC):
    @abstractmethod
    def use_coupon(self, buyer_id: str, coupon_id: str) -> None:
        """Mark the coupon card as used. Raises CouponConsumptionFailed."""
        ...

    @abstractmethod
    def release_coupon(self, buyer_id: str, coupon_id: str) -> None:
        """Return a used coupon card to the buyer. Raises CouponConsumptionFailed."""
        ...


class PaymentHandoff(ABC):
    @abstractmethod
    def initiate(self, order_id: str, amount: int) -> None:
        """Hand a committed order over to payment initiation."""
        ...
