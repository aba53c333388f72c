"""Collaborator factory.

Provides get_clients() / set_clients() to swap implementations:
- fake adapters for development and testing (TRADE_CLIENTS=fake, the default)
- HTTP adapters for production (TRADE_CLIENTS=http)
"""

from dataclasses import dataclass

from trade.clients.port import AddressBook, Catalogue, CouponWallet, PaymentHandoff, PricingEngine
from trade.config import get_settings


@dataclass
class Collaborators:
    address_book: AddressBook
    catalogue: Catalogue
    pricing: PricingEngine
    coupons: CouponWallet
    payments: PaymentHandoff


_current_clients: Collaborators | None = None


def fake_clients() -> Collaborators:
    from trade.clients.fake_adapter import (
        FakeAddressBook,
        FakeCatalogue,
        FakeCouponWallet,
        FakePaymentHandoff,
        FakePricingEngine,
    )

    return Collaborators(
        address_book=FakeAddressBook(),
        catalogue=FakeCatalogue(),
        pricing=FakePricingEngine(),
        coupons=FakeCouponWallet(),
        payments=FakePaymentHandoff(),
    )


def http_clients() -> Collaborators:
    from trade.clients.http_adapter import (
        HttpAddressBook,
        HttpCatalogue,
        HttpCouponWallet,
        HttpPricingEngine,
        NoopPaymentHandoff,
    )

    settings = get_settings()
    timeout = settings.client_timeout
    return Collaborators(
        address_book=HttpAddressBook(settings.address_url, timeout),
        catalogue=HttpCatalogue(settings.catalogue_url, timeout),
        pricing=HttpPricingEngine(settings.pricing_url, timeout),
        coupons=HttpCouponWallet(settings.coupon_url, timeout),
        payments=NoopPaymentHandoff(),
    )


def get_clients() -> Collaborators:
    """Return the active collaborators, building them from settings on first use."""
    global _current_clients
    if _current_clients is None:
        adapter = get_settings().clients
        if adapter == "fake":
            _current_clients = fake_clients()
        elif adapter == "http":
            _current_clients = http_clients()
        else:
            raise ValueError(f"Unknown trade clients adapter: {adapter}")
    return _current_clients


def set_clients(clients: Collaborators) -> None:
    """Override the active collaborators (useful for tests)."""
    global _current_clients
    _current_clients = clients


def reset_clients() -> None:
    """Reset to the collaborators configured by settings."""
    global _current_clients
    _current_clients = None
