"""Runtime settings for the trade domain, read from the environment.

    TRADE_CLIENTS            fake | http (default: fake)
    TRADE_ADDRESS_URL        base URL of the address book service
    TRADE_CATALOGUE_URL      base URL of the product catalogue
    TRADE_PRICING_URL        base URL of the promotion pricing engine
    TRADE_COUPON_URL         base URL of the coupon card service
    TRADE_CLIENT_TIMEOUT     per-call timeout in seconds (default: 3.0)
    TRADE_COMPENSATE_COUPON  release the coupon when the order commit fails
                             (default: false)
"""

import os
from dataclasses import dataclass

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class TradeSettings:
    clients: str = "fake"
    address_url: str = "http://localhost:8001"
    catalogue_url: str = "http://localhost:8002"
    pricing_url: str = "http://localhost:8003"
    coupon_url: str = "http://localhost:8004"
    client_timeout: float = 3.0
    compensate_coupon: bool = False

    @classmethod
    def from_env(cls) -> "TradeSettings":
        defaults = cls()
        return cls(
            clients=os.environ.get("TRADE_CLIENTS", defaults.clients).lower(),
            address_url=os.environ.get("TRADE_ADDRESS_URL", defaults.address_url),
            catalogue_url=os.environ.get("TRADE_CATALOGUE_URL", defaults.catalogue_url),
            pricing_url=os.environ.get("TRADE_PRICING_URL", defaults.pricing_url),
            coupon_url=os.environ.get("TRADE_COUPON_URL", defaults.coupon_url),
            client_timeout=float(os.environ.get("TRADE_CLIENT_TIMEOUT", defaults.client_timeout)),
            compensate_coupon=os.environ.get("TRADE_COMPENSATE_COUPON", "").strip().lower() in _TRUTHY,
        )


_settings: TradeSettings | None = None


def get_settings() -> TradeSettings:
    """Return the active settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = TradeSettings.from_env()
    return _settings


def set_settings(settings: TradeSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Drop cached settings so the next read goes back to the environment."""
    global _settings
    _settings = None
