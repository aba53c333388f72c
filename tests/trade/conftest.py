import pytest
from protean.integrations.pytest import DomainFixture

from trade.clients import fake_clients, reset_clients, set_clients
from trade.clients.port import ResolvedAddress, ResolvedVariant
from trade.config import reset_settings


@pytest.fixture(scope="session")
def trade_bed():
    from trade.domain import trade
    from trade.utils.db import drop_db, setup_db

    bed = DomainFixture(trade)
    bed.setup()
    setup_db(trade)
    yield bed
    drop_db(trade)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(trade_bed):
    with trade_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def clients():
    """Fresh fake collaborators for every test."""
    bundle = fake_clients()
    set_clients(bundle)
    yield bundle
    reset_clients()
    reset_settings()


# ---------------------------------------------------------------------------
# A buyer with one address, three published variants and one coupon
# ---------------------------------------------------------------------------
BUYER_ID = "buyer-001"
ADDRESS_ID = "addr-001"
COUPON_ID = "coupon-001"


@pytest.fixture()
def home_address():
    return ResolvedAddress(
        name="Li Lei",
        mobile="13800000000",
        area_code="310104",
        detail_address="88 Caoxi North Road, Xuhui",
    )


@pytest.fixture()
def storefront(clients, home_address):
    clients.address_book.add(ADDRESS_ID, BUYER_ID, home_address)

    clients.catalogue.add(
        ResolvedVariant(
            variant_id="var-001",
            product_id="prod-001",
            name="Canvas Tote",
            images=("https://img.example.com/tote-front.png", "https://img.example.com/tote-back.png"),
        )
    )
    clients.catalogue.add(
        ResolvedVariant(
            variant_id="var-002",
            product_id="prod-002",
            name="Enamel Mug",
            images=("https://img.example.com/mug.png",),
        )
    )
    clients.catalogue.add(ResolvedVariant(variant_id="var-003", product_id="prod-001", name="Canvas Tote XL"))

    clients.pricing.set_price("var-001", 50)
    clients.pricing.set_price("var-002", 50)
    clients.pricing.set_price("var-003", 80)
    clients.pricing.coupon_discounts[COUPON_ID] = 30

    clients.coupons.issue(BUYER_ID, COUPON_ID)
    return clients
