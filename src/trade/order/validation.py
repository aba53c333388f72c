"""Address and catalogue resolution for a new order.

Both lookups are read-only. They fail fast so nothing is priced, consumed or
stored for a request that references a missing address or variant.
"""

import structlog

from trade.clients.port import AddressBook, Catalogue, ResolvedAddress, ResolvedVariant
from trade.order.errors import AddressNotFound, CatalogMismatch

logger = structlog.get_logger(__name__)

# Detail fields requested from the catalogue: the parent product (name, images)
VARIANT_DETAIL_FIELDS = ("spu",)


def resolve_address(address_book: AddressBook, buyer_id, address_id) -> ResolvedAddress:
    """Look up the shipping address, which must belong to the buyer."""
    address = address_book.get_address(str(address_id), str(buyer_id))
    if address is None:
        logger.warning("Shipping address not found", address_id=str(address_id))
        raise AddressNotFound("Shipping address not found", address_id=str(address_id), buyer_id=str(buyer_id))
    return address


def resolve_variants(catalogue: Catalogue, items) -> dict[str, ResolvedVariant]:
    """Fetch catalogue details for every requested variant, keyed by variant id."""
    requested = list(dict.fromkeys(str(item.variant_id) for item in items))
    variants = catalogue.list_variants(requested, VARIANT_DETAIL_FIELDS)

    if len(variants) != len(requested):
        found = {str(variant.variant_id) for variant in variants}
        missing = [variant_id for variant_id in requested if variant_id not in found]
        logger.warning(
            "Catalogue returned a different number of variants",
            requested=len(requested),
            returned=len(variants),
            missing=missing,
        )
        raise CatalogMismatch(
            "Could not load all requested goods",
            requested=len(requested),
            returned=len(variants),
            missing=missing,
        )

    return {str(variant.variant_id): variant for variant in variants}
