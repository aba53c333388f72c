"""Failures of the order creation flow.

Each error names the stage that raised it. Bad requests are reported with
protean's ValidationError instead, like every other caller error in the domain.
"""

from enum import Enum


class CreationStage(Enum):
    VALIDATE_ADDRESS = "Validate_Address"
    VALIDATE_CATALOG = "Validate_Catalog"
    RESOLVE_PRICE = "Resolve_Price"
    CONSUME_COUPON = "Consume_Coupon"
    COMMIT_ORDER = "Commit_Order"
    INITIATE_PAYMENT = "Initiate_Payment"


class OrderCreationError(Exception):
    """Base class for every error that aborts an order creation."""

    code = "ORDER_CREATION_FAILED"
    stage: CreationStage | None = None

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "stage": self.stage.value if self.stage else None,
            "message": self.message,
            "details": self.details,
        }


class AddressNotFound(OrderCreationError):
    code = "USER_ADDRESS_NOT_FOUND"
    stage = CreationStage.VALIDATE_ADDRESS


class AddressUnavailable(OrderCreationError):
    code = "USER_ADDRESS_UNAVAILABLE"
    stage = CreationStage.VALIDATE_ADDRESS


class CatalogMismatch(OrderCreationError):
    code = "ORDER_GET_GOODS_INFO_INCORRECT"
    stage = CreationStage.VALIDATE_CATALOG


class CatalogUnavailable(OrderCreationError):
    code = "ORDER_GOODS_SERVICE_UNAVAILABLE"
    stage = CreationStage.VALIDATE_CATALOG


class PricingError(OrderCreationError):
    stage = CreationStage.RESOLVE_PRICE


class PricingRejected(PricingError):
    code = "ORDER_PRICE_REJECTED"


class PricingUnavailable(PricingError):
    code = "ORDER_PRICE_UNAVAILABLE"


class CouponConsumptionFailed(OrderCreationError):
    code = "COUPON_CARD_USE_FAILED"
    stage = CreationStage.CONSUME_COUPON


class StorageFailure(OrderCreationError):
    code = "ORDER_STORAGE_FAILED"
    stage = CreationStage.COMMIT_ORDER


class InternalInconsistency(OrderCreationError):
    """Resolved data and the request fell out of sync. Always a bug, never bad input."""

    code = "ORDER_INTERNAL_INCONSISTENCY"
    stage = CreationStage.COMMIT_ORDER
