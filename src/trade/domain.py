"""Trade bounded context — order creation.

Validates a buyer's request against the address book and the catalogue,
prices it through the promotion engine, consumes the coupon and persists the
order header together with its line items in one Unit of Work.
"""

from protean.domain import Domain

from trade.utils.logging import configure_logging, get_logger

configure_logging(log_file_prefix="trade")

logger = get_logger(__name__)

trade = Domain(name="trade")
