"""Order number generation.

An order number is the creation time to the second (14 digits, server local
time) followed by six random digits. Two orders created in the same second can
collide; the storage layer does not guard against it.
"""

import random
from datetime import datetime

ORDER_NO_TIME_FORMAT = "%Y%m%d%H%M%S"
ORDER_NO_LENGTH = 20
RANDOM_SUFFIX_MIN = 100000
RANDOM_SUFFIX_MAX = 999999


def generate_order_no(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return now.strftime(ORDER_NO_TIME_FORMAT) + str(random.randint(RANDOM_SUFFIX_MIN, RANDOM_SUFFIX_MAX))


def order_no_timestamp(order_no: str) -> datetime:
    """Return the naive local creation time encoded in an order number."""
    return datetime.strptime(order_no[:14], ORDER_NO_TIME_FORMAT)
