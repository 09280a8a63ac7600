"""Order domain constants.

Status choices and the settlement state machine: PENDING is the only
state settlement may leave, APPROVED and DECLINED are terminal.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    DECLINED = "DECLINED", "Declined"


# A PENDING gateway verdict re-records PENDING so the attempt is audited.
VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {
        OrderStatus.PENDING,
        OrderStatus.APPROVED,
        OrderStatus.DECLINED,
    },
    OrderStatus.APPROVED: set(),
    OrderStatus.DECLINED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.APPROVED, OrderStatus.DECLINED}

IDENTIFIER_MAX_RETRIES = 5

DELIVERY_INFO_FIELDS = (
    "first_name",
    "last_name",
    "address",
    "city",
    "state",
    "postal_code",
    "phone",
)
