"""Order pricing.

``amount = subtotal + base_fee + delivery_fee`` where ``subtotal`` is the
sum of ``unit_price * quantity`` at current catalog prices.  Plain
``Decimal`` arithmetic; no discounts, taxes or rounding rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from django.conf import settings

from modules.core.exceptions import NotFoundError
from modules.products.services import LineItem


@dataclass(frozen=True)
class FeeSchedule:
    base_fee: Decimal
    delivery_fee: Decimal

    @classmethod
    def from_settings(cls) -> FeeSchedule:
        return cls(
            base_fee=Decimal(settings.ORDER_BASE_FEE),
            delivery_fee=Decimal(settings.ORDER_DELIVERY_FEE),
        )


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Decimal
    base_fee: Decimal
    delivery_fee: Decimal

    @property
    def amount(self) -> Decimal:
        return self.subtotal + self.base_fee + self.delivery_fee


class PricingPolicy:
    def __init__(self, fee_schedule: FeeSchedule) -> None:
        self.fee_schedule = fee_schedule

    def quote(
        self, items: Iterable[LineItem], prices: Mapping[str, Decimal]
    ) -> PriceQuote:
        """Price ``items`` using ``prices`` (unit price keyed by product id)."""
        subtotal = Decimal("0")
        for item in items:
            product_id = str(item.product_id)
            if product_id not in prices:
                raise NotFoundError("product", product_id)
            subtotal += Decimal(prices[product_id]) * item.quantity
        return PriceQuote(
            subtotal=subtotal,
            base_fee=self.fee_schedule.base_fee,
            delivery_fee=self.fee_schedule.delivery_fee,
        )
