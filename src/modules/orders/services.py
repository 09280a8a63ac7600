"""Order service layer (Use Cases).

Order creation runs ``InventoryGate.check_availability ->
CustomerResolver.resolve -> PricingPolicy.quote -> IOrderRepository.create``
inside one transaction, so nothing is written unless every check passed.
Settlement lives in ``modules.orders.settlement``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.core.exceptions import NotFoundError
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderCreated

if TYPE_CHECKING:
    from django.db import models

    from modules.customers.services import CustomerResolver
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.pricing import PricingPolicy
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.services import InventoryGate

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        inventory_gate: InventoryGate,
        customer_resolver: CustomerResolver,
        pricing_policy: PricingPolicy,
    ) -> None:
        self._order_repo = order_repository
        self._inventory = inventory_gate
        self._customers = customer_resolver
        self._pricing = pricing_policy

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a PENDING order from a validated request.

        Steps:
        1. Check every product exists and has enough stock (no reservation).
        2. Find or create the customer by email.
        3. Price the cart with the catalog prices read in step 1.
        4. Persist order + items, the creation history record and the
           ``OrderCreated`` outbox event.

        Raises:
            NotFoundError: a product does not exist.
            InsufficientStockError: a product's stock is below the request.
        """
        log = logger.bind(item_count=len(dto.items))
        log.info("order.creation_started")

        products = self._inventory.check_availability(dto.items)

        customer = self._customers.resolve(
            name=dto.customer_name,
            email=dto.customer_email,
            address=dto.customer_address,
        )

        quote = self._pricing.quote(
            dto.items,
            {product_id: product.price for product_id, product in products.items()},
        )

        order = self._order_repo.create(
            {
                "customer_id": customer.id,
                "items": [
                    {"product_id": item.product_id, "quantity": item.quantity}
                    for item in dto.items
                ],
                "delivery_info": dto.delivery_info.model_dump(),
                "subtotal": quote.subtotal,
                "base_fee": quote.base_fee,
                "delivery_fee": quote.delivery_fee,
            }
        )

        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                transaction_id=order.transaction_id,
                amount=str(quote.amount),
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
        )

        log.info(
            "order.created",
            order_id=str(order.id),
            transaction_id=order.transaction_id,
            customer_id=str(customer.id),
            amount=str(quote.amount),
        )

        # Re-fetch with prefetch for output
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, ref: str) -> Order:
        """Retrieve an order by internal id, ``transaction_id`` or ``order_id``.

        Raises:
            NotFoundError: if the order does not exist.
        """
        order = self._order_repo.get_by_id(ref) or self._order_repo.get_by_reference(ref)
        if not order:
            raise NotFoundError("order", ref)
        return order

    def list_orders(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """Return orders, optionally filtered."""
        return self._order_repo.list(filters)
