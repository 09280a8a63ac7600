"""Payment settlement of PENDING orders.

States: ``PENDING -> {APPROVED, DECLINED}``, both terminal.  A PENDING
gateway verdict leaves the order PENDING so settlement can be retried.

``settle`` runs in one database transaction holding the order's row lock:

1. Resolve the order by internal id, then by ``transaction_id`` /
   ``order_id``.
2. Refuse terminal orders with ``ConflictError`` before the gateway is
   contacted.
3. Resolve the customer.
4. Charge the card once.  Gateway failures propagate; nothing has been
   written yet.
5. Write the verdict (``updated_at`` bumped, history appended).
6. On APPROVED only: decrement stock, then create exactly one delivery.
7. Record ``OrderApproved`` / ``OrderDeclined`` in the outbox.
8. Re-read the order.

Steps 5 to 7 share the transaction: if the decrement or the delivery
insert fails, the status write is rolled back and the order stays PENDING.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import DatabaseError, transaction

from modules.core.exceptions import (
    ConflictError,
    ConsistencyError,
    DomainError,
    NotFoundError,
)
from modules.orders.constants import OrderStatus
from modules.orders.events import OrderApproved, OrderDeclined
from modules.payments.gateway import GatewayVerdict

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.deliveries.services import DeliveryAssigner
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.payments.dtos import CardDataDTO
    from modules.payments.gateway import PaymentGateway
    from modules.products.services import InventoryGate

logger = structlog.get_logger(__name__)

VERDICT_STATUS = {
    GatewayVerdict.APPROVED: OrderStatus.APPROVED,
    GatewayVerdict.DECLINED: OrderStatus.DECLINED,
    GatewayVerdict.PENDING: OrderStatus.PENDING,
}

VERDICT_NOTES = {
    GatewayVerdict.APPROVED: "Payment approved",
    GatewayVerdict.DECLINED: "Payment declined",
    GatewayVerdict.PENDING: "Payment pending at gateway",
}


class OrderSettlementOrchestrator:
    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        payment_gateway: PaymentGateway,
        inventory_gate: InventoryGate,
        delivery_assigner: DeliveryAssigner,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._gateway = payment_gateway
        self._inventory = inventory_gate
        self._deliveries = delivery_assigner

    @transaction.atomic
    def settle(self, order_ref: str, card: CardDataDTO) -> Order:
        """Charge ``card`` for the order identified by ``order_ref``.

        Raises:
            NotFoundError: order or customer does not exist.
            ConflictError: the order is already APPROVED or DECLINED.
            PaymentGatewayError: the gateway failed (order left PENDING).
            PaymentGatewayTimeout: the gateway timed out (order left PENDING).
            InsufficientStockError: stock ran out after approval (rolled back).
            ConsistencyError: the order vanished after its status write.
        """
        log = logger.bind(order_ref=order_ref)
        log.info("order.settlement_started")

        order = self._order_repo.get_for_update(
            order_ref
        ) or self._order_repo.get_for_update_by_reference(order_ref)
        if order is None:
            log.warning("order.settlement_order_not_found")
            raise NotFoundError("order", order_ref)

        log = log.bind(order_id=str(order.id), transaction_id=order.transaction_id)

        if order.is_terminal:
            log.warning("order.settlement_rejected", status=order.status)
            raise ConflictError(
                f"Order {order.transaction_id} is already {order.status}."
            )

        customer = self._customer_repo.get_by_id(str(order.customer_id))
        if customer is None:
            log.error("order.settlement_customer_missing", customer_id=str(order.customer_id))
            raise NotFoundError("customer", order.customer_id)

        verdict = self._gateway.charge(
            reference=order.transaction_id,
            amount=order.amount,
            card=card,
            customer_email=customer.email,
        )
        log = log.bind(verdict=str(verdict))

        new_status = VERDICT_STATUS[verdict]
        order = self._order_repo.update_status(
            order, new_status, notes=VERDICT_NOTES[verdict]
        )

        if verdict == GatewayVerdict.APPROVED:
            items = list(order.items.all())
            try:
                self._inventory.decrement(items)
                delivery = self._deliveries.assign(order.id, customer.id)
            except (DomainError, DatabaseError):
                # The card has been charged; the rollback leaves the order
                # PENDING and needs reconciliation with the gateway.
                log.exception("order.post_approval_failed")
                raise
            order.add_domain_event(
                OrderApproved(
                    aggregate_id=order.id,
                    transaction_id=order.transaction_id,
                    delivery_id=str(delivery.id),
                )
            )
        elif verdict == GatewayVerdict.DECLINED:
            order.add_domain_event(
                OrderDeclined(aggregate_id=order.id, transaction_id=order.transaction_id)
            )

        if order.domain_events:
            self._order_repo.save(order)

        settled = self._order_repo.get_by_id(str(order.id))
        if settled is None:
            log.error("order.settlement_reread_failed")
            raise ConsistencyError(
                f"Order {order.id} could not be re-read after settlement."
            )

        log.info("order.settlement_completed", status=settled.status)
        return settled
