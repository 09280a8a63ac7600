"""Transaction (order) API views.

Exposes ``OrderService`` and ``OrderSettlementOrchestrator`` via HTTP using
a DRF ``GenericViewSet``.  Domain exceptions are caught and translated
into HTTP status codes; ``ConsistencyError`` and unexpected exceptions are
left to propagate as 500s.
"""

from __future__ import annotations

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import (
    ConflictError,
    ErrorCode,
    InsufficientStockError,
    NotFoundError,
    PaymentGatewayError,
    ValidationError,
)
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerResolver
from modules.deliveries.repositories.django_repository import DeliveryDjangoRepository
from modules.deliveries.services import DeliveryAssigner
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.pricing import FeeSchedule, PricingPolicy
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    TransactionListSerializer,
    TransactionSerializer,
    adapt_legacy_payload,
)
from modules.orders.services import OrderService
from modules.orders.settlement import OrderSettlementOrchestrator
from modules.orders.validators import OrderValidator
from modules.payments.dtos import CardDataDTO
from modules.payments.gateway import build_payment_gateway
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import InventoryGate

PAYMENT_FAILED_MESSAGE = "Payment failed."


def _card_error_response(exc: PydanticValidationError) -> Response:
    """First pydantic error rendered as a ``VALIDATION_ERROR`` body."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "card"
    message = str(error["msg"]).removeprefix("Value error, ")
    return Response(
        ValidationError(field, message).as_dict(),
        status=status.HTTP_400_BAD_REQUEST,
    )


class TransactionViewSet(GenericViewSet):
    """Create, list, retrieve and settle orders.

    All ORM access goes through the service/repository layer.
    """

    queryset = Order.objects.all()
    filterset_class = OrderFilter
    search_fields = ["transaction_id", "order_id", "customer__email"]
    ordering_fields = ["created_at", "amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        inventory_gate = InventoryGate(ProductDjangoRepository())
        self._validator = OrderValidator(settings.ORDER_MAX_ITEM_QUANTITY)
        self._service = OrderService(
            order_repository=order_repository,
            inventory_gate=inventory_gate,
            customer_resolver=CustomerResolver(CustomerDjangoRepository()),
            pricing_policy=PricingPolicy(FeeSchedule.from_settings()),
        )
        self._gateway = build_payment_gateway()
        self._settlement = OrderSettlementOrchestrator(
            order_repository=order_repository,
            customer_repository=CustomerDjangoRepository(),
            payment_gateway=self._gateway,
            inventory_gate=inventory_gate,
            delivery_assigner=DeliveryAssigner(DeliveryDjangoRepository()),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Scoped throttling per action."""
        scopes = {
            "create": "transaction_creation",
            "process_payment": "payment_processing",
            "tokenize_card": "payment_processing",
        }
        self.throttle_scope = scopes.get(self.action)
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/transactions/"""
        try:
            dto = self._validator.validate(adapt_legacy_payload(request.data))
            order = self._service.create_order(dto)
        except (ValidationError, InsufficientStockError) as exc:
            return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        except NotFoundError as exc:
            return Response(exc.as_dict(), status=status.HTTP_404_NOT_FOUND)

        return Response(
            TransactionSerializer(order).data, status=status.HTTP_201_CREATED
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/transactions/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = TransactionListSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(TransactionListSerializer(queryset, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/transactions/{ref}/

        ``ref`` may be the internal id, the transaction id or the order id.
        """
        try:
            order = self._service.get_order(str(pk))
        except NotFoundError as exc:
            return Response(exc.as_dict(), status=status.HTTP_404_NOT_FOUND)
        return Response(TransactionSerializer(order).data)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="process-payment")
    def process_payment(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/transactions/{ref}/process-payment/

        Card data is forwarded to the gateway and never stored.
        """
        try:
            card = CardDataDTO(**request.data)
        except PydanticValidationError as exc:
            return _card_error_response(exc)
        except TypeError:
            return Response(
                ValidationError("card", "Card data must be an object.").as_dict(),
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._settlement.settle(str(pk), card)
        except NotFoundError as exc:
            return Response(exc.as_dict(), status=status.HTTP_404_NOT_FOUND)
        except ConflictError as exc:
            return Response(exc.as_dict(), status=status.HTTP_409_CONFLICT)
        except PaymentGatewayError as exc:
            return Response(
                {"detail": PAYMENT_FAILED_MESSAGE, "code": str(exc.code)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except InsufficientStockError as exc:
            return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)

        data = TransactionSerializer(order).data
        data["card_last_four"] = card.last_four
        return Response(data)

    @action(detail=False, methods=["post"], url_path="tokenize-card")
    def tokenize_card(self, request: Request) -> Response:
        """POST /api/v1/transactions/tokenize-card/"""
        try:
            card = CardDataDTO(**request.data)
        except PydanticValidationError as exc:
            return _card_error_response(exc)
        except TypeError:
            return Response(
                ValidationError("card", "Card data must be an object.").as_dict(),
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            tokenized = self._gateway.tokenize_card(card)
        except PaymentGatewayError:
            return Response(
                {
                    "detail": "Card tokenization failed.",
                    "code": str(ErrorCode.PAYMENT_FAILED),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(tokenized.model_dump())
