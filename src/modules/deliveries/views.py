"""Delivery API views (read-only)."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import NotFoundError
from modules.deliveries.filters import DeliveryFilter
from modules.deliveries.models import Delivery
from modules.deliveries.repositories.django_repository import DeliveryDjangoRepository
from modules.deliveries.serializers import DeliverySerializer
from modules.deliveries.services import DeliveryService


class DeliveryViewSet(ListModelMixin, GenericViewSet):
    filterset_class = DeliveryFilter
    ordering_fields = ["created_at", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Delivery.objects.all()
    serializer_class = DeliverySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DeliveryService(repository=DeliveryDjangoRepository())

    def get_queryset(self):
        return self._service.list_deliveries()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/deliveries/{pk}/"""
        try:
            delivery = self._service.get_delivery(str(pk))
        except NotFoundError as exc:
            return Response(exc.as_dict(), status=status.HTTP_404_NOT_FOUND)
        return Response(DeliverySerializer(delivery).data)
