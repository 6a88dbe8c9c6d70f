"""Order API views.

Exposes ``OrderService`` and ``OrderSummaryAssembler`` via HTTP using a
DRF ViewSet.  Domain exceptions are caught and translated into
appropriate HTTP status codes; only ``StorageFailure`` becomes a 500,
with a generic message (the service has already logged the cause).
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.exchange.services import get_rate_cache
from modules.orders.dtos import CreateOrderDTO, CustomerDTO
from modules.orders.exceptions import (
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
    StorageFailure,
)
from modules.orders.repositories.django_repository import (
    DjangoOrderUnitOfWork,
    OrderDjangoRepository,
)
from modules.orders.serializers import CreateOrderSerializer
from modules.orders.services import OrderService
from modules.orders.summary import OrderSummaryAssembler


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer, and orders are immutable once placed.
    """

    serializer_class = CreateOrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        self._service = OrderService(
            uow_factory=DjangoOrderUnitOfWork,
            order_repository=order_repository,
        )
        self._assembler = OrderSummaryAssembler(
            order_repository=order_repository,
            rate_cache=get_rate_cache(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"retrieve", "summary"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Returns 201 with the order, the product's remaining stock and
        the total converted into foreign currencies.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        if not create_serializer.is_valid():
            return Response(
                {"detail": "Validation failed", "errors": create_serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            product_id=data["product_id"],
            quantity=data["quantity"],
            customer=CustomerDTO(**data["customer"]),
        )

        try:
            created = self._service.create_order(dto)
        except ProductNotFound:
            return Response(
                {"detail": "Product not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InsufficientStock as exc:
            body = {"detail": str(exc)}
            if exc.available is not None:
                body["available"] = exc.available
            return Response(body, status=status.HTTP_409_CONFLICT)
        except StorageFailure:
            return Response(
                {"detail": "An unexpected error occurred."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        detail = self._assembler.build_detail(created.order, created.product)
        return Response(detail.model_dump(mode="json"), status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Retrieve / Summary
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        if pk is None:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        detail = self._assembler.build_detail(order)
        return Response(detail.model_dump(mode="json"))

    @action(detail=True, methods=["get"])
    def summary(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/summary/

        Always 200 for an existing order, even when CNB rates are down.
        """
        if pk is None:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        try:
            summary = self._assembler.build_summary(pk)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(summary.model_dump(mode="json"))
