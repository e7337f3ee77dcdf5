"""
Orders app views.

Architecture: Views are intentionally thin.

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Permission Strategy
-------------------
The base permission is ``IsAuthenticated``.  Role and ownership checks
are enforced inside the service layer; domain exceptions are rendered
by ``core.domain.exception_handler``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import EntityKind
from .serializers import (
    DemandCreateSerializer,
    DemandSerializer,
    OrderCreateSerializer,
    OrderSerializer,
    StatusTransitionLogSerializer,
    TransitionRequestSerializer,
    TransitionResponseSerializer,
)
from .services import DemandService, OrderService, StatusWorkflowService

_STATUS_FILTER = OpenApiParameter(
    name="status",
    type=str,
    location=OpenApiParameter.QUERY,
    description="Filter by status.",
)


class OrderViewSet(viewsets.ViewSet):
    """
    /api/orders/

    Buyers place and track their own orders; admins see every order.
    Status changes go through ``/api/workflow/transition/``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List orders",
        parameters=[_STATUS_FILTER],
        responses={200: OrderSerializer(many=True)},
        tags=["Orders"],
    )
    def list(self, request: Request) -> Response:
        orders = OrderService.list_for(request.user, status=request.query_params.get("status"))
        return Response(OrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Place an order",
        request=OrderCreateSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Book unavailable or invalid quantity."),
            404: OpenApiResponse(description="Book not found."),
        },
        tags=["Orders"],
    )
    def create(self, request: Request) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.place_order(request.user, **serializer.validated_data)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Retrieve an order", responses={200: OrderSerializer}, tags=["Orders"])
    def retrieve(self, request: Request, pk: str = None) -> Response:
        order = OrderService.get_for(request.user, pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Order status history",
        responses={200: StatusTransitionLogSerializer(many=True)},
        tags=["Orders"],
    )
    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request: Request, pk: str = None) -> Response:
        order = OrderService.get_for(request.user, pk)
        logs = StatusWorkflowService.history(EntityKind.ORDER, order.pk)
        return Response(StatusTransitionLogSerializer(logs, many=True).data, status=status.HTTP_200_OK)


class DemandViewSet(viewsets.ViewSet):
    """
    /api/demands/

    Requests for books that are not listed yet.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List book demands",
        parameters=[_STATUS_FILTER],
        responses={200: DemandSerializer(many=True)},
        tags=["Demands"],
    )
    def list(self, request: Request) -> Response:
        demands = DemandService.list_for(request.user, status=request.query_params.get("status"))
        return Response(DemandSerializer(demands, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Request a book",
        request=DemandCreateSerializer,
        responses={201: DemandSerializer},
        tags=["Demands"],
    )
    def create(self, request: Request) -> Response:
        serializer = DemandCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        demand = DemandService.create_demand(request.user, **serializer.validated_data)
        return Response(DemandSerializer(demand).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Retrieve a book demand", responses={200: DemandSerializer}, tags=["Demands"])
    def retrieve(self, request: Request, pk: str = None) -> Response:
        demand = DemandService.get_for(request.user, pk)
        return Response(DemandSerializer(demand).data, status=status.HTTP_200_OK)


class TransitionView(APIView):
    """
    **POST /api/workflow/transition/**

    Generic status transition for orders, shop orders and demands.
    Admin only.  Requesting the current status again is a successful
    no-op (``changed: false``).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Change an entity's status",
        request=TransitionRequestSerializer,
        responses={
            200: OpenApiResponse(response=TransitionResponseSerializer, description="Transition applied or no-op."),
            403: OpenApiResponse(description="Caller is not an admin."),
            404: OpenApiResponse(description="Entity not found."),
            409: OpenApiResponse(description="Invalid transition or concurrent modification."),
        },
        tags=["Workflow"],
    )
    def post(self, request: Request) -> Response:
        serializer = TransitionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = StatusWorkflowService.transition(
            entity_kind=data["entity_kind"],
            entity_id=data["entity_id"],
            requested_status=data["status"],
            actor=request.user,
            notes=data.get("notes", ""),
        )
        payload = {
            "entity_kind": data["entity_kind"],
            "entity_id": result.entity.pk,
            "previous_status": result.previous_status,
            "status": result.status,
            "changed": result.changed,
        }
        return Response(TransitionResponseSerializer(payload).data, status=status.HTTP_200_OK)
