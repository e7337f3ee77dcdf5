"""
Shops app ViewSets.

- ``ShopViewSet``          — /api/shops/  (directory, read-only)
- ``ShopIncomingOrderViewSet`` — /api/shops/{shop_pk}/orders/  (owner inbox)
- ``ShopOrderViewSet``     — /api/shop-orders/  (customer side + shop notes)

Views are thin; ownership checks live in ``shops.services``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    ShopBookSerializer,
    ShopNotesUpdateSerializer,
    ShopOrderCreateSerializer,
    ShopOrderSerializer,
    ShopSerializer,
)
from .services import ShopOrderService, ShopService

_STATUS_FILTER = OpenApiParameter(
    name="status",
    type=str,
    location=OpenApiParameter.QUERY,
    description="Filter by order status.",
)


class ShopViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List shops", responses={200: ShopSerializer(many=True)}, tags=["Shops"])
    def list(self, request: Request) -> Response:
        shops = ShopService.list_shops(request.user)
        return Response(ShopSerializer(shops, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(summary="Retrieve a shop", responses={200: ShopSerializer}, tags=["Shops"])
    def retrieve(self, request: Request, pk: str = None) -> Response:
        shop = ShopService.get_shop(request.user, pk)
        return Response(ShopSerializer(shop).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Shop catalogue",
        responses={200: ShopBookSerializer(many=True)},
        tags=["Shops"],
    )
    @action(detail=True, methods=["get"], url_path="books")
    def books(self, request: Request, pk: str = None) -> Response:
        shop = ShopService.get_shop(request.user, pk)
        books = shop.books.filter(is_available=True)
        return Response(ShopBookSerializer(books, many=True).data, status=status.HTTP_200_OK)


class ShopIncomingOrderViewSet(viewsets.ViewSet):
    """
    GET /api/shops/{shop_pk}/orders/

    The shop owner's inbox of orders placed against their catalogue.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Incoming shop orders",
        parameters=[_STATUS_FILTER],
        responses={
            200: ShopOrderSerializer(many=True),
            403: OpenApiResponse(description="Caller does not own this shop."),
        },
        tags=["Shops"],
    )
    def list(self, request: Request, shop_pk: str = None) -> Response:
        orders = ShopOrderService.list_for_shop(
            request.user,
            shop_pk,
            status=request.query_params.get("status"),
        )
        return Response(ShopOrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)


class ShopOrderViewSet(viewsets.ViewSet):
    """
    /api/shop-orders/

    Customers place and track Nilkhet orders.  Shop owners annotate
    incoming orders via ``shop-notes``; status changes are admin
    transitions through ``/api/workflow/transition/``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List my shop orders",
        parameters=[_STATUS_FILTER],
        responses={200: ShopOrderSerializer(many=True)},
        tags=["Shop Orders"],
    )
    def list(self, request: Request) -> Response:
        orders = ShopOrderService.list_for_customer(
            request.user,
            status=request.query_params.get("status"),
        )
        return Response(ShopOrderSerializer(orders, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Place a shop order",
        request=ShopOrderCreateSerializer,
        responses={
            201: ShopOrderSerializer,
            400: OpenApiResponse(description="Shop inactive or book unavailable."),
        },
        tags=["Shop Orders"],
    )
    def create(self, request: Request) -> Response:
        serializer = ShopOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = ShopOrderService.place_order(request.user, **serializer.validated_data)
        return Response(ShopOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Retrieve a shop order", responses={200: ShopOrderSerializer}, tags=["Shop Orders"])
    def retrieve(self, request: Request, pk: str = None) -> Response:
        order = ShopOrderService.get_for(request.user, pk)
        return Response(ShopOrderSerializer(order).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Edit shop notes",
        request=ShopNotesUpdateSerializer,
        responses={
            200: ShopOrderSerializer,
            403: OpenApiResponse(description="Caller does not own the order's shop."),
        },
        tags=["Shop Orders"],
    )
    @action(detail=True, methods=["patch"], url_path="shop-notes", url_name="shop-notes")
    def shop_notes(self, request: Request, pk: str = None) -> Response:
        serializer = ShopNotesUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = ShopOrderService.update_shop_notes(
            pk,
            request.user,
            serializer.validated_data["shop_notes"],
        )
        return Response(ShopOrderSerializer(order).data, status=status.HTTP_200_OK)
