"""
Unlocks app ViewSets.

``UnlockPaymentViewSet`` exposes the contact-unlock ledger:

- buyers create unlocks, list their own, and request refunds;
- admins resolve payments and refunds;
- ``quote`` and ``contact`` read the fee and the gated seller contact.

Views are thin; the role, ownership and state rules live in
``unlocks.services.UnlockLedgerService``.
"""

from __future__ import annotations

from dataclasses import asdict

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    ResolvePaymentSerializer,
    ResolveRefundSerializer,
    SellerContactSerializer,
    UnlockCreateSerializer,
    UnlockPaymentSerializer,
    UnlockQuoteSerializer,
)
from .services import UnlockLedgerService


class UnlockPaymentViewSet(viewsets.ViewSet):
    """
    /api/unlocks/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List unlock payments",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="pending, approved or rejected."),
            OpenApiParameter(name="refund_pending", type=bool, location=OpenApiParameter.QUERY, description="Only open refund requests."),
        ],
        responses={200: UnlockPaymentSerializer(many=True)},
        tags=["Unlocks"],
    )
    def list(self, request: Request) -> Response:
        refund_pending = request.query_params.get("refund_pending", "").lower() in ("1", "true", "yes")
        payments = UnlockLedgerService.list_for(
            request.user,
            status=request.query_params.get("status") or None,
            refund_pending=refund_pending,
        )
        return Response(UnlockPaymentSerializer(payments, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit an unlock payment",
        request=UnlockCreateSerializer,
        responses={
            201: UnlockPaymentSerializer,
            400: OpenApiResponse(description="Malformed bKash number."),
            404: OpenApiResponse(description="Book not found."),
            409: OpenApiResponse(description="An active unlock already exists (duplicate_unlock)."),
        },
        tags=["Unlocks"],
    )
    def create(self, request: Request) -> Response:
        serializer = UnlockCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = UnlockLedgerService.create_unlock(
            request.user,
            serializer.validated_data["book_id"],
            serializer.validated_data["bkash_number"],
        )
        return Response(UnlockPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Retrieve an unlock payment", responses={200: UnlockPaymentSerializer}, tags=["Unlocks"])
    def retrieve(self, request: Request, pk: str = None) -> Response:
        payment = UnlockLedgerService.get_for(request.user, pk)
        return Response(UnlockPaymentSerializer(payment).data, status=status.HTTP_200_OK)

    # ── Admin resolution ──────────────────────────────────────────────

    @extend_schema(
        summary="Approve or reject a payment",
        request=ResolvePaymentSerializer,
        responses={
            200: UnlockPaymentSerializer,
            403: OpenApiResponse(description="Caller is not an admin."),
            409: OpenApiResponse(description="Payment already resolved (already_resolved)."),
        },
        tags=["Unlocks"],
    )
    @action(detail=True, methods=["post"], url_path="resolve")
    def resolve(self, request: Request, pk: str = None) -> Response:
        serializer = ResolvePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = UnlockLedgerService.resolve_payment(
            pk,
            serializer.validated_data["decision"],
            request.user,
            serializer.validated_data.get("notes", ""),
        )
        return Response(UnlockPaymentSerializer(payment).data, status=status.HTTP_200_OK)

    # ── Refunds ───────────────────────────────────────────────────────

    @extend_schema(
        summary="Request a refund",
        request=None,
        responses={
            200: UnlockPaymentSerializer,
            409: OpenApiResponse(description="Not eligible, already pending or already resolved."),
        },
        tags=["Unlocks"],
    )
    @action(detail=True, methods=["post"], url_path="refund-request", url_name="refund-request")
    def refund_request(self, request: Request, pk: str = None) -> Response:
        payment = UnlockLedgerService.request_refund(pk, request.user)
        return Response(UnlockPaymentSerializer(payment).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Approve or deny a refund",
        request=ResolveRefundSerializer,
        responses={
            200: UnlockPaymentSerializer,
            403: OpenApiResponse(description="Caller is not an admin."),
            409: OpenApiResponse(description="No refund requested or already resolved."),
        },
        tags=["Unlocks"],
    )
    @action(detail=True, methods=["post"], url_path="refund-resolve", url_name="refund-resolve")
    def refund_resolve(self, request: Request, pk: str = None) -> Response:
        serializer = ResolveRefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = UnlockLedgerService.resolve_refund(
            pk,
            serializer.validated_data["approved"],
            request.user,
            serializer.validated_data.get("notes", ""),
        )
        return Response(UnlockPaymentSerializer(payment).data, status=status.HTTP_200_OK)

    # ── Book-level reads ──────────────────────────────────────────────

    @extend_schema(summary="Unlock fee for a book", responses={200: UnlockQuoteSerializer}, tags=["Unlocks"])
    @action(detail=False, methods=["get"], url_path=r"quote/(?P<book_id>[0-9]+)", url_name="quote")
    def quote(self, request: Request, book_id: str = None) -> Response:
        data = UnlockLedgerService.quote(book_id)
        return Response(UnlockQuoteSerializer(data).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Seller contact for an unlocked book",
        responses={
            200: SellerContactSerializer,
            403: OpenApiResponse(description="No approved unlock for this book."),
        },
        tags=["Unlocks"],
    )
    @action(detail=False, methods=["get"], url_path=r"contact/(?P<book_id>[0-9]+)", url_name="contact")
    def contact(self, request: Request, book_id: str = None) -> Response:
        contact = UnlockLedgerService.contact_for_book(request.user, book_id)
        return Response(SellerContactSerializer(asdict(contact)).data, status=status.HTTP_200_OK)
