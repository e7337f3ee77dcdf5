"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Extracting and validating request data.
2. Calling the service with the authenticated user and parameters.
3. Serialising the result and returning an HTTP ``Response``.

Domain exceptions raised by the services are rendered by
``core.domain.exception_handler``.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiResponse, extend_schema

from .serializers import (
    BroadcastRequestSerializer,
    BroadcastResponseSerializer,
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    SystemConstantsSerializer,
    UnreadCountSerializer,
)
from .services import BroadcastService, NotificationService, SystemConstantsService


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Return the status enumerations, broadcast targets and unlock fee
    schedule so the frontend can build dropdowns and labels without
    hardcoding values.

    **Authentication**: Not required (``AllowAny``).
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="System constants",
        description="Return system-wide choice enumerations and the unlock fee schedule.",
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        serializer = SystemConstantsSerializer(data)
        return Response(serializer.data, status=status.HTTP_200_OK)


class BroadcastView(APIView):
    """
    **POST /api/core/broadcasts/**

    Send a notification to every user in the selected audience.

    **Authentication**: Required; the caller must be an admin.

    **Response** (``201 Created``): ``{"sent_count": <n>}``.  An empty
    audience is not an error.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Send broadcast",
        request=BroadcastRequestSerializer,
        responses={
            201: OpenApiResponse(response=BroadcastResponseSerializer, description="Broadcast sent."),
            400: OpenApiResponse(description="Missing content or target id."),
            403: OpenApiResponse(description="Caller is not an admin."),
        },
        tags=["Notifications"],
    )
    def post(self, request: Request) -> Response:
        serializer = BroadcastRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sent_count = BroadcastService.send(
            actor=request.user,
            target=serializer.to_target(),
            title=serializer.validated_data["title"],
            message=serializer.validated_data["message"],
        )
        return Response({"sent_count": sent_count}, status=status.HTTP_201_CREATED)


class NotificationViewSet(viewsets.ViewSet):
    """
    **Notification API** — the authenticated user's inbox.

    Endpoints
    ---------
    GET  /api/core/notifications/                → most recent notifications
    GET  /api/core/notifications/unread-count/   → unread counter
    POST /api/core/notifications/{id}/read/      → mark one as read
    POST /api/core/notifications/read-all/       → mark all as read
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List notifications",
        description="Return the 50 most recent notifications of the authenticated user.",
        responses={200: OpenApiResponse(response=NotificationSerializer(many=True), description="Notification list.")},
        tags=["Notifications"],
    )
    def list(self, request: Request) -> Response:
        service = NotificationService(user=request.user)
        serializer = NotificationSerializer(service.list_notifications(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Unread notification count",
        responses={200: OpenApiResponse(response=UnreadCountSerializer, description="Unread count.")},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count", url_name="unread-count")
    def unread_count(self, request: Request) -> Response:
        service = NotificationService(user=request.user)
        return Response({"unread_count": service.unread_count()}, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark notification as read",
        request=None,
        responses={
            200: OpenApiResponse(response=NotificationSerializer, description="Updated notification."),
            404: OpenApiResponse(description="Not found or not owned by the caller."),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"], url_path="read", url_name="read")
    def mark_as_read(self, request: Request, pk: str = None) -> Response:
        service = NotificationService(user=request.user)
        notification = service.mark_as_read(notification_id=pk)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: OpenApiResponse(response=MarkAllReadResponseSerializer, description="Number updated.")},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all", url_name="read-all")
    def mark_all_as_read(self, request: Request) -> Response:
        service = NotificationService(user=request.user)
        return Response({"updated": service.mark_all_as_read()}, status=status.HTTP_200_OK)
