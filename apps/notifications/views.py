from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.authentication.context import Actor
from apps.orders.mixins import DomainErrorMixin

from .serializers import NotificationSerializer
from .service import NotificationDispatcher

dispatcher = NotificationDispatcher()


@extend_schema(tags=["Notifications"], summary="Pending notifications addressed to me or my role")
class PendingNotificationsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        notifications = dispatcher.pending_for_actor(Actor.from_user(request.user))
        return Response({
            "count":   len(notifications),
            "unread":  sum(1 for n in notifications if request.user.username not in n.read_by),
            "results": NotificationSerializer(notifications, many=True).data,
        })


class _NotificationActionView(DomainErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]
    action_name = None

    def post(self, request, notification_id):
        action = getattr(dispatcher, self.action_name)
        notification = action(notification_id, Actor.from_user(request.user))
        return Response(NotificationSerializer(notification).data)


@extend_schema(tags=["Notifications"], summary="Mark a notification as read")
class MarkReadView(_NotificationActionView):
    action_name = "mark_read"


@extend_schema(tags=["Notifications"], summary="Resolve a pending notification")
class ResolveView(_NotificationActionView):
    action_name = "resolve"


@extend_schema(tags=["Notifications"], summary="Dismiss a pending notification")
class DismissView(_NotificationActionView):
    action_name = "dismiss"
