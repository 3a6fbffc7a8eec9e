from django.urls import path
from .views import PendingNotificationsView, MarkReadView, ResolveView, DismissView

urlpatterns = [
    path("",                                 PendingNotificationsView.as_view(), name="notification-pending"),
    path("<uuid:notification_id>/read/",     MarkReadView.as_view(),             name="notification-read"),
    path("<uuid:notification_id>/resolve/",  ResolveView.as_view(),              name="notification-resolve"),
    path("<uuid:notification_id>/dismiss/",  DismissView.as_view(),              name="notification-dismiss"),
]
