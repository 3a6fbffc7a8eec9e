from django.urls import path
from .views import (
    OrderListCreateView, OrderDetailView, OrderCancelView, OrderRelinkView,
    NextOrderNumberView, TruckOrdersView,
)

urlpatterns = [
    path("",                        OrderListCreateView.as_view(), name="order-list"),
    path("next-number/",            NextOrderNumberView.as_view(), name="order-next-number"),
    path("truck/<str:truck_no>/",   TruckOrdersView.as_view(),     name="order-truck"),
    path("<uuid:order_id>/",        OrderDetailView.as_view(),     name="order-detail"),
    path("<uuid:order_id>/cancel/", OrderCancelView.as_view(),     name="order-cancel"),
    path("<uuid:order_id>/relink/", OrderRelinkView.as_view(),     name="order-relink"),
]
