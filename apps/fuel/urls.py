from django.urls import path
from .views import (
    LedgerListView, LedgerDetailView, TruckJourneyView, ActivateNextJourneyView,
    RouteConfigListCreateView, RouteConfigDetailView,
    TruckBatchListCreateView, TruckBatchDetailView,
)

urlpatterns = [
    path("ledgers/",                            LedgerListView.as_view(),            name="ledger-list"),
    path("ledgers/<uuid:ledger_id>/",           LedgerDetailView.as_view(),          name="ledger-detail"),
    path("trucks/<str:truck_no>/journey/",       TruckJourneyView.as_view(),          name="truck-journey"),
    path("trucks/<str:truck_no>/activate-next/", ActivateNextJourneyView.as_view(),   name="truck-activate-next"),
    path("routes/",                             RouteConfigListCreateView.as_view(), name="route-list"),
    path("routes/<int:pk>/",                    RouteConfigDetailView.as_view(),     name="route-detail"),
    path("batches/",                            TruckBatchListCreateView.as_view(),  name="batch-list"),
    path("batches/<int:pk>/",                   TruckBatchDetailView.as_view(),      name="batch-detail"),
]
