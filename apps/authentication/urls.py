from django.urls import path
from .views import OperatorCreateView, ProfileView

urlpatterns = [
    path("operators/", OperatorCreateView.as_view(), name="operator-create"),
    path("me/",        ProfileView.as_view(),        name="operator-profile"),
]
