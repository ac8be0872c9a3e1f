"""URL patterns for author profiles."""

from django.urls import path

from .views import MyProfileView, ProfileDetailView

urlpatterns = [
    path("me/", MyProfileView.as_view(), name="profile-me"),
    path("<str:username>/", ProfileDetailView.as_view(), name="profile-detail"),
]
