"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/sync-user/  - Create or refresh the caller's User (POST)
    /api/v1/auth/profile/    - Current user profile (GET/PATCH)
"""

from django.urls import path

from authentication.views import ProfileView, SyncUserView

app_name = "authentication"

urlpatterns = [
    path("sync-user/", SyncUserView.as_view(), name="sync-user"),
    path("profile/", ProfileView.as_view(), name="profile"),
]
