"""
URL configuration for authentication app.

URL structure (included at /api/v1/ in config/urls.py):
    auth/token/           - Obtain JWT pair (email + password)
    auth/token/refresh/   - Refresh access token
    users/me/             - Current user profile
    users/<id>/           - User existence check
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.views import CurrentUserView, UserExistsView

app_name = "authentication"

urlpatterns = [
    path("auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("users/me/", CurrentUserView.as_view(), name="current-user"),
    path("users/<str:user_id>/", UserExistsView.as_view(), name="user-exists"),
]
