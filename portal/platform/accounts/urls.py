from django.urls import path

from .views import ForbiddenView, LoginView, LogoutView

urlpatterns = [
    path("auth/login", LoginView.as_view(), name="login"),
    path("auth/logout", LogoutView.as_view(), name="logout"),
    path("pages/error-403", ForbiddenView.as_view(), name="forbidden"),
]
