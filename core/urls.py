"""
URL configuration for core project.

Every handler lives under ``/api/`` with the same path the web client already
calls (``/api/track-view``, ``/api/stripe-webhook``...), so the routes carry no
trailing slash.
"""

from django.urls import path
from django.urls import include
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView


def home_view(request):
    return JsonResponse({
        "message": "Partnerships Careers API",
        "status": "running",
        "endpoints": {
            "api": "/api/",
            "docs": "/api/docs/",
            "schema": "/api/schema/"
        }
    })


urlpatterns = [
    path("", home_view, name="home"),
    path("api/", include("apps.tracking.urls")),
    path("api/", include("apps.payments.urls")),
    path("api/", include("apps.alerts.urls")),
    path("api/", include("apps.accounts.urls")),
    path("api/", include("apps.listings.urls")),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
