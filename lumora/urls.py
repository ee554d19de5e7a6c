"""
URL configuration for the Lumora backend.

Each app owns its API routes under /api/; core also serves /healthz.
"""

from django.urls import include, path

from lumora.core.api import views as core_views

urlpatterns = [
    path("healthz", core_views.healthz, name="healthz"),
    path("api/", include("lumora.core.api.urls", namespace="core_api")),
    path("api/", include("lumora.brandbrain.api.urls", namespace="brandbrain")),
    path("api/", include("lumora.generation.api.urls", namespace="generation")),
    path("api/", include("lumora.media.api.urls", namespace="media")),
]
