"""
Brand brain URL routing.

- POST /api/brand-chat
- POST /api/brand-ingest
- POST /api/brain/upload
"""

from django.urls import path

from lumora.brandbrain.api import views

app_name = "brandbrain"

urlpatterns = [
    path("brand-chat", views.brand_chat, name="brand-chat"),
    path("brand-ingest", views.brand_ingest, name="brand-ingest"),
    path("brain/upload", views.brain_upload, name="brain-upload"),
]
