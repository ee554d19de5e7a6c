"""
Core API URL routing.

URL patterns:
- GET/POST /api/brands
- GET/PUT/DELETE /api/brands/:brand_id
- GET /api/brands/:brand_id/content
- GET /api/brands/:brand_id/content/by-status
- GET/POST /api/brands/:brand_id/cameos
- GET /api/topics/:brand_id
- POST /api/content
- GET/PATCH /api/content/:item_id
- GET /api/content/:item_id/generations
- PATCH/DELETE /api/cameos/:cameo_id
- GET/POST /api/focus-sessions
- GET /api/workflow/stages
"""

from django.urls import path

from lumora.core.api import views

app_name = "core_api"

urlpatterns = [
    # Brands
    path("brands", views.brands_list_create, name="brands-list-create"),
    path("brands/<str:brand_id>", views.brand_detail, name="brand-detail"),
    path("brands/<str:brand_id>/content", views.brand_content, name="brand-content"),
    path(
        "brands/<str:brand_id>/content/by-status",
        views.brand_content_by_status,
        name="brand-content-by-status",
    ),
    path("brands/<str:brand_id>/cameos", views.cameos_list_create, name="cameos-list-create"),
    path("topics/<str:brand_id>", views.brand_topics, name="brand-topics"),
    # Content
    path("content", views.content_create, name="content-create"),
    path("content/<str:item_id>", views.content_detail, name="content-detail"),
    path(
        "content/<str:item_id>/generations",
        views.content_generations,
        name="content-generations",
    ),
    # Cameos
    path("cameos/<str:cameo_id>", views.cameo_detail, name="cameo-detail"),
    # Focus sessions
    path("focus-sessions", views.focus_sessions, name="focus-sessions"),
    # Workflow
    path("workflow/stages", views.workflow_stages, name="workflow-stages"),
]
