"""
Generation URL routing.

- POST /api/generate
- POST /api/bulk
- POST /api/brand-suggestions
- GET /api/topics/:brand_id/variety
- POST /api/youtube/transcript
- POST /api/youtube/refine
"""

from django.urls import path

from lumora.generation.api import views

app_name = "generation"

urlpatterns = [
    path("generate", views.generate, name="generate"),
    path("bulk", views.bulk, name="bulk"),
    path("brand-suggestions", views.brand_suggestions, name="brand-suggestions"),
    path("topics/<str:brand_id>/variety", views.topic_variety, name="topic-variety"),
    path("youtube/transcript", views.youtube_transcript, name="youtube-transcript"),
    path("youtube/refine", views.youtube_refine, name="youtube-refine"),
]
