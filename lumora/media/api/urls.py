"""
Media URL routing.

- GET /api/elevenlabs/voices
- POST /api/elevenlabs/speech
- POST /api/sora/create
- GET /api/sora/status
- POST /api/sora/generate-captions
- GET /api/video/proxy
- GET /api/captions/presets
"""

from django.urls import path

from lumora.media.api import views

app_name = "media"

urlpatterns = [
    path("elevenlabs/voices", views.elevenlabs_voices, name="elevenlabs-voices"),
    path("elevenlabs/speech", views.elevenlabs_speech, name="elevenlabs-speech"),
    path("sora/create", views.sora_create, name="sora-create"),
    path("sora/status", views.sora_status, name="sora-status"),
    path("sora/generate-captions", views.sora_generate_captions, name="sora-generate-captions"),
    path("video/proxy", views.video_proxy, name="video-proxy"),
    path("captions/presets", views.caption_presets, name="caption-presets"),
]
