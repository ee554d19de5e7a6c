"""
ElevenLabs text-to-speech integration.
"""

from .client import (
    DEFAULT_MODEL_ID,
    ElevenLabsClient,
    ElevenLabsError,
    SpeechResult,
    get_default_client,
)

__all__ = [
    "DEFAULT_MODEL_ID",
    "ElevenLabsClient",
    "ElevenLabsError",
    "SpeechResult",
    "get_default_client",
]
