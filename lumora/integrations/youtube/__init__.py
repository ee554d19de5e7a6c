"""
YouTube transcript fetching (youtube-transcript-api captions + yt-dlp details).
"""

from lumora.integrations.youtube.transcript import (
    TranscriptLanguage,
    TranscriptPayload,
    TranscriptSegment,
    YoutubeTranscriptError,
    build_segments,
    extract_video_id,
    fetch_transcript,
    fetch_video_details,
)

__all__ = [
    "TranscriptLanguage",
    "TranscriptPayload",
    "TranscriptSegment",
    "YoutubeTranscriptError",
    "build_segments",
    "extract_video_id",
    "fetch_transcript",
    "fetch_video_details",
]
