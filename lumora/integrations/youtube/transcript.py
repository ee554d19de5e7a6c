"""
YouTube transcript fetcher.

Steps:
1. Resolve the 11-char video id from an id, youtu.be link, ?v= link or embed URL
2. List the caption tracks with youtube-transcript-api and pick the preferred
   language (else the first track, manual captions before generated ones)
3. Fetch the track's segments
4. Read title, channel, duration and thumbnail with yt-dlp (no download);
   missing details fall back to placeholders

No API key is involved. Every failing transcript step raises
YoutubeTranscriptError with a user-facing message.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlparse

import requests
import yt_dlp
from yt_dlp.utils import DownloadError
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v="

YDL_OPTIONS = {
    "quiet": True,
    "no_warnings": True,
    "skip_download": True,
    "noplaylist": True,
}

_BARE_ID = re.compile(r"^[a-zA-Z0-9_-]{11}$")
_EMBEDDED_ID = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})",
    re.IGNORECASE,
)


class YoutubeTranscriptError(Exception):
    """Raised when a transcript cannot be resolved, downloaded or parsed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# =============================================================================
# PAYLOAD TYPES
# =============================================================================


@dataclass
class TranscriptSegment:
    id: str
    text: str
    offset: float
    duration: float


@dataclass
class TranscriptLanguage:
    language_code: str
    name: str
    kind: str | None = None


@dataclass
class TranscriptPayload:
    video_id: str
    title: str
    channel_name: str
    duration_seconds: int
    language_code: str
    description: str | None = None
    thumbnail_url: str | None = None
    languages: list[TranscriptLanguage] = field(default_factory=list)
    segments: list[TranscriptSegment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# PARSING
# =============================================================================


def extract_video_id(value: str) -> str:
    """
    Resolve a YouTube video id from a bare id or any common URL shape.

    Raises:
        YoutubeTranscriptError: If no id can be found
    """
    value = value.strip()
    if _BARE_ID.match(value):
        return value

    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        if "youtu.be" in parsed.netloc:
            candidate = parsed.path.replace("/", "")[:11]
            if candidate:
                return candidate
        video_ids = parse_qs(parsed.query).get("v")
        if video_ids and video_ids[0]:
            return video_ids[0][:11]

    match = _EMBEDDED_ID.search(value)
    if match:
        return match.group(1)

    raise YoutubeTranscriptError("Could not figure out the YouTube video ID from the input.")


def build_segments(snippets) -> list[TranscriptSegment]:
    """Turn fetched snippets into segments. Whitespace is collapsed; blank text is skipped."""
    segments: list[TranscriptSegment] = []
    for snippet in snippets:
        text = " ".join(snippet.text.split())
        if not text:
            continue
        offset = float(snippet.start)
        segments.append(
            TranscriptSegment(
                id=f"{round(offset * 1000)}-{len(segments)}",
                text=text,
                offset=offset,
                duration=float(snippet.duration),
            )
        )
    return segments


def _thumbnail_url(info: dict[str, Any]) -> str | None:
    if info.get("thumbnail"):
        return info["thumbnail"]
    thumbnails = info.get("thumbnails") or []
    return thumbnails[-1].get("url") if thumbnails else None


def _duration_seconds(info: dict[str, Any]) -> int:
    try:
        return int(info.get("duration") or 0)
    except (TypeError, ValueError):
        return 0


# =============================================================================
# FETCHING
# =============================================================================


def fetch_video_details(video_id: str) -> dict[str, Any]:
    """
    Read video metadata with yt-dlp without downloading media.

    Returns {} when yt-dlp cannot extract the video; the transcript is the
    required part of the payload and details are filled with placeholders.
    """
    call_start = time.monotonic()
    try:
        with yt_dlp.YoutubeDL(YDL_OPTIONS) as ydl:
            info = ydl.extract_info(f"{WATCH_URL}{video_id}", download=False)
    except DownloadError as exc:
        logger.warning("YOUTUBE_DETAILS_UNAVAILABLE video_id=%s error=%s", video_id, exc)
        return {}

    duration_ms = int((time.monotonic() - call_start) * 1000)
    logger.info("YOUTUBE_DETAILS_COMPLETE video_id=%s duration_ms=%d", video_id, duration_ms)
    return info or {}


def _select_transcript(transcript_list, language: str | None):
    if language:
        try:
            return transcript_list.find_transcript([language])
        except NoTranscriptFound:
            logger.info("YOUTUBE_LANGUAGE_FALLBACK language=%s", language)
    return next(iter(transcript_list), None)


def fetch_transcript(url_or_id: str, language: str | None = None) -> TranscriptPayload:
    """
    Fetch the transcript and video details for a YouTube video.

    Args:
        url_or_id: Video id or any YouTube URL
        language: Preferred caption language code (e.g. "en")

    Raises:
        YoutubeTranscriptError: On any resolution, download or parse failure
    """
    video_id = extract_video_id(url_or_id)
    call_start = time.monotonic()
    logger.info("YOUTUBE_CALL_START video_id=%s language=%s", video_id, language)

    try:
        transcript_list = YouTubeTranscriptApi().list(video_id)
        languages = [
            TranscriptLanguage(
                language_code=transcript.language_code,
                name=transcript.language or transcript.language_code,
                kind="asr" if transcript.is_generated else None,
            )
            for transcript in transcript_list
        ]
        selected = _select_transcript(transcript_list, language)
        if selected is None:
            raise YoutubeTranscriptError("No transcripts are available for this video.")
        fetched = selected.fetch()
    except VideoUnavailable as exc:
        logger.error("YOUTUBE_CALL_ERROR video_id=%s error=unavailable", video_id)
        raise YoutubeTranscriptError("This YouTube video is unavailable.") from exc
    except TranscriptsDisabled as exc:
        logger.error("YOUTUBE_CALL_ERROR video_id=%s error=disabled", video_id)
        raise YoutubeTranscriptError("Transcripts are disabled for this video.") from exc
    except NoTranscriptFound as exc:
        logger.error("YOUTUBE_CALL_ERROR video_id=%s error=not_found", video_id)
        raise YoutubeTranscriptError("No transcripts are available for this video.") from exc
    except (CouldNotRetrieveTranscript, requests.RequestException) as exc:
        logger.error("YOUTUBE_CALL_ERROR video_id=%s error=%s", video_id, exc)
        raise YoutubeTranscriptError("Failed to download the transcript from YouTube.") from exc

    segments = build_segments(fetched)
    if not segments:
        raise YoutubeTranscriptError("The transcript is empty or could not be parsed.")

    duration_ms = int((time.monotonic() - call_start) * 1000)
    logger.info(
        "YOUTUBE_CALL_COMPLETE video_id=%s language=%s segments=%d duration_ms=%d",
        video_id,
        selected.language_code,
        len(segments),
        duration_ms,
    )

    details = fetch_video_details(video_id)
    return TranscriptPayload(
        video_id=video_id,
        title=details.get("title") or "Untitled video",
        channel_name=details.get("uploader") or details.get("channel") or "Unknown creator",
        description=details.get("description"),
        duration_seconds=_duration_seconds(details),
        thumbnail_url=_thumbnail_url(details),
        language_code=selected.language_code,
        languages=languages,
        segments=segments,
    )
