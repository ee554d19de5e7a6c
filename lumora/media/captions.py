"""
Caption generation from TTS character alignment.

Alignment comes in as characters with start/end times in seconds. Captions
come out in milliseconds, grouped a few words at a time for short-form
vertical video, and can be rendered as SRT, WebVTT or JSON.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Sequence


@dataclass
class AlignmentCharacter:
    character: str
    start: float
    end: float | None = None


@dataclass
class Caption:
    text: str
    start: float  # ms
    end: float  # ms

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CaptionWord:
    id: str
    text: str
    start: float  # seconds
    end: float  # seconds

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CaptionOptions:
    max_words_per_caption: int = 2
    max_chars_per_caption: int = 20
    min_duration: float = 500  # ms


# =============================================================================
# ALIGNMENT INPUT
# =============================================================================


def _alignment_time(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Alignment {label} must be numeric")
    if not math.isfinite(value):
        raise ValueError(f"Alignment {label} must be a finite number")
    return float(value)


def _character_from_mapping(item: Any) -> AlignmentCharacter:
    if not isinstance(item, dict):
        raise ValueError("Alignment entries must be objects")
    character = item.get("character")
    if not isinstance(character, str):
        raise ValueError("Alignment entries need a character and a numeric start")
    end = item.get("end")
    return AlignmentCharacter(
        character=character,
        start=_alignment_time(item.get("start"), "start"),
        end=_alignment_time(end, "end") if end is not None else None,
    )


def alignment_from_payload(payload: Any) -> list[AlignmentCharacter]:
    """
    Normalize alignment data to AlignmentCharacters.

    Accepts either a list of {character, start, end} objects or the
    provider's parallel-array form:
        {"characters": [...], "character_start_times_seconds": [...],
         "character_end_times_seconds": [...]}

    Returns [] for None or an empty payload.

    Raises:
        ValueError: If entries are malformed
    """
    if not payload:
        return []

    if isinstance(payload, dict):
        characters = payload.get("characters") or []
        starts = payload.get("character_start_times_seconds") or []
        ends = payload.get("character_end_times_seconds") or []
        if len(starts) != len(characters):
            raise ValueError("Alignment arrays have mismatched lengths")
        return [
            AlignmentCharacter(
                character=str(character),
                start=_alignment_time(starts[index], "start"),
                end=(
                    _alignment_time(ends[index], "end")
                    if index < len(ends) and ends[index] is not None
                    else None
                ),
            )
            for index, character in enumerate(characters)
        ]

    if isinstance(payload, list):
        return [
            item if isinstance(item, AlignmentCharacter) else _character_from_mapping(item)
            for item in payload
        ]

    raise ValueError("Alignment must be a list or an object of arrays")


# =============================================================================
# CAPTION BUILDING
# =============================================================================


def generate_captions(
    alignment: Sequence[AlignmentCharacter],
    options: CaptionOptions | None = None,
) -> list[Caption]:
    """
    Group aligned characters into short captions.

    A word ends at a space or at the last character. A caption closes when
    it reaches max_words_per_caption or max_chars_per_caption, or at the end
    of input; captions shorter than min_duration are dropped and the next
    caption starts where the dropped one ended.
    """
    opts = options or CaptionOptions()
    captions: list[Caption] = []
    if not alignment:
        return captions

    words: list[str] = []
    caption_start = 0.0
    caption_chars = 0
    current_word = ""
    word_start = alignment[0].start * 1000
    last_index = len(alignment) - 1

    for index, char in enumerate(alignment):
        char_time = char.start * 1000
        is_last = index == last_index

        if char.character == " " or is_last:
            if is_last and char.character != " ":
                current_word += char.character

            if current_word.strip():
                words.append(current_word.strip())
                caption_chars += len(current_word)

                should_break = (
                    len(words) >= opts.max_words_per_caption
                    or caption_chars >= opts.max_chars_per_caption
                )
                if should_break or is_last:
                    end_time = char.end * 1000 if char.end else (char.start + 0.5) * 1000
                    if end_time - caption_start >= opts.min_duration:
                        captions.append(Caption(text=" ".join(words), start=caption_start, end=end_time))
                    words = []
                    caption_start = end_time
                    caption_chars = 0

                current_word = ""
                word_start = char_time
        else:
            current_word += char.character
            if len(current_word) == 1:
                word_start = char_time
            if not words:
                caption_start = word_start

    return captions


def generate_word_captions(alignment: Sequence[AlignmentCharacter]) -> list[Caption]:
    """One caption per word, for word-by-word highlighting."""
    captions: list[Caption] = []
    current_word = ""
    word_start = 0.0
    last_index = len(alignment) - 1

    for index, char in enumerate(alignment):
        is_last = index == last_index
        if char.character == " " or is_last:
            if is_last and char.character != " ":
                if not current_word:
                    word_start = char.start * 1000
                current_word += char.character
            if current_word.strip():
                end_time = char.end * 1000 if char.end else (char.start + 0.3) * 1000
                captions.append(Caption(text=current_word.strip(), start=word_start, end=end_time))
                current_word = ""
        else:
            if not current_word:
                word_start = char.start * 1000
            current_word += char.character

    return captions


def generate_captions_from_transcript(
    words: Iterable[CaptionWord],
    options: CaptionOptions | None = None,
) -> list[Caption]:
    """
    Group timed words into captions.

    Same limits as generate_captions, except the final group is always
    emitted regardless of its duration. A group that hits a limit but is
    still too short keeps growing until it is long enough.
    """
    opts = options or CaptionOptions()
    timed = [word for word in words if word.text.strip()]
    captions: list[Caption] = []

    group: list[str] = []
    group_start = 0.0
    group_end = 0.0
    group_chars = 0

    for index, word in enumerate(timed):
        text = word.text.strip()
        if not group:
            group_start = word.start * 1000
        group.append(text)
        group_chars += len(text)
        group_end = word.end * 1000

        limit_reached = (
            len(group) >= opts.max_words_per_caption
            or group_chars >= opts.max_chars_per_caption
        )
        is_last = index == len(timed) - 1

        if (limit_reached or is_last) and (group_end - group_start >= opts.min_duration or is_last):
            captions.append(Caption(text=" ".join(group), start=group_start, end=group_end))
            group = []
            group_chars = 0

    return captions


def build_words_from_alignment(
    alignment: Sequence[AlignmentCharacter] | None,
    text: str,
    seconds_per_word: float = 0.4,
) -> list[CaptionWord]:
    """
    Turn character alignment into timed CaptionWords (ids w1, w2, ...).

    With no alignment the words of text are spread evenly,
    seconds_per_word apart.
    """
    words: list[CaptionWord] = []

    if not alignment:
        for index, token in enumerate(text.split()):
            words.append(
                CaptionWord(
                    id=f"w{index + 1}",
                    text=token,
                    start=round(index * seconds_per_word, 3),
                    end=round((index + 1) * seconds_per_word, 3),
                )
            )
        return words

    buffer = ""
    start = 0.0
    end = 0.0
    for char in alignment:
        if char.character.isspace():
            if buffer:
                words.append(CaptionWord(id=f"w{len(words) + 1}", text=buffer, start=start, end=end))
                buffer = ""
            continue
        if not buffer:
            start = round(char.start, 3)
        buffer += char.character
        end = round(char.end if char.end is not None else char.start, 3)

    if buffer:
        words.append(CaptionWord(id=f"w{len(words) + 1}", text=buffer, start=start, end=end))
    return words


# =============================================================================
# FORMATTING
# =============================================================================


def _timestamp(milliseconds: float, separator: str) -> str:
    total = math.floor(milliseconds)
    hours, rest = divmod(total, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}{separator}{ms:03d}"


def _cues(captions: Sequence[Caption], separator: str) -> str:
    return "\n".join(
        f"{index}\n{_timestamp(c.start, separator)} --> {_timestamp(c.end, separator)}\n{c.text}\n"
        for index, c in enumerate(captions, start=1)
    )


def format_as_srt(captions: Sequence[Caption]) -> str:
    """SubRip: numbered cues with HH:MM:SS,mmm timestamps."""
    return _cues(captions, ",")


def format_as_vtt(captions: Sequence[Caption]) -> str:
    """WebVTT: WEBVTT header, HH:MM:SS.mmm timestamps."""
    return "WEBVTT\n\n" + _cues(captions, ".")


def format_as_json(captions: Sequence[Caption]) -> str:
    return json.dumps([caption.to_dict() for caption in captions], indent=2)
