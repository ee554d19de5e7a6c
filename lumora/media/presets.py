"""
Caption style presets for the captioner.
"""

from typing import Literal

from pydantic import BaseModel, Field


class CaptionStyle(BaseModel):
    font_family: str = "Inter"
    font_weight: int = 700
    font_size: int = 42
    color: str = "#EDEDED"
    background_color: str = "#0B0B0C"
    highlight_color: str = "#0951BF"
    uppercase: bool = False
    align: Literal["left", "center", "right"] = "center"
    letter_spacing: float = 0.4
    line_height: float = 1.18
    shadow: bool = True
    animation: str = "fade-in"
    motion: str = "float"
    words_per_caption: int = Field(default=3, ge=1)
    word_spacing: float = 0.35
    padding_y: float = 0.9
    padding_x: float = 1.4
    border_radius: int = 18
    background_opacity: float = Field(default=0.6, ge=0, le=1)


class CaptionPreset(BaseModel):
    id: str
    name: str
    description: str
    style: CaptionStyle


DEFAULT_CAPTION_STYLE = CaptionStyle()

CAPTION_PRESETS: list[CaptionPreset] = [
    CaptionPreset(
        id="glass-blue",
        name="Glass blue",
        description="Frosted block with electric highlights",
        style=DEFAULT_CAPTION_STYLE.model_copy(
            update={
                "highlight_color": "#4C8DFF",
                "background_opacity": 0.55,
            }
        ),
    ),
    CaptionPreset(
        id="electric",
        name="Electric",
        description="Punchy uppercase with hard bounce",
        style=DEFAULT_CAPTION_STYLE.model_copy(
            update={
                "uppercase": True,
                "animation": "bounce",
                "motion": "punch",
                "highlight_color": "#FF2A2A",
                "font_family": "Space Grotesk",
                "font_weight": 800,
                "font_size": 44,
                "letter_spacing": 1.0,
                "background_opacity": 0.4,
                "border_radius": 12,
            }
        ),
    ),
    CaptionPreset(
        id="minimal",
        name="Minimal",
        description="Lightweight lower-third caption",
        style=DEFAULT_CAPTION_STYLE.model_copy(
            update={
                "background_opacity": 0.2,
                "motion": "static",
                "animation": "slide-up",
                "font_weight": 600,
                "font_size": 36,
                "padding_x": 1.2,
                "padding_y": 0.7,
                "border_radius": 12,
                "words_per_caption": 4,
                "highlight_color": "#EDEDED",
            }
        ),
    ),
]


def get_caption_preset(preset_id: str) -> CaptionPreset | None:
    """Look up a preset by id; None if unknown."""
    for preset in CAPTION_PRESETS:
        if preset.id == preset_id:
            return preset
    return None
