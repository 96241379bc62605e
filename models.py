"""
models.py — Shared Pydantic data models: design choices, positioned elements, slides
and the raw content returned by the design service.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.colors import hex_to_rgb


class LayoutStrategy(str, Enum):
    """Geometric heuristic governing element placement on a slide."""

    GOLDEN_RATIO = "GOLDEN_RATIO"
    RULE_OF_THIRDS = "RULE_OF_THIRDS"
    CENTERED_MINIMAL = "CENTERED_MINIMAL"
    ASYMMETRICAL = "ASYMMETRICAL"
    GRID_SYSTEM = "GRID_SYSTEM"

    @classmethod
    def resolve(cls, tag: Optional[str]) -> LayoutStrategy:
        """Map a raw preference tag to a strategy.

        Accepts any case and '-' or ' ' in place of '_'. Anything that is
        not a declared variant resolves to CENTERED_MINIMAL.
        """
        if tag:
            key = tag.strip().upper().replace("-", "_").replace(" ", "_")
            try:
                return cls(key)
            except ValueError:
                pass
        return cls.CENTERED_MINIMAL


class ElementType(str, Enum):
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    SHAPE = "SHAPE"


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ColorPalette(BaseModel):
    """Five-colour palette chosen by the design service."""
    background: str
    primary: str
    secondary: str
    accent: str
    text: str

    @field_validator("background", "primary", "secondary", "accent", "text")
    @classmethod
    def _must_be_hex(cls, value: str) -> str:
        hex_to_rgb(value)
        return value


class TypographyTheme(BaseModel):
    """Heading / body font pairing (Google Fonts names)."""
    heading_font: str
    body_font: str


class TextStyle(BaseModel):
    font_family: str
    font_size: float
    font_weight: int
    color: str
    text_align: TextAlign = TextAlign.LEFT
    line_height: float
    letter_spacing: float


class VisualElement(BaseModel):
    """An absolutely positioned unit of slide content.

    ``x``/``y`` are not clamped: strategies may place content past the canvas
    edges. ``z_index`` is the paint order renderers honour (lowest first).
    """
    id: str
    type: ElementType
    content: str = ""
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    rotation: Optional[float] = None
    style: Optional[TextStyle] = None
    fill: Optional[str] = Field(
        default=None,
        description="Fill colour, only meaningful for SHAPE elements",
    )
    z_index: int
    opacity: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class Slide(BaseModel):
    id: str
    layout_strategy: LayoutStrategy
    elements: List[VisualElement] = Field(default_factory=list)
    background_color: str
    notes: Optional[str] = None


class Presentation(BaseModel):
    id: str
    title: str
    palette: ColorPalette
    typography: TypographyTheme
    slides: List[Slide] = Field(default_factory=list)


# ── Layout Engine Input ────────────────────────────────────────

class LayoutColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    accent: str


class LayoutFonts(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: str
    body: str


class LayoutInput(BaseModel):
    """Abstract, un-positioned content for one slide."""
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: Optional[str] = None
    body_points: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    layout_strategy: LayoutStrategy
    colors: LayoutColors
    fonts: LayoutFonts


# ── Design Service Output ──────────────────────────────────────

class RawSlideData(BaseModel):
    """One slide as described by the design service."""
    title: str
    subtitle: Optional[str] = None
    layout_preference: str = Field(
        description="One of: 'GOLDEN_RATIO', 'RULE_OF_THIRDS', 'CENTERED_MINIMAL'",
    )
    key_points: List[str] = Field(default_factory=list)
    image_description: Optional[str] = Field(
        default=None,
        description="Unsplash-style keywords for an image, only if one enhances the slide",
    )
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("slide title must not be blank")
        return value


class RawPresentationData(BaseModel):
    """Complete design-service response for a topic."""
    title: str
    color_palette: ColorPalette
    typography: TypographyTheme
    raw_slides: List[RawSlideData]

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("presentation title must not be blank")
        return value


# ── Editor Mutations ───────────────────────────────────────────

class ElementGeometryUpdate(BaseModel):
    """Partial geometry reported by the canvas editor after a drag or resize."""
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    rotation: Optional[float] = None


# ── Pipeline ───────────────────────────────────────────────────

class PipelineState(BaseModel):
    """Tracks the current state of a generation run."""
    status: str = Field(
        default="idle",
        description="One of: 'idle', 'designing', 'laying_out', 'done', 'error'",
    )
    topic: str = ""
    current_step: str = ""
    errors: List[str] = Field(default_factory=list)
