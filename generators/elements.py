"""
generators/elements.py — Builders for positioned visual elements.
Every layout strategy and the slide assembler create elements through here,
so id assignment and text-height approximation live in one place.
"""

from __future__ import annotations

import uuid
from typing import Callable, List, Optional

from config import CANVAS_HEIGHT, CANVAS_WIDTH
from models import ElementType, LayoutFonts, TextAlign, TextStyle, VisualElement

IdGenerator = Callable[[], str]

HEADING_WEIGHT = 700
LINE_HEIGHT = 1.4
HEADING_LETTER_SPACING = -0.02

Z_BACKGROUND = 0
Z_IMAGE = 1
Z_TEXT = 10


def generate_id() -> str:
    """Random 9-character element id."""
    return uuid.uuid4().hex[:9]


class ApproximateTextMetrics:
    """Estimates a single text block's height from its font size.

    No glyph measurement: swap in another object exposing ``height_for``
    to use real metrics.
    """

    def __init__(self, ratio: float = 1.5) -> None:
        self.ratio = ratio

    def height_for(self, font_size: float) -> float:
        return font_size * self.ratio


class ElementFactory:
    """Creates text, image and background elements for one slide."""

    def __init__(
        self,
        fonts: Optional[LayoutFonts] = None,
        new_id: IdGenerator = generate_id,
        metrics: Optional[ApproximateTextMetrics] = None,
    ) -> None:
        self._fonts = fonts
        self._new_id = new_id
        self._metrics = metrics or ApproximateTextMetrics()

    def make_text(
        self,
        text: str,
        x: float,
        y: float,
        width: float,
        font_size: float,
        weight: int,
        color: str,
        align: TextAlign = TextAlign.LEFT,
    ) -> VisualElement:
        """Build a text element; 700-weight text is treated as a heading."""
        if self._fonts is None:
            raise RuntimeError("ElementFactory needs fonts to build text elements")
        is_heading = weight == HEADING_WEIGHT
        return VisualElement(
            id=self._new_id(),
            type=ElementType.TEXT,
            content=text,
            x=x,
            y=y,
            width=width,
            height=self._metrics.height_for(font_size),
            z_index=Z_TEXT,
            style=TextStyle(
                font_family=self._fonts.heading if is_heading else self._fonts.body,
                font_size=font_size,
                font_weight=weight,
                color=color,
                text_align=align,
                line_height=LINE_HEIGHT,
                letter_spacing=HEADING_LETTER_SPACING if is_heading else 0,
            ),
        )

    def make_image(
        self, url: str, x: float, y: float, width: float, height: float
    ) -> VisualElement:
        return VisualElement(
            id=self._new_id(),
            type=ElementType.IMAGE,
            content=url,
            x=x,
            y=y,
            width=width,
            height=height,
            z_index=Z_IMAGE,
        )

    def make_background(self, color: str) -> VisualElement:
        """Full-canvas filled rectangle painted beneath everything else."""
        return VisualElement(
            id=self._new_id(),
            type=ElementType.SHAPE,
            content="",
            x=0,
            y=0,
            width=CANVAS_WIDTH,
            height=CANVAS_HEIGHT,
            fill=color,
            z_index=Z_BACKGROUND,
        )


def is_background(element: VisualElement) -> bool:
    """True for the full-canvas fill placed beneath a slide's content."""
    return element.type == ElementType.SHAPE and element.z_index == Z_BACKGROUND


def paint_order(elements: List[VisualElement]) -> List[VisualElement]:
    """Elements sorted for painting by z_index; ties keep list order."""
    return sorted(elements, key=lambda e: e.z_index)
