"""
generators/slide_previewer.py — Renders positioned slides to PNG images.
Uses matplotlib in canvas coordinates so the preview matches the exported PPTX.
"""

from __future__ import annotations

import io
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from config import CANVAS_HEIGHT, CANVAS_WIDTH, Settings, get_settings
from generators.elements import paint_order
from models import ElementType, Slide, TextAlign, VisualElement
from utils.colors import hex_to_norm

# Slide dimensions (13.333 x 7.5 aspect = 16:9), 96 canvas units per inch
FIG_W = 13.333
FIG_H = 7.5
POINTS_PER_UNIT = 0.75

_HA = {
    TextAlign.LEFT: "left",
    TextAlign.CENTER: "center",
    TextAlign.RIGHT: "right",
}


class SlidePreviewRenderer:
    """Renders slides as PNG images for in-browser preview."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def render_slide(self, slide: Slide) -> bytes:
        """Render a single slide to a PNG image (bytes).

        The slide colour comes from its background element, painted first.
        """
        fig, ax = self._new_figure()
        for order, element in enumerate(paint_order(slide.elements)):
            if element.type == ElementType.SHAPE:
                self._draw_shape(ax, element, order)
            elif element.type == ElementType.IMAGE:
                self._draw_image_placeholder(ax, element, order)
            elif element.type == ElementType.TEXT:
                self._draw_text(ax, element, order)
        return self._fig_to_bytes(fig)

    def render_all(self, slides: List[Slide]) -> List[bytes]:
        return [self.render_slide(slide) for slide in slides]

    # ── Figure Helpers ───────────────────────────────────────

    def _new_figure(self):
        fig = plt.figure(figsize=(FIG_W, FIG_H), dpi=self._settings.preview_dpi)
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_xlim(0, CANVAS_WIDTH)
        ax.set_ylim(0, CANVAS_HEIGHT)
        ax.invert_yaxis()
        ax.axis("off")
        return fig, ax

    def _fig_to_bytes(self, fig) -> bytes:
        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=self._settings.preview_dpi)
        plt.close(fig)
        buf.seek(0)
        return buf.read()

    # ── Element Drawing ──────────────────────────────────────

    @staticmethod
    def _alpha(element: VisualElement) -> float:
        return 1.0 if element.opacity is None else element.opacity

    def _draw_shape(self, ax, element: VisualElement, order: int) -> None:
        rect = mpatches.Rectangle(
            (element.x, element.y), element.width, element.height,
            angle=element.rotation or 0.0,
            facecolor=hex_to_norm(element.fill) if element.fill else "none",
            edgecolor="none",
            alpha=self._alpha(element),
            zorder=order,
        )
        ax.add_patch(rect)

    def _draw_image_placeholder(self, ax, element: VisualElement, order: int) -> None:
        rect = mpatches.Rectangle(
            (element.x, element.y), element.width, element.height,
            angle=element.rotation or 0.0,
            facecolor=hex_to_norm(self._settings.placeholder_hex),
            edgecolor="none",
            alpha=self._alpha(element),
            zorder=order,
        )
        ax.add_patch(rect)
        ax.text(
            element.x + element.width / 2, element.y + element.height / 2,
            "IMAGE",
            ha="center", va="center",
            fontsize=10, color="#52525B",
            zorder=order,
            clip_on=True,
        )

    def _draw_text(self, ax, element: VisualElement, order: int) -> None:
        style = element.style
        if style is None:
            return
        if style.text_align == TextAlign.CENTER:
            x = element.x + element.width / 2
        elif style.text_align == TextAlign.RIGHT:
            x = element.x + element.width
        else:
            x = element.x
        ax.text(
            x, element.y,
            element.content,
            ha=_HA[style.text_align], va="top",
            fontsize=style.font_size * POINTS_PER_UNIT,
            fontweight=style.font_weight,
            linespacing=style.line_height,
            color=hex_to_norm(style.color),
            rotation=-(element.rotation or 0.0),
            rotation_mode="anchor",
            alpha=self._alpha(element),
            zorder=order,
        )
