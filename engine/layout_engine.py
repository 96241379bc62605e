"""
engine/layout_engine.py — Algorithmic slide layout.
Converts one slide's abstract content into absolutely positioned elements
using geometric heuristics instead of fixed templates.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from config import CANVAS_HEIGHT, CANVAS_WIDTH, PADDING, PHI
from engine.pipeline_logger import PipelineLogger
from generators.elements import (
    ApproximateTextMetrics,
    ElementFactory,
    IdGenerator,
    generate_id,
)
from models import LayoutInput, LayoutStrategy, TextAlign, VisualElement

BULLET_GLYPH = "•"

StrategyFn = Callable[[LayoutInput, ElementFactory], List[VisualElement]]


class LayoutEngine:
    """Dispatches a LayoutInput to the algorithm for its strategy.

    Elements come back in creation order; z_index, not list position,
    decides paint order.
    """

    def __init__(
        self,
        new_id: IdGenerator = generate_id,
        metrics: Optional[ApproximateTextMetrics] = None,
    ) -> None:
        self._new_id = new_id
        self._metrics = metrics or ApproximateTextMetrics()
        self._log = PipelineLogger("LayoutEngine")

        self._dispatch: Dict[LayoutStrategy, StrategyFn] = {
            LayoutStrategy.GOLDEN_RATIO: self._golden_ratio,
            LayoutStrategy.RULE_OF_THIRDS: self._rule_of_thirds,
            LayoutStrategy.CENTERED_MINIMAL: self._centered_minimal,
            # Not yet implemented: explicit fallback to centered-minimal.
            LayoutStrategy.ASYMMETRICAL: self._unimplemented,
            LayoutStrategy.GRID_SYSTEM: self._unimplemented,
        }
        missing = set(LayoutStrategy) - set(self._dispatch)
        if missing:
            names = ", ".join(sorted(s.value for s in missing))
            raise RuntimeError(f"No layout algorithm registered for: {names}")

    @property
    def strategies(self) -> List[LayoutStrategy]:
        return list(self._dispatch)

    def layout(self, data: LayoutInput) -> List[VisualElement]:
        """Return the ordered elements for one slide (background excluded)."""
        factory = ElementFactory(fonts=data.fonts, new_id=self._new_id, metrics=self._metrics)
        elements = self._dispatch[data.layout_strategy](data, factory)
        self._log.bind(strategy=data.layout_strategy.value).debug(
            f"'{data.title[:40]}' -> {len(elements)} elements"
        )
        return elements

    # ── Strategies ──────────────────────────────────────────

    def _golden_ratio(self, data: LayoutInput, f: ElementFactory) -> List[VisualElement]:
        w, h = CANVAS_WIDTH, CANVAS_HEIGHT
        major_width = w / PHI
        minor_width = w - major_width
        colors = data.colors
        elements: List[VisualElement] = []

        if data.image_url:
            # Image owns the major section, text sits in the minor one
            elements.append(f.make_image(data.image_url, 0, 0, major_width, h))

            x = major_width + PADDING
            col_width = minor_width - PADDING * 2
            cursor = PADDING * 2
            elements.append(f.make_text(data.title, x, cursor, col_width, 48, 700, colors.text))
            cursor += 80

            if data.subtitle:
                elements.append(f.make_text(data.subtitle, x, cursor, col_width, 24, 400, colors.accent))
                cursor += 50

            for point in data.body_points:
                elements.append(
                    f.make_text(f"{BULLET_GLYPH} {point}", x, cursor, col_width, 20, 300, colors.text)
                )
                cursor += 35
        else:
            # Title at the eye of the spiral
            elements.append(f.make_text(data.title, PADDING, h / 3, major_width, 72, 700, colors.text))
            cursor = h / 3 + 100
            for point in data.body_points:
                elements.append(f.make_text(point, PADDING, cursor, major_width, 24, 400, colors.text))
                cursor += 40

        return elements

    def _rule_of_thirds(self, data: LayoutInput, f: ElementFactory) -> List[VisualElement]:
        third_w = CANVAS_WIDTH / 3
        third_h = CANVAS_HEIGHT / 3
        colors = data.colors
        elements: List[VisualElement] = []

        if data.image_url:
            elements.append(f.make_image(data.image_url, third_w, 0, third_w * 2, CANVAS_HEIGHT))

            col_width = third_w - PADDING
            elements.append(
                f.make_text(data.title, PADDING, third_h - 50, col_width, 56, 700, colors.text, TextAlign.RIGHT)
            )
            if data.subtitle:
                elements.append(
                    f.make_text(data.subtitle, PADDING, third_h + 30, col_width, 24, 400, colors.accent, TextAlign.RIGHT)
                )
            cursor = third_h + 100
            for point in data.body_points:
                elements.append(
                    f.make_text(point, PADDING, cursor, col_width, 20, 300, colors.text, TextAlign.RIGHT)
                )
                cursor += 35
        else:
            # Strong typography anchored on the upper-left intersection
            elements.append(f.make_text(data.title, third_w, third_h, third_w * 2, 64, 700, colors.text))
            cursor = third_h + 100
            for point in data.body_points:
                elements.append(f.make_text(point, third_w, cursor, third_w * 1.5, 22, 300, colors.text))
                cursor += 35

        return elements

    def _centered_minimal(self, data: LayoutInput, f: ElementFactory) -> List[VisualElement]:
        w, h = CANVAS_WIDTH, CANVAS_HEIGHT
        content_width = w * 0.6
        start_x = (w - content_width) / 2
        colors = data.colors
        elements: List[VisualElement] = []

        cursor = h * 0.3
        elements.append(
            f.make_text(data.title, start_x, cursor, content_width, 64, 700, colors.text, TextAlign.CENTER)
        )
        cursor += 90

        if data.image_url:
            img_h = 300
            img_w = content_width * 0.8
            elements.append(f.make_image(data.image_url, (w - img_w) / 2, cursor, img_w, img_h))
            cursor += img_h + 40

        # Points may run past the bottom edge; the editor surfaces that.
        for point in data.body_points:
            elements.append(
                f.make_text(point, start_x, cursor, content_width, 24, 400, colors.text, TextAlign.CENTER)
            )
            cursor += 40

        return elements

    def _unimplemented(self, data: LayoutInput, f: ElementFactory) -> List[VisualElement]:
        self._log.bind(strategy=data.layout_strategy.value).decision(
            f"fall back to {LayoutStrategy.CENTERED_MINIMAL.value}",
            reason="strategy has no algorithm yet",
        )
        return self._centered_minimal(data, f)
