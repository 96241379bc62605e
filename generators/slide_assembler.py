"""
generators/slide_assembler.py — Wraps laid-out elements into a Slide record.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from engine.pipeline_logger import PipelineLogger
from generators.elements import ElementFactory, IdGenerator, generate_id
from models import ColorPalette, LayoutStrategy, Slide, VisualElement


class SlideAssembler:
    """Prepends the background and attaches slide-level metadata."""

    def __init__(self, new_id: IdGenerator = generate_id) -> None:
        self._new_id = new_id
        self._factory = ElementFactory(new_id=new_id)
        self._log = PipelineLogger("SlideAssembler")

    def assemble(
        self,
        elements: Sequence[VisualElement],
        palette: ColorPalette,
        strategy: LayoutStrategy,
        notes: Optional[str] = None,
    ) -> Slide:
        background = self._factory.make_background(palette.background)
        slide_elements: List[VisualElement] = [background, *elements]
        slide = Slide(
            id=self._new_id(),
            layout_strategy=strategy,
            elements=slide_elements,
            background_color=palette.background,
            notes=notes,
        )
        self._log.debug(f"Assembled slide {slide.id} ({len(slide_elements)} elements)")
        return slide
