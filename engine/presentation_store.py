"""
engine/presentation_store.py — Holds the presentation being edited and merges
geometry changes reported by the canvas editor.
"""

from __future__ import annotations

from typing import Dict, Optional

from config import MIN_ELEMENT_SIZE
from engine.pipeline_logger import PipelineLogger
from models import (
    ElementGeometryUpdate,
    ElementType,
    Presentation,
    Slide,
    VisualElement,
)


def geometry_delta(
    element: VisualElement,
    x: float,
    y: float,
    width: float,
    height: float,
    rotation: float,
) -> Optional[ElementGeometryUpdate]:
    """Update carrying only the values that differ from ``element``.

    An unset rotation stays unset while the submitted angle is 0.
    Returns None when nothing changed.
    """
    submitted = {"x": x, "y": y, "width": width, "height": height}
    changes = {k: v for k, v in submitted.items() if v != getattr(element, k)}
    if rotation != (element.rotation or 0.0):
        changes["rotation"] = rotation
    return ElementGeometryUpdate(**changes) if changes else None


class PresentationStore:
    """Single-writer store for an edited presentation.

    Updates replace the affected slide and element records instead of
    mutating them, so previously handed-out snapshots stay valid.
    """

    def __init__(self, presentation: Presentation) -> None:
        self._presentation = presentation
        self._log = PipelineLogger("PresentationStore")

    @property
    def presentation(self) -> Presentation:
        return self._presentation

    def get_slide(self, slide_id: str) -> Slide:
        for slide in self._presentation.slides:
            if slide.id == slide_id:
                return slide
        raise KeyError(f"Unknown slide: {slide_id}")

    def get_element(self, slide_id: str, element_id: str) -> VisualElement:
        for element in self.get_slide(slide_id).elements:
            if element.id == element_id:
                return element
        raise KeyError(f"Unknown element {element_id} on slide {slide_id}")

    def apply_geometry(
        self,
        slide_id: str,
        element_id: str,
        update: ElementGeometryUpdate,
    ) -> VisualElement:
        """Merge a drag/resize result into one element and return it.

        Only x, y, width, height and rotation change. Width and height are
        floored at MIN_ELEMENT_SIZE.

        Raises:
            KeyError: If the slide or element does not exist.
            ValueError: If the element is a background shape.
        """
        current = self.get_element(slide_id, element_id)
        if current.type == ElementType.SHAPE:
            raise ValueError(f"Element {element_id} is a background and cannot be moved")

        changes: Dict[str, Optional[float]] = update.model_dump(exclude_none=True)
        for key in ("width", "height"):
            if key in changes:
                changes[key] = max(float(MIN_ELEMENT_SIZE), changes[key])

        updated = current.model_copy(update=changes)

        slides = []
        for slide in self._presentation.slides:
            if slide.id == slide_id:
                elements = [updated if e.id == element_id else e for e in slide.elements]
                slide = slide.model_copy(update={"elements": elements})
            slides.append(slide)
        self._presentation = self._presentation.model_copy(update={"slides": slides})

        self._log.bind(slide=slide_id, element=element_id).debug(f"Geometry update: {changes}")
        return updated
