"""
orchestrator.py — Pipeline controller.
Topic → design service → layout engine → slide assembler → Presentation.
"""

from __future__ import annotations

import uuid
from typing import Callable, List, Optional

from agents.design_director_agent import DesignDirectorAgent
from config import Settings, get_settings
from engine.layout_engine import LayoutEngine
from engine.pipeline_logger import PipelineLogger
from generators.slide_assembler import SlideAssembler
from models import (
    LayoutColors,
    LayoutFonts,
    LayoutInput,
    LayoutStrategy,
    PipelineState,
    Presentation,
    RawPresentationData,
    Slide,
)
from utils.image_urls import ImageUrlResolver


class PresentationOrchestrator:
    """Runs the generation pipeline for one topic at a time.

    State machine: idle → designing → laying_out → done (or error)

    ``on_status_change(status, step)`` is called on every transition so a UI
    can show progress.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        director: Optional[DesignDirectorAgent] = None,
        engine: Optional[LayoutEngine] = None,
        assembler: Optional[SlideAssembler] = None,
        image_resolver: Optional[ImageUrlResolver] = None,
        on_status_change: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._director = director or DesignDirectorAgent(settings=self._settings)
        self._engine = engine or LayoutEngine()
        self._assembler = assembler or SlideAssembler()
        self._images = image_resolver or ImageUrlResolver(self._settings)
        self._log = PipelineLogger("Orchestrator")
        self._on_status_change = on_status_change

        self.state = PipelineState()

    def _set_status(self, status: str, step: str = "") -> None:
        """Update pipeline status and notify UI."""
        self.state.status = status
        self.state.current_step = step
        self._log.info(f"Pipeline status: {status} | {step}")
        if self._on_status_change:
            self._on_status_change(status, step)

    def generate(self, topic: str) -> Presentation:
        """Design and lay out a complete presentation for ``topic``.

        Raises:
            ValueError: For a blank topic or malformed design-service output.
        """
        topic = topic.strip()
        if not topic:
            raise ValueError("Topic must not be empty")

        self.state = PipelineState(topic=topic)
        self._set_status("designing", "Requesting content and design choices")
        try:
            raw = self._director.design(topic)
            presentation = self.build_presentation(topic, raw)
        except Exception as e:
            self._set_status("error", f"Generation failed: {e}")
            self.state.errors.append(str(e))
            raise

        self._set_status("done", f"{len(presentation.slides)} slides ready")
        return presentation

    def build_presentation(self, topic: str, raw: RawPresentationData) -> Presentation:
        """Convert validated design-service output into positioned slides."""
        self._set_status("laying_out", f"Computing layout for {len(raw.raw_slides)} slides")

        colors = LayoutColors(text=raw.color_palette.text, accent=raw.color_palette.accent)
        fonts = LayoutFonts(
            heading=raw.typography.heading_font,
            body=raw.typography.body_font,
        )

        slides: List[Slide] = []
        for index, raw_slide in enumerate(raw.raw_slides):
            slide_log = self._log.bind(slide=index)
            strategy = LayoutStrategy.resolve(raw_slide.layout_preference)
            if strategy.value != raw_slide.layout_preference:
                slide_log.decision(f"preference '{raw_slide.layout_preference}' -> {strategy.value}")

            layout_input = LayoutInput(
                title=raw_slide.title,
                subtitle=raw_slide.subtitle or None,
                body_points=raw_slide.key_points,
                image_url=self._images.resolve(raw_slide.image_description, index, topic),
                layout_strategy=strategy,
                colors=colors,
                fonts=fonts,
            )
            with slide_log.timed(f"Layout '{raw_slide.title[:30]}'"):
                elements = self._engine.layout(layout_input)
                slides.append(
                    self._assembler.assemble(
                        elements,
                        palette=raw.color_palette,
                        strategy=strategy,
                        notes=raw_slide.notes,
                    )
                )

        return Presentation(
            id=uuid.uuid4().hex,
            title=raw.title,
            palette=raw.color_palette,
            typography=raw.typography,
            slides=slides,
        )
