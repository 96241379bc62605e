"""
agents/design_director_agent.py — Asks Gemini for slide content and design choices.
Returns abstract content only; all coordinates are computed by the layout engine.
"""

from __future__ import annotations

from typing import Optional

from config import Settings, get_settings
from engine.llm_provider import LLMProvider
from engine.pipeline_logger import PipelineLogger
from models import LayoutStrategy, RawPresentationData
from prompts.design_prompts import DESIGN_DIRECTOR_PROMPT, DESIGN_DIRECTOR_SYSTEM

# Strategies offered to the model; the others have no algorithm yet.
PROMPTED_STRATEGIES = (
    LayoutStrategy.GOLDEN_RATIO,
    LayoutStrategy.RULE_OF_THIRDS,
    LayoutStrategy.CENTERED_MINIMAL,
)


class DesignDirectorAgent:
    """Generates palette, typography and per-slide content for a topic."""

    def __init__(
        self,
        llm: Optional[LLMProvider] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._llm = llm or LLMProvider(self._settings)
        self._log = PipelineLogger("DesignDirector")

    def design(self, topic: str) -> RawPresentationData:
        """Produce validated raw presentation data for ``topic``.

        Raises:
            ValueError: If the topic is blank or the model output is malformed.
        """
        topic = topic.strip()
        if not topic:
            raise ValueError("Topic must not be empty")

        self._log.action("Design Presentation", f"topic={topic[:60]}")

        prompt = DESIGN_DIRECTOR_PROMPT.format(
            topic=topic,
            min_slides=self._settings.min_slides,
            max_slides=self._settings.max_slides,
            strategies=", ".join(s.value for s in PROMPTED_STRATEGIES),
        )
        data = self._llm.generate_structured(
            prompt=prompt,
            response_model=RawPresentationData,
            system_instruction=DESIGN_DIRECTOR_SYSTEM,
        )

        if not data.raw_slides:
            raise ValueError("Design service returned no slides")

        self._log.info(
            f"Design ready: '{data.title}' with {len(data.raw_slides)} slides, "
            f"fonts {data.typography.heading_font}/{data.typography.body_font}"
        )
        return data
