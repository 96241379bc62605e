"""
Shared fixtures: deterministic ids, sample content and a stand-in LLM.
"""

import itertools
from typing import Any, Dict, List

import pytest

from config import Settings
from models import (
    LayoutColors,
    LayoutFonts,
    LayoutInput,
    LayoutStrategy,
    RawPresentationData,
)


class SequentialIds:
    """Id generator yielding prefix-1, prefix-2, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


class FakeLLM:
    """Records structured calls and answers with a canned payload."""

    def __init__(self, payload: Dict[str, Any]) -> None:
        self.payload = payload
        self.calls: List[Dict[str, Any]] = []

    def generate_structured(self, prompt, response_model, **kwargs):
        self.calls.append({"prompt": prompt, "response_model": response_model, **kwargs})
        return response_model.model_validate(self.payload)


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", _env_file=None)


@pytest.fixture
def colors():
    return LayoutColors(text="#fff", accent="#0af")


@pytest.fixture
def fonts():
    return LayoutFonts(heading="Playfair Display", body="Inter")


@pytest.fixture
def make_input(colors, fonts):
    def _make(**overrides) -> LayoutInput:
        values = {
            "title": "Q3 Review",
            "layout_strategy": LayoutStrategy.GOLDEN_RATIO,
            "colors": colors,
            "fonts": fonts,
        }
        values.update(overrides)
        return LayoutInput(**values)

    return _make


@pytest.fixture
def raw_payload() -> Dict[str, Any]:
    return {
        "title": "The Future of Urban Farming",
        "color_palette": {
            "background": "#0B132B",
            "primary": "#1C2541",
            "secondary": "#3A506B",
            "accent": "#5BC0BE",
            "text": "#FFFFFF",
        },
        "typography": {"heading_font": "Playfair Display", "body_font": "Inter"},
        "raw_slides": [
            {
                "title": "Cities That Feed Themselves",
                "subtitle": "A new harvest",
                "layout_preference": "GOLDEN_RATIO",
                "key_points": ["Vertical farms", "Rooftop gardens"],
                "image_description": "lush rooftop garden skyline",
                "notes": "Open with the skyline image.",
            },
            {
                "title": "Why Now",
                "layout_preference": "RULE_OF_THIRDS",
                "key_points": ["Cheaper LEDs", "Water scarcity", "Shorter supply chains"],
            },
            {
                "title": "What We Need",
                "layout_preference": "DIAGONAL_FLOW",
                "key_points": [],
            },
        ],
    }


@pytest.fixture
def raw_data(raw_payload) -> RawPresentationData:
    return RawPresentationData.model_validate(raw_payload)


@pytest.fixture
def fake_llm(raw_payload):
    return FakeLLM(raw_payload)
