"""
Tests for LLMProvider schema handling, retries and structured parsing (no network).
"""

import json
from types import SimpleNamespace

import pytest
from tenacity import wait_none

from engine.llm_provider import LLMProvider, gemini_schema, is_transient
from models import RawPresentationData


@pytest.fixture
def provider(settings):
    return LLMProvider(settings)


def _reply(provider, text):
    provider._call_api = lambda model_name, prompt, config: SimpleNamespace(text=text)


def _fake_client(provider, generate_content):
    provider._client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    provider._retrying = provider._retrying.copy(wait=wait_none())


class TestGeminiSchema:
    def test_nested_models_inlined(self):
        schema = gemini_schema(RawPresentationData)

        assert "$defs" not in schema
        assert "title" not in schema
        palette = schema["properties"]["color_palette"]
        assert "$ref" not in palette
        assert set(palette["properties"]) == {"background", "primary", "secondary", "accent", "text"}
        assert "$ref" not in schema["properties"]["raw_slides"]["items"]

    def test_optional_fields_become_nullable(self):
        slide = gemini_schema(RawPresentationData)["properties"]["raw_slides"]["items"]

        assert slide["properties"]["subtitle"]["type"] == "string"
        assert slide["properties"]["subtitle"]["nullable"] is True
        assert "default" not in slide["properties"]["key_points"]

    def test_optional_field_keeps_description(self):
        slide = gemini_schema(RawPresentationData)["properties"]["raw_slides"]["items"]
        image = slide["properties"]["image_description"]

        assert image["nullable"] is True
        assert "keywords" in image["description"]


class TestGenerateStructured:
    def test_valid_reply(self, provider, raw_payload):
        _reply(provider, json.dumps(raw_payload))
        data = provider.generate_structured("prompt", RawPresentationData)
        assert data.raw_slides[0].layout_preference == "GOLDEN_RATIO"

    def test_invalid_json(self, provider):
        _reply(provider, "{not json")
        with pytest.raises(ValueError, match="RawPresentationData"):
            provider.generate_structured("prompt", RawPresentationData)

    def test_schema_violation(self, provider, raw_payload):
        raw_payload["color_palette"]["text"] = "white"
        _reply(provider, json.dumps(raw_payload))
        with pytest.raises(ValueError):
            provider.generate_structured("prompt", RawPresentationData)

    def test_empty_reply(self, provider):
        _reply(provider, None)
        with pytest.raises(ValueError, match="no content"):
            provider.generate_structured("prompt", RawPresentationData)

    def test_config_requests_json(self, provider):
        config = provider._request_config(
            RawPresentationData, temperature=0.5, system_instruction="be brief"
        )
        assert config.response_mime_type == "application/json"
        assert config.temperature == 0.5
        assert config.system_instruction == "be brief"
        assert config.max_output_tokens == 8192


class TestRetries:
    def test_transient_failure_is_retried(self, provider, raw_payload):
        calls = []

        def generate_content(**kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                raise ConnectionError("reset by peer")
            return SimpleNamespace(text=json.dumps(raw_payload))

        _fake_client(provider, generate_content)
        data = provider.generate_structured("prompt", RawPresentationData)

        assert data.title == "The Future of Urban Farming"
        assert len(calls) == 2
        assert calls[0]["contents"] == "prompt"

    def test_gives_up_after_configured_attempts(self, provider):
        calls = []

        def generate_content(**kwargs):
            calls.append(kwargs)
            raise TimeoutError("slow")

        _fake_client(provider, generate_content)
        with pytest.raises(TimeoutError):
            provider.generate_structured("prompt", RawPresentationData)
        assert len(calls) == 3

    def test_permanent_failure_is_not_retried(self, provider):
        calls = []

        def generate_content(**kwargs):
            calls.append(kwargs)
            raise RuntimeError("bad request")

        _fake_client(provider, generate_content)
        with pytest.raises(RuntimeError):
            provider.generate_structured("prompt", RawPresentationData)
        assert len(calls) == 1

    @pytest.mark.parametrize(
        "exc, expected",
        [(ConnectionError(), True), (TimeoutError(), True), (ValueError(), False)],
    )
    def test_is_transient(self, exc, expected):
        assert is_transient(exc) is expected
