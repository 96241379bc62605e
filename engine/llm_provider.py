"""
engine/llm_provider.py — Gemini client for the design service.
Sends a prompt in JSON mode with a response schema derived from a pydantic
model, retries transient outages with tenacity, and validates the reply
against the same model.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Type, TypeVar

from google import genai
from google.genai import errors, types
from pydantic import BaseModel, ValidationError
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from config import Settings, get_settings
from engine.pipeline_logger import PipelineLogger

ModelT = TypeVar("ModelT", bound=BaseModel)

# JSON-schema keywords pydantic emits that Gemini's response_schema rejects.
_UNSUPPORTED_KEYS = frozenset({"additionalProperties", "title", "default"})

RATE_LIMITED = 429


def gemini_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """The model's JSON schema reshaped for Gemini's response_schema.

    Nested models (``ColorPalette`` inside ``RawPresentationData``, each
    ``RawSlideData`` in ``raw_slides``) are inlined in place of their
    ``$ref``; ``Optional[X]`` fields become ``X`` marked nullable, keeping
    their description.
    """
    full = model.model_json_schema()
    defs = full.pop("$defs", {})

    def reshape(node: Dict[str, Any]) -> Dict[str, Any]:
        if "$ref" in node:
            return reshape(defs[node["$ref"].rsplit("/", 1)[-1]])

        variants = [v for v in node.get("anyOf", ()) if v.get("type") != "null"]
        if len(variants) == 1:
            nullable = {**reshape(variants[0]), "nullable": True}
            if "description" in node:
                nullable["description"] = node["description"]
            return nullable

        out: Dict[str, Any] = {}
        for key, value in node.items():
            if key in _UNSUPPORTED_KEYS:
                continue
            if key == "properties":
                value = {name: reshape(sub) for name, sub in value.items()}
            elif key == "items":
                value = reshape(value)
            out[key] = value
        return out

    return reshape(full)


def is_transient(exc: BaseException) -> bool:
    """Server-side failures, rate limiting and dropped connections are retried."""
    if isinstance(exc, errors.ServerError):
        return True
    if isinstance(exc, errors.ClientError):
        return exc.code == RATE_LIMITED
    return isinstance(exc, (ConnectionError, TimeoutError))


class LLMProvider:
    """Gemini client returning validated pydantic models."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._log = PipelineLogger("LLMProvider")
        self._client = genai.Client(api_key=self._settings.gemini_api_key)
        self._retrying = Retrying(
            retry=retry_if_exception(is_transient),
            stop=stop_after_attempt(self._settings.llm_max_attempts),
            wait=wait_exponential(multiplier=2, min=2, max=30),
            before_sleep=self._log_retry,
            reraise=True,
        )

    def generate_structured(
        self,
        prompt: str,
        response_model: Type[ModelT],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        system_instruction: Optional[str] = None,
    ) -> ModelT:
        """Ask Gemini for a JSON reply shaped like ``response_model``.

        Raises:
            ValueError: If the reply is empty, not JSON, or fails validation.
        """
        model_name = model or self._settings.gemini_model
        config = self._request_config(
            response_model,
            temperature=self._settings.llm_temperature if temperature is None else temperature,
            system_instruction=system_instruction,
        )
        log = self._log.bind(model=model_name, schema=response_model.__name__)
        log.action("Structured call", f"{len(prompt)} prompt chars")

        raw_text = self._call_api(model_name, prompt, config).text
        if not raw_text:
            log.error("Empty reply")
            raise ValueError(f"LLM returned no content for {response_model.__name__}")

        try:
            return response_model.model_validate(json.loads(raw_text))
        except (json.JSONDecodeError, ValidationError) as e:
            log.error(f"Reply rejected: {e}")
            raise ValueError(
                f"LLM returned invalid JSON for {response_model.__name__}: {e}"
            ) from e

    def _request_config(
        self,
        response_model: Type[BaseModel],
        temperature: float,
        system_instruction: Optional[str] = None,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=self._settings.llm_max_output_tokens,
            system_instruction=system_instruction or None,
            response_mime_type="application/json",
            response_schema=gemini_schema(response_model),
        )

    def _call_api(
        self,
        model_name: str,
        prompt: str,
        config: types.GenerateContentConfig,
    ) -> Any:
        return self._retrying(
            self._client.models.generate_content,
            model=model_name,
            contents=prompt,
            config=config,
        )

    def _log_retry(self, state: Any) -> None:
        self._log.info(
            f"Gemini attempt {state.attempt_number} failed "
            f"({state.outcome.exception()}); retrying"
        )
