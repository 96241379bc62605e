"""
config.py — Central configuration for Lumina.
Canvas geometry constants plus settings loaded from environment variables / .env file.
"""

from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field

# ── Canvas Geometry ───────────────────────────────────────────
# Every element coordinate is expressed in these units (16:9).
CANVAS_WIDTH = 1280
CANVAS_HEIGHT = 720
PADDING = 60
PHI = 1.61803398875
MIN_ELEMENT_SIZE = 5


# ── Project Paths ──────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent
DATA_DIR = ROOT_DIR / "data"
OUTPUT_DIR = DATA_DIR / "output"
LOG_DIR = DATA_DIR / "logs"

# Ensure data subdirectories exist at import time
for _dir in (OUTPUT_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


# ── Application Settings ──────────────────────────────────────
class Settings(BaseSettings):
    """Typed application settings — loaded from env vars / .env file."""

    # --- Gemini API ---
    gemini_api_key: str = Field(
        ..., description="Google Gemini API key"
    )
    gemini_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used for presentation design",
    )

    # --- LLM Behaviour ---
    llm_temperature: float = Field(
        default=0.7, ge=0.0, le=2.0,
        description="Sampling temperature for design generation",
    )
    llm_max_output_tokens: int = Field(
        default=8192, ge=256,
        description="Default max output tokens per LLM call",
    )
    llm_max_attempts: int = Field(
        default=3, ge=1,
        description="Attempts per design request when Gemini is unavailable or rate limited",
    )

    # --- Deck Shape ---
    min_slides: int = Field(default=4, ge=1)
    max_slides: int = Field(default=6, ge=1)

    # --- Image Placeholders ---
    image_placeholder_base_url: str = Field(
        default="https://picsum.photos",
        description="Base URL for seeded placeholder images",
    )
    image_width: int = Field(default=800, ge=1)
    image_height: int = Field(default=600, ge=1)

    # --- Rendering ---
    preview_dpi: int = Field(default=96, ge=24, description="Matplotlib preview DPI")
    placeholder_hex: str = Field(
        default="#D4D4D8",
        description="Fill colour for image placeholders in previews and exported decks",
    )

    model_config = {
        "env_file": str(ROOT_DIR / ".env"),
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def get_settings() -> Settings:
    """Factory that loads and returns validated settings."""
    return Settings()  # type: ignore[call-arg]
