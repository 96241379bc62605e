"""
utils/json_export.py — Serialises a presentation to a portable JSON document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from config import OUTPUT_DIR
from engine.pipeline_logger import PipelineLogger
from models import Presentation

_log = PipelineLogger("JSONExport")


def safe_filename(title: str, suffix: str, fallback: str = "presentation") -> str:
    """Build a filesystem-safe file name from a presentation title."""
    safe = "".join(c if c.isalnum() or c in " -_" else "" for c in title)
    stem = safe[:50].strip() or fallback
    return f"{stem}{suffix}"


def presentation_to_json(presentation: Presentation, indent: Optional[int] = 2) -> str:
    return presentation.model_dump_json(indent=indent)


def export_presentation_json(
    presentation: Presentation,
    output_dir: Path = OUTPUT_DIR,
    filename: Optional[str] = None,
) -> Path:
    """Write the presentation to ``output_dir`` and return the file path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / (filename or safe_filename(presentation.title, ".json"))
    output_path.write_text(presentation_to_json(presentation), encoding="utf-8")
    _log.info(f"Presentation JSON saved: {output_path}")
    return output_path
