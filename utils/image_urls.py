"""
utils/image_urls.py — Turns an image description into a concrete image reference.
Uses seeded placeholder URLs so a topic regenerates the same pictures.
"""

from __future__ import annotations

from typing import Optional

from config import Settings, get_settings


class ImageUrlResolver:
    """Maps (description, slide index, topic) to a placeholder image URL."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def resolve(self, description: Optional[str], index: int, topic: str) -> Optional[str]:
        """Return an image URL, or None when the slide asked for no image."""
        if not description or not description.strip():
            return None
        s = self._settings
        seed = index + len(topic)
        base = s.image_placeholder_base_url.rstrip("/")
        return f"{base}/seed/{seed}/{s.image_width}/{s.image_height}"
