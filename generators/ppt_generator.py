"""
generators/ppt_generator.py — Exports positioned slides to PPTX using python-pptx.
Canvas units map to 96 per inch, so a 1280×720 canvas fills a 13.333×7.5 in slide.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple

from pptx import Presentation as PptxPresentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Emu, Inches, Pt

from config import CANVAS_WIDTH, OUTPUT_DIR, Settings, get_settings
from engine.pipeline_logger import PipelineLogger
from generators.elements import is_background, paint_order
from models import ElementType, Presentation, Slide, TextAlign, VisualElement
from utils.colors import hex_to_rgb
from utils.json_export import safe_filename

SLIDE_WIDTH = Inches(13.333)
SLIDE_HEIGHT = Inches(7.5)

EMU_PER_UNIT = SLIDE_WIDTH / CANVAS_WIDTH
POINTS_PER_UNIT = 0.75

_ALIGN = {
    TextAlign.LEFT: PP_ALIGN.LEFT,
    TextAlign.CENTER: PP_ALIGN.CENTER,
    TextAlign.RIGHT: PP_ALIGN.RIGHT,
}


def _rgb(value: str) -> RGBColor:
    return RGBColor(*hex_to_rgb(value))


def _emu(units: float) -> Emu:
    return Emu(int(round(units * EMU_PER_UNIT)))


class PPTXExporter:
    """Builds a PPTX deck from already laid-out slides.

    ``to_bytes`` remembers the last presentation it serialised, so asking
    again for an unchanged deck does not rebuild it.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._log = PipelineLogger("PPTXExporter")
        self._last: Optional[Tuple[Presentation, bytes]] = None

    def build(self, presentation: Presentation) -> PptxPresentation:
        self._log.action("Export PPTX", f"title={presentation.title[:50]}, slides={len(presentation.slides)}")

        prs = PptxPresentation()
        prs.slide_width = SLIDE_WIDTH
        prs.slide_height = SLIDE_HEIGHT
        layout = prs.slide_layouts[6]  # blank

        for slide in presentation.slides:
            with self._log.bind(slide=slide.id).timed("Render slide"):
                self._render_slide(prs.slides.add_slide(layout), slide)
        return prs

    def to_bytes(self, presentation: Presentation) -> bytes:
        if self._last is not None and self._last[0] == presentation:
            return self._last[1]
        buf = io.BytesIO()
        self.build(presentation).save(buf)
        self._last = (presentation, buf.getvalue())
        return self._last[1]

    def save(
        self,
        presentation: Presentation,
        output_filename: Optional[str] = None,
        output_dir: Path = OUTPUT_DIR,
    ) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / (output_filename or safe_filename(presentation.title, ".pptx"))
        self.build(presentation).save(str(output_path))
        self._log.info(f"Presentation saved: {output_path}")
        return output_path

    # ── Element Rendering ────────────────────────────────────

    def _render_slide(self, pptx_slide, slide: Slide) -> None:
        if slide.notes:
            pptx_slide.notes_slide.notes_text_frame.text = slide.notes

        for element in paint_order(slide.elements):
            if is_background(element):
                # Native slide background instead of a full-canvas rectangle.
                if element.fill:
                    pptx_slide.background.fill.solid()
                    pptx_slide.background.fill.fore_color.rgb = _rgb(element.fill)
            elif element.type == ElementType.SHAPE:
                self._add_shape(pptx_slide, element)
            elif element.type == ElementType.IMAGE:
                self._add_image_placeholder(pptx_slide, element)
            elif element.type == ElementType.TEXT:
                self._add_text(pptx_slide, element)

    def _add_shape(self, pptx_slide, element: VisualElement) -> None:
        shape = pptx_slide.shapes.add_shape(
            MSO_SHAPE.RECTANGLE,
            _emu(element.x), _emu(element.y),
            _emu(element.width), _emu(element.height),
        )
        if element.fill:
            shape.fill.solid()
            shape.fill.fore_color.rgb = _rgb(element.fill)
        else:
            shape.fill.background()
        shape.line.fill.background()
        self._apply_rotation(shape, element)

    def _add_image_placeholder(self, pptx_slide, element: VisualElement) -> None:
        """Images are referenced by URL only; draw a labelled frame in their place."""
        frame = pptx_slide.shapes.add_shape(
            MSO_SHAPE.RECTANGLE,
            _emu(element.x), _emu(element.y),
            _emu(element.width), _emu(element.height),
        )
        frame.fill.solid()
        frame.fill.fore_color.rgb = _rgb(self._settings.placeholder_hex)
        frame.line.fill.background()

        tf = frame.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = MSO_ANCHOR.MIDDLE
        p = tf.paragraphs[0]
        p.text = element.content
        p.alignment = PP_ALIGN.CENTER
        p.font.size = Pt(10)
        p.font.color.rgb = RGBColor(0x52, 0x52, 0x5B)
        self._apply_rotation(frame, element)

    def _add_text(self, pptx_slide, element: VisualElement) -> None:
        box = pptx_slide.shapes.add_textbox(
            _emu(element.x), _emu(element.y),
            _emu(element.width), _emu(element.height),
        )
        tf = box.text_frame
        tf.word_wrap = True
        tf.margin_left = tf.margin_right = tf.margin_top = tf.margin_bottom = 0

        p = tf.paragraphs[0]
        run = p.add_run()
        run.text = element.content
        style = element.style
        if style is not None:
            p.alignment = _ALIGN[style.text_align]
            p.line_spacing = style.line_height
            font = run.font
            font.name = style.font_family
            font.size = Pt(style.font_size * POINTS_PER_UNIT)
            font.bold = style.font_weight >= 700
            font.color.rgb = _rgb(style.color)
        self._apply_rotation(box, element)

    @staticmethod
    def _apply_rotation(shape, element: VisualElement) -> None:
        if element.rotation:
            shape.rotation = element.rotation
