"""
Tests for JSON export, PPTX export and PNG previews.
"""

import io

import pytest
from pptx import Presentation as load_pptx
from pptx.dml.color import RGBColor
from pptx.util import Pt

from engine.layout_engine import LayoutEngine
from engine.presentation_store import PresentationStore
from generators.elements import is_background
from generators.ppt_generator import SLIDE_HEIGHT, SLIDE_WIDTH, PPTXExporter
from generators.slide_assembler import SlideAssembler
from generators.slide_previewer import SlidePreviewRenderer
from models import ElementGeometryUpdate, ElementType, Presentation
from orchestrator import PresentationOrchestrator
from utils.json_export import export_presentation_json, presentation_to_json, safe_filename

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def presentation(settings, raw_data, ids):
    orchestrator = PresentationOrchestrator(
        settings=settings,
        director=object(),
        engine=LayoutEngine(new_id=ids),
        assembler=SlideAssembler(new_id=ids),
    )
    return orchestrator.build_presentation("urban farming", raw_data)


class TestJSONExport:
    def test_round_trip(self, presentation):
        restored = Presentation.model_validate_json(presentation_to_json(presentation))
        assert restored == presentation

    def test_plain_values(self, presentation):
        text = presentation_to_json(presentation)
        assert '"layout_strategy": "GOLDEN_RATIO"' in text
        assert '"type": "SHAPE"' in text

    def test_written_to_output_dir(self, presentation, tmp_path):
        path = export_presentation_json(presentation, output_dir=tmp_path)
        assert path == tmp_path / "The Future of Urban Farming.json"
        assert Presentation.model_validate_json(path.read_text(encoding="utf-8")) == presentation

    @pytest.mark.parametrize(
        "title, expected",
        [("Q3: Review!", "Q3 Review.json"), ("???", "presentation.json")],
    )
    def test_safe_filename(self, title, expected):
        assert safe_filename(title, ".json") == expected


class TestPPTXExport:
    def _load(self, settings, presentation):
        return load_pptx(io.BytesIO(PPTXExporter(settings).to_bytes(presentation)))

    def test_one_pptx_slide_per_slide(self, settings, presentation):
        prs = self._load(settings, presentation)
        assert len(prs.slides) == len(presentation.slides)
        assert prs.slide_width == SLIDE_WIDTH
        assert prs.slide_height == SLIDE_HEIGHT

    def test_every_content_element_becomes_a_shape(self, settings, presentation):
        prs = self._load(settings, presentation)
        for pptx_slide, slide in zip(prs.slides, presentation.slides):
            content = [e for e in slide.elements if not is_background(e)]
            assert len(pptx_slide.shapes) == len(content)

    def test_background_element_fills_slide_once(self, settings, presentation):
        prs = self._load(settings, presentation)
        pptx_slide = prs.slides[0]

        assert pptx_slide.background.fill.fore_color.rgb == RGBColor.from_string("0B132B")
        full_canvas = [
            s for s in pptx_slide.shapes
            if abs(s.width - SLIDE_WIDTH) < 1000 and abs(s.height - SLIDE_HEIGHT) < 1000
        ]
        assert full_canvas == []

    def test_unchanged_deck_not_rebuilt(self, settings, presentation, monkeypatch):
        exporter = PPTXExporter(settings)
        builds = []
        original_build = exporter.build

        def counting_build(deck):
            builds.append(deck)
            return original_build(deck)

        monkeypatch.setattr(exporter, "build", counting_build)
        first = exporter.to_bytes(presentation)
        second = exporter.to_bytes(presentation.model_copy(deep=True))

        assert first == second
        assert len(builds) == 1

    def test_edited_deck_rebuilt(self, settings, presentation, monkeypatch):
        exporter = PPTXExporter(settings)
        builds = []
        original_build = exporter.build
        monkeypatch.setattr(exporter, "build", lambda deck: builds.append(deck) or original_build(deck))

        exporter.to_bytes(presentation)
        store = PresentationStore(presentation)
        slide = presentation.slides[0]
        text = next(e for e in slide.elements if e.type == ElementType.TEXT)
        store.apply_geometry(slide.id, text.id, ElementGeometryUpdate(y=400))
        exporter.to_bytes(store.presentation)

        assert len(builds) == 2
        assert builds[1] == store.presentation

    def test_text_styling(self, settings, presentation):
        prs = self._load(settings, presentation)
        texts = [s for s in prs.slides[0].shapes if s.has_text_frame and s.text_frame.text]
        title = next(s for s in texts if s.text_frame.text == "Cities That Feed Themselves")
        run = title.text_frame.paragraphs[0].runs[0]

        assert run.font.size == Pt(48 * 0.75)
        assert run.font.bold is True
        assert run.font.name == "Playfair Display"

    def test_image_placeholder_carries_url(self, settings, presentation):
        prs = self._load(settings, presentation)
        image_url = next(
            e.content for e in presentation.slides[0].elements if e.type == ElementType.IMAGE
        )
        assert any(s.has_text_frame and s.text_frame.text == image_url for s in prs.slides[0].shapes)

    def test_notes_exported(self, settings, presentation):
        prs = self._load(settings, presentation)
        assert prs.slides[0].notes_slide.notes_text_frame.text == "Open with the skyline image."

    def test_edited_geometry_is_exported(self, settings, presentation):
        store = PresentationStore(presentation)
        slide = presentation.slides[0]
        title = next(e for e in slide.elements if e.content == "Cities That Feed Themselves")
        store.apply_geometry(slide.id, title.id, ElementGeometryUpdate(x=-48, rotation=15))

        prs = self._load(settings, store.presentation)
        shape = next(s for s in prs.slides[0].shapes
                     if s.has_text_frame and s.text_frame.text == title.content)
        assert shape.rotation == pytest.approx(15)
        assert shape.left < 0

    def test_save_to_disk(self, settings, presentation, tmp_path):
        path = PPTXExporter(settings).save(presentation, output_dir=tmp_path)
        assert path.name == "The Future of Urban Farming.pptx"
        assert path.stat().st_size > 0


class TestSlidePreview:
    def test_render_slide_png(self, settings, presentation):
        png = SlidePreviewRenderer(settings).render_slide(presentation.slides[0])
        assert png.startswith(PNG_SIGNATURE)

    def test_render_all(self, settings, presentation):
        images = SlidePreviewRenderer(settings).render_all(presentation.slides)
        assert len(images) == len(presentation.slides)
        assert all(img.startswith(PNG_SIGNATURE) for img in images)
