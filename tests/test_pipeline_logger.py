"""
Tests for component-scoped logging and bound slide/element context.
"""

import pytest
from loguru import logger

from engine.layout_engine import LayoutEngine
from engine.pipeline_logger import PipelineLogger
from engine.presentation_store import PresentationStore
from generators.slide_assembler import SlideAssembler
from models import ElementGeometryUpdate, ElementType, LayoutStrategy
from orchestrator import PresentationOrchestrator


@pytest.fixture
def records():
    PipelineLogger("tests")  # installs the project sinks before capturing
    captured = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


def test_component_and_scope_attached(records):
    PipelineLogger("Exporter").bind(slide="s-1").info("rendered")

    record = records[-1]
    assert record["message"] == "rendered"
    assert record["extra"]["component"] == "Exporter"
    assert record["extra"]["scope"] == {"slide": "s-1"}


def test_bind_merges_without_touching_parent(records):
    parent = PipelineLogger("Store", slide="s-1")
    child = parent.bind(element="e-7")
    parent.debug("parent")
    child.debug("child")

    assert records[-2]["extra"]["scope"] == {"slide": "s-1"}
    assert records[-1]["extra"]["scope"] == {"slide": "s-1", "element": "e-7"}


def test_decision_format(records):
    PipelineLogger("Engine").decision("fall back", reason="no algorithm")
    assert records[-1]["message"] == "DECISION: fall back | Reason: no algorithm"


def test_timed_logs_failure_and_reraises(records):
    log = PipelineLogger("Orchestrator")
    with pytest.raises(RuntimeError):
        with log.timed("Layout"):
            raise RuntimeError("boom")

    assert records[-1]["level"].name == "ERROR"
    assert records[-1]["message"].startswith("Layout failed after")


def test_store_logs_slide_and_element(records, settings, raw_data, ids):
    orchestrator = PresentationOrchestrator(
        settings=settings,
        director=object(),
        engine=LayoutEngine(new_id=ids),
        assembler=SlideAssembler(new_id=ids),
    )
    store = PresentationStore(orchestrator.build_presentation("urban farming", raw_data))
    slide = store.presentation.slides[0]
    text = next(e for e in slide.elements if e.type == ElementType.TEXT)

    store.apply_geometry(slide.id, text.id, ElementGeometryUpdate(x=10))

    record = records[-1]
    assert record["extra"]["component"] == "PresentationStore"
    assert record["extra"]["scope"] == {"slide": slide.id, "element": text.id}


def test_fallback_logged_with_strategy(records, make_input):
    LayoutEngine().layout(make_input(layout_strategy=LayoutStrategy.GRID_SYSTEM))

    decisions = [r for r in records if r["message"].startswith("DECISION")]
    assert decisions[-1]["extra"]["scope"] == {"strategy": "GRID_SYSTEM"}
