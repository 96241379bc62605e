"""
app.py — Streamlit interface for Lumina.
Topic in, generated deck out; element geometry can then be adjusted slide by slide.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from engine.presentation_store import PresentationStore, geometry_delta
from generators.ppt_generator import PPTXExporter
from generators.slide_previewer import SlidePreviewRenderer
from models import ElementType, Slide, VisualElement
from orchestrator import PresentationOrchestrator
from utils.json_export import presentation_to_json, safe_filename

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# ── Page Config ─────────────────────────────────────────────
st.set_page_config(
    page_title="Lumina",
    page_icon="✨",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ── Session State ───────────────────────────────────────────
def init_session_state() -> None:
    defaults = {
        "phase": "idle",
        "orchestrator": None,
        "store": None,
        "exporter": None,
        "slide_idx": 0,
        "error_message": None,
        "status_log": [],
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def get_orchestrator() -> PresentationOrchestrator:
    """Get or create the pipeline orchestrator."""
    if st.session_state.orchestrator is None:

        def on_status(status: str, step: str) -> None:
            st.session_state.status_log.append(f"[{status}] {step}")

        st.session_state.orchestrator = PresentationOrchestrator(
            on_status_change=on_status,
        )
    return st.session_state.orchestrator


@st.cache_resource
def get_previewer() -> SlidePreviewRenderer:
    return SlidePreviewRenderer()


def get_exporter() -> PPTXExporter:
    """Per-session exporter; it reuses the last deck's bytes until an edit."""
    if st.session_state.exporter is None:
        st.session_state.exporter = PPTXExporter()
    return st.session_state.exporter


def _element_label(element: VisualElement) -> str:
    if element.type == ElementType.IMAGE:
        return f"Image · {element.id}"
    text = element.content if len(element.content) <= 40 else element.content[:37] + "..."
    return f"Text · {text}"


# ── Phases ──────────────────────────────────────────────────
def phase_idle() -> None:
    st.title("Lumina")
    st.caption("Generative presentation design engine.")

    with st.form("topic_form"):
        topic = st.text_input(
            "Topic",
            placeholder="What do you want to present about?",
        )
        submitted = st.form_submit_button("Generate", use_container_width=True)

    if st.session_state.error_message:
        st.error(st.session_state.error_message)

    st.caption("Golden Ratio · Rule of Thirds · Centered Minimal")

    if submitted and topic.strip():
        st.session_state.error_message = None
        with st.spinner("Designing structure... calculating layout coordinates & typographic hierarchy"):
            try:
                presentation = get_orchestrator().generate(topic)
            except Exception:
                st.session_state.error_message = (
                    "Failed to generate presentation. Please check your API key and try again."
                )
                st.rerun()
        st.session_state.store = PresentationStore(presentation)
        st.session_state.slide_idx = 0
        st.session_state.phase = "editor"
        st.rerun()


def render_sidebar(store: PresentationStore) -> None:
    presentation = store.presentation
    with st.sidebar:
        if st.button("← New topic", use_container_width=True):
            st.session_state.store = None
            st.session_state.phase = "idle"
            st.rerun()

        st.subheader(presentation.title)
        st.caption(
            f"{presentation.typography.heading_font} + {presentation.typography.body_font}"
        )
        labels = [f"Slide {i + 1}" for i in range(len(presentation.slides))]
        st.session_state.slide_idx = st.radio(
            "Slides",
            options=list(range(len(labels))),
            format_func=lambda i: labels[i],
            index=min(st.session_state.slide_idx, len(labels) - 1),
        )

        st.markdown("---")
        st.download_button(
            "Export JSON",
            data=presentation_to_json(presentation),
            file_name=safe_filename(presentation.title, ".json"),
            mime="application/json",
            use_container_width=True,
        )
        st.download_button(
            "Export PPTX",
            data=get_exporter().to_bytes(presentation),
            file_name=safe_filename(presentation.title, ".pptx"),
            mime=PPTX_MIME,
            use_container_width=True,
        )

        if st.session_state.status_log:
            with st.expander("Activity Log", expanded=False):
                for entry in st.session_state.status_log[-10:]:
                    st.text(entry)


def render_geometry_form(store: PresentationStore, slide: Slide) -> None:
    editable = [e for e in slide.elements if e.type != ElementType.SHAPE]
    if not editable:
        return

    element_id = st.selectbox(
        "Element",
        options=[e.id for e in editable],
        format_func=lambda eid: _element_label(store.get_element(slide.id, eid)),
    )
    element = store.get_element(slide.id, element_id)

    with st.form(f"geometry_{slide.id}_{element.id}"):
        c1, c2 = st.columns(2)
        x = c1.number_input("x", value=float(element.x), step=5.0)
        y = c2.number_input("y", value=float(element.y), step=5.0)
        width = c1.number_input("width", value=float(element.width), step=5.0)
        height = c2.number_input("height", value=float(element.height), step=5.0)
        rotation = st.number_input("rotation", value=float(element.rotation or 0.0), step=1.0)
        if st.form_submit_button("Apply", use_container_width=True):
            update = geometry_delta(element, x, y, width, height, rotation)
            if update is not None:
                store.apply_geometry(slide.id, element.id, update)
                st.rerun()


def phase_editor() -> None:
    store: Optional[PresentationStore] = st.session_state.store
    if store is None:
        st.session_state.phase = "idle"
        st.rerun()

    render_sidebar(store)
    slide = store.presentation.slides[st.session_state.slide_idx]

    col_canvas, col_panel = st.columns([3, 1])
    with col_canvas:
        st.image(get_previewer().render_slide(slide), use_container_width=True)
    with col_panel:
        st.markdown("**Layout Algorithm**")
        st.code(slide.layout_strategy.value, language=None)
        st.caption(
            "Elements are positioned using a generative coordinate system "
            "based on visual weight and the golden mean."
        )
        st.text_area("Slide Notes", value=slide.notes or "", disabled=True, height=140)
        st.markdown("---")
        render_geometry_form(store, slide)


# ── Main App ────────────────────────────────────────────────
def main() -> None:
    """Main application entry point."""
    init_session_state()

    phases = {
        "idle": phase_idle,
        "editor": phase_editor,
    }
    handler = phases.get(st.session_state.phase, phase_idle)
    handler()


if __name__ == "__main__":
    main()
