"""
Iberia Chronos – Streamlit app
==============================
Political map of the Iberian Peninsula for any year between 3000 BC and
2026 CE. Entities are generated on demand by a Bedrock text model and cached
in memory per year for the lifetime of the server process.

Run:
  pip install -e .
  streamlit run iberia_chronos/app.py
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import pandas as pd
import streamlit as st
from streamlit_folium import st_folium

from iberia_chronos import config
from iberia_chronos.history_service import HistoryService
from iberia_chronos.map_view import make_map, resolve_click_to_entity
from iberia_chronos.models import HistoricalEntity
from iberia_chronos.shell import HistoryShell


def _log_level(name: str) -> int:
    """Numeric level for a level name; INFO for anything unknown."""
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(level=_log_level(config.LOG_LEVEL))
logger = logging.getLogger(__name__)

MAP_HEIGHT = 620


# ─────────────────────────────────────────────────────────────────────────────
# SERVICE / SESSION
# ─────────────────────────────────────────────────────────────────────────────

@st.cache_resource
def get_history_service() -> HistoryService:
    """One service (and so one year cache) per server process."""
    return HistoryService()


def get_shell() -> HistoryShell:
    ss = st.session_state
    if "shell" not in ss:
        ss["shell"] = HistoryShell(get_history_service())
    return ss["shell"]


def _spinner_text(shell: HistoryShell) -> str:
    return "Updating Borders..." if shell.state.data is not None else "Generating Map..."


def run_load(shell: HistoryShell, year: int) -> None:
    """Drive one load to completion; the shell drops it if superseded."""
    with st.spinner(_spinner_text(shell)):
        asyncio.run(shell.load_history(year))


def run_submit(shell: HistoryShell, text: str) -> None:
    """Form submit: rejected input only sets the error, valid input loads."""
    with st.spinner(_spinner_text(shell)):
        asyncio.run(shell.submit(text))


# ─────────────────────────────────────────────────────────────────────────────
# STREAMLIT UI
# ─────────────────────────────────────────────────────────────────────────────

def render_header(shell: HistoryShell) -> str | None:
    """
    Title, year form and era stats.

    Returns the submitted year text, or None when the form was not submitted.
    """
    st.title("🏰 Iberia Chronos")
    st.caption("Instant explorer · results are cached for instant navigation between eras.")

    form_col, era_col, count_col = st.columns([2, 1, 1], gap="medium")
    submitted_text: str | None = None
    with form_col:
        with st.form("year_form", border=False):
            text = st.text_input(
                "Year",
                value=shell.state.input_value,
                placeholder="Year (e.g. 711 or 300 BC)",
                help="Plain number (negative = BC) or a number followed by BC / CE.",
            )
            if st.form_submit_button("🔎 Show map", use_container_width=True):
                submitted_text = text

    with era_col:
        st.metric("Selected era", shell.display_label)
    with count_col:
        st.metric("Entities", shell.entity_count)

    return submitted_text


def render_detail_panel(shell: HistoryShell) -> None:
    """Selected-entity card, or a hint when nothing is selected."""
    st.markdown("### 📜 Selected entity")
    entity = shell.state.selected_entity
    if entity is None:
        st.info("Click a territory on the map.")
        return

    st.markdown(
        f'<div style="height:6px; border-radius:3px; background:{entity.color};"></div>',
        unsafe_allow_html=True,
    )
    st.subheader(entity.name)
    st.write(entity.description)
    st.caption("Historical record")
    if st.button("✕ Close", use_container_width=True):
        shell.clear_selection()
        st.rerun()


def render_entity_table(entities: tuple[HistoricalEntity, ...]) -> None:
    if not entities:
        return
    rows: list[dict[str, Any]] = [
        {
            "Entity":      e.name,
            "Color":       e.color,
            "Points":      len(e.boundary_points),
            "Description": e.description,
        }
        for e in entities
    ]
    df = pd.DataFrame(rows)
    df.index += 1
    st.dataframe(df, use_container_width=True, hide_index=False)


def _click_signature(map_data: dict[str, Any] | None) -> str | None:
    """Identity of the last click, so a stale click is not re-applied on rerun."""
    if not map_data or not map_data.get("last_active_drawing"):
        return None
    props = (map_data["last_active_drawing"] or {}).get("properties") or {}
    return json.dumps(
        [props.get("_index"), props.get("name"), map_data.get("last_object_clicked")],
        sort_keys=True,
        default=str,
    )


def render_map(shell: HistoryShell) -> dict[str, Any] | None:
    """Map (left 3/4) | detail panel (right 1/4). Returns the st_folium output."""
    col_map, col_detail = st.columns([3, 1], gap="medium")

    with col_detail:
        render_detail_panel(shell)

    with col_map:
        selected = shell.state.selected_entity
        folium_map = make_map(
            shell.entities,
            selected_name=selected.name if selected else None,
        )
        # One component per load; a new load starts with no reported click.
        # Selection updates re-style the layer in place.
        map_key = f"history_map_{shell.request_id}"
        return st_folium(
            folium_map,
            key=map_key,
            use_container_width=True,
            height=MAP_HEIGHT,
            returned_objects=["last_active_drawing", "last_object_clicked"],
        )


# ─────────────────────────────────────────────────────────────────────────────
# MAIN
# ─────────────────────────────────────────────────────────────────────────────

def main() -> None:
    st.set_page_config(
        page_title="Iberia Chronos",
        page_icon="🏰",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    ss = st.session_state
    ss.setdefault("last_click", None)
    shell = get_shell()

    # ── First render: load the default year ──────────────────────────────────
    if shell.request_id == 0:
        run_load(shell, shell.state.year)

    submitted_text = render_header(shell)
    if submitted_text is not None:
        # last_click is kept: a click already handled must not reselect after the load
        run_submit(shell, submitted_text)
        st.rerun()

    if shell.state.error:
        st.error(shell.state.error)

    map_data = render_map(shell)

    st.divider()
    st.subheader("🗺️ Entities in this era")
    render_entity_table(shell.entities)
    st.caption("Boundaries and summaries are model-generated and approximate.")

    # ── Click handler: clicked feature → full entity record ──────────────────
    signature = _click_signature(map_data)
    if signature is not None and signature != ss["last_click"]:
        ss["last_click"] = signature
        entity = resolve_click_to_entity(map_data, shell.entities)
        if entity is not None and shell.state.selected_entity != entity:
            shell.select_entity(entity)
            st.rerun()


if __name__ == "__main__":
    main()
