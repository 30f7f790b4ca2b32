import logging

import pytest
from streamlit.testing.v1 import AppTest

import page_fakes
from iberia_chronos.app import _click_signature, _log_level, _spinner_text
from iberia_chronos.shell import HistoryShell


def _page():
    import page_fakes
    from iberia_chronos import app

    app.get_history_service = page_fakes.get_history_service
    app.st_folium = page_fakes.fake_st_folium
    app.main()


@pytest.fixture
def at():
    page_fakes.reset()
    app_test = AppTest.from_function(_page, default_timeout=15)
    app_test.run()
    assert not app_test.exception
    return app_test


def shell_of(app_test):
    return app_test.session_state["shell"]


def submit(app_test, text):
    app_test.text_input[0].input(text)
    next(b for b in app_test.button if b.label == "🔎 Show map").click()
    app_test.run()
    assert not app_test.exception


def close_panel(app_test):
    next(b for b in app_test.button if b.label == "✕ Close").click()
    app_test.run()
    assert not app_test.exception


def test_no_click_has_no_signature():
    assert _click_signature(None) is None
    assert _click_signature({"last_active_drawing": None, "last_object_clicked": None}) is None


def test_signature_changes_with_click_position():
    drawing = {"properties": {"name": "Al-Andalus", "_index": 0}}
    first = _click_signature({"last_active_drawing": drawing, "last_object_clicked": {"lat": 37.0, "lng": -4.0}})
    again = _click_signature({"last_active_drawing": drawing, "last_object_clicked": {"lat": 37.0, "lng": -4.0}})
    moved = _click_signature({"last_active_drawing": drawing, "last_object_clicked": {"lat": 38.0, "lng": -4.5}})
    assert first == again
    assert first != moved


def test_log_level_ignores_non_level_names():
    assert _log_level("DEBUG") == logging.DEBUG
    assert _log_level("WARNING") == logging.WARNING
    assert _log_level("BASIC_FORMAT") == logging.INFO
    assert _log_level("nonsense") == logging.INFO


def test_first_render_loads_default_year(at):
    shell = shell_of(at)
    assert page_fakes.SOURCE.years == [2024]
    assert shell.state.data.year == 2024
    assert shell.state.loading is False
    assert [m.value for m in at.metric] == ["2024 CE", "2"]
    assert not at.error


def test_invalid_year_shows_error_without_loading(at):
    submit(at, "2027")

    shell = shell_of(at)
    assert at.error[0].value == "Valid range: 3000 BC to 2026 CE"
    assert page_fakes.SOURCE.years == [2024]
    assert shell.state.year == 2024
    assert shell.state.data.year == 2024


def test_valid_year_loads_and_updates_stats(at):
    submit(at, "711 CE")

    assert page_fakes.SOURCE.years == [2024, 711]
    assert shell_of(at).state.data.label == "711 CE"
    assert at.metric[0].value == "711 CE"
    assert page_fakes.MAP["keys"][-1] == f"history_map_{shell_of(at).request_id}"


def test_click_opens_panel_and_close_clears_it(at):
    page_fakes.click(0)
    at.run()
    shell = shell_of(at)
    assert shell.state.selected_entity.name == "Spain"
    assert "Spain" in [s.value for s in at.subheader]

    close_panel(at)
    assert shell.state.selected_entity is None

    # the map still reports the old click; it must not reopen the panel
    at.run()
    assert shell.state.selected_entity is None


def test_second_click_replaces_selection(at):
    page_fakes.click(0)
    at.run()
    page_fakes.click(1, lat=41.0, lng=-8.0)
    at.run()
    assert shell_of(at).state.selected_entity.name == "Portugal"


def test_resubmitting_same_year_clears_selection(at):
    page_fakes.click(0)
    at.run()
    assert shell_of(at).state.selected_entity is not None

    submit(at, "2024")

    shell = shell_of(at)
    assert shell.request_id == 2
    assert shell.state.selected_entity is None
    at.run()
    assert shell.state.selected_entity is None


def test_spinner_text_depends_on_data_on_screen():
    shell = HistoryShell(page_fakes.PageHistorySource())
    assert _spinner_text(shell) == "Generating Map..."
    shell.state.data = page_fakes.HistoryData.from_mapping(page_fakes._payload(711))
    assert _spinner_text(shell) == "Updating Borders..."
