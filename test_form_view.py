"""
Tests for the Streamlit form view and its button callbacks.
"""

from unittest.mock import MagicMock

import pytest

import registration.form_data_collector as form_data_collector
import registration.form_view as form_view
import registration.session_manager as session_manager
from registration.config_loader import get_default_config
from registration.error_handler import ErrorType
from registration.exceptions import FieldListError
from registration.form_data_collector import tech_key
from registration.session_manager import SessionManager


@pytest.fixture
def mock_st(monkeypatch):
    """Streamlit replaced by a mock with a plain dict as session state."""
    st = MagicMock()
    st.session_state = {}
    st.columns.side_effect = lambda spec: [MagicMock() for _ in spec]
    for module in (form_view, session_manager, form_data_collector):
        monkeypatch.setattr(module, "st", st)
    monkeypatch.setattr(form_view, "Notify", MagicMock())
    monkeypatch.setattr(form_view, "ErrorHandler", MagicMock())
    SessionManager.initialize(get_default_config())
    return st


def valid_widgets(state, st):
    st.session_state.update({
        "field_avatar_v0": MagicMock(size=1000, type="image/png"),
        "field_name_v0": "ana maria",
        "field_email_v0": "ANA@example.com",
        "field_password_v0": "secret1",
    })
    st.session_state["field_avatar_v0"].name = "me.png"
    for title in ("React", "Python"):
        entry = state.techs.append()
        st.session_state[tech_key(entry.key, "title", 0)] = title
        st.session_state[tech_key(entry.key, "knowledge", 0)] = "50"


class TestCallbacks:
    """Add, remove and submit buttons."""

    def test_on_add_tech_appends_empty_row(self, mock_st):
        form_view.on_add_tech()
        form_view.on_add_tech()

        state = SessionManager.get_form_state()
        assert state.techs.values() == [{"title": "", "knowledge": 0}] * 2

    def test_on_remove_tech_by_key(self, mock_st):
        state = SessionManager.get_form_state()
        first = state.techs.append(title="React")
        second = state.techs.append(title="Python")
        mock_st.session_state[tech_key(first.key, "title", 0)] = "React"

        form_view.on_remove_tech(first.key)

        assert state.techs.keys() == [second.key]
        assert tech_key(first.key, "title", 0) not in mock_st.session_state

    def test_on_remove_stale_key_reports_form_state_error(self, mock_st):
        state = SessionManager.get_form_state()
        state.techs.append(title="React")

        form_view.on_remove_tech("tech-404")

        assert len(state.techs) == 1
        form_view.ErrorHandler.handle_error.assert_called_once()
        error, _context, error_type = form_view.ErrorHandler.handle_error.call_args[0]
        assert isinstance(error, FieldListError)
        assert error_type == ErrorType.FORM_STATE

    def test_on_submit_success(self, mock_st):
        state = SessionManager.get_form_state()
        valid_widgets(state, mock_st)

        form_view.on_submit()

        assert state.errors == {}
        assert '"name": "Ana Maria"' in state.output
        form_view.Notify.success.assert_called_once()

    def test_on_submit_failure(self, mock_st):
        form_view.on_submit()

        state = SessionManager.get_form_state()
        assert set(state.errors) == {"avatar", "name", "email", "password", "techs"}
        form_view.Notify.error.assert_called_once_with("Please fix 5 field(s)")


class TestRender:
    """Rendering binds widgets to entry keys and shows inline errors."""

    def test_render_rows_and_errors(self, mock_st):
        state = SessionManager.get_form_state()
        first = state.techs.append(title="React", knowledge=80)
        second = state.techs.append(title="Go", knowledge=101)
        state.errors = {"techs[1].knowledge": "Knowledge must be at most 100", "name": "Name is required"}

        form_view.render_registration_form()

        assert mock_st.session_state[tech_key(first.key, "title", 0)] == "React"
        assert mock_st.session_state[tech_key(second.key, "knowledge", 0)] == "101"
        mock_st.error.assert_any_call("Knowledge must be at most 100")
        mock_st.error.assert_any_call("Name is required")
        remove_calls = [c for c in mock_st.button.call_args_list if c.args[0] == "Remove"]
        assert [c.kwargs["args"] for c in remove_calls] == [(first.key,), (second.key,)]

    def test_render_output_only_after_success(self, mock_st):
        state = SessionManager.get_form_state()

        form_view.render_output(state)
        mock_st.code.assert_not_called()

        state.output = '{\n  "name": "Ana"\n}'
        form_view.render_output(state)
        mock_st.code.assert_called_once_with(state.output, language="json")

    def test_avatar_uploader_restricted_to_images(self, mock_st):
        form_view.render_registration_form()

        mock_st.file_uploader.assert_called_once_with(
            "Avatar", type=form_view.AVATAR_EXTENSIONS, key="field_avatar_v0"
        )
