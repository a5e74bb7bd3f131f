"""
Unit tests for the session manager.
"""

import pytest

import registration.session_manager as session_manager
from registration.config_loader import get_default_config
from registration.form_state import FormState
from registration.session_manager import SessionManager


@pytest.fixture
def session_state(monkeypatch):
    state = {}
    monkeypatch.setattr(session_manager.st, "session_state", state)
    return state


class TestSessionManager:
    """Session initialization and form reset."""

    def test_initialize_creates_form_state(self, session_state):
        config = get_default_config()
        config['validation']['min_techs'] = 4

        SessionManager.initialize(config)

        form_state = session_state['form_state']
        assert isinstance(form_state, FormState)
        assert form_state.settings.min_techs == 4
        assert session_state['form_version'] == 0
        assert session_state['session_id'].startswith("session_")

    def test_initialize_is_idempotent(self, session_state):
        SessionManager.initialize(get_default_config())
        form_state = SessionManager.get_form_state()
        form_state.set_value("name", "ana")

        SessionManager.initialize(get_default_config())

        assert SessionManager.get_form_state() is form_state
        assert form_state.get_value("name") == "ana"

    def test_reset_form_drops_old_widgets(self, session_state):
        SessionManager.initialize(get_default_config())
        form_state = SessionManager.get_form_state()
        form_state.set_value("name", "ana")
        form_state.techs.append(title="React")
        session_state['field_name_v0'] = "ana"
        session_state['tech_tech-1_title_v0'] = "React"

        SessionManager.reset_form()

        assert 'field_name_v0' not in session_state
        assert 'tech_tech-1_title_v0' not in session_state
        assert SessionManager.get_form_version() == 1
        assert form_state.get_value("name") == ""
        assert len(form_state.techs) == 0

    def test_get_session_info(self, session_state):
        SessionManager.initialize(get_default_config())
        SessionManager.get_form_state().submit()

        info = SessionManager.get_session_info()

        assert info['phase'] == 'editing'
        assert info['last_outcome'] == 'failed'
        assert info['submit_count'] == 1
        assert info['error_count'] == 5
