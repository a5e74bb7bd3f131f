"""
Tests for the page entry point: configuration loading and the debug panel.
"""

from unittest.mock import MagicMock, patch

import pytest

import registration.config_loader as config_loader
import registration.form_view as form_view
import registration.session_manager as session_manager
import streamlit_app
from registration.config_loader import get_default_config


class TestLoadPageConfig:
    """A broken config.yaml is reported on the page, not silently replaced."""

    @patch('registration.error_handler.st')
    def test_broken_file_shows_configuration_error(self, mock_st, tmp_path, monkeypatch):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("validation: [unclosed")
        monkeypatch.setattr(config_loader, "CONFIG_FILE", config_path)

        config = streamlit_app.load_page_config()

        assert config == get_default_config()
        mock_st.error.assert_called_once()
        assert "configuration file could not be loaded" in mock_st.error.call_args[0][0].lower()

    @patch('registration.error_handler.st')
    def test_valid_file_is_loaded(self, mock_st, tmp_path, monkeypatch):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("validation:\n  min_techs: 3\n")
        monkeypatch.setattr(config_loader, "CONFIG_FILE", config_path)

        config = streamlit_app.load_page_config()

        assert config['validation']['min_techs'] == 3
        mock_st.error.assert_not_called()


@pytest.mark.parametrize("debug", [True, False])
def test_session_panel_only_in_debug(debug, monkeypatch):
    st = MagicMock()
    monkeypatch.setattr(streamlit_app, "st", st)
    monkeypatch.setattr(session_manager.st, "session_state", {})
    monkeypatch.setattr(streamlit_app, "load_page_config", get_default_config)
    monkeypatch.setattr(form_view, "render_registration_form", lambda: MagicMock(errors={}))
    settings = {('app', 'debug'): debug}
    monkeypatch.setattr(
        streamlit_app, "get_config_value",
        lambda section, key, default=None: settings.get((section, key), default)
    )

    streamlit_app.main()

    if debug:
        st.json.assert_called_once()
        info = st.json.call_args[0][0]
        assert info['form_version'] == 0
        assert info['submit_count'] == 0
    else:
        st.json.assert_not_called()
