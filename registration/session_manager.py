"""
Session state management for the Streamlit registration page.
Keeps one FormState per browser session and tracks the widget key version.
"""

import streamlit as st
from typing import Any, Dict, Optional
from datetime import datetime
import logging

from .config_loader import get_config
from .form_state import FormState
from .validator import ValidationSettings

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages Streamlit session state for the registration page."""

    @staticmethod
    def initialize(config: Optional[Dict[str, Any]] = None):
        """Initialize all session state variables with default values."""
        if 'form_state' not in st.session_state:
            settings = ValidationSettings.from_config(config or get_config())
            st.session_state['form_state'] = FormState(settings)

        defaults = {
            'form_version': 0,
            'last_activity': datetime.now(),
            'session_id': None,
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        # Generate session ID if not exists
        if not st.session_state['session_id']:
            st.session_state['session_id'] = f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

        logger.debug(f"Session initialized: {st.session_state['session_id']}")

    @staticmethod
    def get_form_state() -> FormState:
        """Get the form state of this session, creating it on first use."""
        if 'form_state' not in st.session_state:
            SessionManager.initialize()
        return st.session_state['form_state']

    @staticmethod
    def get_form_version() -> int:
        """Widget keys carry this version so a reset gets fresh widgets."""
        return st.session_state.get('form_version', 0)

    @staticmethod
    def bump_form_version() -> int:
        version = SessionManager.get_form_version() + 1
        st.session_state['form_version'] = version
        return version

    @staticmethod
    def update_activity():
        """Update last activity timestamp."""
        st.session_state['last_activity'] = datetime.now()

    @staticmethod
    def get_session_id() -> str:
        """Get the session ID."""
        return st.session_state.get('session_id', 'unknown')

    @staticmethod
    def reset_form():
        """Clear the form and drop the widget values of the old version."""
        logger.info(f"Resetting form for session {SessionManager.get_session_id()}")
        SessionManager.get_form_state().reset()

        old_suffix = f"_v{SessionManager.get_form_version()}"
        for key in list(st.session_state.keys()):
            if isinstance(key, str) and key.endswith(old_suffix):
                del st.session_state[key]

        SessionManager.bump_form_version()
        SessionManager.update_activity()

    @staticmethod
    def get_session_info() -> Dict[str, Any]:
        """Get session information for debugging."""
        state = SessionManager.get_form_state()
        return {
            'session_id': SessionManager.get_session_id(),
            'form_version': SessionManager.get_form_version(),
            'phase': state.phase.value,
            'last_outcome': state.last_outcome.value if state.last_outcome else None,
            'submit_count': state.submit_count,
            'tech_count': len(state.techs),
            'error_count': len(state.errors),
        }
