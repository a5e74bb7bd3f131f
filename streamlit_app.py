"""
Main Streamlit application for the user registration form.
Validates and transforms the form on submit and shows the resulting record.
"""

import streamlit as st
import logging

from registration.config_loader import get_config_value, get_default_config, load_config, validate_config
from registration.exceptions import ConfigurationLoadError


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
log_level_str = get_config_value('logging', 'level', 'INFO')
logging.basicConfig(
    level=get_logging_level(log_level_str),
    format=get_config_value('logging', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured to level: {log_level_str}")

page_title = get_config_value('ui', 'page_title', 'Create User')


def load_page_config():
    """
    Load config.yaml strictly so a broken file is reported on the page.

    Returns:
        The loaded configuration, or the defaults if the file could not be read
    """
    from registration.error_handler import ErrorHandler, ErrorType

    try:
        return load_config(strict=True)
    except ConfigurationLoadError as e:
        ErrorHandler.handle_error(e, "loading config.yaml", ErrorType.CONFIGURATION)
        return get_default_config()


def main():
    """Main application entry point."""
    from registration.error_handler import ErrorHandler, ErrorType, format_error_summary
    from registration.form_view import render_registration_form
    from registration.session_manager import SessionManager

    st.set_page_config(page_title=page_title, page_icon="👤", layout="centered")
    debug = bool(get_config_value('app', 'debug', False))

    try:
        config = load_page_config()
        if not validate_config(config):
            st.warning("⚠️ config.yaml has invalid validation settings; check the logs.")

        SessionManager.initialize(config)
        st.title(page_title)

        state = render_registration_form()

        if state.errors and get_config_value('ui', 'show_raw_errors', False):
            with st.expander("Validation errors"):
                for line in format_error_summary(state.errors):
                    st.write(line)

        if debug:
            with st.expander("Session"):
                st.json(SessionManager.get_session_info())

    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "registration page",
            ErrorType.SYSTEM,
            show_details=debug
        )


if __name__ == "__main__":
    main()
