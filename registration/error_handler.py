"""
Error handling utilities for the registration page.
Logs unexpected failures and shows a user-friendly message instead of a
traceback. Form validation errors never come through here; they are shown
inline next to their fields.
"""

import streamlit as st
import logging
import traceback
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationLoadError, FieldListError

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    CONFIGURATION = "configuration"
    FORM_STATE = "form_state"
    SYSTEM = "system"


ERROR_MESSAGES: Dict[str, Dict[Any, str]] = {
    ErrorType.CONFIGURATION: {
        ConfigurationLoadError: "⚙️ The configuration file could not be loaded. Default settings are in use.",
        "default": "⚙️ Configuration error. Please check config.yaml."
    },
    ErrorType.FORM_STATE: {
        FieldListError: "🔁 That technology row no longer exists. The form has been refreshed.",
        "default": "🔁 The form got out of sync. Please try again."
    },
    ErrorType.SYSTEM: {
        MemoryError: "💻 System is running low on memory. Please try again.",
        "default": "💻 Unexpected error occurred. Please try again."
    }
}


class ErrorHandler:
    """Error handling for the registration page."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            show_details: Whether to show technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler.get_user_friendly_message(error, error_type)

        st.error(user_message)

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                st.code(traceback.format_exc())

    @staticmethod
    def get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Pick the message for an error based on its type and exception class."""
        error_type_messages = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")


def format_error_summary(errors: Dict[str, str]) -> List[str]:
    """Flatten an error map into 'path: message' lines, in form order."""
    return [f"{path}: {message}" for path, message in errors.items()]
