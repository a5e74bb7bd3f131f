"""
UI feedback utilities for the registration page.
"""

import streamlit as st
import logging

# Configure logging
logger = logging.getLogger(__name__)


class Notify:
    """
    Toast-first notification helper.
    Prefers st.toast for non-blocking notifications, falls back to the
    regular status boxes when toasts are unavailable.

    Usage:
    Notify.success("User created!")
    Notify.error("Something went wrong.")
    """

    ICONS = {
        'success': '✅',
        'error': '❌'
    }

    @staticmethod
    def _display_notification(message: str, notification_type: str) -> None:
        """Internal method to display notification based on type."""
        icon = Notify.ICONS[notification_type]

        if hasattr(st, 'toast'):
            st.toast(message, icon=icon)
            return

        full_message = f"{icon} {message}"
        if notification_type == 'success':
            st.success(full_message)
        else:
            st.error(full_message)

    @staticmethod
    def success(message: str) -> None:
        """Show success notification."""
        Notify._display_notification(message, 'success')

    @staticmethod
    def error(message: str) -> None:
        """Show error notification."""
        Notify._display_notification(message, 'error')
