"""
Exception classes for the registration form.

Validation problems in user input are never raised; they are returned as an
error map. These exceptions cover misuse of the form API and configuration
failures.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """
    Base exception for registration form errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class ConfigurationLoadError(RegistrationError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, unreadable files and documents
    that are not a mapping.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


class FieldListError(RegistrationError, IndexError):
    """Raised when a tech entry position or key does not exist."""

    def __init__(self, index: Any, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"No tech entry at {index!r} (list has {length} entries)",
            context={'index': index, 'length': length},
        )
