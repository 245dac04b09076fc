"""Configuration-related exceptions.

- ConfigurationError: Base class for configuration errors
- ConfigValidationError: Option values fail validation
"""

from typing import Any

from .base import WaveSyncError


class ConfigurationError(WaveSyncError):
    """Configuration is invalid."""
    pass


class ConfigValidationError(ConfigurationError):
    """Option values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str):
        """
        Initialize config validation error.

        Args:
            field: The option that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
        """
        user_msg = f"Invalid option value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' option"
        if "color" in field.lower():
            recovery += "\nColors are CSS-style strings such as '#999' or 'red'"
        elif "bar_align" in field.lower():
            recovery += "\nValid values: 'top', 'bottom'"
        elif "sample_rate" in field.lower():
            recovery += "\nThe decoding sample rate must be a positive integer (default 8000)"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Option validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.field = field
        self.value = value
