"""
Error conversion and display helpers.

| Scenario | Use This |
|----------|----------|
| pydantic rejected an option | `raise wrap_pydantic_error(e) from e` |
| Show any error on the CLI | `message, hint = format_error_for_display(e)` |
"""

from typing import Optional

from pydantic import ValidationError

from .base import WaveSyncError
from .config import ConfigValidationError


def wrap_pydantic_error(error: ValidationError) -> ConfigValidationError:
    """
    Convert a pydantic validation error to a ConfigValidationError.

    Args:
        error: The pydantic ValidationError raised while building options

    Returns:
        A ConfigValidationError naming the offending field(s)
    """
    errors = error.errors()
    if len(errors) == 1:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
        return ConfigValidationError(
            field=field,
            value=first_error.get('input'),
            error_msg=first_error.get('msg', 'validation failed'),
        )

    error_lines = []
    for err in errors:
        field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
        error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, WaveSyncError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
