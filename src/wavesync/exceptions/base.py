"""Base exception class for wavesync.

Most wavesync errors wrap a failure from a library underneath (aiohttp,
soundfile, sounddevice, pydantic). The CLI shows `user_message` and
`recovery_hint`; the log file gets `technical_message`, which ends with the
library's own error text.
"""

from typing import Optional


class WaveSyncError(Exception):
    """
    Base exception for all wavesync errors.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logging
        original_error: Error text from the underlying library, if any
        recoverable: Whether the operation can simply be retried
        recovery_hint: Optional hint for how to fix the issue
    """

    def __init__(
        self,
        user_message: str,
        *,
        technical_message: Optional[str] = None,
        original_error: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.original_error = original_error
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

        self.technical_message = technical_message or user_message
        if original_error:
            self.technical_message += f"\nOriginal error: {original_error}"

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint."""
        msg = self.user_message
        if self.recovery_hint:
            msg += f"\n\nSuggestion: {self.recovery_hint}"
        return msg
