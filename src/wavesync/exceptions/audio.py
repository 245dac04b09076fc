"""Audio source and playback exceptions.

- NothingLoadedError: An operation needs decoded audio but none is loaded
- AudioSourceError: Base class for fetch and decode failures
- FetchError: The raw audio bytes could not be retrieved
- DecodeError: The raw audio bytes could not be decoded
- MediaPlaybackError: The media player could not open or drive its output
"""

from .base import WaveSyncError


class NothingLoadedError(WaveSyncError):
    """An operation requires decoded audio data but nothing is loaded yet."""

    def __init__(self, operation: str):
        """
        Initialize nothing-loaded error.

        Args:
            operation: Name of the operation that was attempted (e.g. "zoom")
        """
        super().__init__(
            user_message="No audio loaded",
            technical_message=f"Cannot {operation}: no decoded audio data is available",
            recoverable=True,
            recovery_hint="Wait for the 'ready' event (or await load()) before calling this.",
        )
        self.operation = operation


class AudioSourceError(WaveSyncError):
    """Audio source could not be fetched or decoded."""

    def __init__(self, user_message: str, url: str | None = None, **kwargs):
        """
        Initialize audio source error.

        Args:
            user_message: User-friendly error message
            url: The source URL or path involved (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.url = url


class FetchError(AudioSourceError):
    """Raw audio bytes could not be retrieved."""

    def __init__(self, url: str, original_error: str | None = None, status: int | None = None):
        """
        Initialize fetch error.

        Args:
            url: The URL or path that failed
            original_error: The underlying error message
            status: HTTP status code, when the failure came from a response
        """
        user_msg = f"Failed to fetch audio from {url}"
        if status is not None:
            user_msg += f" (HTTP {status})"

        super().__init__(
            user_message=user_msg,
            original_error=original_error,
            url=url,
            recoverable=True,
            recovery_hint="Check that the URL or file path exists and is reachable, then load it again.",
        )
        self.status = status


class DecodeError(AudioSourceError):
    """Raw audio bytes could not be decoded into channel data."""

    def __init__(self, original_error: str | None = None, url: str | None = None):
        """
        Initialize decode error.

        Args:
            original_error: The error message from the decoding library
            url: The source the bytes came from (if known)
        """
        super().__init__(
            user_message="Failed to decode audio data",
            original_error=original_error,
            url=url,
            recovery_hint="Use a format supported by libsndfile (WAV, FLAC, OGG, MP3).",
        )


class MediaPlaybackError(WaveSyncError):
    """Media player output could not be started or driven."""

    def __init__(self, user_message: str, device_id: int | None = None, original_error: str | None = None):
        """
        Initialize media playback error.

        Args:
            user_message: User-friendly error message
            device_id: The output device involved (if applicable)
            original_error: The error message from the audio library
        """
        super().__init__(
            user_message=user_message,
            original_error=original_error,
            recoverable=True,
            recovery_hint="Check the output device with 'wavesync play --device ID' or use the default device.",
        )
        self.device_id = device_id
