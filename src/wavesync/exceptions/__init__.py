"""
Custom exception hierarchy for wavesync.

## Exception Hierarchy

```
WaveSyncError (base)
├── NothingLoadedError
├── AudioSourceError
│   ├── FetchError
│   └── DecodeError
├── MediaPlaybackError
└── ConfigurationError
    └── ConfigValidationError
```

The orchestrator never wraps errors raised by its collaborators: whatever the
fetcher or decoder raises is what `load()` raises. The bundled fetcher and
decoder raise `FetchError` and `DecodeError`, preserving the original
exception with `from e`.

### Example: zoom before anything is loaded

```python
from wavesync.exceptions import NothingLoadedError

try:
    player.zoom(100)
except NothingLoadedError as e:
    print(e.get_full_message())
```
"""

from .audio import (
    AudioSourceError,
    DecodeError,
    FetchError,
    MediaPlaybackError,
    NothingLoadedError,
)
from .base import WaveSyncError
from .config import ConfigurationError, ConfigValidationError
from .handlers import format_error_for_display, wrap_pydantic_error

__all__ = [
    # Audio
    "AudioSourceError",
    "DecodeError",
    "FetchError",
    "MediaPlaybackError",
    "NothingLoadedError",
    # Config
    "ConfigValidationError",
    "ConfigurationError",
    # Base
    "WaveSyncError",
    # Handlers
    "format_error_for_display",
    "wrap_pydantic_error",
]
