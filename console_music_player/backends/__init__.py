"""Audio backends for Console Music Player.

The libVLC backend is imported on demand by the service because
python-vlc needs the native library at import time.
"""

from .base import AudioBackend

__all__ = ["AudioBackend"]
