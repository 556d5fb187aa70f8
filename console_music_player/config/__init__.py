"""Configuration module for Console Music Player."""

from .session_store import SessionState, SessionStore
from .settings import Settings

__all__ = ["SessionState", "SessionStore", "Settings"]
