"""Audio backend contract consumed by the playback session."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

FinishedHandler = Callable[[int], None]
ErrorHandler = Callable[[int, str], None]


class AudioBackend(ABC):
    """Fire-and-forget audio output.

    Every load returns a new integer handle. Completion and error
    notifications carry the handle they belong to and may arrive on
    any thread, so handlers must only enqueue work.
    """

    def __init__(self):
        self._on_finished: Optional[FinishedHandler] = None
        self._on_error: Optional[ErrorHandler] = None

    def set_event_handlers(
        self,
        on_finished: Optional[FinishedHandler],
        on_error: Optional[ErrorHandler] = None
    ) -> None:
        """Register callbacks for track completion and playback errors."""
        self._on_finished = on_finished
        self._on_error = on_error

    def _emit_finished(self, handle: int) -> None:
        if self._on_finished:
            self._on_finished(handle)

    def _emit_error(self, handle: int, message: str) -> None:
        if self._on_error:
            self._on_error(handle, message)

    @abstractmethod
    def load(self, path: str) -> int:
        """Prepare a file for playback and return its handle.

        Raises:
            DecodeError: If the file can be rejected immediately
        """

    @abstractmethod
    def play(self) -> None:
        """Start or resume the loaded media."""

    @abstractmethod
    def pause(self) -> None:
        """Pause the loaded media."""

    @abstractmethod
    def stop(self) -> None:
        """Stop playback and release the loaded media."""

    @abstractmethod
    def seek(self, seconds: float) -> None:
        """Jump to an absolute position in the loaded media."""

    @abstractmethod
    def set_volume(self, volume: int) -> None:
        """Set output volume (0-100)."""

    @abstractmethod
    def position(self) -> float:
        """Current playback position in seconds."""

    @abstractmethod
    def duration(self) -> Optional[float]:
        """Length of the loaded media in seconds, if known."""

    def close(self) -> None:
        """Release backend resources."""
        self.stop()
