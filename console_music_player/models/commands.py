"""Commands and backend events carried by the dispatcher queue."""

from dataclasses import dataclass


class Command:
    """Base class for everything the dispatcher accepts."""

    navigates = False  # supersedes a queued TrackFinished in the same batch


@dataclass(frozen=True)
class PlayPause(Command):
    pass


@dataclass(frozen=True)
class Next(Command):
    navigates = True


@dataclass(frozen=True)
class Previous(Command):
    navigates = True


@dataclass(frozen=True)
class SeekBy(Command):
    seconds: float


@dataclass(frozen=True)
class VolumeBy(Command):
    delta: int


@dataclass(frozen=True)
class ToggleMute(Command):
    pass


@dataclass(frozen=True)
class ToggleShuffle(Command):
    pass


@dataclass(frozen=True)
class CycleRepeat(Command):
    pass


@dataclass(frozen=True)
class RemoveAt(Command):
    index: int


@dataclass(frozen=True)
class Clear(Command):
    pass


@dataclass(frozen=True)
class AddPath(Command):
    path: str


@dataclass(frozen=True)
class Save(Command):
    path: str


@dataclass(frozen=True)
class PlayAt(Command):
    index: int
    navigates = True


@dataclass(frozen=True)
class PlayHistoryEntry(Command):
    index: int
    navigates = True


@dataclass(frozen=True)
class ClearHistory(Command):
    pass


@dataclass(frozen=True)
class Quit(Command):
    pass


# Backend and timer events


@dataclass(frozen=True)
class TrackFinished(Command):
    handle: int


@dataclass(frozen=True)
class BackendError(Command):
    handle: int
    message: str


@dataclass(frozen=True)
class Tick(Command):
    pass


@dataclass(frozen=True)
class PersistSession(Command):
    pass
