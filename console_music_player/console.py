"""Interactive line console: parses user input into commands and renders views."""

import logging
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from rich.console import Console
from rich.table import Table

from .config.settings import Settings
from .errors import InputError
from .models.commands import (
    AddPath,
    Clear,
    ClearHistory,
    Command,
    CycleRepeat,
    Next,
    PlayAt,
    PlayHistoryEntry,
    PlayPause,
    Previous,
    Quit,
    RemoveAt,
    Save,
    SeekBy,
    ToggleMute,
    ToggleShuffle,
    VolumeBy,
)
from .models.playback import PlaybackStatus, SessionSnapshot


class View(str, Enum):
    """Read-only views rendered by the console itself."""

    STATUS = "status"
    PLAYLIST = "list"
    HISTORY = "history"
    HELP = "help"


Parsed = Union[Command, View]

HELP_TEXT = """\
play | p | <space>    play / pause
next | n              next track
prev | b              previous track (restarts after 3s)
seek [+-N]            seek by N seconds (default: forward one step)
vol [+-N] | + | -     change volume
mute                  toggle mute
shuffle               toggle shuffle
repeat                cycle repeat mode (off -> one -> all)
goto N                play playlist entry N
rm N                  remove playlist entry N
clear                 clear the playlist
add PATH              add a file, directory or M3U playlist
save [PATH]           save the playlist as M3U
hist N                replay history entry N
clear-history         clear the history
status | list | history | help
quit | q              quit"""

_ALIASES = {
    "p": "play",
    "pause": "play",
    "n": "next",
    "b": "prev",
    "previous": "prev",
    "volume": "vol",
    "q": "quit",
    "exit": "quit",
    "ls": "list",
    "s": "status",
    "h": "help",
    "?": "help",
}

_SIMPLE = {
    "play": PlayPause,
    "next": Next,
    "prev": Previous,
    "mute": ToggleMute,
    "shuffle": ToggleShuffle,
    "repeat": CycleRepeat,
    "clear": Clear,
    "clear-history": ClearHistory,
    "quit": Quit,
}

_VIEWS = {view.value: view for view in View}


def default_playlist_path(settings: Settings, now: Optional[datetime] = None) -> Path:
    """Timestamped M3U path used when save is given no path."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return settings.library.playlist_dir() / f"playlist_{stamp}.m3u"


def _parse_step(argument: Optional[str], default: float, name: str) -> float:
    if argument is None:
        return default
    try:
        return float(argument)
    except ValueError:
        raise InputError(f"{name} expects a number, got '{argument}'")


def _parse_index(argument: Optional[str], name: str) -> int:
    """Convert a 1-based user index to a 0-based one."""
    if argument is None:
        raise InputError(f"{name} expects an entry number")
    try:
        number = int(argument)
    except ValueError:
        raise InputError(f"{name} expects an entry number, got '{argument}'")
    if number < 1:
        raise InputError(f"{name} expects an entry number >= 1")
    return number - 1


def parse_command(line: str, settings: Settings) -> Optional[Parsed]:
    """Parse one line of user input.

    Args:
        line: Raw input line
        settings: Settings providing seek/volume steps and the playlist dir

    Returns:
        A command for the dispatcher, a view to render, or None for an
        empty line

    Raises:
        InputError: Unknown command or malformed argument
    """
    if not line.strip():
        # A lone space is the play/pause key
        return PlayPause() if line.strip("\r\n") else None

    word, _, rest = line.strip().partition(" ")
    word = _ALIASES.get(word.lower(), word.lower())
    argument = rest.strip() or None

    if word in _SIMPLE:
        return _SIMPLE[word]()

    if word in _VIEWS:
        return _VIEWS[word]

    if word == "seek":
        return SeekBy(_parse_step(argument, settings.player.seek_step_seconds, "seek"))

    if word == "vol":
        return VolumeBy(int(_parse_step(argument, settings.player.volume_step, "vol")))

    if word == "+":
        return VolumeBy(settings.player.volume_step)

    if word == "-":
        return VolumeBy(-settings.player.volume_step)

    if word in ("rm", "remove"):
        return RemoveAt(_parse_index(argument, "rm"))

    if word in ("goto", "g"):
        return PlayAt(_parse_index(argument, "goto"))

    if word == "hist":
        return PlayHistoryEntry(_parse_index(argument, "hist"))

    if word == "add":
        if argument is None:
            raise InputError("add expects a path")
        return AddPath(argument)

    if word == "save":
        return Save(argument or str(default_playlist_path(settings)))

    raise InputError(f"Unknown command '{word}' (type 'help')")


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as m:ss (h:mm:ss past an hour); unknown as --:--."""
    if seconds is None:
        return "--:--"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


_STATUS_STYLE = {
    PlaybackStatus.PLAYING: "green",
    PlaybackStatus.PAUSED: "yellow",
    PlaybackStatus.STOPPED: "red",
}


def render_status(snapshot: SessionSnapshot) -> str:
    """One-line status in rich markup."""
    style = _STATUS_STYLE[snapshot.status]
    parts = [f"[{style}]{snapshot.status.value.capitalize()}[/{style}]"]

    if snapshot.track is not None:
        parts.append(f"[bold]{snapshot.track.display_name}[/bold]")
        parts.append(f"{format_time(snapshot.position)} / {format_time(snapshot.duration)}")

    volume = "muted" if snapshot.muted else f"{snapshot.volume}%"
    parts.append(f"vol {volume}")
    parts.append(f"shuffle {'on' if snapshot.shuffle else 'off'}")
    parts.append(f"repeat {snapshot.repeat_mode.value}")

    if snapshot.error:
        parts.append(f"[red]{snapshot.error}[/red]")

    return " | ".join(parts)


def render_playlist(snapshot: SessionSnapshot) -> Table:
    """Playlist table with the cursor entry highlighted."""
    table = Table(title=f"Playlist ({len(snapshot.playlist)} tracks)")
    table.add_column("#", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("")

    unplayable = set(snapshot.unplayable)
    for index, path in enumerate(snapshot.playlist):
        marker = ""
        if index == snapshot.cursor:
            marker = "[green]>[/green]" if snapshot.status == PlaybackStatus.PLAYING else ">"
        if index in unplayable:
            marker += " [red]unplayable[/red]"
        table.add_row(str(index + 1), path, marker)

    return table


def render_history(snapshot: SessionSnapshot) -> Table:
    """History table, most recent first."""
    table = Table(title="History")
    table.add_column("#", justify="right")
    table.add_column("Title", style="green")
    table.add_column("Artist")
    table.add_column("Album")
    table.add_column("Played At")

    for index, entry in enumerate(snapshot.history):
        table.add_row(
            str(index + 1),
            entry.title,
            entry.artist,
            entry.album,
            entry.played_at.strftime("%Y-%m-%d %H:%M")
        )

    return table


class PlayerConsole:
    """Reads commands from the terminal and prints session updates."""

    def __init__(
        self,
        submit: Callable[[Command], None],
        settings: Settings,
        logger: logging.Logger,
        console: Optional[Console] = None
    ):
        """Initialize console.

        Args:
            submit: Dispatcher submit function
            settings: Player settings
            logger: Logger instance
            console: Rich console (default: a new one on stdout)
        """
        self.submit = submit
        self.settings = settings
        self.logger = logger
        self.console = console or Console()

        self._lock = threading.Lock()
        self._snapshot: Optional[SessionSnapshot] = None
        self._last_message = ""

    @property
    def snapshot(self) -> Optional[SessionSnapshot]:
        with self._lock:
            return self._snapshot

    def on_snapshot(self, snapshot: SessionSnapshot) -> None:
        """Dispatcher listener: remember the snapshot, echo new status messages."""
        with self._lock:
            self._snapshot = snapshot
            changed = snapshot.message and snapshot.message != self._last_message
            self._last_message = snapshot.message

        if changed:
            style = "red" if snapshot.message == snapshot.error else "cyan"
            self.console.print(f"[{style}]{snapshot.message}[/{style}]")

    def show(self, view: View) -> None:
        if view == View.HELP:
            self.console.print(HELP_TEXT, markup=False)
            return

        snapshot = self.snapshot
        if snapshot is None:
            self.console.print("[yellow]No session state yet[/yellow]")
            return

        if view == View.STATUS:
            self.console.print(render_status(snapshot))
        elif view == View.PLAYLIST:
            self.console.print(render_playlist(snapshot))
        elif view == View.HISTORY:
            if not snapshot.history:
                self.console.print("[yellow]History is empty[/yellow]")
            else:
                self.console.print(render_history(snapshot))

    def handle_line(self, line: str) -> bool:
        """Process one input line.

        Returns:
            False once the user asked to quit
        """
        try:
            parsed = parse_command(line, self.settings)
        except InputError as e:
            self.console.print(f"[yellow]{e}[/yellow]")
            return True

        if parsed is None:
            return True

        if isinstance(parsed, View):
            self.show(parsed)
            return True

        self.submit(parsed)
        return not isinstance(parsed, Quit)

    def run(self, read_line: Optional[Callable[[], str]] = None) -> None:
        """Read and handle lines until quit, EOF or Ctrl+C."""
        read_line = read_line or (lambda: self.console.input("[bold]> [/bold]"))
        self.console.print("Type 'help' for commands")

        while True:
            try:
                line = read_line()
            except (EOFError, KeyboardInterrupt):
                self.logger.info("Input closed, quitting")
                self.submit(Quit())
                return

            if not self.handle_line(line):
                return
