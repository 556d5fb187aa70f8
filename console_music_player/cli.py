"""Command-line interface for Console Music Player."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config.session_store import SessionStore
from .config.settings import Settings
from .errors import PersistenceError
from .library.m3u import write_m3u
from .utils.platform import get_config_dir

app = typer.Typer(help="Console Music Player")
console = Console()


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from file or defaults."""
    return Settings.from_file_or_default(config_path)


def get_session_store(settings: Settings) -> SessionStore:
    """Get session store (logging through the package logger)."""
    return SessionStore(settings.session.path, logging.getLogger("console_music_player"))


@app.command()
def play(
    paths: Optional[List[str]] = typer.Argument(
        None,
        help="Audio files, directories or M3U playlists"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    ),
    no_restore: bool = typer.Option(
        False,
        "--no-restore",
        help="Start with an empty playlist instead of the last session"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log to the terminal as well"
    )
):
    """Start the interactive player."""
    # Import here so that the other commands work without libVLC
    from .service import PlayerService

    try:
        service = PlayerService(
            config_path=config,
            paths=paths or [],
            restore=not no_restore,
            verbose=verbose,
            console=console
        )
        service.start()
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Player error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def status(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """Show configuration paths and the saved session."""
    settings = get_settings(config)
    store = get_session_store(settings)

    console.print("[cyan]Console Music Player Status[/cyan]\n")

    console.print(f"Config directory: {get_config_dir()}")
    console.print(f"Session file: {settings.session.path}")
    console.print(f"Log file: {settings.logging.path}\n")

    if not store.exists():
        console.print("[yellow]No saved session[/yellow]")
        return

    state = store.load()

    console.print("[bold]Saved session:[/bold]")
    console.print(f"  Volume: {state.volume}%{' (muted)' if state.muted else ''}")
    console.print(f"  Shuffle: {'on' if state.shuffle else 'off'}")
    console.print(f"  Repeat: {state.repeat_mode.value}")
    console.print(f"  Tracks: {len(state.last_playlist_paths)}\n")

    if not state.last_playlist_paths:
        return

    table = Table(title="Saved Playlist")
    table.add_column("#", justify="right")
    table.add_column("Path", style="cyan")
    table.add_column("")

    for index, path in enumerate(state.last_playlist_paths):
        marker = "[green]>[/green]" if index == state.last_cursor else ""
        missing = "" if Path(path).exists() else " [red]missing[/red]"
        table.add_row(str(index + 1), path, marker + missing)

    console.print(table)


@app.command(name="export-session")
def export_session(
    output: Path = typer.Argument(..., help="M3U file to write"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """Write the saved session's playlist to an M3U file."""
    settings = get_settings(config)
    store = get_session_store(settings)

    if not store.exists():
        console.print("[red]No saved session to export[/red]")
        raise typer.Exit(1)

    state = store.load()

    try:
        write_m3u(output, state.last_playlist_paths)
    except PersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Exported {len(state.last_playlist_paths)} track(s) to {output}[/green]"
    )


@app.command()
def init_config(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file without asking"
    )
):
    """Initialize a configuration file with defaults."""
    if output is None:
        output = get_config_dir() / 'config.yaml'

    if output.exists() and not force:
        overwrite = typer.confirm(
            f"Config file already exists at {output}. Overwrite?",
            default=False
        )
        if not overwrite:
            console.print("[yellow]Cancelled[/yellow]")
            return

    # Create default settings and save
    settings = Settings()
    settings.save(output)

    console.print(f"[green]Configuration file created: {output}[/green]")
    console.print("\nEdit this file to customize your settings")


if __name__ == "__main__":
    app()
