"""Playlist ordering, shuffle and repeat handling."""

import logging
import random
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..errors import InputError, OutOfRange, PersistenceError
from ..library.m3u import read_m3u
from ..library.metadata import track_from_path
from ..library.scanner import DEFAULT_AUDIO_EXTENSIONS, is_playlist_file, scan_audio_files
from ..models.playback import Direction, RepeatMode
from ..models.track import Track


class PlaylistManager:
    """Ordered collection of tracks with a cursor, shuffle order and repeat mode.

    Entries are identified by position, so the same path may appear
    several times. The shuffle order is invalidated by every mutation
    and rebuilt on the next read, with the cursor's entry first.
    """

    def __init__(
        self,
        logger: logging.Logger,
        track_factory: Callable[[str], Track] = track_from_path,
        audio_extensions: Iterable[str] = DEFAULT_AUDIO_EXTENSIONS,
        max_scan_depth: int = 8,
        max_scan_files: int = 5000,
        rng: Optional[random.Random] = None
    ):
        """Initialize an empty playlist.

        Args:
            logger: Logger instance
            track_factory: Builds a Track (with metadata) from a path
            audio_extensions: Extensions accepted when expanding directories
            max_scan_depth: Recursion limit for directory expansion
            max_scan_files: File limit for directory expansion
            rng: Random source for shuffle permutations
        """
        self.logger = logger
        self.track_factory = track_factory
        self.audio_extensions = tuple(audio_extensions)
        self.max_scan_depth = max_scan_depth
        self.max_scan_files = max_scan_files
        self._rng = rng or random.Random()

        self._tracks: List[Track] = []
        self.cursor: Optional[int] = None
        self.repeat_mode = RepeatMode.OFF
        self._shuffle = False
        self._shuffle_order: Optional[List[int]] = None
        self._order_dirty = False

    # Read accessors

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> Track:
        self._check_index(index)
        return self._tracks[index]

    @property
    def tracks(self) -> List[Track]:
        return list(self._tracks)

    @property
    def paths(self) -> List[str]:
        return [track.path for track in self._tracks]

    @property
    def is_empty(self) -> bool:
        return not self._tracks

    @property
    def current(self) -> Optional[Track]:
        if self.cursor is None:
            return None
        return self._tracks[self.cursor]

    @property
    def shuffle(self) -> bool:
        return self._shuffle

    @property
    def shuffle_order(self) -> Optional[List[int]]:
        """Current shuffle permutation, or None when shuffle is off."""
        if not self._shuffle:
            return None
        if self._order_dirty or self._shuffle_order is None:
            self._shuffle_order = self._generate_order()
            self._order_dirty = False
        return list(self._shuffle_order)

    def traversal_order(self) -> List[int]:
        """Indices in the order playback walks them."""
        order = self.shuffle_order
        if order is None:
            return list(range(len(self._tracks)))
        return order

    def index_of_path(self, path: str) -> Optional[int]:
        """Return the first index holding path, or None."""
        for index, track in enumerate(self._tracks):
            if track.path == path:
                return index
        return None

    # Mutations

    def add(self, track: Track) -> Track:
        """Append one track."""
        self._tracks.append(track)
        if self.cursor is None:
            self.cursor = 0
        self._invalidate_order()
        return track

    def add_tracks(self, tracks: Iterable[Track]) -> List[Track]:
        """Append several tracks, preserving their order."""
        added = list(tracks)
        if not added:
            return added

        self._tracks.extend(added)
        if self.cursor is None:
            self.cursor = 0
        self._invalidate_order()
        return added

    def add_paths(self, paths: Iterable[str]) -> List[Track]:
        """Append tracks built from paths (metadata read once, here)."""
        return self.add_tracks(self.track_factory(path) for path in paths)

    def add_path(self, path: str) -> List[Track]:
        """Add a file, a directory or an M3U playlist.

        Args:
            path: File, directory or .m3u/.m3u8 path

        Returns:
            List of added tracks (possibly empty for an empty directory)

        Raises:
            InputError: If the path does not exist or the playlist is unreadable
        """
        target = Path(path).expanduser().absolute()

        if target.is_dir():
            found = scan_audio_files(
                target,
                extensions=self.audio_extensions,
                max_depth=self.max_scan_depth,
                max_files=self.max_scan_files
            )
            self.logger.info(f"Expanded directory {target} into {len(found)} track(s)")
            return self.add_paths(found)

        if not target.exists():
            raise InputError(f"No such file or directory: {path}")

        if is_playlist_file(target):
            try:
                entries = read_m3u(target)
            except PersistenceError as e:
                raise InputError(str(e)) from e
            self.logger.info(f"Loaded {len(entries)} entries from playlist {target}")
            return self.add_paths(entries)

        return [self.add(self.track_factory(str(target)))]

    def remove(self, index: int) -> Track:
        """Remove the entry at index.

        When the removed entry was the cursor, the cursor keeps its
        position (now the following entry), clamped to the last index,
        or becomes None for an empty playlist.

        Raises:
            OutOfRange: If index is invalid
        """
        self._check_index(index)
        removed = self._tracks.pop(index)

        if not self._tracks:
            self.cursor = None
        elif self.cursor is not None:
            if index < self.cursor:
                self.cursor -= 1
            elif self.cursor >= len(self._tracks):
                self.cursor = len(self._tracks) - 1

        self._invalidate_order()
        self.logger.debug(f"Removed {removed.path} at index {index}")
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        self._tracks.clear()
        self.cursor = None
        self._invalidate_order()

    def jump(self, index: int) -> Track:
        """Move the cursor to index.

        Raises:
            OutOfRange: If index is invalid
        """
        self._check_index(index)
        self.cursor = index
        return self._tracks[index]

    def toggle_shuffle(self) -> bool:
        """Flip shuffle; turning it on draws a fresh permutation."""
        self._shuffle = not self._shuffle
        self._shuffle_order = None
        self._order_dirty = self._shuffle
        self.logger.debug(f"Shuffle {'on' if self._shuffle else 'off'}")
        return self._shuffle

    def set_shuffle(self, enabled: bool) -> None:
        if enabled != self._shuffle:
            self.toggle_shuffle()

    def cycle_repeat(self) -> RepeatMode:
        """Cycle repeat mode Off -> One -> All -> Off."""
        self.repeat_mode = self.repeat_mode.cycled()
        self.logger.debug(f"Repeat mode: {self.repeat_mode.value}")
        return self.repeat_mode

    def set_repeat_mode(self, mode: RepeatMode) -> None:
        self.repeat_mode = RepeatMode(mode)

    def advance(self, direction: Direction, honor_repeat_one: bool = True) -> Optional[Track]:
        """Move the cursor one step in traversal order.

        Args:
            direction: Direction.NEXT or Direction.PREVIOUS
            honor_repeat_one: When False, repeat One is traversed like Off

        Returns:
            The new current track, or None when the playlist is empty or
            Next runs past the end without repeat All (cursor unchanged)
        """
        if not self._tracks:
            return None

        order = self.traversal_order()

        if self.cursor is None:
            self.cursor = order[0]
            return self.current

        if self.repeat_mode == RepeatMode.ONE and honor_repeat_one:
            return self.current

        position = order.index(self.cursor)
        wrap = self.repeat_mode == RepeatMode.ALL

        if Direction(direction) == Direction.NEXT:
            if position + 1 < len(order):
                self.cursor = order[position + 1]
            elif wrap:
                self.cursor = order[0]
            else:
                return None
        else:
            if position > 0:
                self.cursor = order[position - 1]
            elif wrap:
                self.cursor = order[-1]
            else:
                self.cursor = order[0]

        return self.current

    # Internals

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tracks):
            raise OutOfRange(index, len(self._tracks))

    def _invalidate_order(self) -> None:
        self._order_dirty = True

    def _generate_order(self) -> List[int]:
        """Random permutation of all indices with the cursor first."""
        indices = list(range(len(self._tracks)))
        if self.cursor is None:
            self._rng.shuffle(indices)
            return indices

        others = [i for i in indices if i != self.cursor]
        self._rng.shuffle(others)
        return [self.cursor] + others
