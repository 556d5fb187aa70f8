"""Console Music Player: a terminal audio player."""

__version__ = "0.1.0"
