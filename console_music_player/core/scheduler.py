"""Scheduler for periodic position sampling and session autosave."""

import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..models.commands import Command, PersistSession, Tick


class PlaybackScheduler:
    """Posts Tick and PersistSession events to the dispatcher on a timer.

    The jobs never touch the session themselves; they only enqueue
    events so that all state changes stay on the logic thread.
    """

    TICK_JOB_ID = "position_tick"
    AUTOSAVE_JOB_ID = "session_autosave"

    def __init__(
        self,
        logger: logging.Logger,
        submit: Callable[[Command], None],
        position_interval_seconds: float = 0.5,
        autosave_interval_seconds: int = 30
    ):
        """Initialize scheduler.

        Args:
            logger: Logger instance
            submit: Dispatcher submit function
            position_interval_seconds: How often to sample playback position
            autosave_interval_seconds: How often to persist the session
        """
        self.logger = logger
        self.submit = submit
        self.position_interval_seconds = position_interval_seconds
        self.autosave_interval_seconds = autosave_interval_seconds

        self.scheduler = BackgroundScheduler()

    def start(self) -> None:
        """Start the scheduler."""
        try:
            self.scheduler.add_job(
                self._safe_submit,
                trigger=IntervalTrigger(seconds=self.position_interval_seconds),
                args=[Tick()],
                id=self.TICK_JOB_ID,
                name="Position Tick",
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )
            self.scheduler.add_job(
                self._safe_submit,
                trigger=IntervalTrigger(seconds=self.autosave_interval_seconds),
                args=[PersistSession()],
                id=self.AUTOSAVE_JOB_ID,
                name="Session Autosave",
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )

            self.scheduler.start()
            self.logger.info(
                f"Scheduler started (tick every {self.position_interval_seconds}s, "
                f"autosave every {self.autosave_interval_seconds}s)"
            )

        except Exception as e:
            self.logger.error(f"Failed to start scheduler: {e}")
            raise

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        try:
            if self.scheduler.running:
                self.logger.info("Stopping scheduler...")
                self.scheduler.shutdown(wait=True)
                self.logger.info("Scheduler stopped")
        except Exception as e:
            self.logger.error(f"Error stopping scheduler: {e}")

    def _safe_submit(self, command: Command) -> None:
        """Enqueue a timer event without letting failures stop the scheduler."""
        try:
            self.submit(command)
        except Exception as e:
            self.logger.error(f"Error posting {type(command).__name__}: {e}", exc_info=True)

    def is_running(self) -> bool:
        """Check if scheduler is running.

        Returns:
            True if running
        """
        return self.scheduler.running
