"""
Statistics Reporter

Owns the start/stop life cycle of periodic statistics submission.
Privacy-first: anonymous UUID, opt-out re-checked before every report.
"""

import logging
import threading
from enum import Enum
from typing import Any, Dict, Optional

from .backends.http import HTTPBackend
from .config import Config, ConfigStore
from .errors import ConfigIOError
from .hosts.base import HostAdapter
from .settings import Settings, load_settings

PING_INTERVAL = 15 * 60  # In seconds


class ReporterState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


def _root_cause(error: BaseException) -> BaseException:
    seen = set()
    while error.__cause__ is not None and id(error) not in seen:
        seen.add(id(error))
        error = error.__cause__
    return error


class Reporter:
    """Periodic statistics reporter for a single host"""

    def __init__(self, host: HostAdapter, config=None, backend=None, settings: Optional[Settings] = None):
        """
        Initialize reporter

        Args:
            host: Host adapter providing metrics, scheduling and logging
            config: Config provider with a reload() -> Config method
                (defaults to statslite.properties in settings.config_dir)
            backend: Submission backend (defaults to HTTPBackend)
            settings: Client settings (defaults to load_settings())
        """
        if host is None:
            raise ValueError("host is required")

        self.settings = settings or load_settings()
        self.host = host
        self.config = config or ConfigStore.in_directory(self.settings.config_dir)
        self.backend = backend or HTTPBackend(
            self.settings.report_url,
            timeout=self.settings.timeout,
            debug=self.settings.debug,
            logger=host.get_logger(),
        )

        self._lock = threading.RLock()
        self._state = ReporterState.STOPPED
        self._task: Any = None
        self._ping = False
        self._warned = False
        self._last_config: Optional[Config] = None

    @property
    def state(self) -> ReporterState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ReporterState.RUNNING

    @property
    def ping(self) -> bool:
        return self._ping

    def start(self) -> bool:
        """
        Start periodic submission

        Not starting is not necessarily an error: the reporter stays off
        when the user has opted out.

        Returns:
            True if the reporter was started by this call
        """
        with self._lock:
            if self._state is ReporterState.RUNNING:
                return False

            try:
                config = self._reload()
            except ConfigIOError as e:
                self.host.log(logging.WARNING, "Failed to start plugin statistic client", e)
                return False

            if config.opt_out:
                return False

            self._state = ReporterState.RUNNING
            self._ping = False
            self._warned = False
            self._task = self.host.schedule_repeating(PING_INTERVAL, self.run)
            return True

    def run(self):
        """Submit statistics once (invoked by the host schedule)"""
        with self._lock:
            if self._state is not ReporterState.RUNNING:
                return
            task = self._task

        try:
            config = self._reload()
        except ConfigIOError as e:
            # Unreadable now means unreadable later, stop trying
            self.host.log(logging.WARNING, "Failed to reload statistics configuration", e)
            self._stop_session(task)
            return

        # The user may have opted out in the meantime
        if config.opt_out:
            self._stop_session(task)
            return

        with self._lock:
            ping = self._ping

        try:
            self.backend.submit(config, ping, self.host.metrics())
        except Exception as e:
            self._submit_failed(e)
            return

        with self._lock:
            if self._task is task and self._state is ReporterState.RUNNING:
                self._ping = True
                self._warned = False

    def stop(self) -> bool:
        """
        Stop periodic submission

        Returns:
            True if the reporter was running before
        """
        with self._lock:
            if self._state is not ReporterState.RUNNING:
                return False

            task, self._task = self._task, None
            self._state = ReporterState.STOPPED
            self._ping = False
            self.host.cancel(task)
            return True

    def get_status(self) -> Dict[str, Any]:
        """Get reporter status for display in settings (for transparency)"""
        config = self._last_config or Config()
        return {
            "unique_id": config.unique_id,
            "opt_out": config.opt_out,
            "running": self.is_running,
        }

    def _reload(self) -> Config:
        try:
            config = self.config.reload()
        except OSError as e:
            raise ConfigIOError(str(e)) from e
        self._last_config = config
        return config

    def _stop_session(self, task):
        # Only stop the session this run belongs to
        with self._lock:
            if self._task is task:
                self.stop()

    def _submit_failed(self, error: Exception):
        if self.settings.debug:
            self.host.log(logging.WARNING, "Failed to submit plugin statistics", error)
            return

        with self._lock:
            if self._warned:
                return
            self._warned = True
        self.host.log(logging.DEBUG, f"Failed to submit plugin statistics: {_root_cause(error)!r}")
