"""
Threaded Host

Generic host adapter for plain Python processes. Each schedule runs on
its own daemon thread so the reporter never blocks the application.
"""

import logging
import platform
import threading
from typing import Callable, Optional, Union

from .base import HostAdapter, format_server_version


class _Schedule:
    """Handle for one repeating background task"""

    def __init__(self, host: "ThreadedHost", interval: float, callback: Callable[[], None], initial_delay: float):
        self.interval = interval
        self.callback = callback
        self.initial_delay = initial_delay
        self.cancelled = threading.Event()
        self._host = host
        self.thread = threading.Thread(target=self._loop, name="statslite-reporter", daemon=True)

    def _loop(self):
        if self.initial_delay and self.cancelled.wait(self.initial_delay):
            return
        while not self.cancelled.is_set():
            try:
                self.callback()
            except Exception as e:
                # Keep the schedule alive; the next tick may succeed
                self._host.log(logging.WARNING, "Scheduled statistics task failed", e)
            if self.cancelled.wait(self.interval):
                break


class ThreadedHost(HostAdapter):
    """Host adapter backed by daemon threads"""

    def __init__(
        self,
        name: str,
        version: str,
        server_version: Optional[str] = None,
        user_count: Union[int, Callable[[], int]] = 0,
        online_mode: Union[bool, Callable[[], bool]] = False,
        initial_delay: float = 0.0,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize threaded host

        Args:
            name: Plugin/application name (used in the report URL)
            version: Plugin/application version
            server_version: Host version string (defaults to the Python runtime)
            user_count: Online user count, or a callable returning it
            online_mode: Authentication mode, or a callable returning it
            initial_delay: Seconds before the first invocation of a schedule
            logger: Logger for host output (defaults to "statslite")
        """
        self.name = name
        self.version = version
        self.server_version = server_version or format_server_version(
            platform.python_implementation(), platform.python_version()
        )
        self._user_count = user_count
        self._online_mode = online_mode
        self.initial_delay = initial_delay
        self._logger = logger

    def get_process_name(self) -> str:
        return self.name

    def get_process_version(self) -> str:
        return self.version

    def get_host_version_string(self) -> str:
        return self.server_version

    def get_active_user_count(self) -> int:
        if callable(self._user_count):
            return self._user_count()
        return self._user_count

    def is_authenticated_mode(self) -> bool:
        if callable(self._online_mode):
            return self._online_mode()
        return self._online_mode

    def schedule_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> _Schedule:
        schedule = _Schedule(self, interval_seconds, callback, self.initial_delay)
        schedule.thread.start()
        return schedule

    def cancel(self, handle: _Schedule):
        # Signal only; an in-flight callback is allowed to finish
        handle.cancelled.set()

    def get_logger(self) -> logging.Logger:
        return self._logger or super().get_logger()
