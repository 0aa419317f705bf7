"""
Qt Host

Host adapter for PyQt6 desktop applications. Ticks come from a QTimer on
the owning thread; each submission runs on a background thread so the UI
never waits on the network.
"""

import threading
from typing import Callable, Optional, Union

from PyQt6.QtCore import (QCoreApplication, QMetaObject, QThread, QTimer, Qt,
                          QT_VERSION_STR, PYQT_VERSION_STR)

from .base import HostAdapter


class _QtSchedule:
    """QTimer-driven schedule that allows one in-flight run at a time"""

    def __init__(self, interval_seconds: float, callback: Callable[[], None]):
        self.callback = callback
        self.worker: Optional[threading.Thread] = None
        self.cancelled = threading.Event()
        self.timer = QTimer()
        self.timer.setInterval(max(1, int(interval_seconds * 1000)))
        self.timer.timeout.connect(self.tick)

    def start(self):
        self.timer.start()
        # First report right away, like a zero initial delay
        QTimer.singleShot(0, self.tick)

    def tick(self):
        if self.cancelled.is_set():
            return
        if self.worker is not None and self.worker.is_alive():
            return
        self.worker = threading.Thread(target=self.callback, name="statslite-reporter", daemon=True)
        self.worker.start()

    def stop(self):
        self.cancelled.set()
        # QTimer may only be stopped from the thread that owns it
        if self.timer.thread() == QThread.currentThread():
            self.timer.stop()
        else:
            QMetaObject.invokeMethod(self.timer, "stop", Qt.ConnectionType.QueuedConnection)


class QtHost(HostAdapter):
    """Host adapter for PyQt6 applications"""

    def __init__(
        self,
        name: Optional[str] = None,
        version: Optional[str] = None,
        user_count: Union[int, Callable[[], int]] = 1,
        online_mode: Union[bool, Callable[[], bool]] = False,
    ):
        """
        Initialize Qt host

        Args:
            name: Application name (defaults to QCoreApplication.applicationName())
            version: Application version (defaults to QCoreApplication.applicationVersion())
            user_count: Active user count, or a callable returning it
            online_mode: Authentication mode, or a callable returning it
        """
        self.name = name
        self.version = version
        self._user_count = user_count
        self._online_mode = online_mode

    def get_process_name(self) -> str:
        return self.name or QCoreApplication.applicationName()

    def get_process_version(self) -> str:
        return self.version or QCoreApplication.applicationVersion()

    def get_host_version_string(self) -> str:
        return f"Qt {QT_VERSION_STR} (PyQt: {PYQT_VERSION_STR})"

    def get_active_user_count(self) -> int:
        if callable(self._user_count):
            return self._user_count()
        return self._user_count

    def is_authenticated_mode(self) -> bool:
        if callable(self._online_mode):
            return self._online_mode()
        return self._online_mode

    def schedule_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> _QtSchedule:
        schedule = _QtSchedule(interval_seconds, callback)
        schedule.start()
        return schedule

    def cancel(self, handle: _QtSchedule):
        handle.stop()
