"""
Host Adapter Interface

The capabilities the statistics client needs from the process it runs in:
identity and metrics, periodic scheduling, and a logging sink.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class HostMetrics:
    """Host values sent with every submission"""

    plugin_name: str
    plugin_version: str
    server_version: str
    online_players: int
    online_mode: bool


def format_server_version(implementation: str, version: str, platform_version: Optional[str] = None) -> str:
    """
    Build a server version string in the format the collector expects

    Args:
        implementation: Server implementation name (e.g., "BungeeCord")
        version: Implementation version
        platform_version: Underlying game version, rendered as "(MC: x)"

    Returns:
        Version string such as "BungeeCord 1.8-SNAPSHOT (MC: 1.8.9)"
    """
    text = f"{implementation} {version}".strip()
    if platform_version:
        text += f" (MC: {platform_version})"
    return text


class HostAdapter(ABC):
    """Platform integration for a statistics reporter"""

    logger_name = "statslite"

    @abstractmethod
    def get_process_name(self) -> str:
        """Display name of the reporting plugin or application"""

    @abstractmethod
    def get_process_version(self) -> str:
        """Display version of the reporting plugin or application"""

    @abstractmethod
    def get_host_version_string(self) -> str:
        """Version string of the host server or runtime"""

    @abstractmethod
    def get_active_user_count(self) -> int:
        """Number of users currently online"""

    @abstractmethod
    def is_authenticated_mode(self) -> bool:
        """Whether the host authenticates its users"""

    @abstractmethod
    def schedule_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> Any:
        """
        Run a callback periodically off the caller's thread

        Args:
            interval_seconds: Delay between invocations
            callback: Function to invoke (never run concurrently with itself)

        Returns:
            Opaque handle accepted by cancel()
        """

    @abstractmethod
    def cancel(self, handle: Any):
        """Cancel a schedule without waiting for an in-flight invocation"""

    def get_logger(self) -> logging.Logger:
        """Logger used by log()"""
        return logging.getLogger(self.logger_name)

    def log(self, level: int, message: str, error: Optional[BaseException] = None):
        """
        Write a message to the host log

        Args:
            level: logging level (logging.DEBUG, logging.WARNING, ...)
            message: Log message
            error: Optional exception to attach
        """
        logger = self.get_logger()
        if error is not None:
            logger.log(level, message, exc_info=(type(error), error, error.__traceback__))
        else:
            logger.log(level, message)

    def metrics(self) -> HostMetrics:
        """Collect the current host metrics"""
        return HostMetrics(
            plugin_name=self.get_process_name(),
            plugin_version=self.get_process_version(),
            server_version=self.get_host_version_string(),
            online_players=int(self.get_active_user_count()),
            online_mode=bool(self.is_authenticated_mode()),
        )
