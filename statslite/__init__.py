"""
StatsLite

Lightweight MCStats client: reports plugin, server and system information
every 15 minutes. Anonymous UUID, opt-out available in statslite.properties.
"""

from .config import Config, ConfigStore
from .errors import CompressionError, ConfigIOError, StatsLiteError, SubmitError
from .hosts import HostAdapter, HostMetrics, ThreadedHost
from .reporter import PING_INTERVAL, Reporter, ReporterState
from .settings import Settings, load_settings

__version__ = "0.2.2"

__all__ = [
    'Config', 'ConfigStore', 'Reporter', 'ReporterState', 'PING_INTERVAL',
    'HostAdapter', 'HostMetrics', 'ThreadedHost', 'Settings', 'load_settings',
    'StatsLiteError', 'ConfigIOError', 'SubmitError', 'CompressionError',
]
