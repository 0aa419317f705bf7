"""Host adapters

QtHost lives in statslite.hosts.qt and needs the optional PyQt6 extra.
"""

from .base import HostAdapter, HostMetrics, format_server_version
from .threaded import ThreadedHost

__all__ = ['HostAdapter', 'HostMetrics', 'ThreadedHost', 'format_server_version']
