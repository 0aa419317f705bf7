"""
Error Types

Exceptions raised by the statistics client.
"""


class StatsLiteError(Exception):
    """Base class for statistics client errors"""


class ConfigIOError(StatsLiteError):
    """Configuration file could not be read or written"""


class SubmitError(StatsLiteError):
    """Statistics submission failed"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CompressionError(StatsLiteError):
    """Payload could not be compressed"""
