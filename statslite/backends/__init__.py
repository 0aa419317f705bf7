"""Statistics backend adapters"""

from .http import HTTPBackend

__all__ = ['HTTPBackend']
