"""
shortlink package initializer.
"""

from . import service
from . import storage

__all__ = ["service", "storage"]
