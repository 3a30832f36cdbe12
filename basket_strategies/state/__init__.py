"""
Persistent store objects for price history
"""

from .history import BoundedHistoryBuffer, Observation

__all__ = [
    "BoundedHistoryBuffer",
    "Observation",
]
