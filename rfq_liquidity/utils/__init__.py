"""
Shared helpers for the RFQ core.
"""

from .async_helpers import (
    AsyncCallTimeoutError,
    drain_background_tasks,
    fire_and_forget,
    with_timeout,
)

__all__ = [
    "AsyncCallTimeoutError",
    "with_timeout",
    "fire_and_forget",
    "drain_background_tasks",
]
