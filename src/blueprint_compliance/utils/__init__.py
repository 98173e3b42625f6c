"""Shared low-level helpers (filesystem, concurrency)."""

from blueprint_compliance.utils.concurrency import BoundedSemaphore, WorkerPool, run_with_timeout
from blueprint_compliance.utils.fs import atomic_write, is_within, read_text_lenient

__all__ = [
    "BoundedSemaphore",
    "WorkerPool",
    "atomic_write",
    "is_within",
    "read_text_lenient",
    "run_with_timeout",
]
