"""Shared utilities and helpers."""
from shared.diagnostics import log_memory_usage, log_thread_status
from shared.progress import CancelToken

__all__ = [
    'CancelToken',
    'log_memory_usage',
    'log_thread_status',
]
