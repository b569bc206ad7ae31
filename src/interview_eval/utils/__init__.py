"""Utility functions."""

from interview_eval.utils.logging import (
    ensure_request_id,
    get_logger,
    get_request_id,
    log_error,
    set_request_id,
    setup_logging,
)
from interview_eval.utils.retry import retry_transient

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "ensure_request_id",
    "log_error",
    # Retry
    "retry_transient",
]
