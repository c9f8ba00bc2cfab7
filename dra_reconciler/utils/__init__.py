"""Utility modules for the data repository association reconciler."""

from .cloudwatch_logger import CloudWatchHandler, configure_cloudwatch_logging
from .correlation import (
    CorrelationIDMiddleware,
    OperationLogFilter,
    bind_operation,
    get_correlation_id,
    log_extra,
    step_scope,
)

__all__ = [
    "CloudWatchHandler",
    "configure_cloudwatch_logging",
    "CorrelationIDMiddleware",
    "OperationLogFilter",
    "bind_operation",
    "get_correlation_id",
    "log_extra",
    "step_scope",
]
