# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Operation tracing across re-invocations.

A create, update or delete may take several invocations to finish. The
correlation ID of the operation is stored in the ``CallbackContext`` that
travels with each IN_PROGRESS event, so every invocation logs under the same
ID whether or not the caller echoes the ``X-Correlation-ID`` header. The step
executor also records which step is running; both values are added to log
records as ``correlation_id`` and ``step``.
"""

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..models.context import CallbackContext

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"

_correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "dra_correlation_id", default=""
)
_current_step: contextvars.ContextVar[str] = contextvars.ContextVar(
    "dra_current_step", default=""
)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str:
    return _correlation_id.get()


def get_current_step() -> str:
    return _current_step.get()


def bind_operation(context: CallbackContext) -> str:
    """
    Resolve the correlation ID of the operation ``context`` belongs to.

    The ID recorded by an earlier invocation wins, then the ID bound to this
    invocation (from the request header), then a new one. The result is
    written back to ``context`` and bound to the current task.

    Args:
        context: Continuation context of the operation, updated in place

    Returns:
        The correlation ID now in effect
    """
    if not context.correlation_id:
        context.correlation_id = get_correlation_id() or generate_correlation_id()
        logger.debug(f"Operation bound to correlation ID {context.correlation_id}")
    set_correlation_id(context.correlation_id)
    return context.correlation_id


@contextmanager
def step_scope(step_name: str) -> Iterator[None]:
    """Mark ``step_name`` as the running step for log records in this block."""
    token = _current_step.set(step_name)
    try:
        yield
    finally:
        _current_step.reset(token)


def log_extra(association_id: Optional[str] = None) -> dict:
    """
    Build the ``extra`` mapping for a log call.

    Returns:
        ``correlation_id``, ``step`` and ``association_id`` for whichever of
        them are known
    """
    extra = {}
    correlation_id = get_correlation_id()
    if correlation_id:
        extra["correlation_id"] = correlation_id
    step = get_current_step()
    if step:
        extra["step"] = step
    if association_id:
        extra["association_id"] = association_id
    return extra


class OperationLogFilter(logging.Filter):
    """
    Stamp every record with the correlation ID and running step.

    Lets format strings reference ``%(correlation_id)s`` and ``%(step)s``
    for records logged without an explicit ``extra``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id() or "-"
        if not getattr(record, "step", None):
            record.step = get_current_step() or "-"
        return True


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Bind the caller's ``X-Correlation-ID`` header to the invocation.

    The response echoes the ID the invocation actually ran under, which
    differs from the header when the callback context already carried one.
    Endpoints report it through ``request.state.correlation_id``.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(CORRELATION_ID_HEADER, "")
        set_correlation_id(incoming)

        response = await call_next(request)

        correlation_id = (
            getattr(request.state, "correlation_id", None)
            or incoming
            or generate_correlation_id()
        )
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        logger.debug(
            f"Invocation {request.url.path} completed",
            extra={"correlation_id": correlation_id},
        )
        return response
