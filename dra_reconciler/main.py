"""FastAPI application exposing the handlers over HTTP.

The host POSTs one invocation at a time to ``/handlers/{action}`` with the
request and the callback context it kept from the previous invocation, and
re-invokes while the returned status is IN_PROGRESS.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .config import settings
from .models import Action, CallbackContext, HandlerRequest, HealthStatus, ProgressEvent
from .services.reconciler import Reconciler
from .utils.cloudwatch_logger import configure_cloudwatch_logging
from .utils.correlation import CorrelationIDMiddleware, get_correlation_id, log_extra

logger = logging.getLogger(__name__)

# Global instances
reconciler: Optional[Reconciler] = None


class InvocationRequest(BaseModel):
    """Body of a handler invocation."""
    request: HandlerRequest
    callback_context: Optional[CallbackContext] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown.

    Builds the reconciler (FSx client and step executor) from settings.
    """
    global reconciler

    app_settings = settings()
    configure_cloudwatch_logging(app_settings)

    logger.info("Starting data repository association handler server")

    if reconciler is None:
        try:
            reconciler = Reconciler.from_settings(app_settings)
            logger.info(f"FSx client initialized for region {app_settings.aws_region}")
        except Exception as e:
            logger.warning(f"Failed to initialize FSx client: {e}")
            reconciler = None

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="FSx Data Repository Association Reconciler",
    description=(
        "Create, read, update, delete and list Amazon FSx data repository "
        "associations with resumable, stabilized progress."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for errors a handler did not classify.

    Logs the error and returns a structured error response; the caller
    decides whether to retry.
    """
    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra=log_extra(),
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
        },
    )


@app.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Health check endpoint for monitoring server status."""
    ready = reconciler is not None
    return HealthStatus(
        status="healthy" if ready else "degraded",
        version=__version__,
        aws_region=settings().aws_region,
        fsx_client_ready=ready,
    )


@app.post("/handlers/{action}", response_model=ProgressEvent, response_model_exclude_none=True)
async def invoke_handler(action: str, body: InvocationRequest, http_request: Request) -> ProgressEvent:
    """
    Run one invocation of a handler.

    Args:
        action: create, read, update, delete or list
        body: Handler request and the callback context from the previous
            invocation
        http_request: Incoming request; its state reports the correlation
            ID the operation ran under

    Returns:
        ProgressEvent for the invocation
    """
    try:
        handler_action = Action(action.lower())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown handler action: {action}")

    if reconciler is None:
        raise HTTPException(status_code=503, detail="FSx client not initialized")

    logger.info(
        f"Handler invocation: {handler_action.value}",
        extra=log_extra(),
    )

    event = await reconciler.invoke(handler_action, body.request, body.callback_context)
    http_request.state.correlation_id = get_correlation_id()
    return event
