# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""
Main entry point for the data repository association handler server.

Loads environment variables, configures logging, and starts the FastAPI
server on the configured port (default: 8080).

Usage:
    python -m dra_reconciler

Or with uvicorn directly:
    uvicorn dra_reconciler.main:app --host 0.0.0.0 --port 8080
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from .config import Settings, settings
from .utils.correlation import OperationLogFilter


def configure_logging(log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(OperationLogFilter())

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s %(step)s] %(message)s",
        handlers=[stream_handler],
    )

    # Set uvicorn loggers to the same level
    logging.getLogger("uvicorn").setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(numeric_level)
    logging.getLogger("uvicorn.error").setLevel(numeric_level)
    # botocore is noisy at DEBUG
    logging.getLogger("botocore").setLevel(max(numeric_level, logging.INFO))


def log_startup_configuration(config: Settings) -> None:
    """Log the effective configuration once at startup."""
    from . import __version__

    logger = logging.getLogger(__name__)
    logger.info(f"FSx data repository association reconciler v{__version__}")
    logger.info(f"  Environment:   {config.environment}")
    logger.info(f"  AWS Region:    {config.aws_region}")
    logger.info(f"  Poll interval: {config.poll_interval_seconds:g}s")
    logger.info(f"  Max wait:      {config.max_wait_minutes:g} min")
    if config.max_polls_per_invocation:
        logger.info(f"  Polls per invocation: {config.max_polls_per_invocation}")


def main() -> None:
    """
    Main entry point for the handler server.

    Loads configuration, configures logging, and starts the server.
    """
    load_dotenv()
    config = settings()

    configure_logging(config.log_level)
    logger = logging.getLogger(__name__)
    log_startup_configuration(config)

    logger.info(f"Server will listen on {config.host}:{config.port}")

    try:
        uvicorn.run(
            "dra_reconciler.main:app",
            host=config.host,
            port=config.port,
            reload=config.debug,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
