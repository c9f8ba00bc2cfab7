"""CloudWatch logging configuration and utilities."""

import logging
import sys
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from ..config import Settings


class CloudWatchHandler(logging.Handler):
    """Logging handler that sends handler logs to AWS CloudWatch Logs."""

    def __init__(
        self,
        log_group: str,
        log_stream: str,
        region: str = "us-east-1",
    ):
        """
        Initialize CloudWatch logging handler.

        Args:
            log_group: CloudWatch log group name
            log_stream: CloudWatch log stream name
            region: AWS region for CloudWatch
        """
        super().__init__()
        self.log_group = log_group
        self.log_stream = log_stream
        self.region = region
        self.client = boto3.client("logs", region_name=region)
        self._ensure_log_group_and_stream()

    def _ensure_log_group_and_stream(self) -> None:
        """Create log group and stream if they don't exist."""
        try:
            try:
                self.client.create_log_group(logGroupName=self.log_group)
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                    raise

            try:
                self.client.create_log_stream(
                    logGroupName=self.log_group,
                    logStreamName=self.log_stream,
                )
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                    raise
        except Exception as e:
            print(f"Failed to setup CloudWatch logging: {e}", file=sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to CloudWatch.

        Args:
            record: The log record to emit
        """
        try:
            message = self.format(record)
            labels = [
                value
                for value in (getattr(record, "correlation_id", None), getattr(record, "step", None))
                if value and value != "-"
            ]
            if labels:
                message = f"[{' '.join(labels)}] {message}"
            timestamp = int(record.created * 1000)

            self.client.put_log_events(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
                logEvents=[
                    {
                        "message": message,
                        "timestamp": timestamp,
                    }
                ],
            )
        except Exception as e:
            # Logging must never raise into the handler
            print(f"Failed to send log to CloudWatch: {e}", file=sys.stderr)


def configure_cloudwatch_logging(config: Settings) -> Optional[CloudWatchHandler]:
    """
    Attach a CloudWatch handler to the root logger when enabled.

    Args:
        config: Application settings (cloudwatch_* and aws_region)

    Returns:
        The installed handler, or None when CloudWatch logging is disabled
        or could not be set up
    """
    if not config.cloudwatch_enabled:
        return None

    log_stream = config.cloudwatch_log_stream or f"{config.environment}-handler"

    try:
        handler = CloudWatchHandler(
            log_group=config.cloudwatch_log_group,
            log_stream=log_stream,
            region=config.aws_region,
        )

        # Use the same format as console logging
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)

        logging.getLogger().addHandler(handler)

        logging.getLogger(__name__).info(
            f"CloudWatch logging configured: group={config.cloudwatch_log_group}, stream={log_stream}"
        )
        return handler
    except Exception as e:
        print(f"Failed to configure CloudWatch logging: {e}", file=sys.stderr)
        return None
