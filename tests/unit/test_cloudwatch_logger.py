"""Unit tests for CloudWatch logging integration."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from dra_reconciler.config import Settings
from dra_reconciler.utils.cloudwatch_logger import (
    CloudWatchHandler,
    configure_cloudwatch_logging,
)


def make_record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCloudWatchHandler:
    """Tests for CloudWatchHandler class."""

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_initialization(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client

        handler = CloudWatchHandler(
            log_group="/test/group",
            log_stream="test-stream",
            region="eu-west-1",
        )

        assert handler.log_group == "/test/group"
        assert handler.log_stream == "test-stream"
        mock_boto_client.assert_called_once_with("logs", region_name="eu-west-1")
        mock_client.create_log_group.assert_called_once_with(logGroupName="/test/group")
        mock_client.create_log_stream.assert_called_once_with(
            logGroupName="/test/group",
            logStreamName="test-stream",
        )

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_handles_existing_log_group(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        error_response = {"Error": {"Code": "ResourceAlreadyExistsException"}}
        mock_client.create_log_group.side_effect = ClientError(error_response, "CreateLogGroup")

        CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        mock_client.create_log_stream.assert_called_once()

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_emits_with_correlation_id(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        handler = CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        handler.emit(make_record("Step completed", correlation_id="op-1"))

        kwargs = mock_client.put_log_events.call_args.kwargs
        assert kwargs["logGroupName"] == "/test/group"
        assert kwargs["logStreamName"] == "test-stream"
        assert kwargs["logEvents"][0]["message"] == "[op-1] Step completed"

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_emits_running_step(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        handler = CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        handler.emit(make_record("Polling", correlation_id="op-1", step="S3AutoImport"))

        message = mock_client.put_log_events.call_args.kwargs["logEvents"][0]["message"]
        assert message == "[op-1 S3AutoImport] Polling"

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_ignores_placeholder_labels(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        handler = CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        handler.emit(make_record("Startup", correlation_id="-", step="-"))

        message = mock_client.put_log_events.call_args.kwargs["logEvents"][0]["message"]
        assert message == "Startup"

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_emits_without_correlation_id(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        handler = CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        handler.emit(make_record())

        message = mock_client.put_log_events.call_args.kwargs["logEvents"][0]["message"]
        assert message == "Test message"

    @patch("dra_reconciler.utils.cloudwatch_logger.boto3.client")
    def test_handler_handles_emit_errors(self, mock_boto_client):
        mock_client = MagicMock()
        mock_boto_client.return_value = mock_client
        mock_client.put_log_events.side_effect = Exception("CloudWatch error")
        handler = CloudWatchHandler(log_group="/test/group", log_stream="test-stream")

        # Should not raise exception
        handler.emit(make_record())


class TestConfigureCloudWatchLogging:
    """Tests for configure_cloudwatch_logging function."""

    @pytest.fixture(autouse=True)
    def restore_root_handlers(self):
        root_logger = logging.getLogger()
        handlers = list(root_logger.handlers)
        yield
        root_logger.handlers = handlers

    @patch("dra_reconciler.utils.cloudwatch_logger.CloudWatchHandler")
    def test_disabled_by_default(self, mock_handler_class):
        assert configure_cloudwatch_logging(Settings(CLOUDWATCH_ENABLED=False)) is None
        mock_handler_class.assert_not_called()

    @patch("dra_reconciler.utils.cloudwatch_logger.CloudWatchHandler")
    def test_enabled_with_default_stream(self, mock_handler_class):
        mock_handler_class.return_value.level = logging.INFO
        config = Settings(CLOUDWATCH_ENABLED=True, ENVIRONMENT="staging", AWS_REGION="eu-west-1")

        handler = configure_cloudwatch_logging(config)

        assert handler is mock_handler_class.return_value
        mock_handler_class.assert_called_once_with(
            log_group="/fsx/data-repository-association",
            log_stream="staging-handler",
            region="eu-west-1",
        )
        assert handler in logging.getLogger().handlers

    @patch("dra_reconciler.utils.cloudwatch_logger.CloudWatchHandler")
    def test_enabled_with_custom_group_and_stream(self, mock_handler_class):
        mock_handler_class.return_value.level = logging.INFO
        config = Settings(
            CLOUDWATCH_ENABLED=True,
            CLOUDWATCH_LOG_GROUP="/custom/group",
            CLOUDWATCH_LOG_STREAM="custom-stream",
        )

        configure_cloudwatch_logging(config)

        kwargs = mock_handler_class.call_args.kwargs
        assert kwargs["log_group"] == "/custom/group"
        assert kwargs["log_stream"] == "custom-stream"

    @patch("dra_reconciler.utils.cloudwatch_logger.CloudWatchHandler")
    def test_initialization_errors_are_not_raised(self, mock_handler_class):
        mock_handler_class.side_effect = Exception("CloudWatch setup failed")

        assert configure_cloudwatch_logging(Settings(CLOUDWATCH_ENABLED=True)) is None
