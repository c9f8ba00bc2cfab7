# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Entry point that dispatches an invocation to the matching handler."""

import logging
from typing import Optional

from ..clients.fsx_client import FSxClient
from ..config import Settings, settings as get_default_settings
from ..models.context import CallbackContext
from ..models.enums import Action
from ..models.progress import HandlerRequest, ProgressEvent
from ..utils.correlation import bind_operation, log_extra
from .step_executor import StepExecutor

logger = logging.getLogger(__name__)


class Reconciler:
    """
    Holds the FSx client and step executor shared by all handlers.

    Usage::

        reconciler = Reconciler.from_settings()
        event = await reconciler.invoke(Action.CREATE, request, context)
        while event.is_in_progress:
            # persist event.callback_context, wait event.callback_delay_seconds
            event = await reconciler.invoke(Action.CREATE, request, event.callback_context)

    Two operations on the same association must not run concurrently; the
    caller is responsible for serializing them.
    """

    def __init__(self, client: FSxClient, executor: StepExecutor):
        """
        Initialize the reconciler.

        Args:
            client: FSx client, shared across steps and operations
            executor: Step executor configured with the polling bounds
        """
        self.client = client
        self.executor = executor

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Reconciler":
        config = config or get_default_settings()
        return cls(
            client=FSxClient(region=config.aws_region),
            executor=StepExecutor.from_settings(config),
        )

    async def invoke(
        self,
        action: Action,
        request: HandlerRequest,
        callback_context: Optional[CallbackContext] = None,
    ) -> ProgressEvent:
        """
        Run one invocation of ``action``.

        Args:
            action: Operation to run
            request: Handler request
            callback_context: Context from the previous invocation (None on
                the first call)

        Returns:
            ProgressEvent for the invocation

        Raises:
            Exception: Errors that are not classified propagate unchanged
        """
        # Imported here: handlers depend on services
        from ..handlers import (
            create_handler,
            delete_handler,
            list_handler,
            read_handler,
            update_handler,
        )

        context = callback_context or CallbackContext()
        bind_operation(context)
        logger.info(f"Invoking '{action.value}' handler", extra=log_extra())

        if action == Action.CREATE:
            event = await create_handler(self.client, self.executor, request, context)
        elif action == Action.UPDATE:
            event = await update_handler(self.client, self.executor, request, context)
        elif action == Action.DELETE:
            event = await delete_handler(self.client, self.executor, request, context)
        elif action == Action.READ:
            event = await read_handler(self.client, request, context)
        elif action == Action.LIST:
            event = await list_handler(self.client, request)
        else:
            raise ValueError(f"Unknown action: {action}")

        if event.is_failed:
            logger.warning(
                f"'{action.value}' handler failed with {event.error_code.value}: {event.message}",
                extra=log_extra(),
            )
        return event
