# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Step executor: the single driver loop behind every mutating handler.

An operation is an ordered list of ``Step`` descriptors. The executor runs
them strictly in order, recording progress in the ``CallbackContext`` so a
re-invoked operation resumes at the first step that has not completed:

1. A step already listed in ``completed_steps`` is skipped.
2. ``should_apply`` decides whether the step is needed at all; a step that
   is not needed is recorded as completed without any remote call.
3. ``invoke`` issues the remote call. It must itself check whether the change
   is already in place, since it can run again after a crash. Once it returns,
   the step is marked as issued and is never invoked again for the operation.
4. ``stabilize`` is polled until it reports True. Polls are spaced by the poll
   interval and bounded by the maximum wait, measured from the first poll even
   across invocations.
5. Errors: ``HandlerFailure`` subclasses end the operation with their own code;
   other exceptions go through the step's error handler, which translates
   classified FSx errors and re-raises everything else.

Requirements: steps never overlap; step N is not invoked before step N-1 has
stabilized or been skipped.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from ..config import Settings
from ..errors import HandlerFailure, NotStabilizedError
from ..models.context import CallbackContext
from ..models.progress import ProgressEvent
from ..models.resource import ResourceModel, TYPE_NAME
from ..utils.correlation import log_extra, step_scope
from .error_classifier import handle_error

logger = logging.getLogger(__name__)

InvokeResult = Union[dict[str, Any], ProgressEvent, None]


@dataclass
class Step:
    """
    One remote mutation and how to wait for it.

    Attributes:
        name: Unique name within the operation, recorded in the context
        invoke: Issues the remote call. Returns a small dict to keep in the
            context, None when nothing had to be sent, or a ProgressEvent to
            end the operation right away
        should_apply: Returns False when the step is not needed
        stabilize: Returns True once the remote resource has settled
        handle_error: Translates exceptions raised by the step
    """

    name: str
    invoke: Callable[[ResourceModel, CallbackContext], Awaitable[InvokeResult]]
    should_apply: Optional[Callable[[ResourceModel, CallbackContext], bool]] = None
    stabilize: Optional[Callable[[ResourceModel, CallbackContext], Awaitable[bool]]] = None
    handle_error: Callable[[Exception], ProgressEvent] = field(default=handle_error)


class StepExecutor:
    """
    Runs steps in order with bounded, resumable stabilization.

    The sleep primitive and the clock are injectable so tests can run
    without real delays.
    """

    def __init__(
        self,
        poll_interval_seconds: float = 5.0,
        max_wait_seconds: float = 120 * 60,
        max_polls_per_invocation: Optional[int] = None,
        callback_delay_seconds: int = 5,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the executor.

        Args:
            poll_interval_seconds: Delay between lifecycle polls
            max_wait_seconds: Longest a step may wait to stabilize
            max_polls_per_invocation: Polls allowed before returning
                IN_PROGRESS to the caller (None = poll until done)
            callback_delay_seconds: Delay suggested to the caller on IN_PROGRESS
            sleep: Coroutine used to wait between polls (default asyncio.sleep)
            clock: Wall clock in epoch seconds (default time.time); must be
                comparable across invocations
        """
        self.poll_interval_seconds = poll_interval_seconds
        self.max_wait_seconds = max_wait_seconds
        self.max_polls_per_invocation = max_polls_per_invocation
        self.callback_delay_seconds = callback_delay_seconds
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.time

    @classmethod
    def from_settings(
        cls,
        config: Settings,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> "StepExecutor":
        return cls(
            poll_interval_seconds=config.poll_interval_seconds,
            max_wait_seconds=config.max_wait_seconds,
            max_polls_per_invocation=config.max_polls_per_invocation,
            callback_delay_seconds=config.callback_delay_seconds,
            sleep=sleep,
            clock=clock,
        )

    async def run(
        self,
        steps: list[Step],
        model: ResourceModel,
        context: CallbackContext,
    ) -> Optional[ProgressEvent]:
        """
        Run ``steps`` in order.

        Args:
            steps: Step descriptors in execution order
            model: Resource the steps act on
            context: Continuation context, updated in place

        Returns:
            None when every step completed, otherwise the event that ends or
            suspends the invocation (FAILED, IN_PROGRESS, or a terminal event
            returned by a step)

        Raises:
            Exception: Any error the step's error handler does not classify
        """
        for step in steps:
            if context.is_completed(step.name):
                logger.debug(f"{TYPE_NAME} step '{step.name}' already completed, skipping")
                continue

            with step_scope(step.name):
                try:
                    event = await self._run_step(step, model, context)
                except HandlerFailure as e:
                    logger.error(
                        f"{TYPE_NAME} [{model.association_id}] step '{step.name}' failed: {e.message}",
                        extra=log_extra(model.association_id),
                    )
                    return ProgressEvent.failed(e.error_code, e.message)
                except Exception as e:
                    return step.handle_error(e)

            if event is not None:
                return event

        return None

    async def _run_step(
        self,
        step: Step,
        model: ResourceModel,
        context: CallbackContext,
    ) -> Optional[ProgressEvent]:
        issued = context.mutation_issued.get(step.name, False)

        if not issued and step.should_apply is not None and not step.should_apply(model, context):
            logger.info(f"{TYPE_NAME} [{model.association_id}] step '{step.name}' not needed")
            context.mark_completed(step.name)
            return None

        if not issued:
            result = await step.invoke(model, context)
            if isinstance(result, ProgressEvent):
                context.mark_completed(step.name)
                return result
            context.mark_mutation_issued(step.name, result)

        if step.stabilize is not None:
            event = await self._stabilize(step, model, context)
            if event is not None:
                return event

        context.mark_completed(step.name)
        logger.info(
            f"{TYPE_NAME} [{model.association_id}] step '{step.name}' completed",
            extra=log_extra(model.association_id),
        )
        return None

    async def _stabilize(
        self,
        step: Step,
        model: ResourceModel,
        context: CallbackContext,
    ) -> Optional[ProgressEvent]:
        """
        Poll ``step.stabilize`` until it reports True.

        Returns:
            None once stabilized, or an IN_PROGRESS event when this
            invocation's poll budget is spent

        Raises:
            NotStabilizedError: When the maximum wait has elapsed
        """
        polls = 0
        while True:
            context.record_poll(step.name, self._clock())
            polls += 1

            if await step.stabilize(model, context):
                return None

            elapsed = self._clock() - context.stabilization_started_at[step.name]
            if elapsed >= self.max_wait_seconds:
                raise NotStabilizedError(
                    model.association_id,
                    f"Timed out after {self.max_wait_seconds / 60:g} minutes in step '{step.name}'.",
                )

            if self.max_polls_per_invocation is not None and polls >= self.max_polls_per_invocation:
                logger.info(
                    f"{TYPE_NAME} [{model.association_id}] step '{step.name}' still stabilizing, "
                    f"handing back after {polls} polls",
                    extra=log_extra(model.association_id),
                )
                return ProgressEvent.progress(model, context, self.callback_delay_seconds)

            await self._sleep(self.poll_interval_seconds)
