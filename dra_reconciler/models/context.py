# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Continuation context threaded through re-invocations of one operation."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class CallbackContext(BaseModel):
    """
    Progress markers for one logical operation.

    The caller stores the context returned with an IN_PROGRESS event and
    passes it back on the next invocation, which resumes at the first step
    not listed in ``completed_steps``.
    """

    completed_steps: list[str] = Field(
        default_factory=list, description="Steps finished or skipped, in order"
    )
    mutation_issued: dict[str, bool] = Field(
        default_factory=dict, description="Steps whose remote call has already been sent"
    )
    stabilization_started_at: dict[str, float] = Field(
        default_factory=dict, description="Epoch seconds at which polling began, per step"
    )
    poll_attempts: dict[str, int] = Field(
        default_factory=dict, description="Lifecycle polls spent per step"
    )
    results: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Remote call results carried across invocations"
    )
    correlation_id: Optional[str] = Field(
        None, description="Correlation ID shared by every invocation of the operation"
    )

    def is_completed(self, step: str) -> bool:
        return step in self.completed_steps

    def mark_completed(self, step: str) -> None:
        if step not in self.completed_steps:
            self.completed_steps.append(step)

    def mark_mutation_issued(self, step: str, result: Optional[dict[str, Any]] = None) -> None:
        self.mutation_issued[step] = True
        if result:
            self.results[step] = result

    def record_poll(self, step: str, now: float) -> int:
        """Record one lifecycle poll for ``step`` and return the total so far."""
        self.stabilization_started_at.setdefault(step, now)
        self.poll_attempts[step] = self.poll_attempts.get(step, 0) + 1
        return self.poll_attempts[step]
