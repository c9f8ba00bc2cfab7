"""Service layer for the data repository association reconciler."""

from .step_executor import Step, StepExecutor
from .reconciler import Reconciler

__all__ = [
    "Step",
    "StepExecutor",
    "Reconciler",
]
