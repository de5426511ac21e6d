"""Workflow engine: step data types, combinators and the executor."""
from glassine.modules.engine.combinators import sequence, with_retry
from glassine.modules.engine.executor import run_step, run_workflow

__all__ = [
    "run_step",
    "run_workflow",
    "sequence",
    "with_retry",
]
