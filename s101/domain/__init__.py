"""s101.domain

Domain types shared by every layer: the run context, the label, build tasks and
the analysis task's declared inputs.
"""

from __future__ import annotations

from .run_context import (
    BASELINE,
    LABEL_ENV_VAR,
    LABEL_PROPERTY,
    LABELS,
    RECENT,
    RunContext,
    resolve_label,
)
from .tasks import AnalysisInputs, BuildTask, TaskOutputIndex, build_task_output_index

__all__ = [
    "AnalysisInputs",
    "BASELINE",
    "BuildTask",
    "LABELS",
    "LABEL_ENV_VAR",
    "LABEL_PROPERTY",
    "RECENT",
    "RunContext",
    "TaskOutputIndex",
    "build_task_output_index",
    "resolve_label",
]
