"""
tsh Process Module

Child process management for pipeline stages:
- Stage process lifecycle states
- Fork/exec/wait pipeline executor
"""

from .states import (
    EXEC_FAILURE_STATUS,
    Spawned,
    SpawnFailed,
    SpawnOutcome,
    StageProcess,
    StageState,
)
from .executor import ExecutionReport, PipelineExecutor

__all__ = [
    'EXEC_FAILURE_STATUS',
    'Spawned',
    'SpawnFailed',
    'SpawnOutcome',
    'StageProcess',
    'StageState',
    'ExecutionReport',
    'PipelineExecutor',
]
