"""
tsh Shell Module

Provides the interactive command-line shell:
- Line tokenizing at | and ;
- Stage construction
- Pipeline building
- Read-eval loop
"""

from .parser import Tokenizer, Segment, Separator
from .stage import Stage, split_command, is_termination_request
from .pipeline import Pipeline, PipelineBuilder
from .io import (
    LineSource,
    Presenter,
    StreamLineSource,
    FdLineSource,
    ScriptLineSource,
    StreamPresenter,
    NullPresenter,
)
from .shell import Shell, create_shell

__all__ = [
    'Tokenizer',
    'Segment',
    'Separator',
    'Stage',
    'split_command',
    'is_termination_request',
    'Pipeline',
    'PipelineBuilder',
    'LineSource',
    'Presenter',
    'StreamLineSource',
    'FdLineSource',
    'ScriptLineSource',
    'StreamPresenter',
    'NullPresenter',
    'Shell',
    'create_shell',
]
