"""
tsh - A minimal UNIX teaching shell

Reads a line, splits it into stages at | and ;, and runs every stage as
a child process, connecting piped stages with OS pipes.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

# Shell first: it pulls in the process package in a safe order.
from .shell.shell import Shell, create_shell
from .shell.pipeline import Pipeline, PipelineBuilder
from .process.executor import PipelineExecutor

__all__ = [
    'Shell',
    'create_shell',
    'Pipeline',
    'PipelineBuilder',
    'PipelineExecutor',
]
