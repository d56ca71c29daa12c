"""
tsh IPC Module

OS pipes connecting adjacent pipeline stages.
"""

from .pipe import OsPipe

__all__ = [
    'OsPipe',
]
