"""
Pipeline Builder Module

Turns an input line into an ordered sequence of stages with consistent
pipe flags.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Tuple

from .parser import Segment, Tokenizer
from .stage import Stage
from tsh.core.config_loader import ShellConfig, get_config
from tsh.exceptions import EmptyCommandError, StageError
from tsh.logger import get_logger


@dataclass
class Pipeline:
    """Stages of one input line, in left-to-right execution order."""
    stages: List[Stage] = field(default_factory=list)
    line: str = ""

    def __len__(self) -> int:
        return len(self.stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    def __getitem__(self, index: int) -> Stage:
        return self.stages[index]

    def __bool__(self) -> bool:
        return bool(self.stages)


class PipelineBuilder:
    """
    Builds pipelines from input lines.

    Segments that cannot become a stage (no tokens, too many tokens) are
    dropped rather than failing the whole line. Pipe flags are assigned
    after dropping, so for every pair of adjacent stages
    ``stages[i].reads_from_previous == stages[i - 1].writes_to_next``,
    and the last stage never writes to a pipe.

    Example:
        >>> pipeline = PipelineBuilder().build("ls | wc -l")
        >>> [(s.reads_from_previous, s.writes_to_next) for s in pipeline]
        [(False, True), (True, False)]
    """

    def __init__(self, config: Optional[ShellConfig] = None):
        self._config = config or get_config().shell
        self._tokenizer = Tokenizer()
        self._logger = get_logger('parser')

    def build(self, line: str) -> Pipeline:
        """
        Parse a line into a pipeline.

        Args:
            line: Raw input line

        Returns:
            Pipeline, empty when there is nothing to run
        """
        runnable = self._runnable_stages(self._tokenizer.tokenize(line))

        stages = []
        reads_from_previous = False

        for index, (segment, stage) in enumerate(runnable):
            writes_to_next = segment.pipes_out and index < len(runnable) - 1
            stages.append(replace(
                stage,
                reads_from_previous=reads_from_previous,
                writes_to_next=writes_to_next,
            ))
            reads_from_previous = writes_to_next

        self._logger.debug(
            "Built pipeline",
            context={'stages': len(stages), 'line': repr(line)}
        )
        return Pipeline(stages=stages, line=line)

    def _runnable_stages(
        self,
        segments: List[Segment]
    ) -> List[Tuple[Segment, Stage]]:
        """Turn every segment into an unpiped stage, keeping only those that succeed."""
        runnable = []

        for segment in segments:
            try:
                stage = Stage.create(segment.text, max_args=self._config.max_args)
            except EmptyCommandError as e:
                self._logger.debug("Dropping empty segment", context=e.context)
                continue
            except StageError as e:
                self._logger.warning(f"Dropping segment: {e.message}", context=e.context)
                continue
            runnable.append((segment, stage))

        return runnable
