"""
tsh Shell Module

The read-eval loop: prompt, read a line, build its pipeline, run it.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Iterable, Optional, Union

from .io import (
    FdLineSource,
    LineSource,
    NullPresenter,
    Presenter,
    ScriptLineSource,
    StreamPresenter,
)
from .pipeline import PipelineBuilder
from tsh.core.config_loader import ShellConfig, get_config
from tsh.exceptions import PipelineError
from tsh.logger import get_logger
from tsh.process.executor import PipelineExecutor


class Shell:
    """
    tsh Interactive Shell.

    Each iteration owns its line and its pipeline; nothing is carried over
    to the next prompt except the last exit status. The loop ends on the
    quit keyword or at end of input.

    Example:
        >>> shell = Shell()
        >>> shell.run()
    """

    def __init__(
        self,
        line_source: Optional[LineSource] = None,
        presenter: Optional[Presenter] = None,
        config: Optional[ShellConfig] = None,
        builder: Optional[PipelineBuilder] = None,
        executor: Optional[PipelineExecutor] = None
    ):
        self._config = config or get_config().shell
        self._source = line_source or FdLineSource(0)
        self._presenter = presenter or StreamPresenter(sys.stdout)
        self._builder = builder or PipelineBuilder(self._config)
        self._executor = executor or PipelineExecutor(self._config)
        self._logger = get_logger('shell')
        self._running = False
        self._exiting = False
        self._last_status = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_status(self) -> int:
        """Exit status of the last stage of the last pipeline run."""
        return self._last_status

    def run(self) -> None:
        """
        Run the interactive shell.

        This is the main REPL loop.
        """
        self._running = True
        self._exiting = False

        while self._running and not self._exiting:
            try:
                self._presenter.show(self._config.prompt)

                line = self._source.read_line()
                if line is None:
                    self._logger.debug("End of input")
                    break

                if self._execute_line(line):
                    self.request_exit()

            except KeyboardInterrupt:
                print()
                continue
            except Exception as e:
                self._logger.exception(f"Shell error: {e}", exc=e)
                print(f"tsh: error: {e}", file=sys.stderr)

        self._running = False

    def _execute_line(self, line: str) -> bool:
        """
        Execute a command line.

        Returns:
            True if the line asked the shell to terminate
        """
        pipeline = self._builder.build(line)

        if not pipeline:
            return False

        try:
            report = self._executor.execute(pipeline)
        except PipelineError as e:
            print(f"tsh: {e.message}", file=sys.stderr)
            return False

        if report.exit_status is not None:
            self._last_status = report.exit_status

        return report.terminated

    def run_script(self, script: Union[str, Iterable[str]]) -> bool:
        """
        Run lines without prompting.

        Args:
            script: Newline-separated text or an iterable of lines

        Returns:
            True if the script asked the shell to terminate
        """
        source = ScriptLineSource(script)

        while True:
            line = source.read_line()
            if line is None:
                return False
            if self._execute_line(line):
                return True

    def request_exit(self) -> None:
        """Request the shell to exit after the current line."""
        self._exiting = True


def create_shell(
    line_source: Optional[LineSource] = None,
    presenter: Optional[Presenter] = None,
    config: Optional[ShellConfig] = None,
    interactive: bool = True
) -> Shell:
    """Factory function to create a shell."""
    if presenter is None and not interactive:
        presenter = NullPresenter()
    return Shell(line_source=line_source, presenter=presenter, config=config)
