"""
Pipeline Executor Module

Runs a pipeline as real child processes: one fork/exec per stage, with
OS pipes between stages that asked for one.

Author: YSNRFD
Version: 1.0.0
"""

import errno
import os
import signal
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from .states import (
    EXEC_FAILURE_STATUS,
    Spawned,
    SpawnFailed,
    SpawnOutcome,
    StageProcess,
    StageState,
)
from tsh.core.config_loader import ShellConfig, get_config
from tsh.exceptions import ExecFailure, ForkError, PipelineError, ResourceFailure
from tsh.ipc.pipe import OsPipe
from tsh.logger import get_logger
from tsh.shell.pipeline import Pipeline
from tsh.shell.stage import Stage, is_termination_request


# Python ignores these at startup; ignored dispositions survive exec.
_RESTORED_SIGNALS = tuple(
    getattr(signal, name) for name in ('SIGPIPE', 'SIGXFSZ')
    if hasattr(signal, name)
)


@dataclass
class ExecutionReport:
    """Outcome of running one pipeline."""
    terminated: bool = False
    processes: List[StageProcess] = field(default_factory=list)

    @property
    def exit_status(self) -> Optional[int]:
        """Exit status of the last stage that ran, if any."""
        if not self.processes:
            return None
        return self.processes[-1].exit_status

    @property
    def statuses(self) -> List[Optional[int]]:
        return [p.exit_status for p in self.processes]


class PipelineExecutor:
    """
    Forks, wires, executes and reaps the stages of a pipeline.

    Wait policies:
        pipeline: fork every stage, then wait for all of them. Stages run
            concurrently, so a producer can never block forever on a full
            pipe that nobody is draining yet.
        stage: wait for each child before forking the next. Simpler to
            follow, but a stage writing more than the OS pipe buffer into
            a pipe will block until the shell is interrupted.

    Whatever happens, every pipe created for a run is closed and every
    child spawned for it is reaped before :meth:`execute` returns or
    raises.

    Example:
        >>> executor = PipelineExecutor()
        >>> executor.run(PipelineBuilder().build("echo hi | cat"))
        hi
        False
    """

    def __init__(
        self,
        config: Optional[ShellConfig] = None,
        stdin_fd: int = 0,
        stdout_fd: int = 1
    ):
        self._config = config or get_config().shell
        self._stdin_fd = stdin_fd
        self._stdout_fd = stdout_fd
        self._logger = get_logger('executor')

    def run(self, pipeline: Pipeline) -> bool:
        """
        Execute a pipeline.

        Returns:
            True if a termination request was encountered
        """
        return self.execute(pipeline).terminated

    def execute(self, pipeline: Pipeline) -> ExecutionReport:
        """
        Execute a pipeline and report what happened to every stage.

        Raises:
            PipelineError: If a pipe or a child process could not be
                created. The pipeline is abandoned and cleaned up.
        """
        report = ExecutionReport()
        pipes: List[OsPipe] = []
        inbound: Optional[OsPipe] = None
        index = 0

        try:
            for index, stage in enumerate(pipeline):
                if is_termination_request(stage, self._config.quit_keyword):
                    self._logger.info(
                        "Termination requested",
                        context={'stage_index': index}
                    )
                    report.terminated = True
                    break

                outbound = None
                if stage.writes_to_next:
                    outbound = OsPipe.open()
                    pipes.append(outbound)

                process = StageProcess(stage=stage, index=index)
                report.processes.append(process)

                outcome = self._spawn(process, inbound, outbound)
                if isinstance(outcome, SpawnFailed):
                    raise ForkError(outcome.reason, errno=outcome.errno)

                # The child holds its own copy of the inbound pipe now.
                if inbound is not None:
                    inbound.close()
                inbound = outbound

                if self._config.wait_policy == "stage":
                    self._reap(process)

        except ResourceFailure as e:
            self._logger.error(
                f"Abandoning pipeline: {e.message}",
                context={'stage_index': index, 'line': repr(pipeline.line)}
            )
            raise PipelineError(
                f"Pipeline abandoned: {e.message}",
                stage_index=index
            ) from e

        finally:
            for pipe in pipes:
                pipe.close()
            self._reap_all(report.processes)

        return report

    def _spawn(
        self,
        process: StageProcess,
        inbound: Optional[OsPipe],
        outbound: Optional[OsPipe]
    ) -> SpawnOutcome:
        """
        Fork the child for one stage.

        A close-on-exec status pipe tells the parent whether the exec
        succeeded: EOF means the program image replaced the child, an
        errno means it did not.
        """
        stage = process.stage
        status_pipe = OsPipe.open()

        try:
            try:
                pid = os.fork()
            except OSError as e:
                return SpawnFailed(reason=f"Cannot fork: {e.strerror}", errno=e.errno)

            if pid == 0:
                self._exec_child(stage, inbound, outbound, status_pipe)

            process.pid = pid
            process.state = StageState.FORKED

            status_pipe.close_write()
            exec_errno = self._read_exec_status(status_pipe.read_fd)
        finally:
            status_pipe.close()

        if exec_errno is None:
            process.state = StageState.RUNNING
            self._logger.debug(
                "Spawned stage",
                pid=pid,
                context={'index': process.index, 'argv': list(stage.argv)}
            )
        else:
            process.state = StageState.EXEC_FAILED
            process.failure = ExecFailure(stage.program, exec_errno, pid=pid)
            self._logger.info(process.failure.message, pid=pid)
            if self._config.report_exec_failures:
                print(f"tsh: {process.failure.message}", file=sys.stderr, flush=True)

        return Spawned(pid=pid)

    def _exec_child(
        self,
        stage: Stage,
        inbound: Optional[OsPipe],
        outbound: Optional[OsPipe],
        status_pipe: OsPipe
    ) -> None:
        """Wire stdin/stdout and exec the program. Runs in the child; never returns."""
        try:
            status_pipe.close_read()

            if inbound is not None:
                os.dup2(inbound.read_fd, 0)
                inbound.close()
            elif self._stdin_fd != 0:
                os.dup2(self._stdin_fd, 0)

            if outbound is not None:
                os.dup2(outbound.write_fd, 1)
                outbound.close()
            elif self._stdout_fd != 1:
                os.dup2(self._stdout_fd, 1)

            for signum in _RESTORED_SIGNALS:
                signal.signal(signum, signal.SIG_DFL)

            os.execvp(stage.program, stage.argv)
        except OSError as e:
            os.write(status_pipe.write_fd, b"%d" % (e.errno or 0))
        except ValueError:
            # Embedded NUL byte in the program name or an argument.
            os.write(status_pipe.write_fd, b"%d" % errno.EINVAL)
        finally:
            os._exit(EXEC_FAILURE_STATUS)

    @staticmethod
    def _read_exec_status(fd: int) -> Optional[int]:
        """Read the child's exec errno; None on EOF (exec succeeded)."""
        chunks = []
        while True:
            data = os.read(fd, 32)
            if not data:
                break
            chunks.append(data)

        if not chunks:
            return None
        return int(b"".join(chunks))

    def _reap(self, process: StageProcess) -> None:
        """Block until the stage's child exits and record its status."""
        try:
            _, wait_status = os.waitpid(process.pid, 0)
        except ChildProcessError:
            self._logger.warning("Child was already reaped", pid=process.pid)
            process.state = StageState.REAPED
            return

        process.mark_reaped(wait_status)
        self._logger.debug(
            "Reaped stage",
            pid=process.pid,
            context={'index': process.index, 'status': process.exit_status}
        )

    def _reap_all(self, processes: List[StageProcess]) -> None:
        """
        Reap every spawned child that has not been reaped yet.

        A Ctrl-C that lands while waiting does not cut the loop short: the
        wait is retried until every child is collected, and the interrupt
        is raised afterwards.
        """
        interrupted = False
        for process in processes:
            while process.pid is not None and not process.reaped:
                try:
                    self._reap(process)
                except KeyboardInterrupt:
                    interrupted = True

        if interrupted:
            raise KeyboardInterrupt
