#!/usr/bin/env python3
"""
tsh Unit Tests

Tests for the pieces that do not spawn processes: exceptions, logging,
configuration, tokenizing, stages and pipeline building.

Run with: python -m pytest tsh/tests/unit_tests.py -v
Or: python -m unittest tsh.tests.unit_tests

Author: YSNRFD
Version: 1.0.0
"""

import json
import logging
import os
import sys
import tempfile
import unittest


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_empty_command_error(self):
        """EmptyCommandError is a StageError with its own code."""
        from tsh.exceptions import EmptyCommandError, StageError, ShellException

        exc = EmptyCommandError("   ")

        self.assertIsInstance(exc, StageError)
        self.assertIsInstance(exc, ShellException)
        self.assertEqual(exc.error_code, 1101)
        self.assertEqual(exc.raw, "   ")
        self.assertIn("1101", str(exc))

    def test_argument_limit_error(self):
        """ArgumentLimitError carries the count and the limit."""
        from tsh.exceptions import ArgumentLimitError

        exc = ArgumentLimitError("a b c", count=3, limit=2)

        self.assertEqual(exc.count, 3)
        self.assertEqual(exc.limit, 2)
        self.assertEqual(exc.context["limit"], 2)

    def test_resource_failures(self):
        """Fork and pipe failures share the ResourceFailure base."""
        from tsh.exceptions import ForkError, PipeCreationError, ResourceFailure

        fork = ForkError("Cannot fork", errno=11)
        pipe = PipeCreationError("Cannot create pipe", errno=24)

        self.assertIsInstance(fork, ResourceFailure)
        self.assertIsInstance(pipe, ResourceFailure)
        self.assertEqual(fork.errno, 11)
        self.assertEqual(pipe.error_code, 2102)

    def test_exec_failure(self):
        """ExecFailure describes a missing program as not found."""
        from tsh.exceptions import ExecFailure

        exc = ExecFailure("nosuchprogram", errno=2, pid=4242)

        self.assertEqual(exc.program, "nosuchprogram")
        self.assertEqual(exc.message, "nosuchprogram: command not found")
        self.assertIn("pid=4242", str(exc))

    def test_pipeline_error(self):
        """PipelineError remembers where the pipeline broke."""
        from tsh.exceptions import PipelineError, ProcessException

        exc = PipelineError("Pipeline abandoned", stage_index=1)

        self.assertIsInstance(exc, ProcessException)
        self.assertEqual(exc.stage_index, 1)
        self.assertEqual(exc.error_code, 2300)


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def tearDown(self):
        from tsh.logger import Logger
        Logger.shutdown()

    def test_logger_singleton(self):
        """Same subsystem gives the same instance."""
        from tsh.logger import Logger

        log1 = Logger('test1')
        log2 = Logger('test1')

        self.assertIs(log1, log2)
        self.assertIsNot(log1, Logger('test2'))

    def test_log_levels(self):
        """Test log level ordering and lookup."""
        from tsh.logger import LogLevel

        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertEqual(LogLevel.from_name("debug"), LogLevel.DEBUG)
        with self.assertRaises(ValueError):
            LogLevel.from_name("verbose")

    def test_records_carry_context(self):
        """Records reach the subsystem logger with pid and context."""
        from tsh.logger import get_logger

        with self.assertLogs('tsh.unit', level='INFO') as captured:
            get_logger('unit').info("hello", pid=7, context={'k': 1})

        record = captured.records[-1]
        self.assertEqual(record.getMessage(), "hello")
        self.assertEqual(record.subsystem, 'unit')
        self.assertEqual(record.pid, 7)
        self.assertEqual(record.context, {'k': 1})

    def test_shutdown_detaches_handlers(self):
        """After shutdown the tsh root logger has no handlers left."""
        from tsh.logger import Logger, LogLevel

        Logger.initialize(level=LogLevel.DEBUG, console_output=True)
        self.assertTrue(logging.getLogger('tsh').handlers)

        Logger.shutdown()

        self.assertEqual(logging.getLogger('tsh').handlers, [])

    def test_unusable_log_file_leaves_logging_untouched(self):
        """A log file under a regular file fails before any handler is attached."""
        from tsh.logger import Logger, LogLevel

        with tempfile.NamedTemporaryFile(delete=False) as f:
            blocker = f.name
        self.addCleanup(os.unlink, blocker)

        with self.assertRaises(OSError):
            Logger.initialize(
                level=LogLevel.DEBUG,
                log_file=os.path.join(blocker, "tsh.log"),
                console_output=True
            )

        self.assertEqual(logging.getLogger('tsh').handlers, [])

    def test_formatter(self):
        """Formatter renders subsystem, pid and context."""
        from tsh.logger import LogFormatter

        record = logging.LogRecord(
            name='tsh.unit', level=logging.WARNING, pathname=__file__,
            lineno=1, msg="disk on fire", args=(), exc_info=None
        )
        record.subsystem = 'unit'
        record.pid = 42
        record.context = {'k': 'v'}

        text = LogFormatter(use_colors=False).format(record)

        self.assertIn("WARNING", text)
        self.assertIn("[unit]", text)
        self.assertIn("(pid=42)", text)
        self.assertIn("disk on fire", text)
        self.assertTrue(text.endswith("{k=v}"))


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def tearDown(self):
        from tsh.core.config_loader import ConfigLoader
        ConfigLoader().reset()

    def _write_config(self, data) -> str:
        handle = tempfile.NamedTemporaryFile(
            'w', suffix='.json', delete=False, encoding='utf-8'
        )
        with handle:
            if isinstance(data, str):
                handle.write(data)
            else:
                json.dump(data, handle)
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_default_config(self):
        """Test default configuration values."""
        from tsh.core.config_loader import Config

        config = Config()

        self.assertEqual(config.shell.prompt, "$ ")
        self.assertEqual(config.shell.quit_keyword, "quit")
        self.assertEqual(config.shell.wait_policy, "pipeline")
        self.assertGreaterEqual(config.shell.max_args, 25)
        self.assertEqual(config.logging.level, "WARNING")

    def test_load_config(self):
        """Values from the file override defaults; others are kept."""
        from tsh.core.config_loader import ConfigLoader, get_config

        path = self._write_config({
            'shell': {'prompt': 'tsh> ', 'wait_policy': 'stage'},
            'logging': {'level': 'DEBUG'},
        })

        config = ConfigLoader().load(path)

        self.assertEqual(config.shell.prompt, 'tsh> ')
        self.assertEqual(config.shell.wait_policy, 'stage')
        self.assertEqual(config.shell.quit_keyword, 'quit')
        self.assertEqual(config.logging.level, 'DEBUG')
        self.assertIs(get_config(), config)

    def test_missing_file(self):
        """A missing file is a ConfigError."""
        from tsh.core.config_loader import ConfigLoader
        from tsh.exceptions import ConfigError

        with self.assertRaises(ConfigError):
            ConfigLoader().load('/nonexistent/tsh.json')

    def test_invalid_json(self):
        """Broken JSON is a ConfigError."""
        from tsh.core.config_loader import ConfigLoader
        from tsh.exceptions import ConfigError

        path = self._write_config("{not json")

        with self.assertRaises(ConfigError):
            ConfigLoader().load(path)

    def test_invalid_values(self):
        """Values the shell cannot run with are rejected."""
        from tsh.core.config_loader import ConfigLoader
        from tsh.exceptions import ConfigError

        bad = [
            {'shell': {'wait_policy': 'parallel'}},
            {'shell': {'max_args': 3}},
            {'shell': {'quit_keyword': 'two words'}},
            {'logging': {'level': 'LOUD'}},
            {'logging': {'log_file': 5}},
        ]

        for data in bad:
            with self.subTest(data=data):
                with self.assertRaises(ConfigError):
                    ConfigLoader().load(self._write_config(data))

    def test_section_must_be_object(self):
        """A section that is not a JSON object is a ConfigError, not a crash."""
        from tsh.core.config_loader import ConfigLoader
        from tsh.exceptions import ConfigError

        for data in ({'shell': []}, {'logging': "DEBUG"}, {'shell': None}):
            with self.subTest(data=data):
                with self.assertRaises(ConfigError) as ctx:
                    ConfigLoader().load(self._write_config(data))
                self.assertEqual(ctx.exception.key, next(iter(data)))

    def test_get_and_set(self):
        """Dot-notation access works in both directions."""
        from tsh.core.config_loader import ConfigLoader
        from tsh.exceptions import ConfigError

        loader = ConfigLoader()
        loader.set('shell.prompt', '% ')

        self.assertEqual(loader.get('shell.prompt'), '% ')
        self.assertEqual(loader.get('shell.nothing', 'x'), 'x')
        self.assertEqual(loader.to_dict()['shell']['prompt'], '% ')
        with self.assertRaises(ConfigError):
            loader.set('shell.nothing', 1)


class TestTokenizer(unittest.TestCase):
    """Test splitting lines at delimiters."""

    def test_empty_lines(self):
        """Empty and whitespace-only lines have no segments."""
        from tsh.shell.parser import Tokenizer

        tokenizer = Tokenizer()

        self.assertEqual(tokenizer.tokenize(""), [])
        self.assertEqual(tokenizer.tokenize("   \t \n"), [])

    def test_separators(self):
        """Each segment records the delimiter right after it."""
        from tsh.shell.parser import Tokenizer, Separator

        segments = Tokenizer().tokenize("ls -l | wc -l ; pwd\n")

        self.assertEqual([s.text for s in segments], ["ls -l", "wc -l", "pwd"])
        self.assertEqual(
            [s.separator for s in segments],
            [Separator.PIPE, Separator.SEQUENCE, Separator.END]
        )

    def test_empty_segments_kept(self):
        """Stray delimiters produce empty segments."""
        from tsh.shell.parser import Tokenizer

        segments = Tokenizer().tokenize("a||b;")

        self.assertEqual([s.text for s in segments], ["a", "", "b", ""])


class TestStage(unittest.TestCase):
    """Test stage construction and the termination check."""

    def test_single_word(self):
        """A single word is a one-token argv with no pipe flags."""
        from tsh.shell.stage import Stage

        stage = Stage.create("ls")

        self.assertEqual(stage.argv, ("ls",))
        self.assertEqual(stage.program, "ls")
        self.assertFalse(stage.reads_from_previous)
        self.assertFalse(stage.writes_to_next)

    def test_whitespace_runs(self):
        """Runs of whitespace separate tokens; ends are trimmed."""
        from tsh.shell.stage import Stage

        stage = Stage.create("  grep \t -v   foo  ", True, False)

        self.assertEqual(stage.argv, ("grep", "-v", "foo"))
        self.assertEqual(stage.raw, "grep \t -v   foo")
        self.assertTrue(stage.reads_from_previous)

    def test_many_tokens(self):
        """At least 25 tokens are supported."""
        from tsh.shell.stage import Stage

        words = [f"w{i}" for i in range(40)]
        stage = Stage.create("echo " + " ".join(words))

        self.assertEqual(len(stage.argv), 41)

    def test_empty_command(self):
        """No tokens raises EmptyCommandError."""
        from tsh.shell.stage import Stage
        from tsh.exceptions import EmptyCommandError

        with self.assertRaises(EmptyCommandError):
            Stage.create("   ")

    def test_argument_limit(self):
        """More tokens than the limit raises ArgumentLimitError."""
        from tsh.shell.stage import split_command
        from tsh.exceptions import ArgumentLimitError

        with self.assertRaises(ArgumentLimitError):
            split_command("a " * 30, max_args=25)

    def test_stage_is_immutable(self):
        """Stages cannot be modified after creation."""
        import dataclasses
        from tsh.shell.stage import Stage

        stage = Stage.create("ls")

        with self.assertRaises(dataclasses.FrozenInstanceError):
            stage.raw = "rm"

    def test_termination_request(self):
        """Only an exact first-token match asks to quit."""
        from tsh.shell.stage import Stage, is_termination_request

        cases = {
            "quit": True,
            "quit now": True,
            "Quit": False,
            "exit": False,
            "echo quit": False,
        }

        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(is_termination_request(Stage.create(text)), expected)

    def test_termination_custom_keyword(self):
        """The keyword is configurable."""
        from tsh.shell.stage import Stage, is_termination_request

        self.assertTrue(is_termination_request(Stage.create("bye"), keyword="bye"))
        self.assertFalse(is_termination_request(Stage.create("quit"), keyword="bye"))

    def test_termination_malformed(self):
        """Malformed input is never a termination request and never raises."""
        from tsh.shell.stage import Stage, is_termination_request

        self.assertFalse(is_termination_request(None))
        self.assertFalse(is_termination_request(object()))
        self.assertFalse(is_termination_request(Stage(raw="", argv=())))


class TestPipelineBuilder(unittest.TestCase):
    """Test pipe flag assignment."""

    def setUp(self):
        from tsh.core.config_loader import ShellConfig
        from tsh.shell.pipeline import PipelineBuilder

        self.builder = PipelineBuilder(ShellConfig())

    def flags(self, line):
        return [
            (s.reads_from_previous, s.writes_to_next)
            for s in self.builder.build(line)
        ]

    def test_single_command(self):
        """No delimiter gives one unpiped stage."""
        pipeline = self.builder.build("ls -la /tmp")

        self.assertEqual(len(pipeline), 1)
        self.assertEqual(pipeline[0].argv, ("ls", "-la", "/tmp"))
        self.assertEqual(self.flags("ls -la /tmp"), [(False, False)])

    def test_three_stage_pipe(self):
        """a | b | c is piped end to end."""
        pipeline = self.builder.build("a | b | c")

        self.assertEqual([s.program for s in pipeline], ["a", "b", "c"])
        self.assertEqual(
            self.flags("a | b | c"),
            [(False, True), (True, True), (True, False)]
        )

    def test_sequence(self):
        """a ; b has no pipes at all."""
        self.assertEqual(self.flags("a ; b"), [(False, False), (False, False)])

    def test_mixed(self):
        """Pipes and sequences combine stage by stage."""
        self.assertEqual(
            self.flags("a | b ; c | d"),
            [(False, True), (True, False), (False, True), (True, False)]
        )

    def test_empty_line(self):
        """Empty lines give an empty, falsy pipeline."""
        for line in ("", "   ", " ; ; ", "|"):
            with self.subTest(line=line):
                pipeline = self.builder.build(line)
                self.assertFalse(pipeline)
                self.assertEqual(len(pipeline), 0)

    def test_empty_segments_dropped(self):
        """Stray delimiters are dropped without breaking the line."""
        pipeline = self.builder.build("a ; ; b")

        self.assertEqual([s.program for s in pipeline], ["a", "b"])
        self.assertEqual(self.flags("a | | b"), [(False, True), (True, False)])

    def test_trailing_pipe(self):
        """A pipe with nothing after it is not connected."""
        self.assertEqual(self.flags("a |"), [(False, False)])
        self.assertEqual(self.flags("a | b |"), [(False, True), (True, False)])

    def test_pipe_then_sequence(self):
        """The delimiter right after a stage decides its pipe-out."""
        self.assertEqual(self.flags("a | ; b"), [(False, True), (True, False)])
        self.assertEqual(self.flags("a ; | b"), [(False, False), (False, False)])

    def test_flags_consistent(self):
        """Adjacent stages always agree on the pipe between them."""
        lines = ["a|b;c", "a;;|b|", "|a|b|c|", "a | b | ; c ; | d", "x"]

        for line in lines:
            with self.subTest(line=line):
                stages = list(self.builder.build(line))
                if stages:
                    self.assertFalse(stages[0].reads_from_previous)
                    self.assertFalse(stages[-1].writes_to_next)
                for prev, cur in zip(stages, stages[1:]):
                    self.assertEqual(cur.reads_from_previous, prev.writes_to_next)

    def test_stages_match_create(self):
        """Built stages are the same values Stage.create gives for each segment."""
        from tsh.shell.stage import Stage

        pipeline = self.builder.build("  ls -l |  wc -l ; pwd ")

        self.assertEqual(list(pipeline), [
            Stage.create("ls -l", writes_to_next=True),
            Stage.create("wc -l", reads_from_previous=True),
            Stage.create("pwd"),
        ])

    def test_argument_limit_drops_stage(self):
        """A stage over the argument limit is dropped, not fatal."""
        from tsh.core.config_loader import ShellConfig
        from tsh.shell.pipeline import PipelineBuilder

        builder = PipelineBuilder(ShellConfig(max_args=25))
        pipeline = builder.build("echo " + "x " * 30 + "; pwd")

        self.assertEqual([s.program for s in pipeline], ["pwd"])


class TestOsPipe(unittest.TestCase):
    """Test the OS pipe wrapper."""

    def test_close_once(self):
        """Closing twice is harmless and both ends end up released."""
        from tsh.ipc.pipe import OsPipe

        pipe = OsPipe.open()
        read_fd, write_fd = pipe.read_fd, pipe.write_fd

        os.write(write_fd, b"ping")
        self.assertEqual(os.read(read_fd, 4), b"ping")

        pipe.close()
        pipe.close()

        self.assertTrue(pipe.closed)
        for fd in (read_fd, write_fd):
            with self.assertRaises(OSError):
                os.fstat(fd)

    def test_context_manager(self):
        """The pipe closes itself on exit."""
        from tsh.ipc.pipe import OsPipe

        with OsPipe.open() as pipe:
            self.assertFalse(pipe.closed)

        self.assertTrue(pipe.closed)


class TestLineSources(unittest.TestCase):
    """Test where input lines come from."""

    def test_stream_source(self):
        """Lines lose their newline; EOF is None."""
        import io
        from tsh.shell.io import StreamLineSource

        source = StreamLineSource(io.StringIO("ls\n\necho hi"))

        self.assertEqual(source.read_line(), "ls")
        self.assertEqual(source.read_line(), "")
        self.assertEqual(source.read_line(), "echo hi")
        self.assertIsNone(source.read_line())

    def test_fd_source_leaves_rest_unread(self):
        """Only one line is consumed from the descriptor."""
        from tsh.shell.io import FdLineSource

        read_fd, write_fd = os.pipe()
        self.addCleanup(os.close, read_fd)
        os.write(write_fd, b"cat\nleft for cat\n")
        os.close(write_fd)

        source = FdLineSource(read_fd)

        self.assertEqual(source.read_line(), "cat")
        self.assertEqual(os.read(read_fd, 100), b"left for cat\n")
        self.assertIsNone(source.read_line())

    def test_script_source(self):
        """Strings are split into lines."""
        from tsh.shell.io import ScriptLineSource

        source = ScriptLineSource("a\nb")

        self.assertEqual([source.read_line() for _ in range(3)], ["a", "b", None])


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
