# python
"""
Executor behavioral tests.

Scope
- Command invocation and result passthrough.
- Invocation id reporting on failures (aborts pass through quietly).
- Output tee into the log file, restored afterwards.
- Quit/info signal traps installed only for the duration of the call.
"""

import io
import os
import signal
import sys
import tempfile
import unittest
from unittest import TestCase

from rich.console import Console

from clikit.executor import Executor, Tee, invocation_id
from clikit.faults import Abort, ExitCode


class Recorder:
    """command double recording how it was called."""

    def __init__(self, callback=None):
        self.calls = []
        self.callback = callback

    def call(self, args, command_name):
        self.calls.append((args, command_name))
        if self.callback is not None:
            return self.callback()
        return "done"


class TestExecutor(TestCase):

    def setUp(self):
        directory = tempfile.TemporaryDirectory()
        self.addCleanup(directory.cleanup)
        self.directory = directory.name
        self.errors = Console(file=io.StringIO(), color_system=None, width=200)

    def err(self):
        return self.errors.file.getvalue()

    def testCallsCommand(self):
        command = Recorder()
        self.assertEqual(Executor(errors=self.errors).call(command, "deploy", ["--force"]), "done")
        self.assertEqual(command.calls, [(["--force"], "deploy")])
        self.assertEqual(self.err(), "")

    def testFailurePrintsInvocationId(self):
        seen = []

        def callback():
            seen.append(invocation_id.get())
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            Executor(errors=self.errors).call(Recorder(callback), "deploy", [])
        self.assertIn("This command ran with ID: %s" % seen[0], self.err())
        self.assertIn("Please include this information", self.err())
        self.assertIsNone(invocation_id.get())

    def testAbortsPassThroughQuietly(self):
        def callback():
            raise Abort("nope")

        with self.assertRaises(Abort):
            Executor(errors=self.errors).call(Recorder(callback), "deploy", [])
        self.assertEqual(self.err(), "")

    def testOutputIsTeedToLogFile(self):
        log_file = os.path.join(self.directory, "nested", "tool.log")
        seen = []

        def callback():
            seen.append(invocation_id.get())
            self.assertIsInstance(sys.stdout, Tee)
            print("hello")
            sys.stderr.write("warn\n")

        stdout, stderr = sys.stdout, sys.stderr
        Executor(log_file).call(Recorder(callback), "deploy", [])
        self.assertIs(sys.stdout, stdout)
        self.assertIs(sys.stderr, stderr)
        with open(log_file, encoding="utf-8") as file:
            self.assertEqual(file.read(), "[%s] hello\n[%s] warn\n" % (seen[0], seen[0]))

    def testStreamsRestoredOnFailure(self):
        log_file = os.path.join(self.directory, "tool.log")

        def callback():
            raise RuntimeError("boom")

        stdout = sys.stdout
        with self.assertRaises(RuntimeError):
            Executor(log_file, errors=self.errors).call(Recorder(callback), "deploy", [])
        self.assertIs(sys.stdout, stdout)

    @unittest.skipUnless(hasattr(signal, "SIGQUIT"), "platform has no SIGQUIT")
    def testQuitTrapInstalledOnlyDuringCall(self):
        executor = Executor(errors=self.errors)
        before = signal.getsignal(signal.SIGQUIT)
        during = []
        executor.call(Recorder(lambda: during.append(signal.getsignal(signal.SIGQUIT))), "deploy", [])
        self.assertEqual(during, [executor._quit_handler])
        self.assertEqual(signal.getsignal(signal.SIGQUIT), before)

    def testQuitHandlerExits(self):
        executor = Executor(errors=self.errors)
        with self.assertRaises(SystemExit) as context:
            executor._quit_handler(3, sys._getframe())
        self.assertEqual(context.exception.code, ExitCode.FAILURE_BUT_NOT_BUG)
        self.assertTrue(self.err().startswith("SIGQUIT: quit\n"))
        self.assertIn("testQuitHandlerExits", self.err())

    def testInfoHandlerPrintsStack(self):
        executor = Executor(errors=self.errors)
        executor._info_handler(29, sys._getframe())
        self.assertTrue(self.err().startswith("SIGINFO:\n"))


class TestTee(TestCase):

    def testPrefixesEveryLogLine(self):
        stream, log = io.StringIO(), io.StringIO()
        tee = Tee(stream, log, "[id] ")
        tee.write("a\nb")
        tee.write("c\n")
        self.assertEqual(stream.getvalue(), "a\nbc\n")
        self.assertEqual(log.getvalue(), "[id] a\n[id] bc\n")


if __name__ == "__main__":
    unittest.main()
