"""
Executor: runs one resolved command.

Per invocation
1. install the quit/info signal traps (where the platform has them);
2. tee stdout/stderr into the log file, prefixing logged lines with a fresh
   invocation id;
3. call command.call(args, command_name);
4. restore the output streams and the previous signal handlers, on every
   exit path.

An exception escaping the command prints the invocation id before it
propagates, so users can match a failure to its log lines. Aborts pass
through untouched; they are expected outcomes.
"""
import contextlib
import contextvars
import logging
import os
import secrets
import signal
import sys
import traceback

from rich.console import Console

from .faults import ExitCode

logger = logging.getLogger(__name__)

invocation_id = contextvars.ContextVar("invocation_id", default=None)


class Tee:
    """
    text stream writing through to `stream` and, line-prefixed with `prefix`,
    to `log`. everything but writing is delegated to `stream`.
    """

    def __init__(self, stream, log, prefix, /):
        self.stream = stream
        self.log = log
        self.prefix = prefix
        self._at_line_start = True

    def write(self, text, /):
        self.stream.write(text)
        for line in text.splitlines(keepends=True):
            if self._at_line_start:
                self.log.write(self.prefix)
            self.log.write(line)
            self._at_line_start = line.endswith("\n")
        return len(text)

    def flush(self):
        self.stream.flush()
        self.log.flush()

    def __getattr__(self, name):
        return getattr(self.stream, name)


class Executor:

    def __init__(self, log_file=None, /, errors=None):
        if log_file:
            os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        self.log_file = log_file
        self.errors = errors if errors is not None else Console(stderr=True)

    def call(self, command, command_name, args, /):
        with self._traps(), self._logging() as id:
            try:
                return command.call(args, command_name)
            except Exception:
                try:
                    self.errors.print("This command ran with ID: %s" % id, markup=False, highlight=False)
                    self.errors.print(
                        "Please include this information in any issues/report along with relevant logs",
                        markup=False,
                        highlight=False,
                    )
                except OSError:
                    logger.debug("could not print the invocation id %s", id)
                raise

    @contextlib.contextmanager
    def _logging(self):
        id = secrets.token_hex(4)
        token = invocation_id.set(id)
        try:
            if not self.log_file:
                yield id
                return
            with open(self.log_file, "a", encoding="utf-8") as log:
                prefix = "[%s] " % id
                logger.debug("teeing output of invocation %s to %s", id, self.log_file)
                with (
                    contextlib.redirect_stdout(Tee(sys.stdout, log, prefix)),
                    contextlib.redirect_stderr(Tee(sys.stderr, log, prefix)),
                ):
                    yield id
        finally:
            invocation_id.reset(token)

    @contextlib.contextmanager
    def _traps(self):
        with self._trap("SIGQUIT", self._quit_handler), self._trap("SIGINFO", self._info_handler):
            yield

    @contextlib.contextmanager
    def _trap(self, name, handler):
        if (signum := getattr(signal, name, None)) is None:
            yield
            return
        try:
            previous = signal.signal(signum, handler)
        except ValueError as error:
            # only the main thread may install handlers
            logger.debug("cannot trap %s: %s", name, error)
            yield
            return
        try:
            yield
        finally:
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)

    def _quit_handler(self, signum, frame, /):
        self._print_stack("SIGQUIT: quit", frame)
        sys.exit(ExitCode.FAILURE_BUT_NOT_BUG)

    def _info_handler(self, signum, frame, /):
        self._print_stack("SIGINFO:", frame)

    def _print_stack(self, title, frame):
        self.errors.print(title, markup=False, highlight=False)
        self.errors.print("".join(traceback.format_stack(frame)).rstrip(), markup=False, highlight=False)


__all__ = (
    "invocation_id",
    "Tee",
    "Executor",
)
