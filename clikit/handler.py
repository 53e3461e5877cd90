"""
ErrorHandler: the single place exit statuses are decided.

call(callback) runs the whole program and classifies whatever escapes it with
the abort matrix of clikit.faults:

    outcome                        printed   queued for report   status
    normal completion              -         -                   0
    SystemExit(code)               -         -                   code
    Abort                          yes       -                   30
    AbortSilent                    -         -                   30
    Bug / any other exception      yes       yes                 1
    BugSilent                      -         yes                 1

KeyboardInterrupt and a full disk (ENOSPC) are turned into plain aborts first.
At most one exception is queued; it is handed to the exception reporter, with
the log file contents, when the interpreter exits.
"""
import abc
import atexit
import errno
import logging
import signal

from rich.console import Console
from rich.text import Text

from .faults import ExitCode, GenericAbort, Abort, classify

logger = logging.getLogger(__name__)

SIGNALS_THAT_ARENT_BUGS = tuple(
    signum for signum in (getattr(signal, name, None) for name in ("SIGTERM", "SIGHUP", "SIGINT")) if signum is not None
)


class ExceptionReporter(abc.ABC):

    @abc.abstractmethod
    def report(self, exception, logs=None, /):
        """
        submit `exception` (and the captured `logs`, if any) to a crash reporting service.
        """


class NullExceptionReporter(ExceptionReporter):

    def report(self, exception, logs=None, /):
        return None


class ErrorHandler:
    """
    exception triage around the whole program.

    `exception_reporter` is an ExceptionReporter or a zero-argument callable
    returning one (resolved when a report is due). `override_exception_handler`
    may be set to a callable (exception) -> status that takes over triage for
    every non-exit exception.
    """

    def __init__(self, log_file=None, exception_reporter=None, tool_name=None, dev_mode=False, errors=None):
        self.log_file = log_file
        self.tool_name = tool_name
        self.dev_mode = dev_mode
        self.errors = errors if errors is not None else Console(stderr=True)
        self.override_exception_handler = None
        self._exception_reporter = exception_reporter if exception_reporter is not None else NullExceptionReporter()
        self._at_exit_exception = None

    @property
    def exception_reporter(self):
        if isinstance(self._exception_reporter, ExceptionReporter):
            return self._exception_reporter
        return self._exception_reporter()

    @property
    def queued_exception(self):
        return self._at_exit_exception

    def call(self, callback, /):
        self._at_exit(self._report_at_exit)
        return self._triage_all_exceptions(callback)

    def handle_abort(self, exception, /):
        """
        narrow triage for aborts raised outside call(): print unless silent,
        queue bugs, and answer the failure-but-not-bug status.
        """
        bug, silent = classify(exception)
        if bug:
            self._at_exit_exception = exception
        if not silent:
            self._print(exception)
        return ExitCode.FAILURE_BUT_NOT_BUG

    def report_exception(self, error, /):
        if (exception := self._exception_for_submission(error)) is None:
            return
        logs = None
        if self.log_file:
            try:
                with open(self.log_file, encoding="utf-8", errors="replace") as file:
                    logs = file.read()
            except OSError as failure:
                logs = "(%s: %s)" % (type(failure).__name__, failure)
        logger.debug("reporting %r", exception)
        self.exception_reporter.report(exception, logs)

    def _at_exit(self, hook):
        atexit.register(hook)

    def _report_at_exit(self):
        self.report_exception(self._at_exit_exception)

    def _triage_all_exceptions(self, callback):
        try:
            try:
                callback()
                return ExitCode.SUCCESS
            except KeyboardInterrupt as error:
                raise Abort("Interrupt") from error
            except OSError as error:
                if error.errno != errno.ENOSPC:
                    raise
                if self.tool_name:
                    message = "Your disk is full - %s requires free space to operate" % self.tool_name
                else:
                    message = "Your disk is full - free space is required to operate"
                raise Abort(message) from error
        except SystemExit as exit:
            match exit.code:
                case None:
                    return ExitCode.SUCCESS
                case int(status):
                    return status
                case message:
                    self._print(message)
                    return ExitCode.BUG
        except (Exception, GenericAbort) as error:
            bug, silent = classify(error)
            if bug:
                self._at_exit_exception = error
            if self.override_exception_handler is not None:
                return self.override_exception_handler(error)
            if self.dev_mode and bug:
                raise
            if not silent:
                self._print(error)
            return ExitCode.BUG if bug else ExitCode.FAILURE_BUT_NOT_BUG

    def _exception_for_submission(self, error):
        if error is None:
            return None
        if not classify(error)[0]:
            return None
        match error:
            case KeyboardInterrupt():
                return None
            case SystemExit():
                return None
            case _ if getattr(error, "signum", None) in SIGNALS_THAT_ARENT_BUGS:
                return None
        return error

    def _print(self, error):
        match error:
            case GenericAbort(message=message):
                pass
            case str(message):
                pass
            case _:
                message = str(error) or type(error).__name__
        try:
            self.errors.print(Text(message, style="red"))
        except BrokenPipeError:
            pass
        except OSError as failure:
            if failure.errno != errno.EIO:
                raise


__all__ = (
    "SIGNALS_THAT_ARENT_BUGS",
    "ExceptionReporter",
    "NullExceptionReporter",
    "ErrorHandler",
)
