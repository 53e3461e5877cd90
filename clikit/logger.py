"""
Logger: user-facing messages that are also kept in a rotating debug log.

Messages may carry rich markup ("[bold]done[/bold]"); the terminal gets the
rendered form, the debug log gets the plain text prefixed with the current
invocation id (when a command is running under the Executor).

- info / warn: stdout (warn in yellow).
- error / fatal: stderr (red; fatal prefixed with "Fatal:").
- debug: only echoed when the environment variable `env_debug_name` is set to
  anything but "" or "0"; always written to the debug log.
"""
import logging
import logging.handlers
import os
import os.path

from rich.console import Console
from rich.text import Text

from .executor import invocation_id

MAX_LOG_SIZE = 5 * 1024 * 1000
MAX_NUM_LOGS = 10

TEXT_FORMAT = "%(asctime)s  %(levelname)-8s  %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class Logger:

    def __init__(self, debug_log_file, /, env_debug_name="DEBUG", console=None, errors=None):
        os.makedirs(os.path.dirname(os.path.abspath(debug_log_file)), exist_ok=True)
        self.env_debug_name = env_debug_name
        self.console = console if console is not None else Console()
        self.errors = errors if errors is not None else Console(stderr=True)

        self._handler = logging.handlers.RotatingFileHandler(
            debug_log_file, maxBytes=MAX_LOG_SIZE, backupCount=MAX_NUM_LOGS, encoding="utf-8"
        )
        self._handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT))
        # private to this instance, never registered with the logging manager
        self._debug_logger = logging.Logger("clikit.debug", logging.DEBUG)
        self._debug_logger.propagate = False
        self._debug_logger.addHandler(self._handler)

    def info(self, message, /, debug=True):
        self.console.print(message)
        if debug:
            self._debug_logger.info(self._format_debug(message))

    def warn(self, message, /, debug=True):
        self.console.print(Text.from_markup(message, style="yellow"))
        if debug:
            self._debug_logger.warning(self._format_debug(message))

    def error(self, message, /, debug=True):
        self.errors.print(Text.from_markup(message, style="red"))
        if debug:
            self._debug_logger.error(self._format_debug(message))

    def fatal(self, message, /, debug=True):
        self.errors.print(Text.assemble(("Fatal:", "bold"), " ", Text.from_markup(message), style="red"))
        if debug:
            self._debug_logger.critical(self._format_debug(message))

    def debug(self, message, /):
        if self.debugging:
            self.console.print(message)
        self._debug_logger.debug(self._format_debug(message))

    @property
    def debugging(self):
        return os.environ.get(self.env_debug_name, "") not in ("", "0")

    def close(self):
        self._debug_logger.removeHandler(self._handler)
        self._handler.close()

    def _format_debug(self, message):
        plain = Text.from_markup(message).plain
        if (id := invocation_id.get()) is None:
            return plain
        return "[%s] %s" % (id, plain)


__all__ = (
    "MAX_LOG_SIZE",
    "MAX_NUM_LOGS",
    "Logger",
)
