"""
Application wiring.

AppConfig is built once at startup; App turns it into exactly one registry,
error handler, executor and resolver and connects them by constructor
injection. Nothing is kept in module-level state, so several apps can live in
one process (and in one test).

Quick example:
    >>> app = App(AppConfig(tool_name="mytool", default_command="help"))
    >>> app.register(Help, "help")
    >>> app.register(Lazy(lambda: importlib.import_module("mytool.deploy").Deploy), "deploy")
    >>> app.alias("d", "deploy")
    >>> app.main()
"""
import dataclasses
import sys

from .faults import ExitCode
from .executor import Executor
from .handler import ErrorHandler
from .registry import CommandRegistry, Entry
from .resolver import Resolver


@dataclasses.dataclass(frozen=True, kw_only=True)
class AppConfig:
    tool_name: str
    default_command: str = "help"
    log_file: str | None = None
    dev_mode: bool = False
    exception_reporter: object = None
    contextual_resolver: object = None
    max_descr_length: int = 80


class App:

    def __init__(self, config, /, errors=None):
        self.config = config
        self.registry = CommandRegistry(config.default_command, contextual_resolver=config.contextual_resolver)
        self.error_handler = ErrorHandler(
            log_file=config.log_file,
            exception_reporter=config.exception_reporter,
            tool_name=config.tool_name,
            dev_mode=config.dev_mode,
            errors=errors,
        )
        self.executor = Executor(config.log_file, errors=errors)
        self.resolver = Resolver(config.tool_name, self.registry, self.error_handler, errors=errors)

    def register(self, command, name=None, /):
        """
        register a command (or a Direct/Lazy entry). `name` defaults to the
        command's own `name` attribute.
        """
        if not isinstance(command, Entry):
            descr = getattr(command, "descr", None)
            if descr is not None and len(descr) > self.config.max_descr_length:
                raise ValueError("description must be %d characters or less" % self.config.max_descr_length)
            if name is None:
                name = getattr(command, "name", None)
        if not name:
            raise ValueError("a command name is required to register %r" % (command,))
        self.registry.add(command, name)
        return command

    def alias(self, source, target, /):
        self.registry.add_alias(source, target)

    def run(self, argv, /):
        """
        resolve, execute and triage one command line; returns the exit status.
        """
        return self.error_handler.call(lambda: self.executor.call(*self.resolver.call(argv)))

    def main(self, argv=None, /):
        status = self.run(sys.argv[1:] if argv is None else argv)
        sys.exit(ExitCode.translate(status))


__all__ = (
    "AppConfig",
    "App",
)
