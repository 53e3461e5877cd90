"""
Resolver: argv to (command, command_name, remaining_args).

The first argument is the command name (missing or empty selects the default
command). An unknown name prints a "Command not found" frame with close
matches, and any abort raised during lookup ends the process with the
failure-but-not-bug status.
"""
import difflib
import logging
import sys

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .faults import GenericAbort, AbortSilent

logger = logging.getLogger(__name__)


class Resolver:

    def __init__(self, tool_name, registry, error_handler, /, errors=None):
        self.tool_name = tool_name
        self.registry = registry
        self.error_handler = error_handler
        self.errors = errors if errors is not None else Console(stderr=True)

    def call(self, args, /):
        args = list(args)
        name = args.pop(0) if args else None
        try:
            command, name = self.registry.lookup_command(name)
            if command is None:
                self._not_found(name)
                raise AbortSilent()
        except GenericAbort as abort:
            sys.exit(self.error_handler.handle_abort(abort))
        logger.debug("dispatching %r with %d argument(s)", name, len(args))
        return command, name, args

    def suggestions(self, name, /):
        """
        up to two registered command names or aliases close to `name`.
        """
        candidates = dict.fromkeys([*self.registry.command_names(), *self.registry.aliases])
        return difflib.get_close_matches(name, list(candidates), 2)

    def _not_found(self, name):
        renders = [Panel(
            Text.assemble((f"{self.tool_name} {name}", "bold cyan"), " was not found"),
            title=Text("Command not found", style="bold red"),
            title_align="left",
            border_style="red",
            expand=False,
        )]
        if suggestions := self.suggestions(name):
            renders.append(Text("Did you mean?", style="bold"))
            for suggestion in suggestions:
                renders.append(Text.assemble("  ", (f"{self.tool_name} {suggestion}", "cyan")))
        self.errors.print(Group(*renders))


__all__ = (
    "Resolver",
)
