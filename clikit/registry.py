"""
Command registry: names and aliases to command implementations.

Entries
- Direct(command): an eagerly available command (anything with call(args, name)).
- Lazy(thunk): a zero-argument callable producing the command on lookup, so
  heavy command modules are imported only when their command runs. A thunk
  failing with ImportError or NameError resolves to "no command".

Resolution of a name
1. empty or missing names become the default command name;
2. registry aliases, then contextual aliases, rewrite the name (first
   registered alias wins, lookups are case-sensitive);
3. registered entries are resolved, then the contextual resolver is asked;
4. otherwise the answer is (None, name).
"""
import abc
import logging
from types import MappingProxyType

from .faults import Abort

logger = logging.getLogger(__name__)


class Entry(abc.ABC):
    __slots__ = ()

    @abc.abstractmethod
    def resolve(self):
        """
        return the command, or None when it cannot be loaded.
        """


class Direct(Entry):
    __slots__ = ("command",)

    def __init__(self, command, /):
        self.command = command

    def resolve(self):
        return self.command

    def __repr__(self):
        return "Direct(%r)" % (self.command,)


class Lazy(Entry):
    __slots__ = ("thunk",)

    def __init__(self, thunk, /):
        if not callable(thunk):
            raise TypeError("Lazy() argument must be callable")
        self.thunk = thunk

    def resolve(self):
        try:
            return self.thunk()
        except (ImportError, NameError) as error:
            logger.debug("lazy command %r failed to load: %s", self.thunk, error)
            return None

    def __repr__(self):
        return "Lazy(%r)" % (self.thunk,)


class ContextualResolver(abc.ABC):
    """
    source of commands that are not registered statically (e.g. project-local
    scripts discovered at runtime).
    """

    @abc.abstractmethod
    def command_names(self):
        """names this resolver can currently answer for."""

    @abc.abstractmethod
    def aliases(self):
        """mapping of alias to command name."""

    @abc.abstractmethod
    def command_class(self, name, /):
        """the command for one of command_names()."""


class NullContextualResolver(ContextualResolver):

    def command_names(self):
        return []

    def aliases(self):
        return {}

    def command_class(self, name, /):
        raise Abort("Cannot be called on the NullContextualResolver since command_names is empty")


class CommandRegistry:

    def __init__(self, default, /, contextual_resolver=None):
        self._commands = {}
        self._aliases = {}
        self._default = default
        self._contextual_resolver = contextual_resolver if contextual_resolver is not None else NullContextualResolver()

    @property
    def default(self):
        return self._default

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    @property
    def aliases(self):
        return MappingProxyType(self._aliases)

    def add(self, command, name, /):
        """
        register `command` under `name`; bare commands are wrapped in Direct.
        re-registering a name replaces the earlier entry.
        """
        self._commands[name] = command if isinstance(command, Entry) else Direct(command)

    def add_alias(self, source, target, /):
        self._aliases.setdefault(source, target)

    def lookup_command(self, name, /):
        """
        return (command, resolved_name); command is None when nothing matches.
        """
        if not name:
            name = self._default
        return self._resolve_command(name)

    def command_names(self):
        return [*self._contextual_resolver.command_names(), *self._commands]

    def exist(self, name, /):
        return self._resolve_command(name)[0] is not None

    def resolved_commands(self):
        return {name: entry.resolve() for name, entry in self._commands.items()}

    def _resolve_alias(self, name):
        if name in self._aliases:
            return self._aliases[name]
        return self._contextual_resolver.aliases().get(name, name)

    def _resolve_command(self, name):
        name = self._resolve_alias(name)
        if (entry := self._commands.get(name)) is not None and (command := entry.resolve()) is not None:
            logger.debug("resolved command %r to %r", name, command)
            return command, name
        if name in self._contextual_resolver.command_names():
            return self._contextual_resolver.command_class(name), name
        return None, name


__all__ = (
    "Entry",
    "Direct",
    "Lazy",
    "ContextualResolver",
    "NullContextualResolver",
    "CommandRegistry",
)
