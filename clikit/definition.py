"""
Definition: the per-invocation schema of a command line.

Overview
- Entities
  • Flag: presence-only switch with a short and/or long spelling.
  • Option: a Flag that takes one value per occurrence; may be required, multi
    (occurrences collected in order) and may carry a literal or thunk default.
  • Position: order-dependent argument; may be required, multi (consumes every
    remaining argument), defaulted, and skipped by a predicate.
- Skip predicates (chosen at declaration time, never by introspection)
  • SkipAlways(predicate): predicate() -> bool, consulted even with no argument left.
  • SkipForValue(predicate): predicate(candidate) -> bool, consulted per candidate.
- Definition
  • add_flag / add_option / add_position build the schema incrementally.
  • lookup_flag / lookup_option / lookup_position by symbolic name.
  • lookup_short / lookup_long by bare spelling (no leading dashes).
  • option_missing(callback) resolves unknown spellings on the fly.

Invariants
- short/long spellings and symbolic names are unique across all entities; a
  collision raises ConflictingFlag naming the earlier owner.
- spellings are given with their dashes ('-f', '--force') and stored without.
- nothing may be declared after a multi position.
- options cannot be multi and required; multi positions cannot have a default
  or be required.

Quick example:
    >>> definition = Definition()
    >>> definition.add_flag("force", short="-f", long="--force")
    >>> definition.add_option("output", short="-o", default="text")
    >>> definition.add_position("file", required=True, multi=False)
    >>> definition.lookup_short("o").name
    'output'
"""
import functools
import operator
import re

from .faults import DefinitionError, ConflictingFlag, InvalidFlag, InvalidLookup, InvalidPosition
from .utils import rename


class EntityType(type):
    """
    Metaclass for schema entities.

    - Exposes every name in __introspectable__ as a read-only property backed by
      the '_<name>' attribute.
    - Provides stable __repr__/__rich_repr__ for diagnostics and help output.
    - __typename__ is the lowercase class name, used in messages.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: property(operator.attrgetter("_" + field), doc="read-only %r field" % field)
                for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, object.__getattribute__(self, "_" + field)
        self.__rich_repr__ = __rich_repr__

        return self


class SkipAlways:
    """
    skip predicate that ignores the candidate argument: predicate() -> bool.
    """
    __slots__ = ("predicate",)

    def __init__(self, predicate, /):
        if not callable(predicate):
            raise TypeError("SkipAlways() argument must be callable")
        self.predicate = predicate

    def __call__(self, candidate, /):
        return bool(self.predicate())

    def __repr__(self):
        return "SkipAlways(%r)" % self.predicate


class SkipForValue:
    """
    skip predicate over the current candidate argument: predicate(value) -> bool.

    with no candidate left there is nothing to judge and the position is not skipped.
    """
    __slots__ = ("predicate",)

    def __init__(self, predicate, /):
        if not callable(predicate):
            raise TypeError("SkipForValue() argument must be callable")
        self.predicate = predicate

    def __call__(self, candidate, /):
        if candidate is None:
            return False
        return bool(self.predicate(candidate))

    def __repr__(self):
        return "SkipForValue(%r)" % self.predicate


def _check_name(name, /):
    if not isinstance(name, str) or not name:
        raise TypeError("entity name must be a non-empty string")
    return name


def _resolve_default(default, /):
    return default() if callable(default) else default


class Flag(metaclass=EntityType):
    """
    presence-only switch. short/long are bare spellings (no dashes).
    """
    __introspectable__ = ("name", "short", "long", "descr")

    def __init__(self, name, /, *, short=None, long=None, descr=None):
        if (long or "").startswith("-") or (short or "").startswith("-"):
            raise ValueError("invalid - prefix")
        self._name = _check_name(name)
        self._short = short
        self._long = long
        self._descr = descr

    def as_written_by_user(self):
        """
        the spelling a user would type: '--long' when available, else '-s'.
        """
        return "--%s" % self._long if self._long else "-%s" % self._short


class Option(Flag):
    """
    value-bearing switch. `default` is read through the property, which
    invokes zero-argument thunks on every read.
    """
    __introspectable__ = ("name", "short", "long", "descr", "required", "multi")

    def __init__(self, name, /, *, short=None, long=None, descr=None, default=None, required=False, multi=False):
        if multi and required:
            raise ValueError("multi-valued options cannot have a required value")
        super().__init__(name, short=short, long=long, descr=descr)
        self._default = default
        self._required = bool(required)
        self._multi = bool(multi)

    @property
    def default(self):
        return _resolve_default(self._default)

    @property
    def dynamic_default(self):
        return callable(self._default)

    @property
    def optional(self):
        return not self._required


class Position(metaclass=EntityType):
    """
    positional argument. `skip` is None, a SkipAlways or a SkipForValue.
    """
    __introspectable__ = ("name", "descr", "required", "multi", "skip")

    def __init__(self, name, /, *, required, multi, descr=None, default=None, skip=None):
        if multi and (default is not None or required):
            raise ValueError("multi-valued positions cannot have a default or required value")
        if skip is not None and not isinstance(skip, SkipAlways | SkipForValue):
            raise TypeError("position 'skip' must be a SkipAlways or a SkipForValue")
        self._name = _check_name(name)
        self._descr = descr
        self._required = bool(required)
        self._multi = bool(multi)
        self._default = default
        self._skip = skip

    @property
    def default(self):
        return _resolve_default(self._default)

    @property
    def dynamic_default(self):
        return callable(self._default)

    @property
    def optional(self):
        return not self._required

    def skips(self, candidate, /):
        """
        whether this position is skipped for `candidate` (None when no argument is left).
        """
        if self._skip is None:
            return False
        return self._skip(candidate)


class Definition:
    """
    Incremental schema of flags, options and positions for one command invocation.

    Indices
    - by short spelling, by long spelling, by symbolic name (shared by flags,
      options and positions). Insertions never overwrite.
    """

    def __init__(self):
        self._flags = []
        self._options = []
        self._positions = []
        self._by_short = {}
        self._by_long = {}
        self._by_name = {}
        self._option_missing = None

    @property
    def flags(self):
        return tuple(self._flags)

    @property
    def options(self):
        return tuple(self._options)

    @property
    def positions(self):
        return tuple(self._positions)

    def add_flag(self, name, /, *, short=None, long=None, descr=None):
        short, long = self._strip_prefixes_and_validate(short, long)
        flag = Flag(name, short=short, long=long, descr=descr)
        self._add_resolution(flag)
        self._flags.append(flag)
        return flag

    def add_option(self, name, /, *, short=None, long=None, descr=None, default=None, required=False, multi=False):
        short, long = self._strip_prefixes_and_validate(short, long)
        option = Option(
            name, short=short, long=long, descr=descr, default=default, required=required, multi=multi
        )
        self._add_resolution(option)
        self._options.append(option)
        return option

    def add_position(self, name, /, *, required, multi, descr=None, default=None, skip=None):
        position = Position(name, required=required, multi=multi, descr=descr, default=default, skip=skip)
        if self._positions and self._positions[-1].multi:
            raise InvalidPosition("Cannot have any more positional arguments after multi", name=name)
        self._add_name_resolution(position)
        self._positions.append(position)
        return position

    def option_missing(self, callback, /):
        """
        install a fallback for unknown spellings.

        callback(spelling) receives the dash-prefixed spelling ('--config.foo', '-x')
        and answers "option", "flag" or None. answered entities are registered on
        the fly with the bare spelling as symbolic name.
        """
        if callback is not None and not callable(callback):
            raise TypeError("option_missing() argument must be callable")
        self._option_missing = callback

    def lookup_flag(self, name, /):
        entity = self._by_name.get(name)
        return entity if type(entity) is Flag else None

    def lookup_option(self, name, /):
        entity = self._by_name.get(name)
        return entity if type(entity) is Option else None

    def lookup_position(self, name, /):
        entity = self._by_name.get(name)
        return entity if type(entity) is Position else None

    def lookup_short(self, name, /):
        if name.startswith("-"):
            raise InvalidLookup("invalid '-' prefix", name=name)
        try:
            return self._by_short[name]
        except KeyError:
            return self._missing(name, "-" + name, short="-" + name)

    def lookup_long(self, name, /):
        if name.startswith("-"):
            raise InvalidLookup("invalid '-' prefix", name=name)
        try:
            return self._by_long[name]
        except KeyError:
            return self._missing(name, "--" + name, long="--" + name)

    def _missing(self, name, spelling, /, **spellings):
        if self._option_missing is None:
            return None
        match self._option_missing(spelling):
            case None:
                return None
            case "option":
                return self.add_option(name, **spellings)
            case "flag":
                return self.add_flag(name, **spellings)
            case answer:
                raise DefinitionError(
                    "option_missing answered %r for %r; expected 'option', 'flag' or None" % (answer, spelling),
                    answer=answer,
                    spelling=spelling,
                )

    @staticmethod
    def _strip_short_prefix(short):
        if not re.match(r"-[^-]", short, re.DOTALL):
            raise InvalidFlag("Short flag '%s' does not start with '-'" % short, short=short)
        if len(short) != 2:
            raise InvalidFlag("Short flag must be a single character", short=short)
        return short[1:]

    @staticmethod
    def _strip_long_prefix(long):
        if not re.match(r"--[^-]", long, re.DOTALL):
            raise InvalidFlag("Long flag '%s' does not start with '--'" % long, long=long)
        return long[2:]

    def _strip_prefixes_and_validate(self, short, long):
        if short is None and long is None:
            raise DefinitionError("One or more of short and long must be specified")
        if short is not None:
            short = self._strip_short_prefix(short)
        if long is not None:
            long = self._strip_long_prefix(long)
        return short, long

    def _add_resolution(self, entity):
        if entity.short is not None and (existing := self._by_short.get(entity.short)):
            raise ConflictingFlag(
                "Short flag '%s' already defined by %s" % (entity.short, existing.name),
                existing=existing,
            )
        if entity.long is not None and (existing := self._by_long.get(entity.long)):
            raise ConflictingFlag(
                "Long flag '%s' already defined by %s" % (entity.long, existing.name),
                existing=existing,
            )
        self._add_name_resolution(entity)
        if entity.short is not None:
            self._by_short[entity.short] = entity
        if entity.long is not None:
            self._by_long[entity.long] = entity

    def _add_name_resolution(self, entity):
        if existing := self._by_name.get(entity.name):
            raise ConflictingFlag(
                "Flag '%s' already defined by %s" % (entity.name, existing.name),
                existing=existing,
            )
        self._by_name[entity.name] = entity


__all__ = (
    "SkipAlways",
    "SkipForValue",
    "Flag",
    "Option",
    "Position",
    "Definition",
)
