"""
Declarative options classes.

An Opts subclass declares its command line with class-level fields; the
attribute name is the symbolic name. The same class is used twice per
invocation: define() writes the fields into a fresh Definition, and after
parsing, evaluate() binds an Evaluation so reading a field returns its value.

Fields
- flag(short=, long=, descr=)                               -> bool
- option(short=, long=, descr=, default=None, required=False) -> str | None
- multi_option(short=, long=, descr=, default=())           -> list[str]
- position(descr=, default=None, skip=None, required=False) -> str | None
- required_position(descr=)                                  -> str
- rest(descr=)                                               -> list[str]

Callables given to a field (`default`, SkipAlways/SkipForValue predicates)
receive the Opts instance first, like methods, so they can read other fields.

Quick example:
    >>> class Opts(clikit.Opts):
    ...     force = flag(short="-f", long="--force", descr="Force")
    ...     output = option(short="-o", long="--output", default="text")
    ...     first = position(skip=SkipAlways(lambda self: self.force))
    ...     files = rest()
"""
import abc
import functools

from .definition import SkipAlways, SkipForValue
from .faults import UndefinedNameError


class Field(abc.ABC):
    """
    base descriptor: remembers its attribute name and reads its value from the
    bound Evaluation of the instance.
    """
    kind = None

    def __init__(self, **spec):
        self.name = None
        self.spec = spec

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return getattr(instance._result(), self.kind)(self.name)

    def __set__(self, instance, value):
        raise AttributeError("%s %r is read-only" % (self.kind, self.name))

    @abc.abstractmethod
    def define(self, opts, definition, /):
        """
        declare this field on `definition`, binding callables to `opts`.
        """

    def __repr__(self):
        return "%s(%s)" % (self.kind, ", ".join("%s=%r" % item for item in (("name", self.name), *self.spec.items())))


def _bind(opts, callback, /):
    return functools.partial(callback, opts) if callable(callback) else callback


class FlagField(Field):
    kind = "flag"

    def define(self, opts, definition, /):
        definition.add_flag(self.name, **self.spec)


class OptionField(Field):
    kind = "option"

    def define(self, opts, definition, /):
        definition.add_option(self.name, **self.spec | {"default": _bind(opts, self.spec.get("default"))})


class PositionField(Field):
    kind = "position"

    def define(self, opts, definition, /):
        spec = dict(self.spec)
        match spec.get("skip"):
            case SkipAlways(predicate=predicate):
                spec["skip"] = SkipAlways(functools.partial(predicate, opts))
            case SkipForValue(predicate=predicate):
                spec["skip"] = SkipForValue(functools.partial(predicate, opts))
        definition.add_position(self.name, **spec | {"default": _bind(opts, spec.get("default"))})


def flag(*, short=None, long=None, descr=None):
    return FlagField(short=short, long=long, descr=descr)


def option(*, short=None, long=None, descr=None, default=None, required=False):
    return OptionField(short=short, long=long, descr=descr, default=default, required=required)


def multi_option(*, short=None, long=None, descr=None, default=()):
    return OptionField(short=short, long=long, descr=descr, default=default, multi=True)


def position(*, descr=None, default=None, skip=None, required=False):
    return PositionField(descr=descr, default=default, skip=skip, required=required, multi=False)


def required_position(*, descr=None):
    return PositionField(descr=descr, required=True, multi=False)


def rest(*, descr=None):
    return PositionField(descr=descr, required=False, multi=True)


class Opts:
    """
    base of all options classes. every Opts gets -h/--help after its own fields.
    """
    help = flag(short="-h", long="--help", descr="Show this help message")

    def __init__(self):
        self._evaluation = None

    @classmethod
    @functools.cache
    def fields(cls):
        """
        declared fields in definition order: base classes first, `help` last.
        """
        fields = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Field):
                    fields[name] = value
        fields["help"] = fields.pop("help")
        return tuple(fields.values())

    def define(self, definition, /):
        for field in type(self).fields():
            field.define(self, definition)

    def evaluate(self, evaluation, /):
        self._evaluation = evaluation
        evaluation.resolve_positions()

    def _result(self):
        if self._evaluation is None:
            raise RuntimeError("%s has not been evaluated yet" % type(self).__name__)
        return self._evaluation

    @property
    def unparsed(self):
        return self._result().unparsed

    def each_option(self):
        evaluation = self._result()
        for option in evaluation.definition.options:
            yield option.name, evaluation.option(option.name)

    def each_flag(self):
        evaluation = self._result()
        for flag in evaluation.definition.flags:
            yield flag.name, evaluation.flag(flag.name)

    def lookup_option(self, name, /):
        try:
            return self._result().option(name)
        except UndefinedNameError:
            return None

    def lookup_flag(self, name, /):
        try:
            return self._result().flag(name)
        except UndefinedNameError:
            return False

    def __getitem__(self, name, /):
        evaluation = self._result()
        if evaluation.has_option(name):
            return evaluation.option(name)
        if evaluation.has_flag(name):
            return evaluation.flag(name)
        return None


__all__ = (
    "Field",
    "FlagField",
    "OptionField",
    "PositionField",
    "flag",
    "option",
    "multi_option",
    "position",
    "required_position",
    "rest",
    "Opts",
)
