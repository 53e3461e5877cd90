"""
Evaluation: a read-only view pairing a Definition with its parse nodes.

Construction validates required options immediately; positions are resolved
once, on resolve_positions() or on the first position query.

Queries
- flag(name)     -> bool: any ShortFlag/LongFlag matching the flag's spellings.
- option(name)   -> the last occurrence's value, every value in order for multi
                    options, or the declared default when absent.
- position(name) -> the assigned argument, every remaining argument for a multi
                    position, or the default when unassigned ([] for multi).
- unparsed       -> all arguments after '--', in order.

Position resolution walks the declared positions against the positional
arguments. For each position, in this order:
1. a declared skip predicate that answers True leaves the position unassigned
   and does not advance the argument cursor;
2. a required position with no argument left raises MissingRequiredPosition;
3. with no argument left the position stays unassigned;
4. a multi position takes every remaining argument, any other takes one.
Leftover arguments raise TooManyPositions.

While positions resolve, a skip predicate or default may query positions
already assigned; later ones read as unassigned.
"""
from .faults import MissingRequiredOption, MissingRequiredPosition, TooManyPositions, UndefinedNameError
from .parser import Argument, LongFlag, LongOption, ShortFlag, ShortOption, Unparsed


class Evaluation:

    def __init__(self, definition, nodes, /):
        self._definition = definition
        self._nodes = tuple(nodes)
        self._arguments = tuple(node.value for node in self._nodes if isinstance(node, Argument))
        self._unparsed = tuple(
            value for node in self._nodes if isinstance(node, Unparsed) for value in node.values
        )
        self._positions = None
        self._check_required_options()

    @property
    def definition(self):
        return self._definition

    @property
    def nodes(self):
        return self._nodes

    @property
    def arguments(self):
        return list(self._arguments)

    @property
    def unparsed(self):
        return list(self._unparsed)

    def has_flag(self, name, /):
        return self._definition.lookup_flag(name) is not None

    def has_option(self, name, /):
        return self._definition.lookup_option(name) is not None

    def has_position(self, name, /):
        return self._definition.lookup_position(name) is not None

    def flag(self, name, /):
        if (flag := self._definition.lookup_flag(name)) is None:
            raise UndefinedNameError("flag", name)
        return any(
            (isinstance(node, ShortFlag) and node.value == flag.short) or
            (isinstance(node, LongFlag) and node.value == flag.long)
            for node in self._nodes
        )

    def option(self, name, /):
        if (option := self._definition.lookup_option(name)) is None:
            raise UndefinedNameError("option", name)
        matches = self._occurrences(option)
        if matches:
            return [node.value for node in matches] if option.multi else matches[-1].value
        default = option.default
        if not option.multi:
            return default
        match default:
            case None:
                return []
            case str():
                return [default]
            case list() | tuple():
                return list(default)
        return default

    def position(self, name, /):
        if (position := self._definition.lookup_position(name)) is None:
            raise UndefinedNameError("position", name)
        self.resolve_positions()
        try:
            value = self._positions[name]
        except KeyError:
            return [] if position.multi else position.default
        return list(value) if position.multi else value

    def resolve_positions(self):
        """
        assign positional arguments to declared positions (once per evaluation).
        """
        if self._positions is not None:
            return
        arguments = self._arguments
        # skip predicates and defaults may read earlier positions while this runs
        values = self._positions = {}
        try:
            index = 0
            for position in self._definition.positions:
                candidate = arguments[index] if index < len(arguments) else None
                if position.skips(candidate):
                    continue
                if candidate is None:
                    if position.required:
                        raise MissingRequiredPosition()
                    continue
                if position.multi:
                    values[position.name] = arguments[index:]
                    index = len(arguments)
                else:
                    values[position.name] = candidate
                    index += 1
            if index < len(arguments):
                raise TooManyPositions()
        except BaseException:
            self._positions = None
            raise

    def _occurrences(self, option):
        return [
            node for node in self._nodes
            if (isinstance(node, ShortOption) and option.short is not None and node.name == option.short) or
               (isinstance(node, LongOption) and option.long is not None and node.name == option.long)
        ]

    def _check_required_options(self):
        for option in self._definition.options:
            if not option.required:
                continue
            matches = self._occurrences(option)
            if not matches or matches[-1].value is None:
                raise MissingRequiredOption(option.as_written_by_user())

    def __repr__(self):
        return "evaluation(nodes=%r)" % (self._nodes,)


__all__ = (
    "Evaluation",
)
