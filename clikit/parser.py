"""
Parser: tokens plus a Definition to typed parse nodes.

Nodes (produced in input order)
- LongOption(name, value) / ShortOption(name, value): an option and its value.
- LongFlag(value) / ShortFlag(value): a flag occurrence (value is the spelling).
- Argument(value): a positional argument.
- Unparsed(values): every argument after '--', accumulated into one trailing node.

States
- init:     classify the current token.
- skip:     the current token was consumed as the previous option's value.
- unparsed: accumulate the current token into the trailing Unparsed node.

Disambiguation
- an option name resolves against the Definition; a flag consumes nothing, an
  option consumes the next token, which must be an OptionValue or an
  OptionValueOrPositionalArgument (otherwise OptionRequiresAnArgumentError).
- an OptionValueOrPositionalArgument not consumed by an option is an Argument.
"""
import itertools

from .definition import Flag, Option
from .faults import ParserError, InvalidOptionError, OptionRequiresAnArgumentError
from .tokenizer import (
    LongOptionName,
    ShortOptionName,
    OptionValue,
    PositionalArgument,
    OptionValueOrPositionalArgument,
    UnparsedArgument,
)


class Node:
    """
    immutable parse node. equality is by concrete class and payload.
    """
    __slots__ = ()
    __fields__ = ()

    def __init__(self, *values):
        if type(self) in (Node, OptionNode, FlagNode):
            raise TypeError(f"{type(self).__name__} cannot be instantiated directly")
        if len(values) != len(self.__fields__):
            raise TypeError(f"{type(self).__name__}() takes {len(self.__fields__)} arguments")
        for field, value in zip(self.__fields__, values):
            object.__setattr__(self, field, value)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def _payload(self):
        return tuple(getattr(self, field) for field in self.__fields__)

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return type(self) is type(other) and self._payload() == other._payload()

    def __hash__(self):
        return hash((type(self), self._payload()))


class OptionNode(Node):
    __slots__ = ("name", "value")
    __fields__ = ("name", "value")

    def __repr__(self):
        return "<%s %s=%s>" % (type(self).__name__, self.name, self.value)


class LongOption(OptionNode):
    __slots__ = ()


class ShortOption(OptionNode):
    __slots__ = ()


class FlagNode(Node):
    __slots__ = ("value",)
    __fields__ = ("value",)

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, self.value)


class LongFlag(FlagNode):
    __slots__ = ()


class ShortFlag(FlagNode):
    __slots__ = ()


class Argument(Node):
    __slots__ = ("value",)
    __fields__ = ("value",)

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, self.value)


class Unparsed(Node):
    __slots__ = ("values",)
    __fields__ = ("values",)

    def __init__(self, values):
        super().__init__(tuple(values))

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, " ".join(self.values))


class Parser:
    """
    single forward pass over the tokens of one invocation, bound to a Definition.
    """

    def __init__(self, definition, /):
        self._definition = definition

    def parse(self, tokens, /):
        nodes = []
        state = "init"

        # pair every token with its successor; the last one is paired with None
        for token, following in itertools.pairwise([*tokens, None]):
            match state:
                case "skip":
                    state = "init"
                case "init":
                    state, node = self._parse_token(token, following)
                    nodes.append(node)
                case "unparsed":
                    if not isinstance(token, UnparsedArgument):
                        raise ParserError("bug: non-unparsed argument after unparsed argument", token=token)
                    nodes[-1] = Unparsed((*nodes[-1].values, token.value))

        return nodes

    def _parse_token(self, token, following):
        match token:
            case LongOptionName():
                return self._parse_name(token, following, self._definition.lookup_long, LongOption, LongFlag)
            case ShortOptionName():
                return self._parse_name(token, following, self._definition.lookup_short, ShortOption, ShortFlag)
            case OptionValue():
                raise ParserError(
                    "bug: unexpected option value in argument parse sequence: %s" % token.value,
                    token=token,
                )
            case PositionalArgument() | OptionValueOrPositionalArgument():
                return "init", Argument(token.value)
            case UnparsedArgument():
                return "unparsed", Unparsed((token.value,))
            case _:
                raise ParserError("bug: unexpected token type: %s" % type(token).__name__, token=token)

    @staticmethod
    def _parse_name(token, following, lookup, option, flag):
        match lookup(token.value):
            case Option():
                match following:
                    case OptionValue() | OptionValueOrPositionalArgument():
                        return "skip", option(token.value, following.value)
                    case None | LongOptionName() | ShortOptionName() | PositionalArgument() | UnparsedArgument():
                        raise OptionRequiresAnArgumentError(token.value)
                    case _:
                        raise ParserError(
                            "bug: unexpected argument type: %s" % type(following).__name__,
                            token=following,
                        )
            case Flag():
                return "init", flag(token.value)
            case _:
                raise InvalidOptionError(token.value)


def parse(tokens, definition, /):
    """
    parse `tokens` against `definition` into a list of nodes.
    """
    return Parser(definition).parse(tokens)


__all__ = (
    "Node",
    "OptionNode",
    "LongOption",
    "ShortOption",
    "FlagNode",
    "LongFlag",
    "ShortFlag",
    "Argument",
    "Unparsed",
    "Parser",
    "parse",
)
