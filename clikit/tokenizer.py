"""
Tokenizer: raw argument strings to typed tokens.

Rules (single forward pass)
- '--' alone switches to unparsed mode; every later argument becomes an
  UnparsedArgument verbatim, including further '--' or option-looking strings.
- '--name' or '--name=value' becomes LongOptionName(name) [+ OptionValue(value)],
  split on the first '='.
- '-xyz' is a short option cluster: each letter becomes a ShortOptionName and a
  trailing run of digits becomes one OptionValue ('-m5' -> m, 5).
- anything else is a PositionalArgument, or an OptionValueOrPositionalArgument
  when it directly follows an option name (the parser decides which it is).

Quick example:
    >>> tokenize(["-ab", "211"])
    [<ShortOptionName a>, <ShortOptionName b>, <OptionValueOrPositionalArgument 211>]
"""
import re

from .faults import InvalidShortOption, InvalidCharInShortOption


class Token:
    """
    immutable, tagged string payload. equality is by concrete class and value.
    """
    __slots__ = ("_value",)

    def __init__(self, value, /):
        if not isinstance(value, str):
            raise TypeError(f"{type(self).__name__}() argument must be a string")
        object.__setattr__(self, "_value", value)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return type(self) is type(other) and self._value == other._value

    def __hash__(self):
        return hash((type(self), self._value))

    def __repr__(self):
        return "<%s %s>" % (type(self).__name__, self._value)


class OptionName(Token):
    __slots__ = ()


class LongOptionName(OptionName):
    __slots__ = ()


class ShortOptionName(OptionName):
    __slots__ = ()


class OptionValue(Token):
    __slots__ = ()


class PositionalArgument(Token):
    __slots__ = ()


class OptionValueOrPositionalArgument(Token):
    __slots__ = ()


class UnparsedArgument(Token):
    __slots__ = ()


def tokenize(args, /):
    """
    convert a flat sequence of argument strings into a list of tokens.

    raises
    - InvalidShortOption / InvalidCharInShortOption for malformed short clusters.
    """
    tokens = []
    unparsed = False

    for arg in args:
        if unparsed:
            tokens.append(UnparsedArgument(arg))
        elif arg == "--":
            unparsed = True
        elif re.match(r"--.", arg, re.DOTALL):
            name, sep, value = arg[2:].partition("=")
            tokens.append(LongOptionName(name))
            if sep:
                tokens.append(OptionValue(value))
        elif re.match(r"-.", arg, re.DOTALL):
            tokens.extend(tokenize_short_option(arg[1:]))
        elif tokens and isinstance(tokens[-1], OptionName):
            tokens.append(OptionValueOrPositionalArgument(arg))
        else:
            tokens.append(PositionalArgument(arg))

    return tokens


def tokenize_short_option(cluster, /):
    """
    tokenize the characters of a short option cluster (without the leading '-').

    letters become ShortOptionName tokens; the first digit switches to numeric
    mode, after which only digits are accepted and are collected into a single
    trailing OptionValue.
    """
    tokens = []
    number = ""

    for char in cluster:
        if number:
            if not re.fullmatch(r"[0-9]", char):
                raise InvalidShortOption(cluster)
            number += char
        elif re.fullmatch(r"[a-zA-Z]", char):
            tokens.append(ShortOptionName(char))
        elif re.fullmatch(r"[0-9]", char):
            number = char
        else:
            raise InvalidCharInShortOption(cluster, char)

    if number:
        tokens.append(OptionValue(number))
    return tokens


__all__ = (
    "Token",
    "OptionName",
    "LongOptionName",
    "ShortOptionName",
    "OptionValue",
    "PositionalArgument",
    "OptionValueOrPositionalArgument",
    "UnparsedArgument",
    "tokenize",
    "tokenize_short_option",
)
