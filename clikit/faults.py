"""
clikit faults (errors, aborts and exit codes).

Scope
- ExitCode: the three process exit statuses the dispatch layer may produce.
- FaultCode: canonical, stable numeric identifiers for every args-pipeline error.
  Codes are grouped by stage (definition, tokenizer, parser, evaluation) so logs
  and searches stay predictable.
- ArgsError and its stage bases: raised by the tokenizer, the definition builder,
  the parser and the evaluation. They carry a message, a FaultCode and read-only
  context options, and know how to render themselves with rich.
- GenericAbort and the four concrete aborts: control-flow signals that end the
  current command. Each carries two fixed facts, `bug` and `silent`, which the
  error handler uses to decide visibility, reporting and exit status.

Abort matrix
                    silent=False     silent=True
    bug=False       Abort            AbortSilent
    bug=True        Bug              BugSilent

Guidelines
- Treat aborts like panic(): don't catch them to recover. Use another exception
  type when the caller is expected to recover.
- Provide a useful message; it is shown to the user in brief.
- Only use AbortSilent/BugSilent when a more contextual message was already printed.
- Never raise GenericAbort directly and never subclass the concrete aborts.
"""
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text


class ExitCode(IntEnum):
    """
    process exit statuses.

    - SUCCESS: normal completion.
    - BUG: an unexpected exception, indicative of a defect.
    - FAILURE_BUT_NOT_BUG: an expected failure (user error, environment, abort).
      deliberately unconventional so wrapping scripts can tell it apart from a
      defect; users see it as 1 (see translate()).
    """
    SUCCESS             = 0
    BUG                 = 1
    FAILURE_BUT_NOT_BUG = 30

    @classmethod
    def translate(cls, status, /):
        """
        map an internal status to the one presented to the user (30 becomes 1).
        """
        if status == cls.FAILURE_BUT_NOT_BUG:
            return 1
        return status


class FaultCode(IntEnum):
    """
    canonical fault codes for the args pipeline (stable identifiers).

    grouping (by stage)
    - definition (2110x): declaration-time programmer errors
    - tokenizer  (2111x): malformed short option clusters
    - parser     (2112x): unknown options, options without values, parser bugs
    - evaluation (2113x): missing required options/positions, extra positionals
    """
    # --- definition errors ---
    DEFINITION                   = 21100
    CONFLICTING_FLAG             = 21101
    INVALID_FLAG                 = 21102
    INVALID_LOOKUP               = 21103
    INVALID_POSITION             = 21104

    # --- tokenizer errors ---
    TOKENIZER                    = 21110
    INVALID_SHORT_OPTION         = 21111
    INVALID_CHAR_IN_SHORT_OPTION = 21112

    # --- parser errors ---
    PARSER                       = 21120
    INVALID_OPTION               = 21121
    OPTION_REQUIRES_AN_ARGUMENT  = 21122

    # --- evaluation errors ---
    EVALUATION                   = 21130
    MISSING_REQUIRED_OPTION      = 21131
    MISSING_REQUIRED_POSITION    = 21132
    TOO_MANY_POSITIONS           = 21133


class ArgsError(Exception):
    """
    base of every error raised by the args pipeline.

    attributes
    - message: the user-facing, lowercase-leaning message.
    - code: the FaultCode of the concrete class.
    - options: read-only mapping with the context of the fault (token, name, ...).
    """
    code = FaultCode.DEFINITION

    def __init__(self, message, /, **options):
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return Text.assemble(
            ("error", "bold red"),
            (" %d" % self.code, "dim"),
            ": ",
            (self.message, "red"),
        )


class DefinitionError(ArgsError):
    code = FaultCode.DEFINITION


class ConflictingFlag(DefinitionError):
    code = FaultCode.CONFLICTING_FLAG


class InvalidFlag(DefinitionError):
    code = FaultCode.INVALID_FLAG


class InvalidLookup(DefinitionError):
    code = FaultCode.INVALID_LOOKUP


class InvalidPosition(DefinitionError):
    code = FaultCode.INVALID_POSITION


class TokenizerError(ArgsError):
    code = FaultCode.TOKENIZER


class InvalidShortOption(TokenizerError):
    code = FaultCode.INVALID_SHORT_OPTION

    def __init__(self, short_option, /):
        super().__init__("invalid short option: '-%s'" % short_option, short_option=short_option)


class InvalidCharInShortOption(TokenizerError):
    code = FaultCode.INVALID_CHAR_IN_SHORT_OPTION

    def __init__(self, short_option, char, /):
        super().__init__(
            "invalid character '%s' in short option: '-%s'" % (char, short_option),
            short_option=short_option,
            char=char,
        )


class ParserError(ArgsError):
    code = FaultCode.PARSER


class InvalidOptionError(ParserError):
    code = FaultCode.INVALID_OPTION

    def __init__(self, option, /):
        super().__init__("invalid option -- '%s'" % option, option=option)


class OptionRequiresAnArgumentError(ParserError):
    code = FaultCode.OPTION_REQUIRES_AN_ARGUMENT

    def __init__(self, option, /):
        super().__init__("option requires an argument -- '%s'" % option, option=option)


class EvaluationError(ArgsError):
    code = FaultCode.EVALUATION


class MissingRequiredOption(EvaluationError):
    code = FaultCode.MISSING_REQUIRED_OPTION

    def __init__(self, name, /):
        super().__init__("missing required option `%s'" % name, name=name)


class MissingRequiredPosition(EvaluationError):
    code = FaultCode.MISSING_REQUIRED_POSITION

    def __init__(self):
        super().__init__("more arguments required")


class TooManyPositions(EvaluationError):
    code = FaultCode.TOO_MANY_POSITIONS

    def __init__(self):
        super().__init__("too many arguments")


class UndefinedNameError(KeyError):
    """
    a flag, option or position was queried by a name that was never declared.

    this is a programmer error and deliberately not an ArgsError, so the command
    layer never turns it into a usage message.
    """

    def __init__(self, kind, name, /):
        super().__init__("undefined %s %r" % (kind, name))
        self.kind = kind
        self.name = name

    def __str__(self):
        return self.args[0]


class GenericAbort(BaseException):
    """
    base of the four aborts. derives from BaseException so that a plain
    `except Exception` does not swallow it on its way to the error handler.

    `bug` and `silent` are fixed per class and never change after creation.
    """
    bug = True
    silent = False

    def __new__(cls, *args, **kwargs):
        if cls is GenericAbort:
            raise TypeError("GenericAbort cannot be raised directly, use Abort, AbortSilent, Bug or BugSilent")
        return super().__new__(cls, *args, **kwargs)

    def __init__(self, message="", /):
        if isinstance(message, BaseException):
            message = str(message)
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() argument must be a string or an exception")
        super().__init__(*((message,) if message else ()))
        self.message = message

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        for base in cls.__bases__:
            if base.__dict__.get("__sealed__", False):
                raise TypeError(f"type {base.__name__!r} is not an acceptable base type")

    def __rich__(self):
        return Text(self.message, style="red")


class Abort(GenericAbort):
    __sealed__ = True
    bug = False
    silent = False


class AbortSilent(GenericAbort):
    __sealed__ = True
    bug = False
    silent = True


class Bug(GenericAbort):
    __sealed__ = True
    bug = True
    silent = False


class BugSilent(GenericAbort):
    __sealed__ = True
    bug = True
    silent = True


def classify(exception, /):
    """
    return (bug, silent) for any exception.

    aborts answer with their fixed facts; anything else is an unexpected,
    visible bug.
    """
    if isinstance(exception, GenericAbort):
        return exception.bug, exception.silent
    return True, False


__all__ = (
    "ExitCode",
    "FaultCode",
    "ArgsError",
    "DefinitionError",
    "ConflictingFlag",
    "InvalidFlag",
    "InvalidLookup",
    "InvalidPosition",
    "TokenizerError",
    "InvalidShortOption",
    "InvalidCharInShortOption",
    "ParserError",
    "InvalidOptionError",
    "OptionRequiresAnArgumentError",
    "EvaluationError",
    "MissingRequiredOption",
    "MissingRequiredPosition",
    "TooManyPositions",
    "UndefinedNameError",
    "GenericAbort",
    "Abort",
    "AbortSilent",
    "Bug",
    "BugSilent",
    "classify",
)
