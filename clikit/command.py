"""
Command base class: metadata, help rendering and the args pipeline entry.

A command is a BaseCommand subclass. Its metadata is plain class attributes,
validated once at class creation; its command line is a nested `Opts` class.

Class attributes
- name: the command name; inferred as kebab-case from the class name.
- tool_name: the executable shown in help; falls back to basename(sys.argv[0]).
- descr: one-line description (at most `max_descr_length` characters).
- long_descr: free-form paragraph.
- usages: usage suffixes ("[options] <file>").
- examples: (command, explanation) pairs.
- help_sections: which sections build_help() renders, in order.
- Opts: the options class (an empty Opts when omitted).

Flow of call(args, command_name)
    Definition -> tokenize -> parse -> Evaluation -> Opts.evaluate
    then either print help (-h/--help) or invoke(opts, command_name).

Quick example:
    >>> class Greet(BaseCommand):
    ...     descr = "Say hello"
    ...     class Opts(clikit.Opts):
    ...         loud = flag(short="-l", long="--loud")
    ...         who = position(default="world")
    ...     def invoke(self, opts, name):
    ...         self.console.print("hello %s" % opts.who)
"""
import os.path
import sys

from rich.console import Console
from rich.text import Text

from .definition import Definition, Option
from .evaluation import Evaluation
from .faults import ArgsError, Abort, AbortSilent, MissingRequiredPosition, TooManyPositions
from .opts import Opts
from .parser import parse
from .tokenizer import tokenize
from .utils import Unset, coalesce, kebab

HELP_SECTIONS = ("descr", "long_descr", "usage", "examples", "options")


class BaseCommand:
    name = Unset
    tool_name = Unset
    descr = None
    long_descr = None
    usages = ()
    examples = ()
    help_sections = HELP_SECTIONS
    max_descr_length = 80
    Opts = Opts

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if "name" not in cls.__dict__:
            cls.name = kebab(cls.__name__)
        if cls.descr is not None and len(cls.descr) > cls.max_descr_length:
            raise ValueError("description must be %d characters or less" % cls.max_descr_length)
        if isinstance(cls.usages, str):
            cls.usages = (cls.usages,)
        for section in cls.help_sections:
            if section not in HELP_SECTIONS:
                raise ValueError("Unknown help section: %s" % section)
        if not (isinstance(cls.Opts, type) and issubclass(cls.Opts, Opts)):
            raise TypeError("%s.Opts must be a subclass of clikit.Opts" % cls.__name__)

    def __init__(self, *, console=None, errors=None):
        self.console = console if console is not None else Console()
        self.errors = errors if errors is not None else Console(stderr=True)

    @classmethod
    def call(cls, args, command_name, /):
        """
        entry point used by the executor: a fresh instance runs the command.
        """
        return cls().run(args, command_name)

    def run(self, args, command_name, /):
        opts = self.Opts()
        definition = Definition()
        opts.define(definition)
        try:
            evaluation = Evaluation(definition, parse(tokenize(args), definition))
            opts.evaluate(evaluation)
        except (TooManyPositions, MissingRequiredPosition) as error:
            self.errors.print(Text("Error: %s" % error.message, style="bold red"))
            self.errors.print()
            self.errors.print(self.build_help())
            raise AbortSilent() from error
        except ArgsError as error:
            raise Abort(error) from error

        if opts.help:
            self.console.print(self.build_help())
        else:
            self.invoke_wrapper(opts, command_name)

    def invoke_wrapper(self, opts, command_name, /):
        """
        hook around invoke(); override to add command-wide error handling.
        """
        return self.invoke(opts, command_name)

    def invoke(self, opts, command_name, /):
        raise NotImplementedError("%s.invoke() must be implemented, or run() overridden" % type(self).__name__)

    def has_subcommands(self):
        return False

    @classmethod
    def prog(cls):
        return coalesce(cls.tool_name, None) or os.path.basename(sys.argv[0])

    @classmethod
    def build_help(cls):
        """
        render the help sections as a single rich Text.
        """
        builders = {
            "descr": cls._build_descr,
            "long_descr": cls._build_long_descr,
            "usage": cls._build_usage,
            "examples": cls._build_examples,
            "options": cls._build_options,
        }
        sections = []
        for name in cls.help_sections:
            if (section := builders[name]()) is not None:
                section.rstrip()
                sections.append(section)
        return Text("\n\n").join(sections)

    @classmethod
    def _command(cls):
        return Text("%s %s" % (cls.prog(), cls.name), style="bold cyan")

    @classmethod
    def _build_descr(cls):
        header = Text.assemble(cls._command(), style="bold")
        if cls.descr:
            header.append(": %s" % cls.descr)
        return header

    @classmethod
    def _build_long_descr(cls):
        return Text(cls.long_descr) if cls.long_descr else None

    @classmethod
    def _build_usage(cls):
        usage = Text("Usage:", style="bold")
        match cls.usages:
            case ():
                usage.append(" ").append(cls._command()).append(" [options]")
            case (single,):
                usage.append(" ").append(cls._command()).append(" %s" % single)
            case multiple:
                for line in multiple:
                    usage.append("\n  ").append(cls._command()).append(" %s" % line)
        return usage

    @classmethod
    def _build_examples(cls):
        if not cls.examples:
            return None
        examples = Text("Examples:", style="bold")
        for index, (command, explanation) in enumerate(cls.examples):
            examples.append("\n\n" if index else "\n")
            examples.append("  ").append(cls._command()).append(" %s" % command)
            if explanation:
                examples.append("  ").append("# %s" % explanation, style="italic bright_black")
        return examples

    @classmethod
    def _build_options(cls):
        definition = Definition()
        cls.Opts().define(definition)
        entities = sorted((*definition.options, *definition.flags), key=lambda entity: entity.name)
        if not entities:
            return None

        options = Text("Options:", style="bold")
        for entity in entities:
            spellings = ", ".join(
                spelling for spelling in (
                    entity.short and "-%s" % entity.short,
                    entity.long and "--%s" % entity.long,
                ) if spelling
            )
            options.append("\n  %s" % spellings)
            comment = [entity.descr] if entity.descr else []
            if isinstance(entity, Option):
                options.append(" VALUE")
                if entity.dynamic_default:
                    comment.append("(generated default)")
                elif (default := entity.default) is None:
                    comment.append("(no default)")
                else:
                    comment.append("(default: %r)" % (default,))
            if comment:
                options.append("  ").append("# %s" % " ".join(comment), style="italic bright_black")
        return options


__all__ = (
    "HELP_SECTIONS",
    "BaseCommand",
)
