# python
"""
Definition behavioral tests.

Scope
- Entity registration, prefix validation and conflict detection.
- Lookups by symbolic name, short and long spelling.
- The option_missing fallback.
- Entity shape rules (multi/required/default combinations, skip wrappers).
"""

import unittest
from unittest import TestCase

from clikit.definition import Definition, Flag, Option, Position, SkipAlways, SkipForValue
from clikit.faults import (
    ArgsError,
    DefinitionError,
    ConflictingFlag,
    InvalidFlag,
    InvalidLookup,
    InvalidPosition,
)


class TestDefinition(TestCase):

    def testSimple(self):
        definition = Definition()
        definition.add_flag("force", short="-f")
        self.assertEqual(definition.lookup_flag("force").short, "f")
        self.assertIsNone(definition.lookup_option("force"))

    def testViewsKeepDeclarationOrder(self):
        definition = Definition()
        definition.add_flag("b", short="-b")
        definition.add_flag("a", short="-a")
        definition.add_option("o", long="--out")
        definition.add_position("first", required=False, multi=False)
        self.assertEqual([flag.name for flag in definition.flags], ["b", "a"])
        self.assertEqual([option.name for option in definition.options], ["o"])
        self.assertEqual([position.name for position in definition.positions], ["first"])
        self.assertIsInstance(definition.flags, tuple)

    def testConflict(self):
        definition = Definition()
        definition.add_flag("version", short="-v")
        with self.assertRaises(ConflictingFlag):
            definition.add_flag("verbose", short="-v", long="--verbose")
        with self.assertRaises(ConflictingFlag):
            definition.add_option("vertical", short="-v", long="--vertical")
        definition.add_option("height", short="-h", long="--height")
        with self.assertRaises(ConflictingFlag):
            definition.add_option("height2", long="--height")
        with self.assertRaises(ConflictingFlag):
            definition.add_option("height", long="--something")

    def testConflictMessages(self):
        definition = Definition()
        definition.add_flag("version", short="-v", long="--version")
        with self.assertRaises(ConflictingFlag) as context:
            definition.add_flag("verbose", short="-v")
        self.assertEqual(context.exception.message, "Short flag 'v' already defined by version")
        with self.assertRaises(ConflictingFlag) as context:
            definition.add_flag("other", long="--version")
        self.assertEqual(context.exception.message, "Long flag 'version' already defined by version")
        with self.assertRaises(ConflictingFlag) as context:
            definition.add_flag("version", long="--show-version")
        self.assertEqual(context.exception.message, "Flag 'version' already defined by version")

    def testFailedRegistrationLeavesNoTrace(self):
        definition = Definition()
        definition.add_flag("version", short="-v")
        with self.assertRaises(ConflictingFlag):
            definition.add_flag("verbose", short="-v", long="--verbose")
        self.assertIsNone(definition.lookup_long("verbose"))
        self.assertIsNone(definition.lookup_flag("verbose"))
        definition.add_flag("verbose", long="--verbose")

    def testPositionNameConflictsWithFlag(self):
        definition = Definition()
        definition.add_flag("file", long="--file")
        with self.assertRaises(ConflictingFlag):
            definition.add_position("file", required=False, multi=False)

    def testInvalidFlags(self):
        definition = Definition()
        for spelling in ("-ab", "--a", "a", "--"):
            with self.subTest(short=spelling), self.assertRaises(InvalidFlag):
                definition.add_flag("invalid", short=spelling)
        for spelling in ("-a", "---a", "--", "a"):
            with self.subTest(long=spelling), self.assertRaises(InvalidFlag):
                definition.add_flag("invalid", long=spelling)

    def testInvalidFlagMessages(self):
        definition = Definition()
        with self.assertRaises(InvalidFlag) as context:
            definition.add_flag("invalid", short="a")
        self.assertEqual(context.exception.message, "Short flag 'a' does not start with '-'")
        with self.assertRaises(InvalidFlag) as context:
            definition.add_flag("invalid", short="-ab")
        self.assertEqual(context.exception.message, "Short flag must be a single character")
        with self.assertRaises(InvalidFlag) as context:
            definition.add_flag("invalid", long="-a")
        self.assertEqual(context.exception.message, "Long flag '-a' does not start with '--'")

    def testShortOrLongRequired(self):
        definition = Definition()
        with self.assertRaises(DefinitionError) as context:
            definition.add_flag("invalid")
        self.assertEqual(context.exception.message, "One or more of short and long must be specified")
        self.assertIsInstance(context.exception, ArgsError)

    def testLookup(self):
        definition = Definition()
        definition.add_flag("force", short="-f")
        definition.add_option("height", short="-h", long="--height")
        self.assertEqual(definition.lookup_long("height").name, "height")
        self.assertEqual(definition.lookup_short("h").name, "height")
        self.assertEqual(definition.lookup_short("f").name, "force")
        self.assertIsNone(definition.lookup_long("f"))
        self.assertIsNone(definition.lookup_short("height"))

    def testLookupRejectsDashPrefix(self):
        definition = Definition()
        with self.assertRaises(InvalidLookup):
            definition.lookup_long("--b")
        with self.assertRaises(InvalidLookup):
            definition.lookup_long("-b")
        with self.assertRaises(InvalidLookup):
            definition.lookup_short("-b")

    def testLookupIsKindExact(self):
        definition = Definition()
        definition.add_flag("force", short="-f")
        definition.add_option("zk", short="-z")
        definition.add_position("first", required=False, multi=False)
        self.assertIsNone(definition.lookup_flag("zk"))
        self.assertIsNone(definition.lookup_option("force"))
        self.assertIsNone(definition.lookup_position("force"))
        self.assertIsInstance(definition.lookup_position("first"), Position)

    def testOptionMissing(self):
        definition = Definition()

        def missing(name):
            if name.startswith("--config."):
                return "option"
            if name.startswith("--toggle."):
                return "flag"
            if name == "--invalid":
                return "invalid"
            return None

        definition.option_missing(missing)
        self.assertIs(type(definition.lookup_long("config.foo")), Option)
        self.assertIs(type(definition.lookup_long("toggle.foo")), Flag)
        self.assertIsNone(definition.lookup_long("foobar"))

        self.assertIsNotNone(definition.lookup_option("config.foo"))
        self.assertIsNotNone(definition.lookup_flag("toggle.foo"))
        # only spellings that went through lookup_long/lookup_short are registered
        self.assertIsNone(definition.lookup_flag("toggle.bar"))

        with self.assertRaises(DefinitionError):
            definition.lookup_long("invalid")

    def testOptionMissingReceivesShortSpelling(self):
        definition = Definition()
        seen = []
        definition.option_missing(lambda name: seen.append(name))
        self.assertIsNone(definition.lookup_short("x"))
        self.assertEqual(seen, ["-x"])

    def testNothingAfterMultiPosition(self):
        definition = Definition()
        definition.add_position("rest", required=False, multi=True)
        with self.assertRaises(InvalidPosition) as context:
            definition.add_position("late", required=False, multi=False)
        self.assertEqual(context.exception.message, "Cannot have any more positional arguments after multi")

    def testAddReturnsEntity(self):
        definition = Definition()
        flag = definition.add_flag("force", short="-f", descr="Force it")
        self.assertIsInstance(flag, Flag)
        self.assertEqual(flag.descr, "Force it")


class TestEntities(TestCase):

    def testOptionCannotBeMultiAndRequired(self):
        with self.assertRaises(ValueError):
            Option("o", short="o", required=True, multi=True)

    def testMultiPositionRestrictions(self):
        with self.assertRaises(ValueError):
            Position("rest", required=False, multi=True, default="x")
        with self.assertRaises(ValueError):
            Position("rest", required=True, multi=True)

    def testRawSpellingsMustNotBeDashed(self):
        with self.assertRaises(ValueError):
            Flag("force", short="-f")

    def testSkipMustBeWrapped(self):
        with self.assertRaises(TypeError):
            Position("first", required=False, multi=False, skip=lambda value: True)

    def testDefaultThunkRunsOnEveryRead(self):
        calls = []
        option = Option("o", short="o", default=lambda: calls.append(1) or len(calls))
        self.assertTrue(option.dynamic_default)
        self.assertEqual(option.default, 1)
        self.assertEqual(option.default, 2)
        self.assertFalse(Option("p", short="p", default="x").dynamic_default)

    def testAsWrittenByUser(self):
        self.assertEqual(Flag("f", short="f", long="force").as_written_by_user(), "--force")
        self.assertEqual(Flag("f", short="f").as_written_by_user(), "-f")

    def testReadOnlyFields(self):
        flag = Flag("force", short="f")
        with self.assertRaises(AttributeError):
            flag.short = "g"

    def testRepr(self):
        self.assertEqual(
            repr(Flag("force", short="f")),
            "flag(name='force', short='f', long=None, descr=None)",
        )

    def testSkipWrappers(self):
        always = Position("p", required=False, multi=False, skip=SkipAlways(lambda: True))
        self.assertTrue(always.skips(None))
        self.assertTrue(always.skips("x"))
        by_value = Position("p", required=False, multi=False, skip=SkipForValue(lambda value: value == "b"))
        self.assertTrue(by_value.skips("b"))
        self.assertFalse(by_value.skips("a"))
        self.assertFalse(by_value.skips(None))
        self.assertFalse(Position("p", required=False, multi=False).skips("b"))


if __name__ == "__main__":
    unittest.main()
