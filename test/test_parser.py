# python
"""
Parser behavioral tests.

Scope
- Flags, options (spaced and inline values), positionals and the unparsed tail.
- Parser bug paths (stray option values, unknown token types, misplaced tokens).
- Node equality and repr.
"""

import unittest
from unittest import TestCase

from clikit.definition import Definition
from clikit.faults import ParserError, InvalidOptionError, OptionRequiresAnArgumentError
from clikit.parser import (
    Parser,
    parse,
    Node,
    FlagNode,
    LongOption,
    ShortOption,
    LongFlag,
    ShortFlag,
    Argument,
    Unparsed,
)
from clikit.tokenizer import (
    Token,
    tokenize,
    LongOptionName,
    ShortOptionName,
    OptionValue,
    PositionalArgument,
    OptionValueOrPositionalArgument,
    UnparsedArgument,
)


class Stray(Token):
    __slots__ = ()


class TestParser(TestCase):

    def setUp(self):
        self.definition = Definition()
        self.definition.add_flag("f", short="-f", long="--force")
        self.definition.add_option("zk", short="-z", long="--zookeeper")
        self.definition.add_option("height", long="--height")
        self.definition.add_option("w", long="--w")

    def parse(self, tokens):
        return Parser(self.definition).parse(tokens)

    def testParseEmpty(self):
        self.assertEqual(self.parse([]), [])

    def testParseFlag(self):
        self.assertEqual(self.parse([ShortOptionName("f")]), [ShortFlag("f")])
        self.assertEqual(self.parse([LongOptionName("force")]), [LongFlag("force")])

    def testParseLongOption(self):
        self.assertEqual(
            self.parse([LongOptionName("zookeeper"), OptionValueOrPositionalArgument("3")]),
            [LongOption("zookeeper", "3")],
        )
        self.assertEqual(
            self.parse([LongOptionName("zookeeper"), OptionValue("4")]),
            [LongOption("zookeeper", "4")],
        )

    def testOptionFollowedByPositionalRequiresArgument(self):
        with self.assertRaises(OptionRequiresAnArgumentError) as context:
            self.parse([LongOptionName("zookeeper"), PositionalArgument("5")])
        self.assertEqual(context.exception.message, "option requires an argument -- 'zookeeper'")

    def testOptionAtEndRequiresArgument(self):
        with self.assertRaises(OptionRequiresAnArgumentError):
            self.parse([ShortOptionName("z")])

    def testOptionFollowedByOptionRequiresArgument(self):
        with self.assertRaises(OptionRequiresAnArgumentError):
            self.parse([ShortOptionName("z"), ShortOptionName("f")])

    def testParsePositional(self):
        self.assertEqual(self.parse([PositionalArgument("what")]), [Argument("what")])
        self.assertEqual(
            self.parse([ShortOptionName("f"), PositionalArgument("what")]),
            [ShortFlag("f"), Argument("what")],
        )
        self.assertEqual(
            self.parse([ShortOptionName("f"), OptionValueOrPositionalArgument("what")]),
            [ShortFlag("f"), Argument("what")],
        )

    def testUnparsed(self):
        self.assertEqual(
            self.parse([UnparsedArgument("a"), UnparsedArgument("b")]),
            [Unparsed(["a", "b"])],
        )
        self.assertEqual(
            self.parse([ShortOptionName("f"), UnparsedArgument("a"), UnparsedArgument("b")]),
            [ShortFlag("f"), Unparsed(["a", "b"])],
        )

    def testNothingParsedAfterUnparsed(self):
        with self.assertRaises(ParserError):
            self.parse([UnparsedArgument("a"), ShortOptionName("f"), UnparsedArgument("b")])

    def testInvalidTokenType(self):
        with self.assertRaises(ParserError) as context:
            self.parse([Stray("a")])
        self.assertTrue(context.exception.message.startswith("bug:"))
        with self.assertRaises(ParserError):
            self.parse([LongOptionName("zookeeper"), Stray("a")])

    def testInvalidOptionValue(self):
        with self.assertRaises(ParserError) as context:
            self.parse([OptionValue("welp")])
        self.assertEqual(
            context.exception.message,
            "bug: unexpected option value in argument parse sequence: welp",
        )

    def testMissingOption(self):
        with self.assertRaises(InvalidOptionError) as context:
            self.parse([ShortOptionName("x")])
        self.assertEqual(context.exception.message, "invalid option -- 'x'")

    def testFlagWithInlineValueIsStray(self):
        with self.assertRaises(ParserError):
            self.parse(tokenize(["--force=yes"]))

    def testComplex(self):
        nodes = self.parse([
            ShortOptionName("f"),
            ShortOptionName("z"),
            OptionValue("200"),
            LongOptionName("height"),
            OptionValueOrPositionalArgument("3"),
            LongOptionName("w"),
            OptionValue("4"),
            PositionalArgument("a"),
            PositionalArgument("b"),
            PositionalArgument("c"),
            UnparsedArgument("d"),
            UnparsedArgument("--neato"),
            UnparsedArgument("-f"),
        ])
        self.assertEqual(nodes, [
            ShortFlag("f"),
            ShortOption("z", "200"),
            LongOption("height", "3"),
            LongOption("w", "4"),
            Argument("a"),
            Argument("b"),
            Argument("c"),
            Unparsed(["d", "--neato", "-f"]),
        ])
        self.assertEqual([repr(node) for node in nodes], [
            "<ShortFlag f>",
            "<ShortOption z=200>",
            "<LongOption height=3>",
            "<LongOption w=4>",
            "<Argument a>",
            "<Argument b>",
            "<Argument c>",
            "<Unparsed d --neato -f>",
        ])

    def testModuleLevelParse(self):
        self.assertEqual(parse(tokenize(["-fz", "9"]), self.definition), [ShortFlag("f"), ShortOption("z", "9")])

    def testShortClusterWithDigits(self):
        definition = Definition()
        definition.add_flag("a", short="-a")
        definition.add_option("b", short="-b")
        self.assertEqual(parse(tokenize(["-ab211"]), definition), [ShortFlag("a"), ShortOption("b", "211")])


class TestNodes(TestCase):

    def testAbstractNodesRejected(self):
        for klass in (Node, FlagNode):
            with self.subTest(klass=klass), self.assertRaises(TypeError):
                klass("x")

    def testEqualityIsByClassAndPayload(self):
        self.assertEqual(ShortOption("z", "1"), ShortOption("z", "1"))
        self.assertNotEqual(ShortOption("z", "1"), LongOption("z", "1"))
        self.assertNotEqual(ShortFlag("f"), LongFlag("f"))

    def testUnparsedValuesAreATuple(self):
        self.assertEqual(Unparsed(["a"]).values, ("a",))

    def testNodesAreImmutable(self):
        node = Argument("a")
        with self.assertRaises(AttributeError):
            node.value = "b"


if __name__ == "__main__":
    unittest.main()
