import unittest

from toylang.lang.error import LexError, ParseError
from toylang.pure.lexical import TokenKind, tokenize
from toylang.pure.parser import Parser, TokenStream, parse
from toylang.pure.syntax import (
    Apply, BinaryOp, BoolLiteral, Function, Identifier, If, IntLiteral, Let, UnaryOp, UnitLiteral
)
from toylang.pure.value import BinOp, UnaryOp as UnaryOperator


def tree(text):
    node, __ = parse(tokenize(text))
    return node


class ParserTestCase(unittest.TestCase):

    def test_primary(self):
        cases = {
            "()": UnitLiteral(),
            "( )": UnitLiteral(),
            "7": IntLiteral(7),
            "true": BoolLiteral(True),
            "false": BoolLiteral(False),
            "x": Identifier("x"),
            "(x)": Identifier("x"),
            "((1))": IntLiteral(1),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_precedence(self):
        one, two, three = IntLiteral(1), IntLiteral(2), IntLiteral(3)
        cases = {
            "1 + 2 * 3": BinaryOp(BinOp.ADD, one, BinaryOp(BinOp.MUL, two, three)),
            "(1 + 2) * 3": BinaryOp(BinOp.MUL, BinaryOp(BinOp.ADD, one, two), three),
            "1 < 2 and 2 > 1": BinaryOp(
                BinOp.AND, BinaryOp(BinOp.LT, one, two), BinaryOp(BinOp.GT, two, one)
            ),
            "1 + 2 = 3": BinaryOp(BinOp.EQ, BinaryOp(BinOp.ADD, one, two), three),
            "-1 * 2": BinaryOp(BinOp.MUL, UnaryOp(UnaryOperator.NEGATE, one), two),
            "not true or false": BinaryOp(
                BinOp.OR, UnaryOp(UnaryOperator.NOT, BoolLiteral(True)), BoolLiteral(False)
            ),
            "1 - -2": BinaryOp(BinOp.SUB, one, UnaryOp(UnaryOperator.NEGATE, two)),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_left_associative(self):
        one, two, three = IntLiteral(1), IntLiteral(2), IntLiteral(3)
        cases = {
            "1 - 2 - 3": BinaryOp(BinOp.SUB, BinaryOp(BinOp.SUB, one, two), three),
            "1 / 2 * 3": BinaryOp(BinOp.MUL, BinaryOp(BinOp.DIV, one, two), three),
            "true and false or true": BinaryOp(
                BinOp.OR, BinaryOp(BinOp.AND, BoolLiteral(True), BoolLiteral(False)), BoolLiteral(True)
            ),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_let(self):
        cases = {
            "let x = 1": Let("x", IntLiteral(1)),
            "let x = 1 in x": Let("x", IntLiteral(1), Identifier("x")),
            "let x = 1 in let y = 2 in x": Let("x", IntLiteral(1), Let("y", IntLiteral(2), Identifier("x"))),
            "let x = let y = 2 in y in x": Let("x", Let("y", IntLiteral(2), Identifier("y")), Identifier("x")),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_if(self):
        cases = {
            "if true then 1": If(BoolLiteral(True), IntLiteral(1)),
            "if true then 1 else 2": If(BoolLiteral(True), IntLiteral(1), IntLiteral(2)),
            "if a then if b then 1 else 2": If(
                Identifier("a"), If(Identifier("b"), IntLiteral(1), IntLiteral(2))
            ),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_function(self):
        body = BinaryOp(BinOp.ADD, Identifier("a"), Identifier("b"))
        cases = {
            "|| => 1": Function(None, IntLiteral(1)),
            "|a| => a": Function("a", Identifier("a")),
            "|a, b| => a + b": Function("a", Function("b", body)),
            "|a,b,c| => c": Function("a", Function("b", Function("c", Identifier("c")))),
            "|a| => |b| => a + b": Function("a", Function("b", body)),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_apply(self):
        f = Identifier("f")
        one, two = IntLiteral(1), IntLiteral(2)
        cases = {
            "f()": Apply(f, UnitLiteral()),
            "f(1)": Apply(f, one),
            "f(1, 2)": Apply(Apply(f, one), two),
            "f(1)(2)": Apply(Apply(f, one), two),
            "f()()": Apply(Apply(f, UnitLiteral()), UnitLiteral()),
            "f(1 + 2)": Apply(f, BinaryOp(BinOp.ADD, one, two)),
            "(|x| => x)(1)": Apply(Function("x", Identifier("x")), one),
            "not f(true)": UnaryOp(UnaryOperator.NOT, Apply(f, BoolLiteral(True))),
            "f(|x| => x, 2)": Apply(Apply(f, Function("x", Identifier("x"))), two),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tree(case), case)

    def test_has_more(self):
        cases = {"1": False, "1 2": True, "1 // trailing comment": False, "let x = 1 x": True}
        for case, expected in cases.items():
            __, has_more = parse(tokenize(case))
            self.assertEqual(expected, has_more, case)

    def test_multiple_top_level(self):
        tokens = TokenStream(tokenize("let x = 1\nx + 1\ntrue"))
        parser = Parser(tokens)

        results = []
        while parser.has_next():
            results.append(parser.parse())

        self.assertEqual([
            Let("x", IntLiteral(1)),
            BinaryOp(BinOp.ADD, Identifier("x"), IntLiteral(1)),
            BoolLiteral(True),
        ], results)

    def test_parenthesis_after_expression_is_application(self):
        self.assertEqual(Apply(IntLiteral(1), IntLiteral(2)), tree("1\n(2)"))

    def test_parse_continues_on_stream(self):
        tokens = TokenStream(tokenize("1 true"))
        self.assertEqual((IntLiteral(1), True), parse(tokens))
        self.assertEqual((BoolLiteral(True), False), parse(tokens))

    def test_accepts_token_lists(self):
        node, has_more = parse(list(tokenize("3")))
        self.assertEqual(IntLiteral(3), node)
        self.assertFalse(has_more)

    def test_parse_error(self):
        should_raise = {
            "": (0, TokenKind.EOF),
            "1 +": (3, TokenKind.EOF),
            "let = 1": (4, TokenKind.EQ),
            "let x 1": (6, TokenKind.INT),
            "if true 1": (8, TokenKind.INT),
            "|a b| => a": (3, TokenKind.IDENT),
            "|a| a": (4, TokenKind.IDENT),
            "(1": (2, TokenKind.EOF),
            "f(1 2)": (4, TokenKind.INT),
            ")": (0, TokenKind.RPAREN),
            "not not true": (4, TokenKind.NOT),
            "then": (0, TokenKind.THEN),
        }
        for case, (pos, kind) in should_raise.items():
            with self.assertRaises(ParseError, msg=case) as context:
                tree(case)
            self.assertEqual(pos, context.exception.pos, case)
            self.assertIs(kind, context.exception.token.kind, case)
            self.assertEqual(case, context.exception.source, case)

    def test_parse_error_expected_kinds(self):
        with self.assertRaises(ParseError) as context:
            tree("let 1")
        self.assertEqual((TokenKind.IDENT,), context.exception.expected)
        self.assertIn("expected IDENT but found '1'", str(context.exception))

        with self.assertRaises(ParseError) as context:
            tree("")
        self.assertIn(TokenKind.INT, context.exception.expected)
        self.assertIn("found 'EOF'", str(context.exception))

    def test_lex_error_propagates(self):
        self.assertRaises(LexError, tree, "1 + @")


if __name__ == '__main__':
    unittest.main()
