"""Recursive-descent parser for toylang. Consumes tokens for exactly one top-level expression per call.

Grammar, loosest binding first:

```
Expr        ::= LetExpr | IfExpr | FnExpr | AndOrExpr
LetExpr     ::= "let" IDENT "=" Expr ("in" Expr)?
IfExpr      ::= "if" Expr "then" Expr ("else" Expr)?
FnExpr      ::= "|" (IDENT ("," IDENT)*)? "|" "=>" Expr   ; |a, b| => e is |a| => |b| => e
AndOrExpr   ::= CompareExpr (("and" | "or") CompareExpr)*
CompareExpr ::= AddSubExpr (("=" | "<" | ">") AddSubExpr)*
AddSubExpr  ::= MulDivExpr (("+" | "-") MulDivExpr)*
MulDivExpr  ::= UnaryExpr (("*" | "/") UnaryExpr)*
UnaryExpr   ::= ("not" | "-")? ApplyExpr
ApplyExpr   ::= Primary ("(" (Expr ("," Expr)*)? ")")*    ; f(a, b) is f(a)(b), f() is f(())
Primary     ::= "(" Expr ")" | "(" ")" | INT | IDENT | "true" | "false"
```

Binary operators associate to the left. `let`, `if` and function bodies extend as far right as possible.
"""

from toylang.lang.error import ParseError
from toylang.pure.lexical import TokenKind
from toylang.pure.syntax import (
    Apply, BinaryOp, BoolLiteral, Function, Identifier, If, IntLiteral, Let, UnaryOp, UnitLiteral
)
from toylang.pure.value import BinOp, UnaryOp as UnaryOperator


class TokenStream:
    """Buffered, peekable view of a token iterable. Pulls tokens lazily and keeps returning EOF once it is reached."""

    def __init__(self, tokens):
        self._tokens = iter(tokens)
        self._buffer = []
        self.source = getattr(tokens, "text", "")  # Lexers carry their text, used for error messages
        self.last = None

    def peek(self, k=0):
        """Returns the token k positions ahead without consuming it."""
        while len(self._buffer) <= k:
            if self._buffer and self._buffer[-1].kind is TokenKind.EOF:
                return self._buffer[-1]
            self._buffer.append(next(self._tokens))
        return self._buffer[k]

    def advance(self):
        """Consumes and returns the next token."""
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self._buffer.pop(0)
        self.last = token
        return token

    def expect(self, *kinds):
        """Consumes the next token, which must be of one of kinds."""
        token = self.peek()
        if token.kind not in kinds:
            raise ParseError(kinds, token, self.source)
        return self.advance()

    def at(self, *kinds):
        """Whether the next token is of one of kinds."""
        return self.peek().kind in kinds

    def at_end(self):
        return self.at(TokenKind.EOF)


class Parser:
    """Parses top-level expressions one at a time from a token stream."""
    BINARY_LEVELS = [
        {TokenKind.AND: BinOp.AND, TokenKind.OR: BinOp.OR},
        {TokenKind.EQ: BinOp.EQ, TokenKind.LT: BinOp.LT, TokenKind.GT: BinOp.GT},
        {TokenKind.PLUS: BinOp.ADD, TokenKind.MINUS: BinOp.SUB},
        {TokenKind.STAR: BinOp.MUL, TokenKind.SLASH: BinOp.DIV},
    ]
    UNARY = {TokenKind.NOT: UnaryOperator.NOT, TokenKind.MINUS: UnaryOperator.NEGATE}
    PRIMARY = (TokenKind.LPAREN, TokenKind.INT, TokenKind.IDENT, TokenKind.TRUE, TokenKind.FALSE)

    def __init__(self, tokens):
        self.tokens = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)

    def parse(self):
        """Returns the syntax tree of the next top-level expression."""
        return self._expr()

    def has_next(self):
        """Whether another top-level expression follows."""
        return not self.tokens.at_end()

    def _expr(self):
        if self.tokens.at(TokenKind.LET):
            return self._let_expr()
        if self.tokens.at(TokenKind.IF):
            return self._if_expr()
        if self.tokens.at(TokenKind.VBAR):
            return self._fn_expr()
        return self._binary_expr(0)

    def _let_expr(self):
        self.tokens.expect(TokenKind.LET)
        name = self.tokens.expect(TokenKind.IDENT).value
        self.tokens.expect(TokenKind.EQ)
        bound = self._expr()

        if self.tokens.at(TokenKind.IN):
            self.tokens.advance()
            return Let(name, bound, self._expr())
        return Let(name, bound)

    def _if_expr(self):
        self.tokens.expect(TokenKind.IF)
        cond = self._expr()
        self.tokens.expect(TokenKind.THEN)
        then = self._expr()

        if self.tokens.at(TokenKind.ELSE):
            self.tokens.advance()
            return If(cond, then, self._expr())
        return If(cond, then)

    def _fn_expr(self):
        params = []

        self.tokens.expect(TokenKind.VBAR)
        if self.tokens.at(TokenKind.IDENT):
            params.append(self.tokens.advance().value)
            while not self.tokens.at(TokenKind.VBAR):
                self.tokens.expect(TokenKind.COMMA, TokenKind.VBAR)
                params.append(self.tokens.expect(TokenKind.IDENT).value)
        self.tokens.expect(TokenKind.VBAR)
        self.tokens.expect(TokenKind.ARROW)
        body = self._expr()

        if not params:
            return Function(None, body)  # nullary

        # curried: innermost function takes the last parameter
        for param in reversed(params):
            body = Function(param, body)
        return body

    def _binary_expr(self, level):
        """Left-associative binary operators of BINARY_LEVELS[level] and tighter."""
        if level == len(Parser.BINARY_LEVELS):
            return self._unary_expr()

        ops = Parser.BINARY_LEVELS[level]
        left = self._binary_expr(level + 1)
        while self.tokens.peek().kind in ops:
            op = ops[self.tokens.advance().kind]
            left = BinaryOp(op, left, self._binary_expr(level + 1))
        return left

    def _unary_expr(self):
        kind = self.tokens.peek().kind
        if kind in Parser.UNARY:
            self.tokens.advance()
            return UnaryOp(Parser.UNARY[kind], self._apply_expr())
        return self._apply_expr()

    def _apply_expr(self):
        callee = self._primary()
        while self.tokens.at(TokenKind.LPAREN):
            args = self._apply_args()
            if not args:
                callee = Apply(callee, UnitLiteral())  # nullary call applies unit
            for arg in args:
                callee = Apply(callee, arg)
        return callee

    def _apply_args(self):
        args = []

        self.tokens.expect(TokenKind.LPAREN)
        if not self.tokens.at(TokenKind.RPAREN):
            args.append(self._expr())
            while not self.tokens.at(TokenKind.RPAREN):
                self.tokens.expect(TokenKind.COMMA, TokenKind.RPAREN)
                args.append(self._expr())
        self.tokens.expect(TokenKind.RPAREN)

        return args

    def _primary(self):
        token = self.tokens.expect(*Parser.PRIMARY)

        if token.kind is TokenKind.LPAREN:
            if self.tokens.at(TokenKind.RPAREN):
                expr = UnitLiteral()
            else:
                expr = self._expr()
            self.tokens.expect(TokenKind.RPAREN)
            return expr

        if token.kind is TokenKind.INT:
            return IntLiteral(token.value)
        if token.kind is TokenKind.IDENT:
            return Identifier(token.value)
        return BoolLiteral(token.kind is TokenKind.TRUE)


def parse(tokens):
    """Parses one top-level expression from tokens (a TokenStream, or any token iterable, which gets wrapped).
    Returns (syntax tree, whether more top-level expressions follow). Calling parse again on the same TokenStream
    continues after the expression just returned.
    """
    parser = Parser(tokens)
    return parser.parse(), parser.has_next()
