"""Lexical analysis for toylang: turns raw source text into a stream of tokens.

Token kinds are matched by regular expression, longest match first:

```
<int>     ::= "0" | [1-9] [0-9]*            ; no negative literals, use unary "-"
<ident>   ::= [a-zA-Z_] [a-zA-Z0-9_]*       ; "let", "in", ... are keywords, "letter", "index", ... are identifiers
<comment> ::= "//" <char>* <newline>        ; line comment
            | "/*" <char>* "*/"             ; block comment, not nested, ends at the first "*/"
```

Whitespace and comments are skipped and never reach the token stream.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from toylang.lang.error import LexError


class TokenKind(Enum):
    """Every kind of token, in matching order: ties between equal-length matches go to the kind declared first."""
    PLUS = ("+", r"\+")
    MINUS = ("-", r"-")
    STAR = ("*", r"\*")
    SLASH = ("/", r"/")
    LPAREN = ("(", r"\(")
    RPAREN = (")", r"\)")
    EQ = ("=", r"=")
    LT = ("<", r"<")
    GT = (">", r">")
    VBAR = ("|", r"\|")
    ARROW = ("=>", r"=>")
    COMMA = (",", r",")
    NOT = ("not", r"not")
    LET = ("let", r"let")
    IN = ("in", r"in")
    IF = ("if", r"if")
    THEN = ("then", r"then")
    ELSE = ("else", r"else")
    AND = ("and", r"and")
    OR = ("or", r"or")
    TRUE = ("true", r"true")
    FALSE = ("false", r"false")
    INT = (None, r"0|[1-9][0-9]*")
    IDENT = (None, r"[a-zA-Z_][a-zA-Z0-9_]*")
    EOF = (None, None)

    def __init__(self, fixed_text, pattern):
        self.fixed_text = fixed_text  # None for open-ended kinds
        self.pattern = pattern

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


@dataclass(frozen=True, repr=False)
class Token:
    """A single token: its kind, the text it matched and its offset in the source. INT tokens also carry their int
    value and IDENT tokens their name.
    """
    kind: TokenKind
    text: str
    pos: int
    value: Any = None

    @property
    def end(self):
        return self.pos + len(self.text)

    def __repr__(self):
        if self.kind is TokenKind.EOF:
            return "Token(EOF)"
        if self.kind in (TokenKind.INT, TokenKind.IDENT):
            return f"Token({self.kind.name}({self.text}))"
        return f"Token({self.kind.name})"


class Lexer:
    """Lazy scanner over text. next() returns one token at a time; iterating a Lexer restarts from the beginning of
    the text and stops after EOF.
    """
    SPACE = r"[\n\r\t ]+"
    COMMENT = r"//[^\r\n]*|/\*.*?\*/"
    IGNORE = re.compile(f"(?:{SPACE}|{COMMENT})*", re.DOTALL)

    PATTERNS = [(kind, re.compile(kind.pattern)) for kind in TokenKind if kind is not TokenKind.EOF]

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def next(self):
        """Returns the next token, or an EOF token (on every call) once the text is exhausted."""
        self._skip_ignored()
        if self.pos >= len(self.text):
            return Token(TokenKind.EOF, "", len(self.text))

        token = self._scan()
        self.pos = token.end
        return token

    def _skip_ignored(self):
        """Consumes whitespace and comments directly after pos."""
        self.pos = Lexer.IGNORE.match(self.text, self.pos).end()

    def _scan(self):
        """Reads the longest token starting at pos."""
        kind, found = None, ""
        for candidate, pattern in Lexer.PATTERNS:
            match = pattern.match(self.text, self.pos)
            if match and len(match.group()) > len(found):
                kind, found = candidate, match.group()

        if kind is None:
            raise LexError(self.text, self.pos)

        if kind is TokenKind.INT:
            return Token(kind, found, self.pos, int(found))
        if kind is TokenKind.IDENT:
            return Token(kind, found, self.pos, found)
        return Token(kind, found, self.pos)

    def __iter__(self):
        lexer = Lexer(self.text)
        while True:
            token = lexer.next()
            yield token
            if token.kind is TokenKind.EOF:
                return

    def __repr__(self):
        return f"Lexer(pos={self.pos}, text={self.text!r})"


def tokenize(text):
    """Returns a lazy, restartable token sequence over text that ends in EOF. Lexical errors are raised as the
    offending position is reached.
    """
    return Lexer(text)
