"""toylang interpreter.

For reference:
- "pure": the language core (toylang/pure), lexing through evaluation
- "lang": the host around the core (toylang/lang), sessions, the shell and error reporting

Basic program flow:
    1. Lexer: scans the source text into tokens, longest match first, skipping whitespace and comments
        - For token kinds and comment syntax, see toylang/pure/lexical.py
    2. Parser: builds a syntax tree for one top-level expression at a time by recursive descent
        - For the grammar, see toylang/pure/parser.py
    3. Evaluator: walks the syntax tree against an Environment and produces a Value
        - `let` bindings persist in the environment across top-level expressions that share it

"""

from toylang.pure.environment import Environment
from toylang.pure.evaluator import evaluate
from toylang.pure.lexical import tokenize
from toylang.pure.parser import TokenStream, parse

__all__ = ["Environment", "evaluate", "interpret", "parse", "tokenize"]


def interpret(text, env=None):
    """Evaluates every top-level expression of text in order against env (a fresh root Environment if None) and
    returns their values.
    """
    if env is None:
        env = Environment()

    tokens = TokenStream(tokenize(text))
    values = []
    while not tokens.at_end():
        node, __ = parse(tokens)
        values.append(evaluate(node, env))
    return values
