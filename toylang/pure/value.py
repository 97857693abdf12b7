"""Runtime values of toylang: values that cannot be reduced any further.

Operators are defined on the values themselves:

```
Int  + - * /  Int   -> Int      ; "/" truncates toward zero, a zero divisor is an error
Int  = < >    Int   -> Bool
Bool = and or Bool  -> Bool
-  Int              -> Int
not Bool            -> Bool
```

Anything else (including every operator on Unit and Closure) is a type mismatch: there is no implicit coercion
between Int and Bool. Closures only respond to being applied, which is the evaluator's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from toylang.lang.error import DivisionByZeroError, TypeMismatchError


class BinOp(Enum):
    """Binary operators, valued by their source text."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "="
    LT = "<"
    GT = ">"
    AND = "and"
    OR = "or"


class UnaryOp(Enum):
    """Unary operators, valued by their source text."""
    NOT = "not"
    NEGATE = "-"


class Value(ABC):
    """Superclass of every runtime value."""

    def apply_binary_op(self, op, other):
        """Returns the Value of self <op> other. Subclasses look op up in their BINARY table, keyed by op, whose
        entries take the two raw operands.
        """
        table = type(self).BINARY
        if op not in table or type(other) is not type(self):
            raise TypeMismatchError("cannot apply '{}' to {} and {}", (op.value, self.describe(), other.describe()))
        return table[op](self, other)

    def apply_unary_op(self, op):
        """Returns the Value of <op> self."""
        table = type(self).UNARY
        if op not in table:
            raise TypeMismatchError("cannot apply '{}' to {}", (op.value, self.describe()))
        return table[op](self)

    def describe(self):
        """Type name and rendering, for error messages."""
        return f"{type(self).__name__} {self}"

    @abstractmethod
    def __str__(self):
        """Human-readable rendering, as printed by the runners."""


class Unit(Value):
    """The single value of the unit type, written '()'. Use UNIT rather than instantiating."""
    BINARY = {}
    UNARY = {}

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __str__(self):
        return "()"

    def __repr__(self):
        return "Unit()"


UNIT = Unit()


def _divide(left, right):
    """Integer division truncating toward zero."""
    if right.n == 0:
        raise DivisionByZeroError(left)
    quotient = abs(left.n) // abs(right.n)
    return Int(quotient if (left.n < 0) == (right.n < 0) else -quotient)


@dataclass(frozen=True)
class Int(Value):
    n: int

    BINARY = {
        BinOp.ADD: lambda left, right: Int(left.n + right.n),
        BinOp.SUB: lambda left, right: Int(left.n - right.n),
        BinOp.MUL: lambda left, right: Int(left.n * right.n),
        BinOp.DIV: _divide,
        BinOp.EQ: lambda left, right: Bool(left.n == right.n),
        BinOp.LT: lambda left, right: Bool(left.n < right.n),
        BinOp.GT: lambda left, right: Bool(left.n > right.n),
    }
    UNARY = {
        UnaryOp.NEGATE: lambda operand: Int(-operand.n),
    }

    def __str__(self):
        return str(self.n)


@dataclass(frozen=True)
class Bool(Value):
    b: bool

    BINARY = {
        BinOp.EQ: lambda left, right: Bool(left.b == right.b),
        BinOp.AND: lambda left, right: Bool(left.b and right.b),
        BinOp.OR: lambda left, right: Bool(left.b or right.b),
    }
    UNARY = {
        UnaryOp.NOT: lambda operand: Bool(not operand.b),
    }

    def __str__(self):
        return "true" if self.b else "false"


@dataclass(frozen=True, eq=False)
class Closure(Value):
    """A function value: an optional parameter name (None for nullary functions), an unevaluated body and the
    environment snapshot taken when the function literal was evaluated. Closures compare by identity.
    """
    param: Optional[str]
    body: Any
    env: Any

    BINARY = {}
    UNARY = {}

    def __str__(self):
        return f"<closure |{self.param or ''}| => {self.body}>"
