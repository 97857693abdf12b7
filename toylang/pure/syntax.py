"""Abstract syntax tree of toylang, as produced by the parser and consumed by the evaluator.

```
<expr> ::= UnitLiteral | IntLiteral | BoolLiteral | Identifier
         | BinaryOp(op, left, right)
         | UnaryOp(op, operand)
         | Let(name, bound, body?)        ; no body: the let is the last expression of its scope
         | If(cond, then, otherwise?)     ; no otherwise: false condition gives ()
         | Function(param?, body)         ; no param: nullary function
         | Apply(callee, argument)        ; one argument, multi-argument calls are curried
```

Nodes are immutable and compare structurally.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Optional

from toylang.pure import value as runtime


class Expr(ABC):
    """Superclass of every syntax tree node."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return [getattr(self, field.name) for field in fields(self) if isinstance(getattr(self, field.name), Expr)]

    @property
    @abstractmethod
    def label(self):
        """Node label used by str() and display()."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <label>(
            <label>(
                ...
                <label>  # <-- if the node has no children
            )
        )
        """
        result = f"{'    ' * indents}{self.label}"
        if self.nodes:
            result += "("
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents})"
        return result

    def __str__(self):
        parts = [self.label] + [str(node) for node in self.nodes]
        return f"[{' '.join(parts)}]"


@dataclass(frozen=True)
class UnitLiteral(Expr):

    @property
    def label(self):
        return "Unit"


@dataclass(frozen=True)
class IntLiteral(Expr):
    value: int

    @property
    def label(self):
        return f"Int {self.value}"


@dataclass(frozen=True)
class BoolLiteral(Expr):
    value: bool

    @property
    def label(self):
        return f"Bool {'true' if self.value else 'false'}"


@dataclass(frozen=True)
class Identifier(Expr):
    name: str

    @property
    def label(self):
        return f"Ident {self.name}"


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: runtime.BinOp
    left: Expr
    right: Expr

    @property
    def label(self):
        return self.op.name.capitalize()


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: runtime.UnaryOp
    operand: Expr

    @property
    def label(self):
        return self.op.name.capitalize()


@dataclass(frozen=True)
class Let(Expr):
    name: str
    bound: Expr
    body: Optional[Expr] = None

    @property
    def label(self):
        return f"Let {self.name}"


@dataclass(frozen=True)
class If(Expr):
    cond: Expr
    then: Expr
    otherwise: Optional[Expr] = None

    @property
    def label(self):
        return "If"


@dataclass(frozen=True)
class Function(Expr):
    param: Optional[str]
    body: Expr

    @property
    def label(self):
        return f"Fn |{self.param or ''}|"


@dataclass(frozen=True)
class Apply(Expr):
    callee: Expr
    argument: Expr

    @property
    def label(self):
        return "Apply"
