"""Tree-walking evaluator: reduces a syntax tree to a Value in an Environment.

Evaluation is eager everywhere: both operands of every binary operator are evaluated, left first, before the operator
is applied (`and`/`or` do not short-circuit), `let`-bound expressions are evaluated before they are bound, and
arguments are evaluated before a closure is entered, even when the closure ignores them.
"""

import sys
from functools import singledispatch

from toylang.lang.error import EvalError, NotAFunctionError, TypeMismatchError
from toylang.pure.syntax import (
    Apply, BinaryOp, BoolLiteral, Function, Identifier, If, IntLiteral, Let, UnaryOp, UnitLiteral
)
from toylang.pure.value import UNIT, Bool, Closure, Int

RECURSION_LIMIT = 10 ** 4  # every toylang call level costs several Python frames

if sys.getrecursionlimit() < RECURSION_LIMIT:
    sys.setrecursionlimit(RECURSION_LIMIT)


@singledispatch
def evaluate(node, env):
    """Returns the Value of node in env. The only side effect is `let` extending the current scope of env."""
    raise EvalError("cannot evaluate '{}'", repr(node))


@evaluate.register(UnitLiteral)
def _(node, env):
    return UNIT


@evaluate.register(IntLiteral)
def _(node, env):
    return Int(node.value)


@evaluate.register(BoolLiteral)
def _(node, env):
    return Bool(node.value)


@evaluate.register(Identifier)
def _(node, env):
    return env.lookup(node.name)


@evaluate.register(BinaryOp)
def _(node, env):
    left = evaluate(node.left, env)
    right = evaluate(node.right, env)
    return left.apply_binary_op(node.op, right)


@evaluate.register(UnaryOp)
def _(node, env):
    return evaluate(node.operand, env).apply_unary_op(node.op)


@evaluate.register(Let)
def _(node, env):
    value = evaluate(node.bound, env)
    env.bind(node.name, value)
    if node.body is None:
        return value
    return evaluate(node.body, env)


@evaluate.register(If)
def _(node, env):
    cond = evaluate(node.cond, env)
    if not isinstance(cond, Bool):
        raise TypeMismatchError("if condition must be Bool, but found {}", cond.describe())

    if cond.b:
        return evaluate(node.then, env)
    if node.otherwise is None:
        return UNIT
    return evaluate(node.otherwise, env)


@evaluate.register(Function)
def _(node, env):
    # body is not evaluated until the closure is applied
    return Closure(node.param, node.body, env.snapshot())


@evaluate.register(Apply)
def _(node, env):
    callee = evaluate(node.callee, env)
    if not isinstance(callee, Closure):
        raise NotAFunctionError(callee)

    argument = evaluate(node.argument, env)
    return call(callee, argument)


def call(closure, argument):
    """Evaluates the body of closure in a new scope under its captured environment, with its parameter (if any) bound
    to argument.
    """
    if closure.param is None:
        return evaluate(closure.body, closure.env.child())
    return evaluate(closure.body, closure.env.child({closure.param: argument}))
