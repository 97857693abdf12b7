"""Lexical environments: a chain of scopes, each mapping names to values, walked from the innermost scope outwards.

A scope is only ever extended in place by `let`. Closures hold a snapshot of the scope they were created in: a copy
of that scope's own bindings chained to the same outer scope, so later `let`s in the creating scope are invisible to
the closure while the (shared) outer chain is not copied.
"""

from toylang.lang.error import UndefinedIdentifierError


class Environment:
    """One scope of the chain. outer is the enclosing scope, None at the root."""

    def __init__(self, bindings=None, outer=None):
        self.bindings = dict(bindings) if bindings else {}
        self.outer = outer

    def lookup(self, name):
        """Returns the value bound to name in the innermost scope that has it."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.outer
        raise UndefinedIdentifierError(name)

    def bind(self, name, value):
        """Binds name in this scope, replacing any earlier binding of name in this scope."""
        self.bindings[name] = value

    def child(self, bindings=None):
        """Returns a new scope nested under this one."""
        return Environment(bindings, outer=self)

    def snapshot(self):
        """Returns a copy of this scope's bindings chained to the same outer scope."""
        return Environment(self.bindings, outer=self.outer)

    @property
    def depth(self):
        """Number of scopes enclosing this one."""
        depth, env = 0, self.outer
        while env is not None:
            depth, env = depth + 1, env.outer
        return depth

    def __contains__(self, name):
        try:
            self.lookup(name)
        except UndefinedIdentifierError:
            return False
        return True

    def __repr__(self):
        return f"Environment(names={sorted(self.bindings)}, depth={self.depth})"
