"""Lexical scoping for the lox language. An Environment is one scope: a name -> value mapping plus a live reference to
its enclosing scope. Scopes form a tree rooted at the global scope; lookups and assignments walk outward from the
innermost scope at the time they happen.

A scope lives as long as something references it: the block or call executing in it, a child scope, or a function
that captured it as its closure.
"""

from treelox.lang.error import UndefinedVariableError


class Environment:
    """A single scope in the scope chain."""

    def __init__(self, enclosing=None):
        self.values = {}            # dict of name: value defined in this scope
        self.enclosing = enclosing  # the enclosing Environment, shared (never copied)

    def child(self):
        """Returns a fresh scope enclosed by this one."""
        return Environment(self)

    def define(self, name, value):
        """Binds name in this scope only. Redefinition silently overwrites."""
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to the token name in the nearest scope that declares it."""
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise UndefinedVariableError.at(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds the token name in the nearest scope that declares it and returns value. Never creates a binding."""
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return value
        if self.enclosing is not None:
            return self.enclosing.assign(name, value)
        raise UndefinedVariableError.at(name, f"Undefined variable '{name.lexeme}'.")

    def __repr__(self):
        return f"Environment({self.values}, enclosing={self.enclosing!r})"
