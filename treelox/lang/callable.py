"""Callable values of the lox language."""

from abc import ABC, abstractmethod


class LoxCallable(ABC):
    """Anything that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with already-evaluated arguments and returns the result value. Assumes the caller has
        checked len(arguments) == self.arity().
        """


class LoxFunction(LoxCallable):
    """A user function: an immutable snapshot of a parsed Function declaration plus the scope it was declared in."""

    def __init__(self, declaration, closure):
        self.name = declaration.name.lexeme
        self.params = tuple(param.lexeme for param in declaration.params)
        self.body = declaration.body
        self.closure = closure  # live scope, so later mutations of captured variables are visible

    def arity(self):
        return len(self.params)

    def call(self, interpreter, arguments):
        """Runs the body in a fresh call frame enclosed by the closure. Returns the returned value, or None (nil) if
        the body finishes without a return statement.
        """
        frame = self.closure.child()
        for param, argument in zip(self.params, arguments):
            frame.define(param, argument)

        outcome = interpreter.execute_block(self.body, frame)
        return outcome.value if outcome.returning else None

    def __repr__(self):
        return f"LoxFunction(name='{self.name}', params={self.params})"

    def __str__(self):
        return f"<fn {self.name}>"
