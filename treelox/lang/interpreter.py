"""Tree-walking interpreter for the lox language.

Runtime values are plain Python objects (see treelox/syntax/tokens.py): None is nil, bool, float (numbers are always
floats), str, and LoxCallable instances. Truthiness: nil and false are falsy, everything else (0 and "" included) is
truthy.

Statements don't unwind with exceptions on `return`: every statement produces an Outcome, and every routine that
executes statements (blocks, if, while, function calls) checks for a returning Outcome and hands it straight back up.
"""

import math
import sys
from dataclasses import dataclass

from treelox.lang.callable import LoxCallable, LoxFunction
from treelox.lang.error import ArityError, RuntimeTypeError
from treelox.syntax.tokens import TokenType, stringify


@dataclass(frozen=True)
class Outcome:
    """Result of executing a statement: either normal completion carrying the statement's value, or a `return`
    unwinding to the enclosing call with the returned value.
    """
    value: object = None
    returning: bool = False


NORMAL = Outcome()


def is_truthy(value):
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Structural equality within a variant. Mismatched variants are never equal (so 1 == true is false)."""
    if type(left) is not type(right):
        return False
    return left == right


def is_number(value):
    return isinstance(value, float)


def divide(left, right):
    """IEEE-754 division: dividing by zero gives inf/-inf/nan instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    """Evaluates expressions and executes statements against an Environment chain. print statements write to out."""

    ARITHMETIC = {
        TokenType.MINUS: lambda left, right: left - right,
        TokenType.STAR: lambda left, right: left * right,
        TokenType.SLASH: divide,
    }

    COMPARISON = {
        TokenType.GREATER: lambda left, right: left > right,
        TokenType.GREATER_EQUAL: lambda left, right: left >= right,
        TokenType.LESS: lambda left, right: left < right,
        TokenType.LESS_EQUAL: lambda left, right: left <= right,
    }

    def __init__(self, out=None):
        self.out = out  # defaults to sys.stdout, looked up at print time

    def interpret(self, statements, environment):
        """Executes statements in environment and returns the value of the last one (None if there were none)."""
        value = None
        for stmt in statements:
            value = self.execute(stmt, environment).value
        return value

    # expressions

    def evaluate(self, expr, environment):
        method = getattr(self, f"_evaluate_{type(expr).__name__.lower()}")
        return method(expr, environment)

    def _evaluate_literal(self, expr, environment):
        return expr.value

    def _evaluate_grouping(self, expr, environment):
        return self.evaluate(expr.expression, environment)

    def _evaluate_variable(self, expr, environment):
        return environment.get(expr.name)

    def _evaluate_assign(self, expr, environment):
        value = self.evaluate(expr.value, environment)
        return environment.assign(expr.name, value)

    def _evaluate_logical(self, expr, environment):
        left = self.evaluate(expr.left, environment)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right, environment)

    def _evaluate_unary(self, expr, environment):
        right = self.evaluate(expr.right, environment)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        if not is_number(right):
            raise RuntimeTypeError.at(expr.operator, "Operand must be a number.")
        return -right

    def _evaluate_binary(self, expr, environment):
        left = self.evaluate(expr.left, environment)
        right = self.evaluate(expr.right, environment)
        operator = expr.operator.type

        if operator is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise RuntimeTypeError.at(expr.operator, "Operands must be two numbers or two strings.")

        if operator in Interpreter.ARITHMETIC:
            if not (is_number(left) and is_number(right)):
                raise RuntimeTypeError.at(expr.operator, "Operands must be numbers.")
            return Interpreter.ARITHMETIC[operator](left, right)

        if operator in Interpreter.COMPARISON:
            compare = Interpreter.COMPARISON[operator]
            if is_number(left) and is_number(right):
                return compare(left, right)
            if isinstance(left, bool) and isinstance(right, bool):
                return compare(left, right)
            # any other pairing compares truthiness instead of failing
            return compare(is_truthy(left), is_truthy(right))

        if operator is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        raise RuntimeTypeError.at(expr.operator, f"Unknown binary operator '{expr.operator.lexeme}'.")

    def _evaluate_call(self, expr, environment):
        callee = self.evaluate(expr.callee, environment)
        if not isinstance(callee, LoxCallable):
            raise RuntimeTypeError.at(expr.paren, "Can only call functions and classes.")

        arguments = [self.evaluate(argument, environment) for argument in expr.arguments]

        if len(arguments) != callee.arity():
            msg = f"Expected {callee.arity()} arguments but got {len(arguments)}."
            raise ArityError.at(expr.paren, msg)

        return callee.call(self, arguments)

    # statements

    def execute(self, stmt, environment):
        """Executes stmt and returns its Outcome."""
        method = getattr(self, f"_execute_{type(stmt).__name__.lower()}")
        return method(stmt, environment)

    def execute_block(self, statements, environment):
        """Executes statements in environment (which the caller has already created for them). Stops at, and returns,
        the first returning Outcome.
        """
        for stmt in statements:
            outcome = self.execute(stmt, environment)
            if outcome.returning:
                return outcome
        return NORMAL

    def _execute_block(self, stmt, environment):
        return self.execute_block(stmt.statements, environment.child())

    def _execute_expression(self, stmt, environment):
        return Outcome(self.evaluate(stmt.expression, environment))

    def _execute_function(self, stmt, environment):
        environment.define(stmt.name.lexeme, LoxFunction(stmt, environment))
        return NORMAL

    def _execute_if(self, stmt, environment):
        if is_truthy(self.evaluate(stmt.condition, environment)):
            return self.execute(stmt.then_branch, environment)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch, environment)
        return NORMAL

    def _execute_print(self, stmt, environment):
        value = self.evaluate(stmt.expression, environment)
        print(stringify(value), file=self.out if self.out is not None else sys.stdout)
        return NORMAL

    def _execute_return(self, stmt, environment):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value, environment)
        return Outcome(value, returning=True)

    def _execute_var(self, stmt, environment):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer, environment)
        environment.define(stmt.name.lexeme, value)
        return NORMAL

    def _execute_while(self, stmt, environment):
        while is_truthy(self.evaluate(stmt.condition, environment)):
            outcome = self.execute(stmt.body, environment)
            if outcome.returning:
                return outcome
        return NORMAL
