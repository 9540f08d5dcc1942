"""Fully-parenthesizing AST printer. Only used for tracing/debugging: nothing in the interpreter depends on it."""

from treelox.syntax import grammar
from treelox.syntax.tokens import stringify


class AstPrinter:
    """Renders Expr/Stmt nodes as prefix s-expressions, e.g. `1 + 2 * 3` -> `(+ 1 (* 2 3))`."""

    def print(self, node):
        """Returns the printed form of node (an Expr or a Stmt)."""
        method = getattr(self, f"_print_{type(node).__name__.lower()}")
        return method(node)

    def parenthesize(self, name, *nodes):
        return "(" + " ".join([name] + [self.print(node) for node in nodes]) + ")"

    # expressions

    def _print_literal(self, expr):
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return stringify(expr.value)

    def _print_variable(self, expr):
        return expr.name.lexeme

    def _print_assign(self, expr):
        return self.parenthesize(f"= {expr.name.lexeme}", expr.value)

    def _print_logical(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def _print_unary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def _print_binary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def _print_call(self, expr):
        return self.print(expr.callee) + "(" + ", ".join(self.print(arg) for arg in expr.arguments) + ")"

    def _print_grouping(self, expr):
        return self.parenthesize("group", expr.expression)

    # statements

    def _print_block(self, stmt):
        if not stmt.statements:
            return "{ }"
        return "{ " + "  ".join(self.print(inner) for inner in stmt.statements) + " }"

    def _print_expression(self, stmt):
        return self.parenthesize(";", stmt.expression)

    def _print_function(self, stmt):
        params = ", ".join(param.lexeme for param in stmt.params)
        return f"(fun {stmt.name.lexeme}({params}) {self._print_block(grammar.Block(stmt.body))})"

    def _print_if(self, stmt):
        if stmt.else_branch is None:
            return self.parenthesize("if", stmt.condition, stmt.then_branch)
        return self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)

    def _print_print(self, stmt):
        return self.parenthesize("print", stmt.expression)

    def _print_return(self, stmt):
        if stmt.value is None:
            return "(return)"
        return self.parenthesize("return", stmt.value)

    def _print_var(self, stmt):
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return self.parenthesize(f"var {stmt.name.lexeme} =", stmt.initializer)

    def _print_while(self, stmt):
        return self.parenthesize("while", stmt.condition, stmt.body)
