"""Abstract syntax tree for the lox language. Nodes are immutable and built once by the Parser.

```
<expr> ::= Literal(value)
         | Variable(name)
         | Assign(name, value)
         | Logical(left, operator, right)     ; "and" / "or"
         | Unary(operator, right)
         | Binary(left, operator, right)
         | Call(callee, paren, arguments)     ; paren is the closing ")", used for error positions
         | Grouping(expression)

<stmt> ::= Block(statements)
         | Expression(expression)
         | Function(name, params, body)
         | If(condition, then_branch, else_branch?)
         | Print(expression)
         | Return(keyword, value?)
         | Var(name, initializer?)
         | While(condition, body)
```
"""

from abc import ABC
from dataclasses import dataclass
from typing import Optional, Tuple

from treelox.syntax.tokens import Token


class Expr(ABC):
    """Superclass of every expression node."""


class Stmt(ABC):
    """Superclass of every statement node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: object


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt
