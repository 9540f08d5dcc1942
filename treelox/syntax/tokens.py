"""Lexical units of the lox language. Tokens are produced once by the Scanner and consumed by the Parser.

Runtime values are plain Python objects, so the literal carried by a token is one of:

```
<literal> ::= str      ; STRING tokens (contents without quotes) and IDENTIFIER tokens (the name)
            | float    ; NUMBER tokens, always floating point
            | None     ; every other token
```
"""

from dataclasses import dataclass, field
from enum import Enum, auto


class TokenType(Enum):
    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "fun": TokenType.FUN,
    "for": TokenType.FOR,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


def stringify(value):
    """Display text of a runtime value, as written by print statements and echoed by the shell."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


@dataclass(frozen=True)
class Token:
    """A single lexeme. line and col are 1-based and point at the first character of the lexeme. path names the source
    the token was scanned from (None if unknown); it is not part of token equality.
    """
    type: TokenType
    lexeme: str
    literal: object
    line: int
    col: int
    path: object = field(default=None, compare=False, repr=False)

    @property
    def place(self):
        """Where this token sits, as used by error messages: 'at end' or "at '<lexeme>'"."""
        if self.type is TokenType.EOF:
            return "at end"
        return f"at '{self.lexeme}'"

    def __str__(self):
        if self.literal is None:
            return f"{self.type.name} {self.lexeme}"
        return f"{self.type.name} {self.lexeme} {self.literal}"
