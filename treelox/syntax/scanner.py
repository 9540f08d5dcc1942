"""Lexical analysis for the lox language: source text to an ordered list of Tokens, terminated by an EOF token.

Lexical grammar:

```
<number>     ::= <digit>+ ( "." <digit>+ )?          ; a "." is only consumed if a digit follows it
<string>     ::= '"' <any char but '"'>* '"'          ; may span lines, no escape sequences
<identifier> ::= <alpha> ( <alpha> | <digit> )*      ; ASCII only, reclassified if it's a keyword
<comment>    ::= "//" <any char but newline>*
```

Scanning stops at the first lexical error.
"""

import string

from treelox.lang.error import LexicalError, UnterminatedStringError
from treelox.syntax.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Single-pass scanner with at most two characters of lookahead."""
    ALPHA = string.ascii_letters
    DIGITS = string.digits

    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }

    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }

    def __init__(self, source, path=None):
        self.source = source
        self.path = path     # source name stamped on every token and error
        self.tokens = []

        self.start = 0       # offset of the first char of the lexeme being scanned
        self.current = 0     # offset of the char about to be consumed
        self.line = 1
        self.line_start = 0  # offset of the first char of the current line

        self._start_line = 1
        self._start_col = 1

    def scan_tokens(self):
        """Scans the whole source and returns its tokens. Raises LexicalError on the first bad lexeme."""
        while not self.is_at_end():
            self.start = self.current
            self._start_line = self.line
            self._start_col = self.col
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.col, self.path))
        return self.tokens

    @property
    def col(self):
        """1-based column of the char about to be consumed."""
        return self.current - self.line_start + 1

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the current char only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return ""
        return self.source[self.current + 1]

    def newline(self):
        """Must be called right after a newline char has been consumed."""
        self.line += 1
        self.line_start = self.current

    def add_token(self, token_type, literal=None):
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self._start_line, self._start_col, self.path))

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])

        elif char in Scanner.DOUBLE:
            matched, unmatched = Scanner.DOUBLE[char]
            self.add_token(matched if self.match("=") else unmatched)

        elif char == "/":
            if self.match("/"):
                while self.peek() not in ("\n", ""):
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)

        elif char == "\n":
            self.newline()

        elif char.isspace():
            pass

        elif char == '"':
            self.string()

        elif char in Scanner.DIGITS:
            self.number()

        elif char in Scanner.ALPHA:
            self.identifier()

        else:
            raise LexicalError("Unexpected character.", self._start_line, self._start_col, f"at '{char}'",
                               path=self.path)

    def string(self):
        while self.peek() not in ('"', ""):
            if self.advance() == "\n":
                self.newline()

        if self.is_at_end():
            raise UnterminatedStringError("Unterminated string.", self.line, self.col, "at end", path=self.path)

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while self.peek() and self.peek() in Scanner.DIGITS:
            self.advance()

        if self.peek() == "." and self.peek_next() and self.peek_next() in Scanner.DIGITS:
            self.advance()  # the "."
            while self.peek() and self.peek() in Scanner.DIGITS:
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while self.peek() and self.peek() in Scanner.ALPHA + Scanner.DIGITS:
            self.advance()

        text = self.source[self.start:self.current]
        token_type = KEYWORDS.get(text, TokenType.IDENTIFIER)
        self.add_token(token_type, text if token_type is TokenType.IDENTIFIER else None)
