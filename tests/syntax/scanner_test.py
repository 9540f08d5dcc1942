import unittest

from treelox.lang.error import LexicalError, UnterminatedStringError
from treelox.syntax.scanner import Scanner
from treelox.syntax.tokens import Token, TokenType


def types(source):
    return [token.type for token in Scanner(source).scan_tokens()]


class ScannerTestCase(unittest.TestCase):

    def test_operators(self):
        cases = {
            "(){},.-+;*/": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
                TokenType.STAR, TokenType.SLASH, TokenType.EOF
            ],
            "! != = == < <= > >=": [
                TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.LESS,
                TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.EOF
            ],
            "!!=": [TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EOF],
            "===": [TokenType.EQUAL_EQUAL, TokenType.EQUAL, TokenType.EOF],
            "": [TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_comments(self):
        cases = {
            "// nothing to see here": [TokenType.EOF],
            "1 // one\n2": [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF],
            "4 / 2": [TokenType.NUMBER, TokenType.SLASH, TokenType.NUMBER, TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_numbers(self):
        cases = {
            "123": [123.0],
            "1.5": [1.5],
            "0.25 7": [0.25, 7.0],
        }
        for case, expected in cases.items():
            tokens = Scanner(case).scan_tokens()[:-1]
            self.assertEqual(expected, [token.literal for token in tokens], case)
            for token in tokens:
                self.assertIsInstance(token.literal, float, case)

        # a "." is only part of a number if a digit follows it
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], types("1."))
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF], types("1.abs"))
        self.assertEqual([TokenType.DOT, TokenType.NUMBER, TokenType.EOF], types(".5"))

    def test_strings(self):
        token, eof = Scanner('"hello world"').scan_tokens()
        self.assertEqual(TokenType.STRING, token.type)
        self.assertEqual("hello world", token.literal)
        self.assertEqual('"hello world"', token.lexeme)

        token, eof = Scanner('"two\nlines"').scan_tokens()
        self.assertEqual("two\nlines", token.literal)
        self.assertEqual(1, token.line)
        self.assertEqual(2, eof.line)

    def test_identifiers_and_keywords(self):
        keywords = "and class else false fun for if nil or print return this true var while"
        expected = [
            TokenType.AND, TokenType.CLASS, TokenType.ELSE, TokenType.FALSE, TokenType.FUN, TokenType.FOR,
            TokenType.IF, TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN, TokenType.THIS,
            TokenType.TRUE, TokenType.VAR, TokenType.WHILE, TokenType.EOF
        ]
        self.assertEqual(expected, types(keywords))

        should_be_identifiers = ["andy", "classy", "x1", "printer", "orchid", "For"]
        for case in should_be_identifiers:
            token = Scanner(case).scan_tokens()[0]
            self.assertEqual(TokenType.IDENTIFIER, token.type, case)
            self.assertEqual(case, token.literal, case)

    def test_positions(self):
        tokens = Scanner("var x = 1;\n  print x;").scan_tokens()
        positions = [(token.lexeme, token.line, token.col) for token in tokens]
        expected = [
            ("var", 1, 1), ("x", 1, 5), ("=", 1, 7), ("1", 1, 9), (";", 1, 10),
            ("print", 2, 3), ("x", 2, 9), (";", 2, 10), ("", 2, 11),
        ]
        self.assertEqual(expected, positions)

    def test_tokens(self):
        expected = [
            Token(TokenType.VAR, "var", None, 1, 1),
            Token(TokenType.IDENTIFIER, "s", "s", 1, 5),
            Token(TokenType.EQUAL, "=", None, 1, 7),
            Token(TokenType.STRING, '"a"', "a", 1, 9),
            Token(TokenType.SEMICOLON, ";", None, 1, 12),
            Token(TokenType.EOF, "", None, 1, 13),
        ]
        self.assertEqual(expected, Scanner('var s = "a";').scan_tokens())

    def test_path(self):
        tokens = Scanner("print x;", "script.lox").scan_tokens()
        self.assertEqual(["script.lox"] * 4, [token.path for token in tokens])
        self.assertEqual(Token(TokenType.PRINT, "print", None, 1, 1), tokens[0])

        with self.assertRaises(LexicalError) as context:
            Scanner('"open', "script.lox").scan_tokens()
        self.assertEqual("script.lox", context.exception.path)
        self.assertIsInstance(context.exception, UnterminatedStringError)

    def test_errors(self):
        cases = {
            "@": (1, 1, "at '@'", "Unexpected character."),
            "var x = 1;\nx = #;": (2, 5, "at '#'", "Unexpected character."),
            "my_var": (1, 3, "at '_'", "Unexpected character."),
            '"never closed': (1, 14, "at end", "Unterminated string."),
            '"line one\nline two': (2, 9, "at end", "Unterminated string."),
        }
        for case, (line, col, place, msg) in cases.items():
            with self.assertRaises(LexicalError, msg=case) as context:
                Scanner(case).scan_tokens()
            error = context.exception
            self.assertEqual((line, col, place, msg), (error.line, error.col, error.place, error.msg), case)

    def test_error_text(self):
        with self.assertRaises(LexicalError) as context:
            Scanner("1 + $").scan_tokens()
        self.assertEqual("[line 1, col 5] Error at '$': Unexpected character.", str(context.exception))


if __name__ == '__main__':
    unittest.main()
