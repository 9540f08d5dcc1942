"""Session control for the lox language: runs the scan -> parse -> interpret pipeline, either in command-line mode (one
line at a time against a persistent global scope) or file interpretation mode (one file, fresh global scope).
"""

from treelox.lang.environment import Environment
from treelox.lang.error import InputError, LexicalError, ParseFailure, UnterminatedStringError
from treelox.lang.interpreter import Interpreter
from treelox.syntax.parser import Parser
from treelox.syntax.printer import AstPrinter
from treelox.syntax.scanner import Scanner
from treelox.syntax.tokens import TokenType


class Session:
    """Governs a lox session and owns its global scope. Closing the session drops the scope."""
    SH_FILE = "<stdin>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, out=None):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.environment = Environment()
        self.interpreter = Interpreter(out)
        self.to_exec = []         # parsed statements waiting for run
        self.inputs = 0           # number of sources added in command-line mode

        if self.cmd_line:
            self.error_handler.fatal = False

        if path == Session.SH_FILE and not cmd_line:
            raise ValueError(f"'{Session.SH_FILE}' is a reserved filename")

    @staticmethod
    def read(path):
        """Returns the contents of the file at path. Raises InputError if it can't be read."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                return file.read()
        except (OSError, UnicodeDecodeError):
            raise InputError(path)

    @staticmethod
    def preprocess_line(line, prev=""):
        """Joins line onto prev (a pending, incomplete command-line input). Returns the joined line and whether it is
        still incomplete: it has more opening braces/parentheses tokens than closing ones, or ends inside a string.
        Brackets in strings and comments don't count. Other lexical errors are left for add to report.
        """
        line = f"{prev}\n{line}" if prev else line

        try:
            tokens = Scanner(line).scan_tokens()
        except UnterminatedStringError:
            return line, True
        except LexicalError:
            return line, False

        types = [token.type for token in tokens]
        incomplete = (types.count(TokenType.LEFT_BRACE) > types.count(TokenType.RIGHT_BRACE)
                      or types.count(TokenType.LEFT_PAREN) > types.count(TokenType.RIGHT_PAREN))
        return line, incomplete

    def source_path(self):
        """Name to register the next source under. Each command-line input gets its own (<stdin>:1, <stdin>:2, ...),
        so an error raised in a function declared on an earlier line still echoes that line.
        """
        if not self.cmd_line:
            return self.path
        self.inputs += 1
        return f"{self.path}:{self.inputs}"

    def add(self, source):
        """Scans and parses source, queueing its statements for run. Raises LexicalError, or ParseFailure carrying
        every syntax error if any statement failed to parse (in which case nothing is queued).
        """
        path = self.source_path()
        self.error_handler.register_source(path, source)

        tokens = Scanner(source, path).scan_tokens()
        parser = Parser(tokens)
        statements = parser.parse()
        if parser.errors:
            raise ParseFailure(parser.errors)

        self.to_exec.extend(statements)

    def run(self):
        """Executes the queued statements against this session's global scope. Returns the value of the last one
        (None if it produced nil). Runtime errors propagate; the statements are dequeued either way.
        """
        statements, self.to_exec = self.to_exec, []

        printer = AstPrinter()
        value = None
        for stmt in statements:
            self.error_handler.register_step("ast", printer.print(stmt))
            value = self.interpreter.interpret([stmt], self.environment)

        if not self.cmd_line:
            self.error_handler.remove_source(self.path)  # command-line inputs stay, their functions may still run
        return value

    def execute(self, source):
        """Adds then runs source."""
        self.add(source)
        return self.run()

    def run_file(self):
        """Reads this session's file and runs it."""
        return self.execute(Session.read(self.path))

    def close(self):
        self.to_exec = []
        self.environment = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
