"""Error handling for the lox language. Only LoxErrors (and the ParseFailure/InputError wrappers) should be encountered
during running: if another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every LoxError is a value carrying the source position it was raised at, and renders as

```
[line <L>, col <C>] Error <place>: <message>   ; <place> is "at end" or "at '<lexeme>'"
```

Exit codes follow sysexits.h: 64 usage, 65 bad input (lexical/syntax), 66 unreadable file, 70 runtime/internal.
"""

import sys

from termcolor import colored


class LoxError(Exception):
    """Templates a lox error so that it can be raised anywhere in the pipeline and reported by ErrorHandler."""
    exit_code = 65

    def __init__(self, msg, line, col, place="", span=1, path=None):
        """line and col are 1-based. span is the width of the offending lexeme, used to underline it. path names the
        source the error comes from, if known.
        """
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.col = col
        self.place = place
        self.span = max(span, 1)
        self.path = path

    @classmethod
    def at(cls, token, msg):
        """Builds an error positioned at token."""
        return cls(msg, token.line, token.col, token.place, len(token.lexeme), token.path)

    def __str__(self):
        if self.place:
            return f"[line {self.line}, col {self.col}] Error {self.place}: {self.msg}"
        return f"[line {self.line}, col {self.col}] Error: {self.msg}"


class LexicalError(LoxError):
    """Bad character or unterminated string."""


class UnterminatedStringError(LexicalError):
    """String literal still open at the end of the source. In command-line mode the input continues instead."""


class ParseError(LoxError):
    """Syntax error: unexpected token, invalid assignment target, parameter/argument limit exceeded, misplaced
    return.
    """


class LoxRuntimeError(LoxError):
    """Superclass of errors raised while a syntactically valid program is executing."""
    exit_code = 70


class RuntimeTypeError(LoxRuntimeError):
    """Operand type mismatch, or a call to something that isn't callable."""


class UndefinedVariableError(LoxRuntimeError):
    """Read or assignment of a name that no enclosing scope declares."""


class ArityError(LoxRuntimeError):
    """Call argument count doesn't match the callee's parameter count."""


class ParseFailure(Exception):
    """Raised once a whole source has been parsed if any statement failed. Carries every ParseError found, so that
    independent syntax errors are all reported instead of only the first.
    """
    exit_code = 65

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} syntax error(s)")


class InputError(Exception):
    """Raised when a script file can't be read."""
    exit_code = 66

    def __init__(self, path):
        self.path = path
        super().__init__(f"'{path}' could not be opened")


class ErrorHandler:
    """Context manager that reports lox errors to stderr and either exits (fatal) or swallows them so the caller can
    carry on with the next line/file.
    """
    ERROR = "red"
    TRACE = "magenta"
    INTERNAL_EXIT = 70
    INTERRUPT_EXIT = 130

    def __init__(self, fatal=True, trace=False, stream=None):
        self.fatal = fatal
        self.trace = trace
        self.stream = stream    # defaults to sys.stderr, looked up at print time
        self.sources = {}       # dict of path: source text, used to echo offending lines
        self.path = None        # path of the most recently registered source
        self.had_error = False

    @property
    def out(self):
        return self.stream if self.stream is not None else sys.stderr

    def register_source(self, path, source):
        """Registers source under path. Should be called before the source is scanned."""
        self.sources[path] = source
        self.path = path

    def remove_source(self, path):
        """Removes path's source. Should be called once a source has run successfully."""
        self.sources.pop(path, None)
        if self.path == path:
            self.path = None

    def register_step(self, label, text):
        """Prints a trace step (e.g. the AST of a statement about to run) if tracing is enabled."""
        if self.trace:
            print(colored(f"{label}: ", ErrorHandler.TRACE, attrs=["bold"]) + text, file=self.out)

    @staticmethod
    def diagnose(error, line):
        """Returns line with the offending part of error highlighted, and a marker underneath it."""
        start = min(max(error.col - 1, 0), len(line))
        end = min(start + error.span, len(line))

        diagnosis = "    " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "    " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def _source_path(self, error):
        """Path of the source error was raised in: the one stamped on it, else the most recently registered one."""
        return error.path if error.path is not None else self.path

    def _source_line(self, error):
        source = self.sources.get(self._source_path(error))
        if source is None:
            return None

        lines = source.splitlines()
        if 1 <= error.line <= len(lines):
            return lines[error.line - 1]
        return None

    def _report(self, error):
        if not isinstance(error, LoxError):
            print(colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + str(error), file=self.out)
            return

        print(colored(str(error), ErrorHandler.ERROR, attrs=["bold"]), file=self.out)

        line = self._source_line(error)
        if line is not None and line.strip():
            print(f"  File '{self._source_path(error)}', line {error.line}:", file=self.out)
            print(ErrorHandler.diagnose(error, line), file=self.out)

    def throw(self, error, internal=False, exit_code=None):
        """Reports error (a LoxError, ParseFailure, or any exception with a readable message). Exits with exit_code (by
        default the error's own exit code) if this handler is fatal.
        """
        self.had_error = True

        if internal:
            print(colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]), end="", file=self.out)

        if isinstance(error, ParseFailure):
            for parse_error in error.errors:
                self._report(parse_error)
        else:
            self._report(error)

        if self.fatal:
            if exit_code is None:
                exit_code = ErrorHandler.INTERNAL_EXIT if internal else getattr(error, "exit_code", 1)
            sys.exit(exit_code)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if issubclass(exc_type, KeyboardInterrupt):
            self.throw(Exception("keyboard interrupt"), exit_code=ErrorHandler.INTERRUPT_EXIT)
        elif issubclass(exc_type, RecursionError):
            self.throw(Exception("maximum recursion depth exceeded"), exit_code=LoxRuntimeError.exit_code)
        elif issubclass(exc_type, (LoxError, ParseFailure, InputError)):
            self.throw(exc_val)
        else:
            self.throw(Exception(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True)

        return True
