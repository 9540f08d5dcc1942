"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from treelox.syntax.tokens import stringify


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' or ^D to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # restored once a continued line is complete

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary lox source, echoing the value of its last statement unless it is nil."""
        with self.sess.error_handler:  # cmd.Cmd would otherwise end the loop on any exception
            self.line_num += 1
            line, incomplete = self.sess.preprocess_line(line, self._tmp_line)

            if incomplete:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            value = self.sess.execute(line)
            if value is not None:
                print(stringify(value), file=self.stdout)

    def do_help(self, arg):
        """Doesn't return docs, but rather a short intro. 'help' followed by anything else is run as lox source."""
        if arg:
            self.default(f"help {arg}")
            return False
        print("Welcome to the lox interpreter!\n\n"
              "Every line is scanned, parsed and run right away, and variables and functions you\n"
              "declare stay around until you leave. Try 'var x = 1;' and then 'x + 2;'.\n"
              "Lines with unclosed braces or parentheses continue on the next line.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Leaves the shell on ^D."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter. 'exit' followed by anything else is run as lox source."""
        if arg:
            self.default(f"exit {arg}")
            return False
        return True
