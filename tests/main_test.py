import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from treelox.main import EX_USAGE, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def tearDown(self):
        self.tmp.cleanup()

    def script(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(content)
        return path

    def main(self, *argv):
        """Runs main with argv, returning its exit code."""
        with redirect_stdout(self.stdout), redirect_stderr(self.stderr):
            try:
                return main(list(argv))
            except SystemExit as exc:
                return exc.code

    def test_usage(self):
        should_fail = [
            ["bogus"],
            ["run"],
            ["run", "a.lox", "b.lox"],
            ["batch"],
            ["--unknown"],
        ]
        for case in should_fail:
            self.assertEqual(EX_USAGE, self.main(*case), case)
        self.assertIn("usage: treelox", self.stderr.getvalue())

    def test_run(self):
        path = self.script("ok.lox", "fun square(n) { return n * n; }\nprint square(3);\n")
        self.assertEqual(0, self.main("run", path))
        self.assertEqual("9\n", self.stdout.getvalue())
        self.assertEqual("", self.stderr.getvalue())

    def test_run_failures(self):
        cases = {
            "var x = @;": 65,
            "print 1\nprint 2;": 65,
            'print 1;\nprint 1 - "a";\nprint 2;': 70,
            "fun f(a) {}\nf();": 70,
            "undefined = 1;": 70,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, self.main("run", self.script("failing.lox", case)), case)

        self.assertIn("[line 2, col 9] Error at '-': Operands must be numbers.", self.stderr.getvalue())
        # output printed before a runtime error is kept, and nothing runs after it
        self.assertIn("1\n", self.stdout.getvalue())
        self.assertNotIn("2\n", self.stdout.getvalue())

    def test_syntax_errors_reported_together(self):
        path = self.script("syntax.lox", "var = 1;\nprint ;\nprint 3;\n")
        self.assertEqual(65, self.main("run", path))

        errors = self.stderr.getvalue()
        self.assertIn("[line 1, col 5] Error at '=': Expect variable name.", errors)
        self.assertIn("[line 2, col 7] Error at ';': Expect expression.", errors)
        self.assertEqual("", self.stdout.getvalue())

    def test_missing_file(self):
        path = os.path.join(self.tmp.name, "missing.lox")
        self.assertEqual(66, self.main("run", path))
        self.assertIn("could not be opened", self.stderr.getvalue())

    def test_batch(self):
        first = self.script("first.lox", 'var x = "first";\nprint x;\nprint -x;\n')
        second = self.script("second.lox", "print x = 2;\n")
        third = self.script("third.lox", 'var x = "third";\nprint x;\n')

        self.assertEqual(0, self.main("batch", first, second, third))
        self.assertEqual("first\nthird\n", self.stdout.getvalue())

        errors = self.stderr.getvalue()
        for path in (first, second, third):
            self.assertIn(f"\nRunning '{path}'...\n", errors)
        self.assertIn("Operand must be a number.", errors)
        self.assertIn("Undefined variable 'x'.", errors)

    def test_batch_unreadable_file(self):
        first = self.script("first.lox", "print 1;\n")
        missing = os.path.join(self.tmp.name, "missing.lox")
        last = self.script("last.lox", "print 3;\n")

        self.assertEqual(66, self.main("batch", first, missing, last))
        self.assertEqual("1\n", self.stdout.getvalue())

    def test_trace(self):
        path = self.script("trace.lox", "print 1 + 2;\n")
        self.assertEqual(0, self.main("--trace", "run", path))
        self.assertIn("(print (+ 1 2))", self.stderr.getvalue())
        self.assertEqual("3\n", self.stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
