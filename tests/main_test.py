import contextlib
import io
import os
import tempfile
import unittest

from pylox.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)

    def script(self, source):
        path = os.path.join(self.directory.name, "script.lox")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def run_main(self, argv):
        """Returns (exit code, stdout, stderr). Exit code is None when main returned normally."""
        out, err = io.StringIO(), io.StringIO()
        code = None
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                main(argv)
            except SystemExit as exc:
                code = exc.code
        return code, out.getvalue(), err.getvalue()

    def test_run_file(self):
        code, out, __ = self.run_main([self.script("fun sq(x) { return x * x; }\nprint sq(4);\n")])
        self.assertIsNone(code)
        self.assertEqual("16\n", out)

    def test_exit_codes(self):
        cases = {
            "print ;": 65,
            "{ var a = a; }": 65,
            "print 1 + nil;": 70,
        }
        for source, expected in cases.items():
            code, __, err = self.run_main([self.script(source)])
            self.assertEqual(expected, code, source)
            self.assertIn("error", err, source)

    def test_missing_file(self):
        code, __, err = self.run_main([os.path.join(self.directory.name, "missing.lox")])
        self.assertEqual(66, code)
        self.assertIn("could not be opened", err)

    def test_usage(self):
        code, __, __ = self.run_main(["a.lox", "b.lox"])
        self.assertEqual(64, code)

    def test_dump_flags(self):
        code, out, __ = self.run_main(["--tokens", "--ast", self.script("print 1;")])
        self.assertIsNone(code)
        self.assertIn("<token PRINT print>", out)
        self.assertIn("(print 1)", out)
        self.assertTrue(out.endswith("1\n"))


if __name__ == '__main__':
    unittest.main()
