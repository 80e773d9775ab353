import io
import math
import unittest

from pylox.core import nodes
from pylox.core.callables import LoxFunction, NativeFunction
from pylox.core.interpreter import Interpreter, is_equal, is_truthy, stringify
from pylox.core.parser import parse
from pylox.core.resolver import resolve
from pylox.core.scanner import scan
from pylox.core.tokens import Token, TokenKind
from pylox.lang.error import LoxRuntimeError


def token(kind, lexeme=None, line=1):
    return Token(kind, kind.value if lexeme is None else lexeme, None, line)


MINUS = token(TokenKind.MINUS)
PLUS = token(TokenKind.PLUS, line=2)
SLASH = token(TokenKind.SLASH)
LESS = token(TokenKind.LESS)
BANG = token(TokenKind.BANG)
OR = token(TokenKind.OR)
AND = token(TokenKind.AND)
PAREN = token(TokenKind.RIGHT_PAREN)


def run(source, interpreter=None):
    """Runs source through the whole pipeline, returns printed lines."""
    out = io.StringIO()
    if interpreter is None:
        interpreter = Interpreter(out)
    else:
        interpreter.out = out

    statements = parse(scan(source))
    interpreter.interpret(statements, resolve(statements))
    return out.getvalue().splitlines()


class EvaluateTestCase(unittest.TestCase):

    def setUp(self):
        self.interpreter = Interpreter(io.StringIO())

    def test_evaluate(self):
        cases = [
            (nodes.Literal(1.0), 1.0),
            (nodes.Grouping(nodes.Literal("x")), "x"),
            (nodes.Binary(nodes.Literal("abc"), PLUS, nodes.Literal("123")), "abc123"),
            (nodes.Binary(nodes.Literal(1.0), PLUS, nodes.Literal(2.0)), 3.0),
            (nodes.Binary(nodes.Literal(1.0), LESS, nodes.Literal(2.0)), True),
            (nodes.Unary(MINUS, nodes.Literal(3.0)), -3.0),
            (nodes.Unary(BANG, nodes.Literal(0.0)), False),
            (nodes.Unary(BANG, nodes.Literal("")), False),
            (nodes.Unary(BANG, nodes.Literal(None)), True),
            (nodes.Binary(nodes.Literal(7.0), SLASH, nodes.Literal(2.0)), 3.5),
        ]
        for expr, expected in cases:
            self.assertEqual(expected, self.interpreter.evaluate(expr))

    def test_runtime_errors(self):
        cases = [
            (nodes.Unary(MINUS, nodes.Literal("string")), MINUS, "Operand must be a number."),
            (nodes.Binary(nodes.Literal("a"), PLUS, nodes.Literal(1.0)), PLUS,
             "Operands must be two numbers or two strings."),
            (nodes.Binary(nodes.Literal(None), PLUS, nodes.Literal(None)), PLUS,
             "Operands must be two numbers or two strings."),
            (nodes.Binary(nodes.Literal("a"), LESS, nodes.Literal("b")), LESS, "Operands must be numbers."),
            (nodes.Binary(nodes.Literal(True), SLASH, nodes.Literal(1.0)), SLASH, "Operands must be numbers."),
            (nodes.Call(nodes.Literal("f"), PAREN, ()), PAREN, "Can only call functions and classes."),
        ]
        for expr, offender, message in cases:
            with self.assertRaises(LoxRuntimeError) as context:
                self.interpreter.evaluate(expr)
            self.assertEqual(message, context.exception.message)
            self.assertIs(offender, context.exception.token)
            self.assertEqual("runtime", context.exception.kind)

    def test_logical_returns_operand(self):
        cases = [
            (nodes.Logical(nodes.Literal(None), OR, nodes.Literal("x")), "x"),
            (nodes.Logical(nodes.Literal("a"), OR, nodes.Literal("x")), "a"),
            (nodes.Logical(nodes.Literal(False), AND, nodes.Literal("x")), False),
            (nodes.Logical(nodes.Literal(1.0), AND, nodes.Literal("x")), "x"),
        ]
        for expr, expected in cases:
            self.assertEqual(expected, self.interpreter.evaluate(expr))

    def test_short_circuit(self):
        # the right operand would raise if it were evaluated
        boom = nodes.Unary(MINUS, nodes.Literal("boom"))
        self.assertEqual(True, self.interpreter.evaluate(nodes.Logical(nodes.Literal(True), OR, boom)))
        self.assertEqual(None, self.interpreter.evaluate(nodes.Logical(nodes.Literal(None), AND, boom)))

    def test_division_by_zero(self):
        def divide(left, right):
            return self.interpreter.evaluate(nodes.Binary(nodes.Literal(left), SLASH, nodes.Literal(right)))

        self.assertEqual(math.inf, divide(1.0, 0.0))
        self.assertEqual(-math.inf, divide(-1.0, 0.0))
        self.assertTrue(math.isnan(divide(0.0, 0.0)))

    def test_equality(self):
        should_pass = [(None, None), (1.0, 1.0), ("a", "a"), (True, True), (False, False)]
        for left, right in should_pass:
            self.assertTrue(is_equal(left, right), (left, right))

        should_fail = [(None, False), (1.0, True), (0.0, False), ("1", 1.0), ("a", "b"), (0.0, None)]
        for left, right in should_fail:
            self.assertFalse(is_equal(left, right), (left, right))

    def test_truthiness(self):
        for value in [0.0, "", "false", True, 1.0]:
            self.assertTrue(is_truthy(value), value)
        for value in [None, False]:
            self.assertFalse(is_truthy(value), value)

    def test_stringify(self):
        cases = [(None, "nil"), (True, "true"), (False, "false"), (3.0, "3"), (3.5, "3.5"), (-0.25, "-0.25"),
                 ("text", "text"), (100.0, "100")]
        for value, expected in cases:
            self.assertEqual(expected, stringify(value))

    def test_clock(self):
        clock = self.interpreter.globals.get(token(TokenKind.IDENTIFIER, "clock"))
        self.assertIsInstance(clock, NativeFunction)
        self.assertEqual(0, clock.arity())
        self.assertIsInstance(clock.call(self.interpreter, []), float)

    def test_arity_mismatch(self):
        call = nodes.Call(nodes.Variable(token(TokenKind.IDENTIFIER, "clock")), PAREN, (nodes.Literal(1.0),))
        with self.assertRaises(LoxRuntimeError) as context:
            self.interpreter.evaluate(call)
        self.assertEqual("Expected 0 arguments but got 1.", context.exception.message)


class InterpretTestCase(unittest.TestCase):

    def test_print(self):
        self.assertEqual(["3", "hello world", "nil", "true"],
                         run("print 1 + 2; print \"hello\" + \" world\"; print nil; print !nil;"))

    def test_for_loop(self):
        self.assertEqual(["0", "1", "2"], run("for (var i = 0; i < 3; i = i + 1) print i;"))

        with self.assertRaises(LoxRuntimeError) as context:
            run("for (var i = 0; i < 3; i = i + 1) {} print i;")
        self.assertEqual("Undefined variable 'i'.", context.exception.message)

    def test_while_loop(self):
        self.assertEqual(["3", "2", "1"], run("var n = 3; while (n > 0) { print n; n = n - 1; }"))

    def test_if_else(self):
        source = "if (nil) print 1; else print 2; if (0) print 3; if (false) print 4;"
        self.assertEqual(["2", "3"], run(source))

    def test_block_scoping(self):
        source = """
        var a = "global a";
        var b = "global b";
        {
            var a = "outer a";
            {
                var a = "inner a";
                print a;
                print b;
            }
            print a;
        }
        print a;
        """
        self.assertEqual(["inner a", "global b", "outer a", "global a"], run(source))

    def test_functions(self):
        source = """
        fun fib(n) {
            if (n < 2) return n;
            return fib(n - 1) + fib(n - 2);
        }
        print fib(10);
        fun noop() {}
        print noop();
        print noop;
        print clock;
        """
        self.assertEqual(["55", "nil", "<fn noop>", "<native fn>"], run(source))

    def test_closure_counter(self):
        source = """
        fun makeCounter() {
            var i = 0;
            fun count() {
                i = i + 1;
                return i;
            }
            return count;
        }
        var a = makeCounter();
        var b = makeCounter();
        print a();
        print a();
        print a();
        print b();
        print a();
        """
        self.assertEqual(["1", "2", "3", "1", "4"], run(source))

    def test_shared_closure_state(self):
        source = """
        var get;
        var set;
        fun make() {
            var value = "initial";
            fun getter() { return value; }
            fun setter(v) { value = v; }
            get = getter;
            set = setter;
        }
        make();
        print get();
        set("changed");
        print get();
        """
        self.assertEqual(["initial", "changed"], run(source))

    def test_closure_is_lexical(self):
        source = """
        var a = "global";
        {
            fun showA() { print a; }
            showA();
            var a = "block";
            showA();
        }
        """
        self.assertEqual(["global", "global"], run(source))

    def test_return_unwinds_to_call(self):
        source = """
        fun first() {
            var i = 0;
            while (true) {
                {
                    if (i == 3) return i;
                }
                i = i + 1;
            }
        }
        print first();
        for (var j = 0; j < 2; j = j + 1) print first() + j;
        """
        self.assertEqual(["3", "3", "4"], run(source))

    def test_top_level_return(self):
        self.assertEqual(["1"], run("print 1; return; print 2;"))

    def test_assignment(self):
        self.assertEqual(["2", "2"], run("var a = 1; print a = 2; print a;"))

        with self.assertRaises(LoxRuntimeError) as context:
            run("x = 1;")
        self.assertEqual("Undefined variable 'x'.", context.exception.message)
        self.assertEqual(1, context.exception.line)

    def test_redefinition(self):
        self.assertEqual(["2"], run("var a = 1; var a = 2; print a;"))
        self.assertEqual(["2"], run("{ var a = 1; var a = 2; print a; }"))

    def test_call_errors(self):
        cases = {
            "\"text\"();": "Can only call functions and classes.",
            "fun f(a) {} f();": "Expected 1 arguments but got 0.",
            "fun f() {} f(1, 2);": "Expected 0 arguments but got 2.",
            "print -\"a\";": "Operand must be a number.",
        }
        for case, message in cases.items():
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertEqual(message, context.exception.message, case)

    def test_stack_overflow(self):
        with self.assertRaises(LoxRuntimeError) as context:
            run("fun f() { f(); } f();")
        self.assertEqual("Stack overflow.", context.exception.message)

    def test_environment_restored_after_error(self):
        interpreter = Interpreter(io.StringIO())
        self.assertRaises(LoxRuntimeError, run, "{ var a = 1; { print -\"x\"; } }", interpreter)
        self.assertIs(interpreter.globals, interpreter.environment)

    def test_globals_persist(self):
        interpreter = Interpreter(io.StringIO())
        run("var a = 1; fun inc() { a = a + 1; return a; }", interpreter)
        self.assertEqual(["2", "3"], run("print inc(); print inc();", interpreter))

    def test_function_value(self):
        interpreter = Interpreter(io.StringIO())
        run("fun add(a, b) { return a + b; }", interpreter)
        add = interpreter.globals.values["add"]
        self.assertIsInstance(add, LoxFunction)
        self.assertEqual(2, add.arity())
        self.assertIs(interpreter.globals, add.closure)
        self.assertEqual(5.0, add.call(interpreter, [2.0, 3.0]))

    def test_unresolved_program(self):
        out = io.StringIO()
        interpreter = Interpreter(out)
        interpreter.interpret(parse(scan("var a = 1; { var b = a + 1; { print b; b = 3; print b; } }")))
        self.assertEqual(["2", "3"], out.getvalue().splitlines())


if __name__ == '__main__':
    unittest.main()
