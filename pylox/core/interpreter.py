"""Tree-walking evaluation of a resolved Lox program.

Values are plain Python objects: nil is None, booleans are bool, numbers are float, strings are str, and functions are
LoxCallables. Executing a statement returns None when it completes normally, or a ReturnCompletion carrying the
returned value; blocks and loops hand that completion straight back to their caller, and only LoxFunction.call consumes
it. Runtime errors are LoxRuntimeErrors and are fatal to the whole run.
"""

import math
import operator
import sys
from functools import singledispatchmethod

from pylox.core import nodes
from pylox.core.callables import NATIVES, LoxCallable, LoxFunction
from pylox.core.environment import Environment
from pylox.core.tokens import TokenKind
from pylox.lang.error import LoxRuntimeError


class ReturnCompletion:
    """Abrupt completion produced by a return statement, unwinding up to the nearest function call."""

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"ReturnCompletion({self.value!r})"


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value):
    """nil and false are falsey, everything else (0 and "" included) is truthy."""
    return value is not None and value is not False


def is_equal(left, right):
    """Value equality without coercion: true != 1 and nil != false."""
    if is_number(left) and is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def divide(left, right):
    """IEEE-754 division: x/0 is +-inf and 0/0 is nan instead of an error."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def stringify(value):
    """Lox representation of value, as written by print."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        text = str(float(value))
        return text[:-2] if text.endswith(".0") else text
    return str(value)


ARITHMETIC = {
    TokenKind.MINUS: operator.sub,
    TokenKind.STAR: operator.mul,
    TokenKind.SLASH: divide,
    TokenKind.GREATER: operator.gt,
    TokenKind.GREATER_EQUAL: operator.ge,
    TokenKind.LESS: operator.lt,
    TokenKind.LESS_EQUAL: operator.le,
}


class Interpreter:
    """Executes programs against a chain of Environments. One Interpreter can run several programs in a row (e.g. REPL
    lines); globals and the resolver side table accumulate across them.
    """

    def __init__(self, out=None):
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}
        self.dynamic = True  # whether unresolved names are looked up through the whole chain

        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements, side_table=None):
        """Runs statements. side_table is the resolver's {node: hop count} table: if it is None, the program is
        assumed unresolved and every variable is looked up dynamically. Raises LoxRuntimeError on the first runtime
        error.
        """
        self.dynamic = side_table is None
        if side_table:
            self.locals.update(side_table)

        for statement in statements:
            if self.execute(statement) is not None:
                break  # return at top level ends the run

    def resolve(self, expr, depth):
        self.locals[expr] = depth

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment however the block is left."""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                completion = self.execute(statement)
                if completion is not None:
                    return completion
        finally:
            self.environment = previous
        return None

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        if self.dynamic:
            return self.environment.get(name)
        return self.globals.get(name)

    # statements

    @singledispatchmethod
    def execute(self, stmt):
        raise TypeError(f"cannot execute {type(stmt).__name__}")

    @execute.register
    def _(self, stmt: nodes.Expression):
        self.evaluate(stmt.expression)

    @execute.register
    def _(self, stmt: nodes.Print):
        print(stringify(self.evaluate(stmt.expression)), file=self.out)

    @execute.register
    def _(self, stmt: nodes.Var):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    @execute.register
    def _(self, stmt: nodes.Block):
        return self.execute_block(stmt.statements, Environment(self.environment))

    @execute.register
    def _(self, stmt: nodes.If):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)

    @execute.register
    def _(self, stmt: nodes.While):
        while is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion is not None:
                return completion

    @execute.register
    def _(self, stmt: nodes.Function):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    @execute.register
    def _(self, stmt: nodes.Return):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return ReturnCompletion(value)

    # expressions

    @singledispatchmethod
    def evaluate(self, expr):
        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    @evaluate.register
    def _(self, expr: nodes.Literal):
        return expr.value

    @evaluate.register
    def _(self, expr: nodes.Grouping):
        return self.evaluate(expr.expression)

    @evaluate.register
    def _(self, expr: nodes.Unary):
        right = self.evaluate(expr.right)

        if expr.operator.kind is TokenKind.MINUS:
            if not is_number(right):
                raise LoxRuntimeError(expr.operator, "Operand must be a number.")
            return -right
        if expr.operator.kind is TokenKind.BANG:
            return not is_truthy(right)

        raise LoxRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.")

    @evaluate.register
    def _(self, expr: nodes.Binary):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        kind = expr.operator.kind

        if kind is TokenKind.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenKind.BANG_EQUAL:
            return not is_equal(left, right)

        if kind is TokenKind.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(expr.operator, "Operands must be two numbers or two strings.")

        if kind in ARITHMETIC:
            if not (is_number(left) and is_number(right)):
                raise LoxRuntimeError(expr.operator, "Operands must be numbers.")
            return ARITHMETIC[kind](left, right)

        raise LoxRuntimeError(expr.operator, f"Unknown binary operator '{expr.operator.lexeme}'.")

    @evaluate.register
    def _(self, expr: nodes.Logical):
        left = self.evaluate(expr.left)

        if expr.operator.kind is TokenKind.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    @evaluate.register
    def _(self, expr: nodes.Variable):
        return self.look_up_variable(expr.name, expr)

    @evaluate.register
    def _(self, expr: nodes.Assign):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name.lexeme, value)
        elif self.dynamic:
            self.environment.assign(expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    @evaluate.register
    def _(self, expr: nodes.Call):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None
