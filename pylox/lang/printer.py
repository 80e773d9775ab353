"""Debug printer: renders an AST in parenthesized prefix form, e.g. `-123 * (45.67)` as `(* (- 123) (group 45.67))`."""

from functools import singledispatchmethod

from pylox.core import nodes
from pylox.core.interpreter import stringify


class AstPrinter:

    def __init__(self, quote_strings=False):
        self.quote_strings = quote_strings

    def print(self, node):
        """Returns the prefix form of a single expression or statement."""
        return self.visit(node)

    def print_program(self, statements):
        """Returns the prefix form of every statement, one per line."""
        return "\n".join(self.visit(statement) for statement in statements)

    def parenthesize(self, name, *parts):
        """parts may be nodes or already rendered strings."""
        rendered = [part if isinstance(part, str) else self.visit(part) for part in parts]
        return f"({' '.join([name] + rendered)})"

    @singledispatchmethod
    def visit(self, node):
        raise TypeError(f"cannot print {type(node).__name__}")

    # expressions

    @visit.register
    def _(self, expr: nodes.Literal):
        if self.quote_strings and isinstance(expr.value, str):
            return f"\"{expr.value}\""
        return stringify(expr.value)

    @visit.register
    def _(self, expr: nodes.Grouping):
        return self.parenthesize("group", expr.expression)

    @visit.register
    def _(self, expr: nodes.Unary):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    @visit.register
    def _(self, expr: nodes.Binary):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    @visit.register
    def _(self, expr: nodes.Logical):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    @visit.register
    def _(self, expr: nodes.Variable):
        return expr.name.lexeme

    @visit.register
    def _(self, expr: nodes.Assign):
        return self.parenthesize("=", expr.name.lexeme, expr.value)

    @visit.register
    def _(self, expr: nodes.Call):
        return self.parenthesize("call", expr.callee, *expr.arguments)

    # statements

    @visit.register
    def _(self, stmt: nodes.Expression):
        return self.parenthesize(";", stmt.expression)

    @visit.register
    def _(self, stmt: nodes.Print):
        return self.parenthesize("print", stmt.expression)

    @visit.register
    def _(self, stmt: nodes.Var):
        if stmt.initializer is None:
            return self.parenthesize("var", stmt.name.lexeme)
        return self.parenthesize("var", stmt.name.lexeme, stmt.initializer)

    @visit.register
    def _(self, stmt: nodes.Block):
        return self.parenthesize("block", *stmt.statements)

    @visit.register
    def _(self, stmt: nodes.If):
        if stmt.else_branch is None:
            return self.parenthesize("if", stmt.condition, stmt.then_branch)
        return self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)

    @visit.register
    def _(self, stmt: nodes.While):
        return self.parenthesize("while", stmt.condition, stmt.body)

    @visit.register
    def _(self, stmt: nodes.Function):
        params = f"({' '.join(param.lexeme for param in stmt.params)})"
        return self.parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    @visit.register
    def _(self, stmt: nodes.Return):
        if stmt.value is None:
            return "(return)"
        return self.parenthesize("return", stmt.value)
