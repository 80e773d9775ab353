"""Static scope resolution. Walks the AST once before it is run and records, for every local variable reference, how
many environments the interpreter has to hop outwards to find the declaration. References that are not found in any
scope are left out of the table and are looked up in the globals at runtime.
"""

from functools import singledispatchmethod

from pylox.core import nodes
from pylox.lang.error import ErrorGroup, ResolveError


class Resolver:
    """Resolves a program. self.scopes is a stack of {name: initialized} dicts, innermost last. The global scope is
    not on the stack.
    """

    def __init__(self):
        self.scopes = []
        self.locals = {}
        self.errors = []

    def resolve(self, statements):
        """Resolves statements and returns the side table {Variable/Assign node: hop count}."""
        for statement in statements:
            self.visit(statement)
        return self.locals

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = False

    def define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for idx in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[idx]:
                self.locals[expr] = len(self.scopes) - 1 - idx
                return

    def resolve_function(self, function):
        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        for statement in function.body:
            self.visit(statement)
        self.end_scope()

    @singledispatchmethod
    def visit(self, node):
        raise TypeError(f"cannot resolve {type(node).__name__}")

    # statements

    @visit.register
    def _(self, stmt: nodes.Block):
        self.begin_scope()
        for statement in stmt.statements:
            self.visit(statement)
        self.end_scope()

    @visit.register
    def _(self, stmt: nodes.Var):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.visit(stmt.initializer)
        self.define(stmt.name)

    @visit.register
    def _(self, stmt: nodes.Function):
        # defined before the body is resolved, so the function can refer to itself
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt)

    @visit.register
    def _(self, stmt: nodes.Expression):
        self.visit(stmt.expression)

    @visit.register
    def _(self, stmt: nodes.Print):
        self.visit(stmt.expression)

    @visit.register
    def _(self, stmt: nodes.If):
        self.visit(stmt.condition)
        self.visit(stmt.then_branch)
        if stmt.else_branch is not None:
            self.visit(stmt.else_branch)

    @visit.register
    def _(self, stmt: nodes.While):
        self.visit(stmt.condition)
        self.visit(stmt.body)

    @visit.register
    def _(self, stmt: nodes.Return):
        if stmt.value is not None:
            self.visit(stmt.value)

    # expressions

    @visit.register
    def _(self, expr: nodes.Variable):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.errors.append(ResolveError(expr.name, "Can't read local variable in its own initializer."))
        self.resolve_local(expr, expr.name)

    @visit.register
    def _(self, expr: nodes.Assign):
        self.visit(expr.value)
        self.resolve_local(expr, expr.name)

    @visit.register
    def _(self, expr: nodes.Binary):
        self.visit(expr.left)
        self.visit(expr.right)

    @visit.register
    def _(self, expr: nodes.Logical):
        self.visit(expr.left)
        self.visit(expr.right)

    @visit.register
    def _(self, expr: nodes.Unary):
        self.visit(expr.right)

    @visit.register
    def _(self, expr: nodes.Grouping):
        self.visit(expr.expression)

    @visit.register
    def _(self, expr: nodes.Call):
        self.visit(expr.callee)
        for argument in expr.arguments:
            self.visit(argument)

    @visit.register
    def _(self, expr: nodes.Literal):
        pass


def resolve(statements):
    """Returns the hop count table of statements. Raises an ErrorGroup of every ResolveError if any were found."""
    resolver = Resolver()
    table = resolver.resolve(statements)
    if resolver.errors:
        raise ErrorGroup(resolver.errors)
    return table
