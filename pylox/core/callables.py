"""Callable values: user-defined functions (closures) and native functions provided by the interpreter."""

import time
from abc import ABC, abstractmethod

from pylox.core.environment import Environment


class LoxCallable(ABC):
    """Anything that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable must be called with."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this callable with already evaluated arguments and returns the result."""


class LoxFunction(LoxCallable):
    """A Function statement paired with the environment it was declared in (its closure)."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        # parent is the closure, not the caller's environment: scoping is lexical
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)
        if completion is not None:
            return completion.value
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self):
        return f"LoxFunction({self.declaration.name.lexeme!r}, arity={self.arity()})"


class NativeFunction(LoxCallable):
    """Wraps a Python function so Lox code can call it."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction({self.name!r}, arity={self._arity})"


def clock():
    """Wall-clock seconds as a float."""
    return time.time()


NATIVES = [NativeFunction("clock", 0, clock)]
