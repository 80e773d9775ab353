"""Runtime scope frames. Environments form a chain from the innermost active scope out to the globals, and are shared
(never copied) between a scope and the closures created inside it.
"""

from pylox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this frame. Redefining a name silently overwrites it."""
        self.values[name] = value

    def get(self, name):
        """Looks name (a Token) up through the whole chain."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds an existing name (a Token) in the nearest frame defining it. Never creates a binding."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance):
        environment = self
        for __ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        """Reads name (a str) from the frame distance hops out. The resolver guarantees it is defined there."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name] = value

    def __repr__(self):
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"Environment(names={sorted(self.values)}, depth={depth})"
