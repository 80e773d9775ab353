"""Recursive-descent parser for Lox: one method per grammar rule (see nodes.py for the grammar), lowest precedence first.

A syntax error unwinds to the enclosing declaration, which discards tokens until a likely statement boundary and
carries on parsing (panic-mode recovery). Every error found along the way is kept in Parser.errors, so a file with
several independent mistakes reports all of them at once.
"""

from pylox.core import nodes
from pylox.core.tokens import TokenKind
from pylox.lang.error import ErrorGroup, ParseError


MAX_ARGS = 255

# kinds that begin a statement: safe places to resume parsing after an error
STATEMENT_STARTS = {
    TokenKind.CLASS, TokenKind.FUN, TokenKind.VAR, TokenKind.FOR, TokenKind.IF, TokenKind.WHILE, TokenKind.PRINT,
    TokenKind.RETURN,
}


class Parser:

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0
        self.errors = []

    def parse(self):
        """Parses every declaration in self.tokens. Declarations containing an error are left out of the result."""
        statements = []
        while not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)
        return statements

    # statements

    def declaration(self):
        try:
            if self.match(TokenKind.FUN):
                return self.function("function")
            if self.match(TokenKind.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def var_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def function(self, kind):
        name = self.consume(TokenKind.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenKind.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(TokenKind.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenKind.COMMA):
                    break
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenKind.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return nodes.Function(name, tuple(params), tuple(self.block()))

    def statement(self):
        if self.match(TokenKind.FOR):
            return self.for_statement()
        if self.match(TokenKind.IF):
            return self.if_statement()
        if self.match(TokenKind.PRINT):
            return self.print_statement()
        if self.match(TokenKind.RETURN):
            return self.return_statement()
        if self.match(TokenKind.WHILE):
            return self.while_statement()
        if self.match(TokenKind.LEFT_BRACE):
            return nodes.Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        """Desugars `for (init; cond; inc) body` into `{ init; while (cond) { body; inc; } }`."""
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenKind.SEMICOLON):
            initializer = None
        elif self.match(TokenKind.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block((body, nodes.Expression(increment)))
        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)
        if initializer is not None:
            body = nodes.Block((initializer, body))

        return body

    def if_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenKind.ELSE):  # binds to the nearest if
            else_branch = self.statement()

        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    def block(self):
        """Parses declarations up to the closing brace. The opening brace must already be consumed."""
        statements = []
        while not self.check(TokenKind.RIGHT_BRACE) and not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        self.consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.assignment()  # right-associative

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)

            # not worth unwinding for: the parser is not confused about where it is
            self.error(equals, "Invalid assignment target.")
            return value

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenKind.OR):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenKind.AND):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.equality())
        return expr

    def binary(self, operand, *kinds):
        """Left-associative fold of operand (operator operand)* for the given operator kinds."""
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def equality(self):
        return self.binary(self.comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.term, TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL
        )

    def term(self):
        return self.binary(self.factor, TokenKind.MINUS, TokenKind.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenKind.SLASH, TokenKind.STAR)

    def unary(self):
        if self.match(TokenKind.BANG, TokenKind.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenKind.LEFT_PAREN):  # f()() chains
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenKind.COMMA):
                    break

        paren = self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenKind.FALSE):
            return nodes.Literal(False)
        if self.match(TokenKind.TRUE):
            return nodes.Literal(True)
        if self.match(TokenKind.NIL):
            return nodes.Literal(None)
        if self.match(TokenKind.NUMBER, TokenKind.STRING):
            return nodes.Literal(self.previous().literal)
        if self.match(TokenKind.IDENTIFIER):
            return nodes.Variable(self.previous())
        if self.match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # helpers

    def match(self, *kinds):
        """Consumes the current token if it is any of kinds."""
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind, message):
        """Consumes and returns the current token if it is of kind, raises a ParseError otherwise."""
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, kind):
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().kind is TokenKind.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, message):
        """Records a ParseError and returns it: callers raise it when the parser needs to resynchronize."""
        error = ParseError(token, message)
        self.errors.append(error)
        return error

    def synchronize(self):
        """Discards tokens until just after a ';' or right before a statement keyword."""
        self.advance()

        while not self.is_at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()


def parse(tokens):
    """Returns the statements of tokens. Raises an ErrorGroup of every ParseError if parsing was not clean."""
    parser = Parser(tokens)
    statements = parser.parse()
    if parser.errors:
        raise ErrorGroup(parser.errors)
    return statements
