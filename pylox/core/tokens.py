"""Token model for Lox. A Token is one lexeme of source text, tagged with its kind, its literal value (if any) and the
line it was scanned from. Tokens are created only by the Scanner and never change afterwards.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Every kind of lexeme the Scanner can produce. Punctuation, operators and keywords use their lexeme as value."""

    # single-character tokens
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    COMMA = ","
    DOT = "."
    MINUS = "-"
    PLUS = "+"
    SEMICOLON = ";"
    SLASH = "/"
    STAR = "*"

    # one or two character tokens
    BANG = "!"
    BANG_EQUAL = "!="
    EQUAL = "="
    EQUAL_EQUAL = "=="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="

    # literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # keywords
    AND = "and"
    CLASS = "class"
    ELSE = "else"
    FALSE = "false"
    FOR = "for"
    FUN = "fun"
    IF = "if"
    NIL = "nil"
    OR = "or"
    PRINT = "print"
    RETURN = "return"
    SUPER = "super"
    THIS = "this"
    TRUE = "true"
    VAR = "var"
    WHILE = "while"

    EOF = ""


KEYWORDS = {kind.value: kind for kind in (
    TokenKind.AND, TokenKind.CLASS, TokenKind.ELSE, TokenKind.FALSE, TokenKind.FOR, TokenKind.FUN, TokenKind.IF,
    TokenKind.NIL, TokenKind.OR, TokenKind.PRINT, TokenKind.RETURN, TokenKind.SUPER, TokenKind.THIS,
    TokenKind.TRUE, TokenKind.VAR, TokenKind.WHILE,
)}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    literal: object = None
    line: int = 1

    def __str__(self):
        parts = [self.kind.name, self.lexeme]
        if self.literal is not None:
            parts.append(str(self.literal))
        return f"<token {' '.join(part for part in parts if part)}>"
