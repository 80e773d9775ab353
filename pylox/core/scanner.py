"""Lexical analysis for Lox: converts raw source text into a list of Tokens in a single forward pass.

Formally, the lexical grammar can be loosely defined as follows:

```
NUMBER     ::= DIGIT+ ( "." DIGIT+ )?       ; always parsed to a float: "123" -> 123.0
STRING     ::= "\"" <any char except ">* "\""  ; may span lines, no escape sequences
IDENTIFIER ::= ALPHA ( ALPHA | DIGIT )*      ; keywords are looked up after scanning an identifier
ALPHA      ::= "a" ... "z" | "A" ... "Z" | "_"
DIGIT      ::= "0" ... "9"

<comment>  ::= "//" <char>* "\n"
```

Errors never abort scanning: the offending character is skipped, a ScanError is recorded and a best-effort token list is
still produced.
"""

from pylox.core.tokens import KEYWORDS, Token, TokenKind
from pylox.lang.error import ErrorGroup, ScanError


SINGLE = {
    "(": TokenKind.LEFT_PAREN, ")": TokenKind.RIGHT_PAREN, "{": TokenKind.LEFT_BRACE, "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA, ".": TokenKind.DOT, "-": TokenKind.MINUS, "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON, "*": TokenKind.STAR,
}

# char: (kind if followed by "=", kind otherwise)
DOUBLE = {
    "!": (TokenKind.BANG_EQUAL, TokenKind.BANG),
    "=": (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
    "<": (TokenKind.LESS_EQUAL, TokenKind.LESS),
    ">": (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
}

WHITESPACE = " \r\t"


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Scans a single chunk of source. self.start marks the beginning of the lexeme being scanned and self.current the
    character about to be read.
    """

    def __init__(self, source):
        self.source = source
        self.tokens = []
        self.errors = []

        self.start = 0
        self.current = 0
        self.line = 1

    def scan_tokens(self):
        """Scans all of self.source and returns tokens, always terminated by an EOF token."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE:
            self.add_token(SINGLE[char])
        elif char in DOUBLE:
            with_equal, without = DOUBLE[char]
            self.add_token(with_equal if self.match("=") else without)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenKind.SLASH)
        elif char in WHITESPACE:
            pass
        elif char == "\n":
            self.line += 1
        elif char == "\"":
            self.string()
        elif is_digit(char):
            self.number()
        elif is_alpha(char):
            self.identifier()
        else:
            self.error(f"Unexpected character '{char}'.")

    def string(self):
        while self.peek() != "\"" and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        # a trailing "." is not part of the number: "1." scans as NUMBER DOT
        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenKind.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        if self.is_at_end():
            return ""
        return self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return ""
        return self.source[self.current + 1]

    def is_at_end(self):
        return self.current >= len(self.source)

    def add_token(self, kind, literal=None):
        self.tokens.append(Token(kind, self.source[self.start:self.current], literal, self.line))

    def error(self, message):
        self.errors.append(ScanError(self.line, message))


def scan(source):
    """Returns the tokens of source. Raises an ErrorGroup of every ScanError if scanning was not clean."""
    scanner = Scanner(source)
    tokens = scanner.scan_tokens()
    if scanner.errors:
        raise ErrorGroup(scanner.errors)
    return tokens
