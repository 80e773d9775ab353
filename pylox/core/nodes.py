"""Abstract syntax tree for Lox. Formally, the syntactic grammar (lowest precedence first) is

```
program     ::= declaration* EOF
declaration ::= "fun" function | "var" IDENTIFIER ( "=" expression )? ";" | statement
function    ::= IDENTIFIER "(" ( IDENTIFIER ( "," IDENTIFIER )* )? ")" block
statement   ::= expression ";" | "print" expression ";" | "return" expression? ";" | block
              | "if" "(" expression ")" statement ( "else" statement )?
              | "while" "(" expression ")" statement
              | "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement
block       ::= "{" declaration* "}"

expression  ::= assignment
assignment  ::= IDENTIFIER "=" assignment | logic_or
logic_or    ::= logic_and ( "or" logic_and )*
logic_and   ::= equality ( "and" equality )*
equality    ::= comparison ( ( "!=" | "==" ) comparison )*
comparison  ::= term ( ( ">" | ">=" | "<" | "<=" ) term )*
term        ::= factor ( ( "-" | "+" ) factor )*
factor      ::= unary ( ( "/" | "*" ) unary )*
unary       ::= ( "!" | "-" ) unary | call
call        ::= primary ( "(" ( expression ( "," expression )* )? ")" )*
primary     ::= "true" | "false" | "nil" | NUMBER | STRING | IDENTIFIER | "(" expression ")"
```

Nodes are frozen and compare by identity (eq=False), so that the resolver can key its side table on the nodes
themselves: two textually identical `x` references in different scopes are different keys.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from pylox.core.tokens import Token


class Expr:
    """Any expression node."""


class Stmt:
    """Any statement node."""


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: object


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token  # "and" or "or"
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, reported on runtime errors
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None
