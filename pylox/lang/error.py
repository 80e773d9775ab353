"""Error handling for pylox. Every stage of the pipeline reports problems as LoxError subclasses, which carry the kind of
error, its message and the source location. Formatting is left to ErrorHandler: if an exception other than a LoxError
makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from pylox.core.tokens import TokenKind


class LoxError(Exception):
    """Base class for every error pylox reports. Stores kind, message and line instead of a formatted string."""
    kind = "error"

    def __init__(self, message, line=None):
        super().__init__(message)
        self.message = message
        self.line = line

    @property
    def where(self):
        """Location suffix used in reports, e.g. " at 'x'". Empty when the error has no token."""
        return ""

    def __str__(self):
        if self.line is None:
            return f"error{self.where}: {self.message}"
        return f"[line {self.line}] error{self.where}: {self.message}"


class ScanError(LoxError):
    kind = "scan"

    def __init__(self, line, message):
        super().__init__(message, line)


class TokenError(LoxError):
    """LoxError raised at a specific token: the token is kept so the shell can point at the offending lexeme."""

    def __init__(self, token, message):
        super().__init__(message, token.line)
        self.token = token

    @property
    def where(self):
        if self.token.kind is TokenKind.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"


class ParseError(TokenError):
    kind = "parse"


class ResolveError(TokenError):
    kind = "resolve"


class LoxRuntimeError(TokenError):
    kind = "runtime"


class FileError(LoxError):
    kind = "io"

    def __init__(self, path, message):
        super().__init__(f"'{path}' {message}")
        self.path = path


class ErrorGroup(LoxError):
    """Several static errors found in one pass. Scanner, parser and resolver keep going after an error, so a single
    source chunk can produce many of them.
    """
    kind = "static"

    def __init__(self, errors):
        errors = list(errors)
        super().__init__(f"{len(errors)} error(s)", errors[0].line if errors else None)
        self.errors = errors

    def __iter__(self):
        return iter(self.errors)


class ErrorHandler:
    """Prints LoxErrors with a diagnosis of the offending source line. Can be used as a context manager, which will
    suppress Python errors and report them as pylox errors instead.
    """
    ERROR = "red"
    EXIT_CODES = {"scan": 65, "parse": 65, "resolve": 65, "static": 65, "io": 66, "runtime": 70}

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream if stream is not None else sys.stderr

        self.path = "<in>"
        self.lines = []
        self.had_error = False
        self.had_runtime_error = False

    def register_source(self, path, source):
        """Registers the chunk of source currently being run. Should be called prior to Session run."""
        self.path = path
        self.lines = source.splitlines()

    def reset(self):
        """Clears error flags, e.g. between two REPL lines."""
        self.had_error = False
        self.had_runtime_error = False

    def source_line(self, line):
        """Returns registered source line (1-based) or None."""
        if line is None or not 0 < line <= len(self.lines):
            return None
        return self.lines[line - 1]

    @staticmethod
    def diagnose(line, lexeme):
        """Returns line with lexeme highlighted and underlined. Assumes lexeme is in line."""
        start = line.index(lexeme)
        end = start + max(len(lexeme), 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def report(self, error):
        """Prints error (or every error of an ErrorGroup) to self.stream. Does not exit."""
        if isinstance(error, ErrorGroup):
            for sub_error in error:
                self.report(sub_error)
            return

        if error.kind == "runtime":
            self.had_runtime_error = True
        else:
            self.had_error = True

        location = self.path if error.line is None else f"{self.path}:{error.line}"
        error_msg = colored(f"{location}: ", attrs=["bold"])
        error_msg += colored(f"{error.kind} error", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += f"{error.where}: {error.message}"
        print(error_msg, file=self.stream)

        token = getattr(error, "token", None)
        line = self.source_line(error.line)
        if token is not None and token.lexeme and line and line.count(token.lexeme) == 1:  # no columns to disambiguate
            print(ErrorHandler.diagnose(line, token.lexeme), file=self.stream)

    def internal(self, message):
        """Reports an error that is not the user program's fault."""
        self.had_error = True
        error_msg = colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + message
        print(error_msg, file=self.stream)

    def throw(self, error):
        """Reports error, then exits with the matching status code if this handler is fatal."""
        self.report(error)
        if self.fatal:
            sys.exit(ErrorHandler.EXIT_CODES.get(error.kind, 1))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is SystemExit:
            do_exit = True
        elif exc_type is None:
            pass
        elif issubclass(exc_type, LoxError):
            self.throw(exc_val)
        else:
            if exc_type is KeyboardInterrupt:
                self.internal("keyboard interrupt")
            elif exc_type is RecursionError:
                self.internal("maximum recursion depth exceeded")
            else:
                self.internal(f"unknown error: '{exc_type.__name__}: {exc_val}'")
            if self.fatal:
                sys.exit(1)

        return not do_exit
