"""Handles interactive/command-line mode for the pylox interpreter. Uses cmd as backend."""

import cmd

from pylox.core.scanner import Scanner
from pylox.core.tokens import TokenKind


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    commands = ("exit", "help", "EOF")  # only recognized as bare words, anything else is Lox source

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.sess.error_handler.fatal = False

        self._tmp_line = ""
        self.line_num = 0

    @staticmethod
    def is_open(source):
        """Whether source has more '{' or '(' tokens opened than closed, meaning the entry continues on the next line.
        Brackets inside strings and comments are not tokens, so they are not counted.
        """
        depth = {TokenKind.LEFT_BRACE: 0, TokenKind.LEFT_PAREN: 0}
        closing = {TokenKind.RIGHT_BRACE: TokenKind.LEFT_BRACE, TokenKind.RIGHT_PAREN: TokenKind.LEFT_PAREN}

        for token in Scanner(source).scan_tokens():
            if token.kind in depth:
                depth[token.kind] += 1
            elif token.kind in closing:
                depth[closing[token.kind]] -= 1
        return any(count > 0 for count in depth.values())

    def onecmd(self, line):
        """Dispatches bare command words to do_*, and every other line to default as Lox source."""
        if line.strip() in Shell.commands or not line.strip():
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Executes arbitrary Lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            source = f"{self._tmp_line}\n{line}" if self._tmp_line else line

            if self.is_open(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            self.sess.error_handler.reset()
            self.sess.run(source)

    def do_help(self, arg):
        """Doesn't return docs, but rather a short intro."""
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with C-like syntax: variables, \n"
              "if/while/for, functions and closures. Statements end with ';'.\n\n"
              "Try it out by typing 'var greeting = \"hi\";', then 'print greeting;'. Functions are \n"
              "declared with 'fun name(params) { ... }'; 'clock()' returns the current time in seconds.",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
