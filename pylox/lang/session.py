"""Session control for pylox. Feeds source chunks (a whole file, or one REPL entry at a time) through the pipeline:
scanning, parsing, resolving and finally interpreting. Errors are raised as LoxErrors; callers are expected to run
sessions inside an ErrorHandler, which decides how they are presented.
"""

from pylox.core.interpreter import Interpreter
from pylox.core.parser import Parser
from pylox.core.resolver import Resolver
from pylox.core.scanner import Scanner
from pylox.lang.error import ErrorGroup, FileError
from pylox.lang.printer import AstPrinter


class Session:
    """Governs a pylox session. The interpreter lives as long as the session, so globals defined by one run are
    visible to the next.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, out=None, dump_tokens=False, dump_ast=False):
        self.error_handler = error_handler
        self.interpreter = Interpreter(out)
        self.out = self.interpreter.out

        self.dump_tokens = dump_tokens  # print every token before parsing
        self.dump_ast = dump_ast        # print the parsed program before running it

    def compile(self, source):
        """Scans, parses and resolves source. Returns (statements, side table). Raises an ErrorGroup holding every
        static error found: scan and parse errors are reported together, resolve errors only once parsing succeeded.
        """
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()
        if self.dump_tokens:
            for token in tokens:
                print(token, file=self.out)

        parser = Parser(tokens)
        statements = parser.parse()
        if scanner.errors or parser.errors:
            raise ErrorGroup(scanner.errors + parser.errors)

        if self.dump_ast:
            print(AstPrinter(quote_strings=True).print_program(statements), file=self.out)

        resolver = Resolver()
        side_table = resolver.resolve(statements)
        if resolver.errors:
            raise ErrorGroup(resolver.errors)

        return statements, side_table

    def run(self, source, path=SH_FILE):
        """Compiles and runs source. Raises ErrorGroup on static errors, LoxRuntimeError on the first runtime error."""
        self.error_handler.register_source(path, source)

        statements, side_table = self.compile(source)
        self.interpreter.interpret(statements, side_table)

    def run_file(self, path):
        """Reads path as UTF-8 and runs it."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError:
            raise FileError(path, "could not be opened")

        self.run(source, path)
