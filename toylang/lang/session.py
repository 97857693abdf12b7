"""Session control for toylang. Runs top-level expressions against one persistent root environment, either from a
file or in command-line mode.
"""

from toylang.lang.error import ErrorHandler, ToylangException
from toylang.pure.environment import Environment
from toylang.pure.evaluator import evaluate
from toylang.pure.lexical import tokenize
from toylang.pure.parser import TokenStream, parse


class Session:
    """Governs a toylang session, with control over the root scope shared by every top-level expression."""
    SH_FILE = "<in>"     # command-line interpreter filename
    CONTINUATION = "\\"  # trailing character that joins a line with the next one

    def __init__(self, error_handler, path, cmd_line, show_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.show_ast = show_ast  # whether or not to print syntax trees before evaluating them

        self.env = Environment()  # root scope: let bindings persist across inputs
        self.to_exec = []         # list of (source, line num) to execute
        self.results = []         # values of executed top-level expressions, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            lines = []
            add_to_prev = False

            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line in file:
                        line, add_to_prev = self.preprocess_line(line, add_to_prev)
                        lines.append(line + "\n")  # line breaks kept so that line numbers stay exact
            except OSError:
                raise ToylangException("'{}' could not be opened", path, diagnosis=False)

            if add_to_prev:
                self.error_handler.register_line(path, lines[-1].strip(), len(lines))
                self.error_handler.warn("'{}' ends with a line continuation", path)
                self.error_handler.remove_line(path)

            self.add("".join(lines), 1)

        elif not cmd_line:
            raise ToylangException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, add_to_prev=False):
        """Preprocesses a line from a file or command-line. Returns the line without its line break and continuation
        backslash, and whether the next line continues it. add_to_prev tells whether line continues a previous one;
        continuation lines keep their leading whitespace out of the joined text.
        """
        line = line.rstrip("\r\n")
        if add_to_prev:
            line = " " + line.lstrip()

        if line.rstrip().endswith(Session.CONTINUATION):
            return line.rstrip()[:-1], True
        return line, False

    def add(self, source, line_num=1):
        """Queues source to be run. Nothing is tokenized or evaluated until run is called."""
        if source.strip():
            self.to_exec.append((source, line_num))

    def run(self):
        """Runs the queued sources expression by expression, appending each value to self.results. Will raise any
        errors that are encountered; the queue is cleared either way.
        """
        to_exec, self.to_exec = self.to_exec, []

        for source, line_num in to_exec:
            tokens = TokenStream(tokenize(source))

            while not tokens.at_end():
                line, line_idx, __ = ErrorHandler.locate(source, tokens.peek().pos)
                self.error_handler.register_line(self.path, line.strip(), line_num + line_idx)

                node, __ = parse(tokens)
                if self.show_ast:
                    print(node.display())
                self.results.append(evaluate(node, self.env))

                self.error_handler.remove_line(self.path)  # error was not raised

    def pop(self):
        """Removes and returns the rendering of the oldest result."""
        return str(self.results.pop(0))
