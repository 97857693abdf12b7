"""Error handling for toylang. Only ToylangExceptions should be encountered during running: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

There are three families of language errors, all fatal to the tokenize/parse/evaluate call that raised them:
    - LexError: no token pattern matches the input at some position
    - ParseError: a token of the wrong kind at a required site, or no primary production for the current token
    - EvalError: undefined identifier, operand type mismatch, application of a non-function, division by zero
"""

import sys

from termcolor import colored


class ToylangException(Exception):
    """Templates an error message so that it can be used to throw a toylang error. msg is a format string whose '{}'
    fields are filled in with exprs; the exprs are kept apart from the message so that they can be highlighted when
    the error is displayed.
    """

    def __init__(self, msg, exprs=None, source="", start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for ToylangException. source, start and end locate the offending span (if any) in the text the
        error came from.
        """
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)

        self.source = source
        self.start = start
        self.end = end if end != -1 else len(source)  # needed for error display

        self.diagnosis = diagnosis and bool(source)
        self.internal = internal

        super().__init__(self.msg)

    def highlighted(self):
        """Message with the expr snippets bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class LexError(ToylangException):
    """No token pattern matches the source at pos."""

    def __init__(self, source, pos):
        self.pos = pos
        self.char = source[pos]
        super().__init__("unexpected character '{}' at position {}", (self.char, pos), source, pos, pos + 1)


class ParseError(ToylangException):
    """token is not of any of the expected kinds."""

    def __init__(self, expected, token, source=""):
        self.expected = tuple(expected)
        self.token = token
        self.pos = token.pos

        found = token.text if token.text else token.kind.name
        msg = "expected {} but found '{}' at position {}"
        exprs = (", ".join(kind.name for kind in self.expected), found, token.pos)

        super().__init__(msg, exprs, source, token.pos, token.pos + max(len(token.text), 1))


class EvalError(ToylangException):
    """Raised while evaluating a syntax tree. Evaluation errors carry no source span."""
    kind = "runtime error"

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False)


class UndefinedIdentifierError(EvalError):
    kind = "undefined identifier"

    def __init__(self, name):
        self.name = name
        super().__init__("identifier '{}' is not defined", name)


class TypeMismatchError(EvalError):
    kind = "type mismatch"


class NotAFunctionError(EvalError):
    kind = "not a function"

    def __init__(self, value):
        self.value = value
        super().__init__("cannot apply '{}': not a function", str(value))


class DivisionByZeroError(EvalError):
    kind = "division by zero"

    def __init__(self, dividend):
        super().__init__("cannot divide '{}' by zero", str(dividend))


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom toylang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def locate(source, offset):
        """Returns (line, line index, column) of offset in source."""
        offset = min(max(offset, 0), len(source))
        line_start = source.rfind("\n", 0, offset) + 1
        line_end = source.find("\n", offset)
        if line_end == -1:
            line_end = len(source)
        return source[line_start:line_end], source.count("\n", 0, offset), offset - line_start

    @staticmethod
    def diagnose(error, warning=False):
        """Returns the source line of error with its offending part highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        line, __, col = ErrorHandler.locate(error.source, error.start)

        end = min(col + max(error.end - error.start, 1), len(line))
        diagnosis = "  " + line[:col]
        diagnosis += colored(line[col:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * col
        diagnosis += colored("^" + "~" * max(end - col - 1, 0), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = ToylangException(*args, **kwargs)

        file, (line, line_num) = next(iter(self.traceback.items()), ("<unknown>", (None, None)))
        __, __, col = ErrorHandler.locate(error.source, error.start)

        error_msg = colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.highlighted()

        print(error_msg)

        if not error.internal and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a ToylangException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.highlighted()
        print(error_msg)

        if not error.internal and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(ToylangException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(EvalError("maximum recursion depth exceeded during evaluation"))
        elif exc_type is not None and issubclass(exc_type, ToylangException):
            self.throw(exc_val)
        elif exc_type is not None:
            detail = f"{exc_type.__name__}: {exc_val}"
            self.throw(ToylangException("unknown error: '{}'", detail, internal=True))
            do_exit = True

        return not do_exit
