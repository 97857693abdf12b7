"""Handles interactive/command-line mode for the toylang interpreter. Uses cmd as backend."""

import cmd

from toylang.lang.session import Session


class Shell(cmd.Cmd):
    """toylang interpreter shell."""
    intro = "toylang interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = ("exit", "help", "?", "EOF")  # bare command names, anything else is toylang input

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._tmp_line_num = 0
        self.line_num = 0

    def onecmd(self, line):
        """Dispatches a line to a do_* command only if it is a bare command name: 'exit(5)' is toylang input."""
        if self._tmp_line or line.strip() and line.strip() not in Shell.COMMANDS:
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary toylang input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._tmp_line_num = self.line_num

            line, add_to_prev = Session.preprocess_line(line, bool(self._tmp_line))
            line = self._tmp_line + line

            if add_to_prev:
                self._tmp_line = line + "\n"  # line breaks kept so that '//' comments end with their line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line, self._tmp_line_num)
            self.sess.run()

        while self.sess.results:
            print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the toylang interpreter!\n\n"
              "toylang is a small expression language with integers, booleans, unit '()', \n"
              "let-bindings, conditionals and curried first-class functions. End a line \n"
              "with '\\' to continue it on the next one.\n\n"
              "Try it out by typing 'let inc = |n| => n + 1'. This will bind a function to \n"
              "'inc'. Next, try typing 'inc(41)', giving '42' as the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
