"""Interactive read loop. Uses cmd as backend."""

import cmd
from typing import TextIO

from malhaetda.session import Outcome, Session


class Shell(cmd.Cmd):
    intro = "malhaetda :: 그녀에게 말해 보세요\nType '?' or 'help' for more information."
    prompt = ">> "

    def __init__(
        self,
        session: Session,
        completekey: str = "tab",
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        super().__init__(completekey=completekey, stdin=stdin, stdout=stdout)
        self.session = session
        if stdin is not None:
            self.use_rawinput = False

    def default(self, line: str) -> bool:
        """Runs one line of the language; returning True stops the loop."""
        return self.session.process_line(line) is Outcome.TERMINATE

    def emptyline(self) -> bool:
        """An empty line is a statement of its own, the previous command is not repeated."""
        return self.default("")

    def do_help(self, arg: str) -> None:
        """Prints a short usage text instead of per-command docs."""
        self.stdout.write(
            "Each line is one statement:\n\n"
            "  2 + 3 * 4                   evaluated, result discarded\n"
            "  나는 그녀에게 말했다. 2 + 3   prints the value of the expression\n"
            '  나는 그녀에게 말했다. "안녕"  prints text\n'
            "  나는 그녀를 떠났다.           ends the session (잊었다 works too)\n\n"
            "Numbers and quoted text are the only values; + - * / apply to numbers only.\n"
        )

    def do_EOF(self, arg: str) -> bool:
        """Exits interpreter."""
        self.stdout.write("\n")
        return True
