"""Runs lines of the language one at a time: lexing, parsing, statement dispatch and printing of results or
diagnostics. Nothing survives from one line to the next apart from the output stream.
"""

import enum
import logging
import sys
from typing import Iterable, TextIO

from termcolor import colored

from malhaetda.parser import (
    SYMBOLIC_GRAMMAR,
    EndOfInputMarker,
    ExpressionStatement,
    Grammar,
    OutputStatement,
    ParserError,
    Statement,
    TerminationStatement,
    parse,
)
from malhaetda.runtime import CalcInternalError, TypeFault, evaluate_expression
from malhaetda.tokenizer import LEXER, Lexer, TokenizerError
from malhaetda.utils import PrintableEnum
from malhaetda.value import Number, Text

logger = logging.getLogger(__name__)

NUMBER_OUTPUT_PREFIX = "나는 그녀에게 숫자를 말했다: "
TEXT_OUTPUT_PREFIX = "나는 그녀에게 글을 말했다: "


class Outcome(PrintableEnum):
    CONTINUE = enum.auto()
    TERMINATE = enum.auto()


class Session:
    ERROR = "red"
    WARNING = "magenta"

    def __init__(
        self,
        grammar: Grammar = SYMBOLIC_GRAMMAR,
        lexer: Lexer = LEXER,
        out: TextIO | None = None,
        color: bool = True,
    ):
        self.grammar = grammar
        self.lexer = lexer
        self.out = out if out is not None else sys.stdout
        self.color = color

    def process_line(self, line: str) -> Outcome:
        """Lexes, parses and executes one line. Faults are reported and never end the session."""
        try:
            tokens = self.lexer.tokenize(line)
        except TokenizerError as e:
            self._print(str(e), self.ERROR)
            return Outcome.CONTINUE
        logger.debug("tokens: %s", " ".join(str(t) for t in tokens))

        try:
            statement = parse(tokens, self.grammar)
        except ParserError as e:
            self._print(str(e), self.ERROR)
            return Outcome.CONTINUE
        logger.debug("statement: %s", statement)

        try:
            outcome = self.execute(statement)
        except CalcInternalError as e:
            self._print_internal(str(e))
            return Outcome.CONTINUE
        except RecursionError:
            # trees built outside the parser have no nesting limit
            self._print_internal("Expression nested too deeply to evaluate")
            return Outcome.CONTINUE
        logger.debug("outcome: %s", outcome)
        return outcome

    def execute(self, statement: Statement) -> Outcome:
        if isinstance(statement, ExpressionStatement):
            self._evaluate(statement)
        elif isinstance(statement, OutputStatement):
            result = self._evaluate(statement)
            if isinstance(result, Number):
                self._print(NUMBER_OUTPUT_PREFIX + str(result))
            elif isinstance(result, Text):
                self._print(TEXT_OUTPUT_PREFIX + str(result))
        elif isinstance(statement, TerminationStatement):
            return Outcome.TERMINATE
        elif isinstance(statement, EndOfInputMarker):
            pass
        else:
            raise CalcInternalError(f"Unexpected statement type: {statement!r}")
        return Outcome.CONTINUE

    def run(self, lines: Iterable[str]) -> Outcome:
        """Processes lines until one of them terminates the session."""
        for line in lines:
            if self.process_line(line.rstrip("\r\n")) is Outcome.TERMINATE:
                return Outcome.TERMINATE
        return Outcome.CONTINUE

    def _evaluate(self, statement: ExpressionStatement | OutputStatement):
        faults: list[TypeFault] = []
        result = evaluate_expression(statement.expression, faults)
        for fault in faults:
            self._print(str(fault), self.WARNING)
        return result

    def _print_internal(self, errmsg: str) -> None:
        tag = colored("[internal] ", self.ERROR, attrs=["bold"]) if self.color else "[internal] "
        self._print(tag + (colored(f"error: {errmsg}", self.ERROR) if self.color else f"error: {errmsg}"))

    def _print(self, text: str, color: str | None = None) -> None:
        if self.color and color is not None:
            text = colored(text, color)
        print(text, file=self.out)
