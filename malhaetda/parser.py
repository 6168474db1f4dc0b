import enum
from dataclasses import dataclass, field
from typing import Optional

from malhaetda.tokenizer import NUMBER_TOKENS, Token, TokenType, untokenize
from malhaetda.utils import PrintableEnum, display_width


@dataclass
class ParserError(Exception):
    errmsg: str
    tokens: list[Token]
    error_token_idx: int

    def __str__(self) -> str:
        parsed_tokens = self.tokens[: self.error_token_idx]
        filler_whitespace = " " * display_width(untokenize(parsed_tokens)) + (" " if parsed_tokens else "")
        return "\n".join([f"Parser error: {self.errmsg}", untokenize(self.tokens), filler_whitespace + "^"])


class BinaryOperator(PrintableEnum):
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()


@dataclass(frozen=True)
class NumberLiteral:
    lexeme: str


@dataclass(frozen=True)
class TextLiteral:
    lexeme: str


@dataclass(frozen=True)
class Subexpression:
    expression: "Expression"


ValueNode = NumberLiteral | TextLiteral | Subexpression


@dataclass(frozen=True)
class Factor:
    base: ValueNode


@dataclass(frozen=True)
class OpFactor:
    operator: BinaryOperator
    factor: Factor


@dataclass(frozen=True)
class Term:
    left: Factor
    right: tuple[OpFactor, ...] = ()


@dataclass(frozen=True)
class OpTerm:
    operator: BinaryOperator
    term: Term


@dataclass(frozen=True)
class Expression:
    left: Term
    right: tuple[OpTerm, ...] = ()


Node = Expression | Term | Factor | ValueNode


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression


@dataclass(frozen=True)
class OutputStatement:
    expression: Expression


@dataclass(frozen=True)
class TerminationStatement:
    verb: str


@dataclass(frozen=True)
class EndOfInputMarker:
    pass


Statement = ExpressionStatement | OutputStatement | TerminationStatement | EndOfInputMarker

Keyword = tuple[TokenType, str]


def _keywords(*words: str) -> tuple[Keyword, ...]:
    return tuple((TokenType.IDENTIFIER, w) for w in words)


@dataclass(frozen=True)
class Grammar:
    """Surface spelling of the language: statement phrases and operator tokens for each precedence tier.

    Grammars differ only in which tokens they accept; every grammar builds the same tree shapes.
    """

    name: str
    expression_operators: dict[Keyword, BinaryOperator]
    term_operators: dict[Keyword, BinaryOperator]
    output_phrase: tuple[Keyword, ...] = _keywords("나는", "그녀에게", "말했다") + ((TokenType.DOT, "."),)
    termination_phrase: tuple[Keyword, ...] = _keywords("나는", "그녀를")
    termination_verbs: frozenset[str] = field(default=frozenset({"떠났다", "잊었다"}))

    def operator(self, tokens: list[Token], i: int, tier: dict[Keyword, BinaryOperator]) -> Optional[BinaryOperator]:
        """Operator of the given tier at tokens[i], None when tokens[i] does not continue this tier."""
        token = tokens[i]
        key = (token.type, token.lexeme)
        if key in tier:
            return tier[key]
        if token.type is TokenType.OPERATOR and key not in self.expression_operators and key not in self.term_operators:
            raise ParserError(f"Unknown operator {token.lexeme!r}", tokens=tokens, error_token_idx=i)
        return None


SYMBOLIC_GRAMMAR = Grammar(
    name="symbolic",
    expression_operators={
        (TokenType.OPERATOR, "+"): BinaryOperator.ADD,
        (TokenType.OPERATOR, "-"): BinaryOperator.SUB,
    },
    term_operators={
        (TokenType.OPERATOR, "*"): BinaryOperator.MUL,
        (TokenType.OPERATOR, "/"): BinaryOperator.DIV,
    },
)

WORDED_GRAMMAR = Grammar(
    name="worded",
    expression_operators={
        (TokenType.IDENTIFIER, "더하기"): BinaryOperator.ADD,
        (TokenType.IDENTIFIER, "빼기"): BinaryOperator.SUB,
    },
    term_operators={
        (TokenType.IDENTIFIER, "곱하기"): BinaryOperator.MUL,
        (TokenType.IDENTIFIER, "나누기"): BinaryOperator.DIV,
    },
)

GRAMMARS = {g.name: g for g in (SYMBOLIC_GRAMMAR, WORDED_GRAMMAR)}

# parentheses deeper than this are rejected before the parser or evaluator run out of stack
MAX_NESTING_DEPTH = 64


def parse(tokens: list[Token], grammar: Grammar = SYMBOLIC_GRAMMAR) -> Statement:
    if not tokens or tokens[-1].type is not TokenType.END:
        raise ParserError("Internal error, token list is not terminated", tokens=tokens, error_token_idx=len(tokens))

    if tokens[0].type is TokenType.END:
        return EndOfInputMarker()

    output_matched = _match_phrase(tokens, 0, grammar.output_phrase)
    if output_matched == len(grammar.output_phrase):
        expr, i = _consume_expression(tokens, output_matched, grammar)
        _expect_end(tokens, i)
        return OutputStatement(expr)

    termination_matched = _match_phrase(tokens, 0, grammar.termination_phrase)
    if termination_matched == len(grammar.termination_phrase):
        i = termination_matched
        verb = tokens[i]
        if verb.type is not TokenType.IDENTIFIER or verb.lexeme not in grammar.termination_verbs:
            expected = " or ".join(repr(v) for v in sorted(grammar.termination_verbs))
            raise ParserError(f"Expected {expected}, found {verb.type}", tokens=tokens, error_token_idx=i)
        i += 1
        if tokens[i].type is TokenType.DOT:
            i += 1
        _expect_end(tokens, i)
        return TerminationStatement(verb.lexeme)

    # a line opening like a keyword phrase is reported against the phrase, not as a bad expression
    partial, phrase = max(
        (output_matched, grammar.output_phrase),
        (termination_matched, grammar.termination_phrase),
        key=lambda candidate: candidate[0],
    )
    if partial > 0:
        raise ParserError(f"Expected {phrase[partial][1]!r}, found {tokens[partial].type}", tokens, partial)

    expr, i = _consume_expression(tokens, 0, grammar)
    _expect_end(tokens, i)
    return ExpressionStatement(expr)


def _match_phrase(tokens: list[Token], i: int, phrase: tuple[Keyword, ...]) -> int:
    """Number of leading phrase keywords found at tokens[i:]."""
    matched = 0
    for expected_type, expected_lexeme in phrase:
        token = tokens[i + matched]
        if token.type is not expected_type or token.lexeme != expected_lexeme:
            break
        matched += 1
    return matched


def _expect_end(tokens: list[Token], i: int) -> None:
    token = tokens[i]
    if token.type is TokenType.BRACKET_CLOSE:
        raise ParserError("Unbalanced parenthesis", tokens=tokens, error_token_idx=i)
    if token.type is not TokenType.END:
        raise ParserError(f"Unexpected {token.type} {token.lexeme!r}", tokens=tokens, error_token_idx=i)


def _consume_expression(tokens: list[Token], i: int, grammar: Grammar, depth: int = 0) -> tuple[Expression, int]:
    left, i = _consume_term(tokens, i, grammar, depth)
    right: list[OpTerm] = []
    while True:
        operator = grammar.operator(tokens, i, grammar.expression_operators)
        if operator is None:
            break
        term, i = _consume_term(tokens, i + 1, grammar, depth)
        right.append(OpTerm(operator=operator, term=term))
    return Expression(left=left, right=tuple(right)), i


def _consume_term(tokens: list[Token], i: int, grammar: Grammar, depth: int) -> tuple[Term, int]:
    left, i = _consume_factor(tokens, i, grammar, depth)
    right: list[OpFactor] = []
    while True:
        operator = grammar.operator(tokens, i, grammar.term_operators)
        if operator is None:
            break
        factor, i = _consume_factor(tokens, i + 1, grammar, depth)
        right.append(OpFactor(operator=operator, factor=factor))
    return Term(left=left, right=tuple(right)), i


def _consume_factor(tokens: list[Token], i: int, grammar: Grammar, depth: int) -> tuple[Factor, int]:
    first = tokens[i]
    if first.type in NUMBER_TOKENS:
        return Factor(NumberLiteral(first.lexeme)), i + 1
    elif first.type is TokenType.TEXT:
        return Factor(TextLiteral(first.lexeme)), i + 1
    elif first.type is TokenType.BRACKET_OPEN:
        if depth >= MAX_NESTING_DEPTH:
            raise ParserError("Expression nested too deeply", tokens=tokens, error_token_idx=i)
        expr, j = _consume_expression(tokens, i + 1, grammar, depth + 1)
        if tokens[j].type is not TokenType.BRACKET_CLOSE:
            raise ParserError("Unbalanced parenthesis", tokens=tokens, error_token_idx=i)
        return Factor(Subexpression(expr)), j + 1
    elif first.type is TokenType.END:
        raise ParserError("Unterminated expression", tokens=tokens, error_token_idx=i)
    else:
        raise ParserError(f"Operand expected, found {first.type} {first.lexeme!r}", tokens=tokens, error_token_idx=i)
