import enum
import re
from dataclasses import dataclass
from typing import Iterator

from malhaetda.utils import PrintableEnum, point_at


@dataclass
class TokenizerError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        return "\n".join([f"[Tokenizer error] {self.errmsg}", *point_at(self.code, self.error_char_idx)])


class TokenType(PrintableEnum):
    TEXT = enum.auto()
    FLOAT = enum.auto()
    INTEGER = enum.auto()
    IDENTIFIER = enum.auto()
    EOL = enum.auto()
    WHITESPACE = enum.auto()
    DOT = enum.auto()
    BRACKET_OPEN = enum.auto()
    BRACKET_CLOSE = enum.auto()
    OPERATOR = enum.auto()
    END = enum.auto()


NUMBER_TOKENS = frozenset({TokenType.FLOAT, TokenType.INTEGER})
ELIDED_TOKENS = frozenset({TokenType.EOL, TokenType.WHITESPACE})


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    pos: int = 0

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


# order matters: the first rule matching at a position wins
TOKEN_RULES: tuple[tuple[TokenType, str], ...] = (
    (TokenType.TEXT, r'"(\\"|[^"])*"'),
    (TokenType.FLOAT, r"[0-9]*\.[0-9]+"),
    (TokenType.INTEGER, r"[0-9]+"),
    (TokenType.IDENTIFIER, r"[ㄱ-ㅎㅏ-ㅣ가-힣]+"),
    (TokenType.EOL, r"\n+"),
    (TokenType.WHITESPACE, r"[ \t\r]+"),
    (TokenType.DOT, r"\."),
    (TokenType.BRACKET_OPEN, r"\("),
    (TokenType.BRACKET_CLOSE, r"\)"),
    (TokenType.OPERATOR, r"[+\-*/]+"),
)


class Lexer:
    """Splits one line into tokens using an ordered table of regular expressions. Read-only once built."""

    def __init__(self, rules: tuple[tuple[TokenType, str], ...] = TOKEN_RULES):
        self._rules = tuple((token_type, re.compile(pattern)) for token_type, pattern in rules)

    def scan(self, code: str) -> Iterator[Token]:
        """Yields every recognized token, whitespace and line terminators included."""
        i = 0
        while i < len(code):
            for token_type, pattern in self._rules:
                match = pattern.match(code, i)
                if match:
                    yield Token(type=token_type, lexeme=match.group(), pos=i)
                    i = match.end()
                    break
            else:
                raise TokenizerError(f"Unexpected character: {code[i]!r}", code=code, error_char_idx=i)

    def tokenize(self, code: str) -> list[Token]:
        tokens = [t for t in self.scan(code) if t.type not in ELIDED_TOKENS]
        tokens.append(Token(type=TokenType.END, lexeme="", pos=len(code)))
        return tokens


LEXER = Lexer()


def scan(code: str) -> list[Token]:
    return list(LEXER.scan(code))


def tokenize(code: str) -> list[Token]:
    return LEXER.tokenize(code)


def untokenize(tokens: list[Token]) -> str:
    result = " ".join(t.lexeme for t in tokens if t.type is not TokenType.END)

    # ( 1 + 2 ) => (1 + 2)
    result = re.sub(r"\(\s+", "(", result)
    result = re.sub(r"\s+\)", ")", result)
    return result
