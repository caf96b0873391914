# core/entities.py
from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    OP = "op"  # runs of = ! < > (so "===" is one token)
    PUNCT = "punct"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str  # for STRING: the literal body without quotes
    col: int
    terminated: bool = True  # False for a STRING that runs off the end of the line

    def is_ident(self, *names: str) -> bool:
        return self.kind is TokenKind.IDENT and (not names or self.text in names)

    def is_punct(self, chars: str) -> bool:
        return self.kind in (TokenKind.PUNCT, TokenKind.OP) and self.text[:1] in chars


@dataclass(frozen=True)
class Declaration:
    """
    A capitalized top-level declaration found by the partitioner.
    """

    line: int  # 0-based
    name: str
    is_default_export: bool
