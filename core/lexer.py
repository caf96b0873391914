# core/lexer.py
from typing import List
from core.entities import Token, TokenKind

_QUOTES = "'\"`"
_OPERATOR_CHARS = "=!<>"


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def tokenize_line(line: str) -> List[Token]:
    """
    Single-pass tokenizer for one line of JS/TSX-ish source.

    Each character is consumed once; strings end at the matching unescaped quote or at
    end of line (marked terminated=False). Comments are not special-cased.
    """
    out: List[Token] = []
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch.isspace():
            i += 1
            continue

        start = i
        if _is_ident_start(ch):
            i += 1
            while i < n and _is_ident_part(line[i]):
                i += 1
            out.append(Token(TokenKind.IDENT, line[start:i], start))
        elif ch.isdigit():
            i += 1
            while i < n and (line[i].isalnum() or line[i] == "."):
                i += 1
            out.append(Token(TokenKind.NUMBER, line[start:i], start))
        elif ch in _QUOTES:
            i += 1
            body: List[str] = []
            closed = False
            while i < n:
                c = line[i]
                if c == "\\" and i + 1 < n:
                    body.append(line[i : i + 2])
                    i += 2
                    continue
                i += 1
                if c == ch:
                    closed = True
                    break
                body.append(c)
            out.append(Token(TokenKind.STRING, "".join(body), start, terminated=closed))
        elif ch in _OPERATOR_CHARS:
            i += 1
            while i < n and line[i] in _OPERATOR_CHARS:
                i += 1
            out.append(Token(TokenKind.OP, line[start:i], start))
        else:
            i += 1
            out.append(Token(TokenKind.PUNCT, ch, start))
    return out


def split_lines(text: str) -> List[str]:
    """
    Split on '\\n' only, keeping the newline on every line but the last.
    "".join(split_lines(t)) == t for every t.
    """
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines

