# core/route_extractor.py
from typing import Callable, Iterator, List, Optional, Sequence, Set
from core.entities import Token, TokenKind
from core.lexer import split_lines, tokenize_line
from model.workspace import Page
from util.constants import PAGE_NAMES
from util.functions import is_slug_literal, slugify, title_label
import logging

logger = logging.getLogger(__name__)

HOME = Page(id="home", path="/", label="Home")

STATE_SUFFIXES = ("tab", "section", "page")
STATE_FIELDS = frozenset({"tab", "section", "page"})
LABEL_FIELDS = frozenset({"label", "name", "title"})
MIN_STATE_LITERAL = 3
MAX_LABEL_LENGTH = 20

# (tokens, position) -> extracted literal or None
Recognizer = Callable[[Sequence[Token], int], Optional[str]]


def _string_at(tokens: Sequence[Token], i: int) -> Optional[str]:
    if i < len(tokens) and tokens[i].kind is TokenKind.STRING and tokens[i].terminated:
        return tokens[i].text
    return None


def _is_state_name(tok: Token) -> bool:
    return tok.is_ident() and tok.text.lower().endswith(STATE_SUFFIXES)


def recognize_path_declaration(tokens: Sequence[Token], i: int) -> Optional[str]:
    """`path="/x"`, `path: '/x'`, `path={"/x"}` -> "/x"."""
    if not tokens[i].is_ident("path") or i + 2 >= len(tokens):
        return None
    sep = tokens[i + 1]
    if not (sep.text == "=" or sep.text == ":"):
        return None
    j = i + 2
    if tokens[j].kind is TokenKind.PUNCT and tokens[j].text == "{":
        j += 1
    literal = _string_at(tokens, j)
    if literal is None or not literal.startswith("/"):
        return None
    return literal


def recognize_setter_call(tokens: Sequence[Token], i: int) -> Optional[str]:
    """`setActiveTab('pricing')` -> "pricing"."""
    tok = tokens[i]
    if not (_is_state_name(tok) and tok.text.startswith("set") and len(tok.text) > 3):
        return None
    if i + 1 >= len(tokens) or tokens[i + 1].text != "(":
        return None
    return _string_at(tokens, i + 2)


def recognize_equality(tokens: Sequence[Token], i: int) -> Optional[str]:
    """`activeTab === 'pricing'` or `'pricing' === activeTab` -> "pricing"."""
    if i + 2 >= len(tokens) or tokens[i + 1].text not in ("==", "==="):
        return None
    if _is_state_name(tokens[i]):
        return _string_at(tokens, i + 2)
    if _is_state_name(tokens[i + 2]):
        return _string_at(tokens, i)
    return None


def recognize_state_field(tokens: Sequence[Token], i: int) -> Optional[str]:
    """`{ tab: 'pricing' }` -> "pricing"."""
    tok = tokens[i]
    if not (tok.is_ident() and tok.text in STATE_FIELDS):
        return None
    if i + 1 >= len(tokens) or tokens[i + 1].text != ":":
        return None
    return _string_at(tokens, i + 2)


def recognize_nav_label(tokens: Sequence[Token], i: int) -> Optional[str]:
    """`{ label: 'Pricing' }` -> "Pricing" (capitalized, short)."""
    tok = tokens[i]
    if not (tok.is_ident() and tok.text in LABEL_FIELDS):
        return None
    if i + 1 >= len(tokens) or tokens[i + 1].text != ":":
        return None
    value = _string_at(tokens, i + 2)
    if not value or len(value) > MAX_LABEL_LENGTH or not value[0].isupper():
        return None
    return value


STATE_RECOGNIZERS: tuple[Recognizer, ...] = (
    recognize_setter_call,
    recognize_equality,
    recognize_state_field,
)


def _scan(
    lines: Sequence[Sequence[Token]], recognizers: Sequence[Recognizer]
) -> Iterator[str]:
    for tokens in lines:
        for i in range(len(tokens)):
            for recognize in recognizers:
                literal = recognize(tokens, i)
                if literal is not None:
                    yield literal
                    break


def page_id_from_path(path: str) -> Optional[str]:
    if ":" in path or "*" in path:
        return None
    page_id = path.strip("/").lower()
    return page_id or None


def accept_state_literal(literal: str) -> Optional[str]:
    page_id = literal.lower()
    if page_id in PAGE_NAMES:
        return page_id
    if len(literal) >= MIN_STATE_LITERAL and is_slug_literal(literal):
        return page_id
    return None


def accept_nav_label(label: str) -> Optional[str]:
    slug = slugify(label)
    return slug if slug in PAGE_NAMES else None


def extract_pages(source: str) -> List[Page]:
    """
    Derive the navigable pages implied by a single-file app.

    Always starts with the home page at "/". Path declarations win over tab/section
    state, which wins over navigation labels; ids are de-duplicated case-insensitively
    and kept in discovery order.
    """
    pages: List[Page] = [HOME]
    seen: Set[str] = {HOME.id}

    def add(page_id: Optional[str]) -> None:
        if page_id is None or page_id in seen:
            return
        seen.add(page_id)
        pages.append(Page(id=page_id, path=f"/{page_id}", label=title_label(page_id)))

    if not source or not source.strip():
        return pages

    lines = [tokenize_line(line) for line in split_lines(source)]

    for literal in _scan(lines, (recognize_path_declaration,)):
        add(page_id_from_path(literal))
    for literal in _scan(lines, STATE_RECOGNIZERS):
        add(accept_state_literal(literal))
    for literal in _scan(lines, (recognize_nav_label,)):
        add(accept_nav_label(literal))

    logger.debug("routes.pages count=%d", len(pages))
    return pages
