# core/partitioner.py
from typing import Dict, List, Optional, Sequence
from core.entities import Declaration, Token
from core.lexer import split_lines, tokenize_line
from model.workspace import LogicalUnit
from util.constants import COMPONENT_NAMES, PAGE_NAMES, VirtualPaths
from util.enums import UnitKind
import logging

logger = logging.getLogger(__name__)

# A leading block shorter than this stays attached to the first unit.
PREAMBLE_MIN_LINE = 3


def _is_component_name(tok: Token) -> bool:
    name = tok.text
    return (
        tok.is_ident()
        and name[:1].isascii()
        and name[:1].isupper()
        and all(c.isascii() and c.isalnum() for c in name)
    )


def recognize_default_export(tokens: Sequence[Token]) -> Optional[str]:
    """`export default function Name` -> "Name"."""
    if len(tokens) < 4:
        return None
    if not (
        tokens[0].is_ident("export")
        and tokens[1].is_ident("default")
        and tokens[2].is_ident("function")
    ):
        return None
    return tokens[3].text if _is_component_name(tokens[3]) else None


def recognize_declaration(tokens: Sequence[Token]) -> Optional[str]:
    """`[export] function|const Name` followed by ':', '=' or '(' -> "Name"."""
    i = 1 if tokens and tokens[0].is_ident("export") else 0
    if len(tokens) < i + 3:
        return None
    if not tokens[i].is_ident("function", "const"):
        return None
    name = tokens[i + 1]
    if not _is_component_name(name) or not tokens[i + 2].is_punct(":=("):
        return None
    return name.text


def find_declarations(lines: Sequence[str]) -> List[Declaration]:
    out: List[Declaration] = []
    for idx, line in enumerate(lines):
        tokens = tokenize_line(line)
        if not tokens:
            continue
        name = recognize_default_export(tokens)
        if name is not None:
            out.append(Declaration(line=idx, name=name, is_default_export=True))
            continue
        name = recognize_declaration(tokens)
        if name is not None:
            out.append(Declaration(line=idx, name=name, is_default_export=False))
    return out


def classify(decl: Declaration) -> UnitKind:
    lower = decl.name.lower()
    if decl.is_default_export or lower == "app":
        return UnitKind.app
    if lower in PAGE_NAMES or lower.endswith("page"):
        return UnitKind.page
    if lower in COMPONENT_NAMES:
        return UnitKind.component
    return UnitKind.component


def _virtual_path(name: str, kind: UnitKind) -> str:
    if kind is UnitKind.page:
        return f"{VirtualPaths.PAGES}/{name}.tsx"
    if kind is UnitKind.component:
        return f"{VirtualPaths.COMPONENTS}/{name}.tsx"
    return f"/{name}.tsx"


def _unique_id(base: str, seen: Dict[str, int]) -> str:
    n = seen.get(base, 0) + 1
    seen[base] = n
    return base if n == 1 else f"{base}-{n}"


def partition_source(source: str) -> List[LogicalUnit]:
    """
    Split a single-file app into ordered virtual files.

    Each declaration owns the lines up to the next declaration. A non-trivial leading
    block (imports, constants) becomes a preamble unit; a short one is folded into the
    first unit. Concatenating the units' code gives back `source`.
    """
    if not source or not source.strip():
        return []

    lines = split_lines(source)
    decls = find_declarations(lines)
    last = len(lines) - 1

    if not decls:
        logger.debug("partition.fallback lines=%d", len(lines))
        return [
            LogicalUnit(
                id="app",
                name="App.tsx",
                path=VirtualPaths.APP,
                kind=UnitKind.app,
                start_line=0,
                end_line=last,
                code=source,
            )
        ]

    seen: Dict[str, int] = {}
    units: List[LogicalUnit] = []

    first = decls[0].line
    leading = "".join(lines[:first])
    has_preamble = first >= PREAMBLE_MIN_LINE and bool(leading.strip())
    if has_preamble:
        units.append(
            LogicalUnit(
                id=_unique_id("imports", seen),
                name="imports.ts",
                path=VirtualPaths.PREAMBLE,
                kind=UnitKind.preamble,
                start_line=0,
                end_line=first - 1,
                code=leading,
            )
        )

    for i, decl in enumerate(decls):
        start = decl.line if (i > 0 or has_preamble) else 0
        end = decls[i + 1].line - 1 if i + 1 < len(decls) else last
        kind = classify(decl)
        units.append(
            LogicalUnit(
                id=_unique_id(decl.name.lower(), seen),
                name=f"{decl.name}.tsx",
                path=_virtual_path(decl.name, kind),
                kind=kind,
                start_line=start,
                end_line=end,
                code="".join(lines[start : end + 1]),
            )
        )

    logger.debug(
        "partition.units lines=%d units=%d preamble=%s",
        len(lines),
        len(units),
        has_preamble,
    )
    return units
