# model/workspace.py
from pydantic import BaseModel, ConfigDict
from util.enums import UnitKind


class LogicalUnit(BaseModel):
    """
    A virtual file carved out of a single-file source blob.

    `start_line`/`end_line` are 0-based and inclusive; `code` is the exact slice,
    newlines included, so concatenating every unit's code rebuilds the blob.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    path: str
    kind: UnitKind
    start_line: int
    end_line: int
    code: str

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    label: str
