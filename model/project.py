# model/project.py
from datetime import datetime
from pydantic import BaseModel, Field
from model.workspace import LogicalUnit, Page


class RemoteSource(BaseModel):
    source: str = ""
    is_broken: bool = False
    last_success_at: datetime | None = None


class ProjectSnapshot(RemoteSource):
    project_id: str
    units: list[LogicalUnit] = Field(default_factory=list)
    pages: list[Page] = Field(default_factory=list)
