# model/purge.py
from pydantic import BaseModel, Field
from util.enums import DeleteOutcome


class PurgeReport(BaseModel):
    project_id: str | None = None  # None for a workspace-wide purge
    keys_removed: int = 0
    databases: dict[str, DeleteOutcome] = Field(default_factory=dict)
    used_fallback: bool = False

    @property
    def failed_databases(self) -> list[str]:
        return [n for n, o in self.databases.items() if o != DeleteOutcome.success]
