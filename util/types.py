# util/types.py
from typing import List, Protocol, runtime_checkable
from model.project import RemoteSource
from util.enums import DeleteOutcome


# Flow: narrow interfaces for the two external collaborators.
@runtime_checkable
class SandboxDatabases(Protocol):
    async def delete_database(self, name: str) -> DeleteOutcome: ...


@runtime_checkable
class EnumerableSandboxDatabases(SandboxDatabases, Protocol):
    async def list_databases(self) -> List[str]: ...


class ProjectSource(Protocol):
    async def fetch_source(self, project_id: str) -> RemoteSource: ...
