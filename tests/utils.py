from util.enums import DeleteOutcome


class RecordingDatabases:
    """Sandbox collaborator double: records deletions, scripted outcomes per name."""

    def __init__(self, names=None, outcomes=None, list_error=None):
        self.names = list(names or [])
        self.outcomes = dict(outcomes or {})
        self.list_error = list_error
        self.deleted = []

    async def list_databases(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.names)

    async def delete_database(self, name):
        self.deleted.append(name)
        outcome = self.outcomes.get(name, DeleteOutcome.success)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class DeleteOnlyDatabases:
    """A runtime without enumeration support."""

    def __init__(self):
        self.deleted = []

    async def delete_database(self, name):
        self.deleted.append(name)
        return DeleteOutcome.success


class StubRemote:
    """ProjectSource double keyed by project id; values are RemoteSource or exceptions."""

    def __init__(self, responses=None, on_fetch=None):
        self.responses = dict(responses or {})
        self.on_fetch = on_fetch
        self.calls = []

    async def fetch_source(self, project_id):
        self.calls.append(project_id)
        if self.on_fetch is not None:
            self.on_fetch(project_id)
        result = self.responses[project_id]
        if isinstance(result, Exception):
            raise result
        return result
