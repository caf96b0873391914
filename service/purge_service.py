# service/purge_service.py
import asyncio
from typing import Iterable, List, Set, Tuple
from redis.asyncio import Redis
from config.cache import StorageContext
from model.purge import PurgeReport
from repository.namespaces import (
    WELL_KNOWN_SANDBOX_DBS,
    WORKSPACE_PREFIXES,
    is_sandbox_database,
)
from util.enums import DeleteOutcome
from util.errors import PurgeFailure
from util.functions import escape_glob
from util.timing import timed
from util.types import EnumerableSandboxDatabases, SandboxDatabases
import logging

logger = logging.getLogger(__name__)

DELETE_BATCH = 500


class PurgeService:
    """
    Removes cached workspace state.

    Key-value purges are exhaustive: backend errors propagate. Sandbox database
    deletions are best-effort: each one is independent and reported, never raised.
    """

    def __init__(self, storage: StorageContext, databases: SandboxDatabases) -> None:
        self._storage = storage
        self._databases = databases

    def _clients(self) -> Tuple[Redis, Redis]:
        return self._storage.durable, self._storage.session

    # ---------------- Key-value stores ----------------

    @staticmethod
    async def _delete_keys(client: Redis, keys: Iterable[str]) -> int:
        batch: List[str] = []
        removed = 0
        for key in keys:
            batch.append(key)
            if len(batch) >= DELETE_BATCH:
                removed += int(await client.delete(*batch))
                batch = []
        if batch:
            removed += int(await client.delete(*batch))
        return removed

    @staticmethod
    async def _keys_containing(client: Redis, needle: str) -> Set[str]:
        found: Set[str] = set()
        async for key in client.scan_iter(match=f"*{escape_glob(needle)}*"):
            # Re-check in Python: the substring test is the contract, not the glob.
            if needle in key:
                found.add(key)
        return found

    @staticmethod
    async def _keys_with_prefixes(client: Redis, prefixes: Iterable[str]) -> Set[str]:
        found: Set[str] = set()
        for prefix in prefixes:
            async for key in client.scan_iter(match=f"{escape_glob(prefix)}*"):
                if key.startswith(prefix):
                    found.add(key)
        return found

    async def purge_project(self, project_id: str) -> PurgeReport:
        """
        Delete every durable and session entry whose raw key contains `project_id`.
        Covers keyer-made keys and legacy ones like "vibecoder-files-<id>".
        """
        if not project_id:
            logger.warning("purge.project.skip reason=empty_id")
            return PurgeReport(project_id=project_id)

        removed = 0
        with timed(logger, "purge.project", project=project_id):
            for client in self._clients():
                keys = await self._keys_containing(client, project_id)
                removed += await self._delete_keys(client, keys)

        logger.info("purge.project.ok project=%s keys=%d", project_id, removed)
        return PurgeReport(project_id=project_id, keys_removed=removed)

    # ---------------- Workspace-wide ----------------

    async def _database_names(self) -> Tuple[List[str], bool]:
        """
        Returns (names, used_fallback). Enumeration that is unsupported or raises falls
        back to the well-known names.
        """
        if isinstance(self._databases, EnumerableSandboxDatabases):
            try:
                listed = await self._databases.list_databases()
            except Exception:
                logger.warning("purge.databases.enumerate_failed", exc_info=True)
            else:
                return [n for n in listed if n and is_sandbox_database(n)], False
        return list(WELL_KNOWN_SANDBOX_DBS), True

    async def _delete_database(self, name: str) -> DeleteOutcome:
        try:
            outcome = await self._databases.delete_database(name)
            if outcome is DeleteOutcome.failure:
                raise PurgeFailure("delete reported failure", key=name)
        except PurgeFailure as e:
            logger.warning("purge.database.failed name=%s reason=%s", name, e.message)
            return DeleteOutcome.failure
        except Exception as e:
            logger.warning("purge.database.failed name=%s err=%s", name, type(e).__name__)
            return DeleteOutcome.failure
        if outcome is DeleteOutcome.blocked:
            logger.warning("purge.database.blocked name=%s", name)
        return outcome

    async def purge_all(self) -> PurgeReport:
        """
        Wipe every workspace-prefixed entry, then delete all sandbox databases.
        Always completes; per-database outcomes are in the report.
        """
        with timed(logger, "purge.all"):
            removed = 0
            for client in self._clients():
                keys = await self._keys_with_prefixes(client, WORKSPACE_PREFIXES)
                removed += await self._delete_keys(client, keys)

            names, used_fallback = await self._database_names()
            # Fan out; one failure never short-circuits the rest.
            outcomes = await asyncio.gather(
                *(self._delete_database(n) for n in names)
            )

        report = PurgeReport(
            keys_removed=removed,
            databases=dict(zip(names, outcomes)),
            used_fallback=used_fallback,
        )
        logger.info(
            "purge.all.ok keys=%d databases=%d failed=%d fallback=%s",
            removed,
            len(names),
            len(report.failed_databases),
            used_fallback,
        )
        return report
