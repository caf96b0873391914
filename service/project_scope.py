# service/project_scope.py
import asyncio
from typing import Any, Callable, Optional, Set, TypeVar
from core.partitioner import partition_source
from core.route_extractor import extract_pages
from model.project import ProjectSnapshot
from model.purge import PurgeReport
from repository.namespaces import scoped_key
from repository.scoped_store import ScopedStore
from repository.upload_repository import PendingUploadRepository
from service.purge_service import PurgeService
from util.enums import ScopeState
from util.errors import RemoteFetchError
from util.timing import timed
from util.types import ProjectSource
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProjectScope:
    """
    Tracks the active project and keeps its cached state isolated.

    - First observed id: becomes active, nothing is purged (keeps state across reloads).
    - Switch p -> q: purge p in the background (not awaited), run `on_project_change`,
      then q is active. One purge per switch; the newest observation wins.
    - suppress_next_project_change_reset() lets a caller that already loaded fresh
      state for the incoming project skip exactly one purge+reset.
    """

    def __init__(
        self,
        store: ScopedStore,
        purger: PurgeService,
        remote: ProjectSource,
        on_project_change: Optional[Callable[[], None]] = None,
        uploads: Optional[PendingUploadRepository] = None,
    ) -> None:
        self._store = store
        self._purger = purger
        self._remote = remote
        self._on_project_change = on_project_change
        self._uploads = uploads
        self._state = ScopeState.UNINITIALIZED
        self._project_id: Optional[str] = None
        self._suppress_next_reset = False
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

    # ---------------- State ----------------

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def project_id(self) -> Optional[str]:
        return self._project_id

    @property
    def reset_suppressed(self) -> bool:
        return self._suppress_next_reset

    @property
    def uploads(self) -> PendingUploadRepository:
        """Resumable uploads; not a workspace prefix, so purge_all() keeps them."""
        if self._uploads is None:
            raise RuntimeError("ProjectScope was built without an upload repository")
        return self._uploads

    def suppress_next_project_change_reset(self) -> None:
        self._suppress_next_reset = True
        logger.info("scope.suppress.armed project=%s", self._project_id)

    def observe(self, project_id: Optional[str]) -> None:
        """
        Feed the host's current project id. Must run inside an event loop when a
        switch can happen (the purge is scheduled as a task).
        """
        if not project_id:
            return  # transient null while the host is loading

        if self._state is ScopeState.UNINITIALIZED:
            self._project_id = project_id
            self._state = ScopeState.ACTIVE
            logger.info("scope.init project=%s", project_id)
            return

        if project_id == self._project_id:
            return

        previous = self._project_id

        if self._suppress_next_reset:
            self._generation += 1
            self._suppress_next_reset = False
            self._project_id = project_id
            self._state = ScopeState.ACTIVE
            logger.info(
                "scope.switch.suppressed from=%s to=%s", previous, project_id
            )
            return

        # Raises outside an event loop, before any state is touched.
        loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation

        logger.info("scope.switch from=%s to=%s", previous, project_id)
        self._state = ScopeState.SWITCHING
        self._project_id = project_id
        try:
            if previous:
                self._schedule_purge(loop, previous)
            if self._on_project_change is not None:
                self._on_project_change()
        finally:
            # A re-entrant observe() from the callback owns the final state.
            if generation == self._generation:
                self._state = ScopeState.ACTIVE

    def _schedule_purge(self, loop: asyncio.AbstractEventLoop, project_id: str) -> None:
        task = loop.create_task(self._purger.purge_project(project_id))
        self._pending.add(task)
        task.add_done_callback(self._purge_done)

    def _purge_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "scope.purge.error err=%s", type(exc).__name__, exc_info=exc
            )

    async def drain(self) -> None:
        """Wait for background purges started by switches."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ---------------- Project-scoped data ----------------

    def get_scoped_key(self, key: str) -> str:
        return scoped_key(key, self._project_id)

    async def get_project_data(self, key: str, default: T, type_: Any = None) -> T:
        return await self._store.get(key, default, self._project_id, type_=type_)

    async def set_project_data(self, key: str, value: Any) -> None:
        await self._store.set(key, value, self._project_id)

    async def clear_current_project_data(self) -> Optional[PurgeReport]:
        if not self._project_id:
            return None
        return await self._purger.purge_project(self._project_id)

    async def purge_project(self, project_id: str) -> PurgeReport:
        report = await self._purger.purge_project(project_id)
        logger.info("scope.purged project=%s", project_id)
        return report

    async def purge_all(self) -> PurgeReport:
        return await self._purger.purge_all()

    # ---------------- Escape hatch ----------------

    async def refresh_from_remote(self) -> Optional[ProjectSnapshot]:
        """
        Re-read the active project's source and flags straight from the remote side,
        ignoring every local cache. None when nothing is active, the fetch fails, or
        the active project changed while the fetch was in flight.
        """
        project_id = self._project_id
        if not project_id:
            return None

        try:
            with timed(logger, "scope.refresh", project=project_id):
                remote = await self._remote.fetch_source(project_id)
        except RemoteFetchError as e:
            logger.error("scope.refresh.error project=%s reason=%s", project_id, e.message)
            return None
        except Exception:
            logger.error("scope.refresh.error project=%s", project_id, exc_info=True)
            return None

        if self._project_id != project_id:
            logger.warning(
                "scope.refresh.stale project=%s active=%s", project_id, self._project_id
            )
            return None

        with timed(logger, "scope.derive", project=project_id):
            units = partition_source(remote.source)
            pages = extract_pages(remote.source)

        return ProjectSnapshot(
            project_id=project_id,
            source=remote.source,
            is_broken=remote.is_broken,
            last_success_at=remote.last_success_at,
            units=units,
            pages=pages,
        )
