# main.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional
from config.cache import StorageContext
from config.settings import settings
from core.remote_client import RemoteProjectClient
from core.sandbox_databases import SqliteDatabaseDirectory
from repository.scoped_store import ScopedStore
from repository.upload_repository import PendingUploadRepository
from service.project_scope import ProjectScope
from service.purge_service import PurgeService
from util.enums import Color
from util.logger import init_logger
from util.types import ProjectSource, SandboxDatabases


def build_project_scope(
    storage: StorageContext,
    *,
    databases: Optional[SandboxDatabases] = None,
    remote: Optional[ProjectSource] = None,
    on_project_change: Optional[Callable[[], None]] = None,
) -> ProjectScope:
    _store = ScopedStore(storage.durable)
    _purger = PurgeService(
        storage, databases or SqliteDatabaseDirectory(settings.SANDBOX_DB_DIR)
    )
    _remote = remote or RemoteProjectClient()
    _uploads = PendingUploadRepository(storage.durable, settings.UPLOAD_EXPIRY_SECONDS)
    return ProjectScope(
        _store,
        _purger,
        _remote,
        on_project_change=on_project_change,
        uploads=_uploads,
    )


@asynccontextmanager
async def lifespan(
    storage: Optional[StorageContext] = None,
    *,
    databases: Optional[SandboxDatabases] = None,
    remote: Optional[ProjectSource] = None,
    on_project_change: Optional[Callable[[], None]] = None,
) -> AsyncIterator[ProjectScope]:
    logger = init_logger()
    storage = storage or StorageContext()
    try:
        print(f"{Color.GREEN}Initializing workspace...{Color.RESET}")
        await storage.open()
    except Exception as e:
        logger.error("workspace.storage.error err=%s", type(e).__name__)
        raise

    scope = build_project_scope(
        storage,
        databases=databases,
        remote=remote,
        on_project_change=on_project_change,
    )
    print(f"{Color.BLUE}Workspace ready{Color.RESET}")

    try:
        yield scope
    finally:
        try:
            await scope.drain()
        finally:
            await storage.close()
        print(f"{Color.RED}Workspace closed{Color.RESET}")
