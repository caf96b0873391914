# core/sandbox_databases.py
import asyncio
import os
import sqlite3
from pathlib import Path
from typing import List
from util.enums import DeleteOutcome
import logging

logger = logging.getLogger(__name__)

DB_SUFFIX = ".sqlite"
SIDECARS = ("-wal", "-shm", "-journal")


class SqliteDatabaseDirectory:
    """
    The sandbox runtime's embedded databases: one SQLite file per name under `root`.

    A database whose lock cannot be taken immediately (another connection is inside a
    transaction) reports BLOCKED and is left in place.
    """

    def __init__(self, root: str | os.PathLike) -> None:
        self._root = Path(root)

    def path_for(self, name: str) -> Path:
        return self._root / f"{name}{DB_SUFFIX}"

    async def list_databases(self) -> List[str]:
        return await asyncio.to_thread(self._list)

    def _list(self) -> List[str]:
        if not self._root.is_dir():
            return []
        return sorted(p.name[: -len(DB_SUFFIX)] for p in self._root.glob(f"*{DB_SUFFIX}"))

    async def delete_database(self, name: str) -> DeleteOutcome:
        return await asyncio.to_thread(self._delete, name)

    def _delete(self, name: str) -> DeleteOutcome:
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            logger.warning("sandbox.db.bad_name name=%r", name)
            return DeleteOutcome.failure

        path = self.path_for(name)
        if not path.exists():
            return DeleteOutcome.success

        try:
            conn = sqlite3.connect(path, timeout=0)
        except sqlite3.Error:
            logger.warning("sandbox.db.open_error name=%s", name, exc_info=True)
            return DeleteOutcome.failure
        try:
            conn.execute("BEGIN EXCLUSIVE")
            conn.rollback()
        except sqlite3.OperationalError as e:
            if "locked" in str(e).lower() or "busy" in str(e).lower():
                logger.warning("sandbox.db.blocked name=%s", name)
                return DeleteOutcome.blocked
            logger.warning("sandbox.db.lock_error name=%s err=%s", name, e)
            return DeleteOutcome.failure
        except sqlite3.DatabaseError as e:
            # Not a database (corrupt or foreign file): still ours to remove.
            logger.info("sandbox.db.not_sqlite name=%s err=%s", name, e)
        finally:
            conn.close()

        try:
            path.unlink()
            for suffix in SIDECARS:
                Path(f"{path}{suffix}").unlink(missing_ok=True)
        except OSError:
            logger.warning("sandbox.db.unlink_error name=%s", name, exc_info=True)
            return DeleteOutcome.failure

        logger.info("sandbox.db.deleted name=%s", name)
        return DeleteOutcome.success
