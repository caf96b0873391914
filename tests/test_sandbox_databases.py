import sqlite3

import pytest

from core.sandbox_databases import SqliteDatabaseDirectory
from util.enums import DeleteOutcome


def _make_db(directory, name):
    path = directory.path_for(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE bundles (id TEXT PRIMARY KEY, code BLOB)")
    conn.commit()
    conn.close()
    return path


@pytest.mark.asyncio
async def test_lists_databases_by_name(tmp_path):
    directory = SqliteDatabaseDirectory(tmp_path / "dbs")
    assert await directory.list_databases() == []

    _make_db(directory, "sandpack-npm-cache")
    _make_db(directory, "keyval-store")
    (tmp_path / "dbs" / "notes.txt").write_text("ignored")

    assert await directory.list_databases() == ["keyval-store", "sandpack-npm-cache"]


@pytest.mark.asyncio
async def test_delete_removes_file_and_sidecars(tmp_path):
    directory = SqliteDatabaseDirectory(tmp_path)
    path = _make_db(directory, "sandpack-bundler-cache")
    wal = tmp_path / "sandpack-bundler-cache.sqlite-wal"
    wal.write_bytes(b"")

    assert await directory.delete_database("sandpack-bundler-cache") is DeleteOutcome.success
    assert not path.exists()
    assert not wal.exists()


@pytest.mark.asyncio
async def test_deleting_a_missing_database_succeeds(tmp_path):
    directory = SqliteDatabaseDirectory(tmp_path)
    assert await directory.delete_database("CSB_V8_CACHE") is DeleteOutcome.success


@pytest.mark.asyncio
async def test_open_transaction_blocks_deletion(tmp_path):
    directory = SqliteDatabaseDirectory(tmp_path)
    path = _make_db(directory, "sandpack-npm-cache")

    holder = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
    holder.execute("BEGIN EXCLUSIVE")
    try:
        assert await directory.delete_database("sandpack-npm-cache") is DeleteOutcome.blocked
        assert path.exists()
    finally:
        holder.execute("ROLLBACK")
        holder.close()

    assert await directory.delete_database("sandpack-npm-cache") is DeleteOutcome.success


@pytest.mark.asyncio
async def test_path_like_names_are_rejected(tmp_path):
    directory = SqliteDatabaseDirectory(tmp_path)
    assert await directory.delete_database("../escape") is DeleteOutcome.failure
    assert await directory.delete_database("") is DeleteOutcome.failure
