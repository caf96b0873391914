import pytest

from repository.namespaces import WELL_KNOWN_SANDBOX_DBS, scoped_key
from service.purge_service import PurgeService
from util.enums import DeleteOutcome
from utils import DeleteOnlyDatabases, RecordingDatabases


async def _seed(client, keys):
    for key in keys:
        await client.set(key, "1")


@pytest.mark.asyncio
async def test_purge_project_removes_scoped_and_legacy_keys(storage, databases, durable, session):
    await _seed(
        durable,
        [
            scoped_key("chat", "p1"),
            scoped_key("files", "p1"),
            "vibecoder-files-p1",
            "sandpack-p1-cache",
            scoped_key("chat", "p2"),
            "unrelated",
        ],
    )
    await _seed(session, [scoped_key("scroll", "p1"), scoped_key("scroll", "p2")])

    report = await PurgeService(storage, databases).purge_project("p1")

    assert report.keys_removed == 5
    assert sorted(await durable.keys("*")) == sorted([scoped_key("chat", "p2"), "unrelated"])
    assert await session.keys("*") == [scoped_key("scroll", "p2")]
    # Project purges never touch sandbox databases
    assert databases.deleted == []


@pytest.mark.asyncio
async def test_purge_project_is_idempotent(storage, databases, durable):
    await _seed(durable, [scoped_key("chat", "p1"), scoped_key("chat", "p2")])
    purger = PurgeService(storage, databases)

    first = await purger.purge_project("p1")
    snapshot = sorted(await durable.keys("*"))
    second = await purger.purge_project("p1")

    assert first.keys_removed == 1
    assert second.keys_removed == 0
    assert sorted(await durable.keys("*")) == snapshot


@pytest.mark.asyncio
async def test_purge_project_with_empty_id_is_a_no_op(storage, databases, durable):
    await _seed(durable, [scoped_key("chat", "p1"), "unrelated"])

    report = await PurgeService(storage, databases).purge_project("")

    assert report.keys_removed == 0
    assert len(await durable.keys("*")) == 2


@pytest.mark.asyncio
async def test_purge_all_wipes_workspace_prefixes_and_sandbox_databases(
    storage, databases, durable, session
):
    await _seed(
        durable,
        [
            scoped_key("chat", "p1"),
            scoped_key("chat"),
            "vibecoder-chat-p9",
            "vibecoder-state-x",
            "sandpack-files",
            "pending_uploads",
            "other-app:setting",
        ],
    )
    await _seed(session, [scoped_key("scroll", "p1"), "other-session"])

    report = await PurgeService(storage, databases).purge_all()

    assert sorted(await durable.keys("*")) == ["other-app:setting", "pending_uploads"]
    assert await session.keys("*") == ["other-session"]
    assert report.keys_removed == 6
    # Enumerated names are filtered to sandbox databases
    assert databases.deleted == ["sandpack-bundler-cache"]
    assert report.databases == {"sandpack-bundler-cache": DeleteOutcome.success}
    assert report.used_fallback is False


@pytest.mark.asyncio
async def test_purge_all_falls_back_when_enumeration_raises(storage):
    databases = RecordingDatabases(list_error=RuntimeError("databases() unsupported"))

    report = await PurgeService(storage, databases).purge_all()

    assert report.used_fallback is True
    assert databases.deleted == list(WELL_KNOWN_SANDBOX_DBS)
    assert set(report.databases.values()) == {DeleteOutcome.success}


@pytest.mark.asyncio
async def test_purge_all_falls_back_when_enumeration_is_unavailable(storage):
    databases = DeleteOnlyDatabases()

    report = await PurgeService(storage, databases).purge_all()

    assert report.used_fallback is True
    assert databases.deleted == list(WELL_KNOWN_SANDBOX_DBS)


@pytest.mark.asyncio
async def test_one_database_outcome_never_aborts_the_batch(storage):
    databases = RecordingDatabases(
        names=["sandpack-a", "sandpack-b", "sandpack-c", "sandpack-d"],
        outcomes={
            "sandpack-a": DeleteOutcome.failure,
            "sandpack-b": DeleteOutcome.blocked,
            "sandpack-c": OSError("disk gone"),
        },
    )

    report = await PurgeService(storage, databases).purge_all()

    assert sorted(databases.deleted) == ["sandpack-a", "sandpack-b", "sandpack-c", "sandpack-d"]
    assert report.databases == {
        "sandpack-a": DeleteOutcome.failure,
        "sandpack-b": DeleteOutcome.blocked,
        "sandpack-c": DeleteOutcome.failure,
        "sandpack-d": DeleteOutcome.success,
    }
    assert sorted(report.failed_databases) == ["sandpack-a", "sandpack-b", "sandpack-c"]
