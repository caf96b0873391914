from datetime import datetime, timezone

import httpx
import pytest

from core.remote_client import RemoteProjectClient
from util.constants import RemoteURIs
from util.errors import RemoteFetchError


def _client(handler, **kwargs):
    return RemoteProjectClient(
        base_url="https://db.example.test",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _router(project_rows, message_rows, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == RemoteURIs.PROJECTS:
            return project_rows if isinstance(project_rows, httpx.Response) else httpx.Response(200, json=project_rows)
        if request.url.path == RemoteURIs.MESSAGES:
            return message_rows if isinstance(message_rows, httpx.Response) else httpx.Response(200, json=message_rows)
        return httpx.Response(404)

    return handler


@pytest.mark.asyncio
async def test_fetch_source_combines_both_reads():
    seen = []
    handler = _router(
        [{"id": "p1", "is_broken": True, "last_success_at": "2025-01-02T03:04:05+00:00"}],
        [{"code_snapshot": "export default function App() {}", "created_at": "x"}],
        seen,
    )

    result = await _client(handler).fetch_source("p1")

    assert result.source == "export default function App() {}"
    assert result.is_broken is True
    assert result.last_success_at == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert len(seen) == 2
    assert all(r.headers["apikey"] == "anon-key" for r in seen)
    projects = next(r for r in seen if r.url.path == RemoteURIs.PROJECTS)
    assert projects.url.params["id"] == "eq.p1"


@pytest.mark.asyncio
async def test_project_without_snapshot_has_empty_source():
    handler = _router([{"id": "p1", "is_broken": False, "last_success_at": None}], [])

    result = await _client(handler).fetch_source("p1")

    assert result.source == ""
    assert result.last_success_at is None


@pytest.mark.asyncio
async def test_missing_project_row_is_a_fetch_error():
    handler = _router([], [{"code_snapshot": "x"}])

    with pytest.raises(RemoteFetchError):
        await _client(handler).fetch_source("gone")


@pytest.mark.asyncio
async def test_either_read_failing_fails_the_call():
    handler = _router(
        [{"id": "p1", "is_broken": False, "last_success_at": None}],
        httpx.Response(500, json={"message": "boom"}),
    )

    with pytest.raises(RemoteFetchError) as err:
        await _client(handler).fetch_source("p1")
    assert "500" in str(err.value)


@pytest.mark.asyncio
async def test_transport_errors_are_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RemoteFetchError):
        await _client(handler).fetch_source("p1")


@pytest.mark.asyncio
async def test_non_list_payload_is_rejected():
    handler = _router({"oops": True}, [])

    with pytest.raises(RemoteFetchError):
        await _client(handler).fetch_source("p1")


@pytest.mark.asyncio
async def test_postgres_timestamps_with_z_suffix_are_accepted():
    handler = _router(
        [{"id": "p1", "is_broken": False, "last_success_at": "2025-01-02T03:04:05.12345Z"}],
        [{"code_snapshot": "function Home() {}"}],
    )

    result = await _client(handler).fetch_source("p1")

    assert result.last_success_at == datetime(
        2025, 1, 2, 3, 4, 5, 123450, tzinfo=timezone.utc
    )


@pytest.mark.asyncio
async def test_unparseable_timestamp_is_a_fetch_error():
    handler = _router(
        [{"id": "p1", "is_broken": False, "last_success_at": "last tuesday"}],
        [],
    )

    with pytest.raises(RemoteFetchError):
        await _client(handler).fetch_source("p1")
