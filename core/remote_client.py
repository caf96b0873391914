# core/remote_client.py
import asyncio
from pydantic import ValidationError
from typing import Any, Dict, List, Optional
import httpx
from config.settings import settings
from model.project import RemoteSource
from util.constants import RemoteURIs
from util.errors import RemoteFetchError
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


class RemoteProjectClient:
    """
    Read-only view of the authoritative project database (PostgREST style API).

    `fetch_source` issues the project-row read and the latest-snapshot read in
    parallel; either failing fails the whole call.
    """

    def __init__(
        self,
        base_url: str = settings.REMOTE_API_URL,
        api_key: str = settings.REMOTE_API_KEY,
        timeout: float = settings.REMOTE_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _get_rows(
        self, client: httpx.AsyncClient, path: str, params: Dict[str, str]
    ) -> List[Dict[str, Any]]:
        try:
            r = await client.get(path, params=params)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise RemoteFetchError(
                f"remote returned {e.response.status_code} for {path}"
            ) from e
        except httpx.RequestError as e:
            raise RemoteFetchError(f"remote request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise RemoteFetchError(f"remote sent malformed JSON for {path}") from e
        if not isinstance(data, list):
            raise RemoteFetchError(f"remote sent a non-list payload for {path}")
        return data

    async def fetch_project_row(
        self, client: httpx.AsyncClient, project_id: str
    ) -> Dict[str, Any]:
        rows = await self._get_rows(
            client,
            RemoteURIs.PROJECTS,
            {"id": f"eq.{project_id}", "select": "id,is_broken,last_success_at"},
        )
        if not rows:
            # Deleted elsewhere: nothing authoritative to restore.
            raise RemoteFetchError(f"project {project_id} not found")
        return rows[0]

    async def fetch_latest_code(
        self, client: httpx.AsyncClient, project_id: str
    ) -> str:
        rows = await self._get_rows(
            client,
            RemoteURIs.MESSAGES,
            {
                "project_id": f"eq.{project_id}",
                "code_snapshot": "not.is.null",
                "select": "code_snapshot,created_at",
                "order": "created_at.desc",
                "limit": "1",
            },
        )
        if not rows:
            return ""
        code = rows[0].get("code_snapshot")
        return code if isinstance(code, str) else ""

    async def fetch_source(self, project_id: str) -> RemoteSource:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers(),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            with timed(logger, "remote.fetch", project=project_id):
                # Wait for both reads before surfacing either failure.
                row, code = await asyncio.gather(
                    self.fetch_project_row(client, project_id),
                    self.fetch_latest_code(client, project_id),
                    return_exceptions=True,
                )
        for result in (row, code):
            if isinstance(result, BaseException):
                raise result

        try:
            remote = RemoteSource(
                source=code,
                is_broken=bool(row.get("is_broken")),
                last_success_at=row.get("last_success_at") or None,
            )
        except ValidationError as e:
            raise RemoteFetchError(
                f"bad project row for project {project_id}"
            ) from e

        logger.info(
            "remote.fetch.ok project=%s chars=%d broken=%s",
            project_id,
            len(code),
            remote.is_broken,
        )
        return remote
