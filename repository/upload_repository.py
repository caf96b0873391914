# repository/upload_repository.py
import time
from typing import Callable, List, Optional
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.settings import settings
from model.upload import PendingUpload
from repository.namespaces import PENDING_UPLOADS
import logging

logger = logging.getLogger(__name__)


class PendingUploadRepository:
    """
    Flow:
    - One Redis hash (field = upload id) tracks in-flight uploads so they can be resumed.
    - save() on start, update_progress() on each chunk, remove() on completion/cancel.
    - Entries untouched for `expiry_seconds` are expired and pruned on load().
    """

    def __init__(
        self,
        client: Redis,
        expiry_seconds: int = settings.UPLOAD_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._r = client
        self._expiry = int(expiry_seconds)
        self._clock = clock

    @staticmethod
    def _key() -> str:
        return PENDING_UPLOADS

    async def _get(self, upload_id: str) -> Optional[PendingUpload]:
        raw = await self._r.hget(self._key(), upload_id)
        if raw is None:
            return None
        try:
            return PendingUpload.model_validate_json(raw)
        except ValidationError:
            return None

    async def _put(self, upload: PendingUpload) -> None:
        await self._r.hset(self._key(), upload.id, upload.model_dump_json())

    async def save(
        self,
        *,
        bucket: str,
        path: str,
        file_name: str,
        file_size: int,
        uploaded_bytes: int = 0,
        total_bytes: int = 0,
    ) -> str:
        upload_id = PendingUpload.make_id(bucket, path)
        now = self._clock()
        try:
            existing = await self._get(upload_id)
            await self._put(
                PendingUpload(
                    id=upload_id,
                    file_name=file_name,
                    file_size=file_size,
                    bucket=bucket,
                    path=path,
                    uploaded_bytes=uploaded_bytes,
                    total_bytes=total_bytes or file_size,
                    created_at=existing.created_at if existing else now,
                    last_updated_at=now,
                )
            )
        except RedisError:
            logger.warning("upload.save.dropped id=%s", upload_id, exc_info=True)
        return upload_id

    async def update_progress(self, upload_id: str, uploaded_bytes: int) -> None:
        try:
            current = await self._get(upload_id)
            if current is None:
                return
            await self._put(
                current.model_copy(
                    update={
                        "uploaded_bytes": uploaded_bytes,
                        "last_updated_at": self._clock(),
                    }
                )
            )
        except RedisError:
            logger.warning("upload.progress.dropped id=%s", upload_id, exc_info=True)

    async def remove(self, upload_id: str) -> None:
        try:
            await self._r.hdel(self._key(), upload_id)
        except RedisError:
            logger.warning("upload.remove.dropped id=%s", upload_id, exc_info=True)

    async def clear_all(self) -> None:
        try:
            await self._r.delete(self._key())
        except RedisError:
            logger.warning("upload.clear.dropped", exc_info=True)

    def _expired(self, upload: PendingUpload, now: float) -> bool:
        return now - upload.last_updated_at >= self._expiry

    async def load(self) -> List[PendingUpload]:
        """
        Return live uploads (oldest first); expired or malformed entries are pruned.
        """
        try:
            raw = await self._r.hgetall(self._key())
        except RedisError:
            logger.warning("upload.load.miss", exc_info=True)
            return []

        now = self._clock()
        live: List[PendingUpload] = []
        stale: List[str] = []
        for field, payload in (raw or {}).items():
            try:
                upload = PendingUpload.model_validate_json(payload)
            except ValidationError:
                stale.append(field)
                continue
            if self._expired(upload, now):
                stale.append(field)
            else:
                live.append(upload)

        if stale:
            try:
                await self._r.hdel(self._key(), *stale)
            except RedisError:
                logger.warning("upload.prune.dropped count=%d", len(stale))
            logger.info("upload.pruned count=%d", len(stale))

        live.sort(key=lambda u: u.created_at)
        return live

    async def has_resumable(self) -> bool:
        return bool(await self.load())
