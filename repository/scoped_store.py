# repository/scoped_store.py
from typing import Any, Optional, TypeVar
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from repository.namespaces import scoped_key
from util.errors import StorageReadError, StorageWriteError
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ANY = TypeAdapter(Any)


class ScopedStore:
    """
    Flow:
    - Every key goes through scoped_key(key, project_id), so projects never share entries.
    - Values are JSON; pass `type_` to get() to validate back into models.
    - get() never raises: malformed or unreadable entries are a cache miss.
    - set()/delete() failures are logged and dropped; the remote side is authoritative.
    """

    def __init__(self, client: Redis, ttl_seconds: Optional[int] = None) -> None:
        self._r = client
        self._ttl = int(ttl_seconds) if ttl_seconds else None

    @staticmethod
    def _key(key: str, project_id: Optional[str]) -> str:
        return scoped_key(key, project_id)

    async def _read(self, raw_key: str, type_: Any) -> Any:
        try:
            raw = await self._r.get(raw_key)
        except RedisError as e:
            raise StorageReadError(f"backend read failed: {e}", key=raw_key) from e
        except UnicodeDecodeError as e:
            # decode_responses clients choke on bytes a foreign writer left behind
            raise StorageReadError("undeserializable entry", key=raw_key) from e
        if raw is None:
            return None
        adapter = TypeAdapter(type_) if type_ is not None else _ANY
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageReadError("undeserializable entry", key=raw_key) from e

    async def get(
        self,
        key: str,
        default: T,
        project_id: Optional[str] = None,
        type_: Any = None,
    ) -> T:
        raw_key = self._key(key, project_id)
        try:
            value = await self._read(raw_key, type_)
        except StorageReadError as e:
            logger.warning("store.read.miss key=%s reason=%s", raw_key, e.message)
            return default
        return default if value is None else value

    async def set(self, key: str, value: Any, project_id: Optional[str] = None) -> None:
        raw_key = self._key(key, project_id)
        try:
            try:
                payload = _ANY.dump_json(value)
            except PydanticSerializationError as e:
                raise StorageWriteError("unserializable value", key=raw_key) from e
            try:
                await self._r.set(raw_key, payload, ex=self._ttl)
            except RedisError as e:
                raise StorageWriteError(f"backend write failed: {e}", key=raw_key) from e
        except StorageWriteError as e:
            logger.warning("store.write.dropped key=%s reason=%s", raw_key, e.message)

    async def delete(self, key: str, project_id: Optional[str] = None) -> bool:
        raw_key = self._key(key, project_id)
        try:
            return bool(await self._r.delete(raw_key))
        except RedisError:
            logger.warning("store.delete.dropped key=%s", raw_key, exc_info=True)
            return False
