import sys
from pathlib import Path

import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

ROOT = Path(__file__).resolve().parents[1]
for p in (ROOT, ROOT / "tests"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config.cache import StorageContext  # noqa: E402
from utils import RecordingDatabases  # noqa: E402


@pytest.fixture
def durable():
    return FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def session():
    return FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def storage(durable, session):
    return StorageContext(durable, session, session_ttl_seconds=60)


@pytest.fixture
def databases():
    return RecordingDatabases(names=["sandpack-bundler-cache", "my-app-db"])
