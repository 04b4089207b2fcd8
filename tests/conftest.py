# ruff: noqa: E402
from __future__ import annotations

from concurrent import futures
from pathlib import Path
from typing import AsyncIterator, Iterator
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import grpc
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from grpc_helpers import TrojanGoServer

from trojan_go_exporter.core.collector import TrojanGoCollector
from trojan_go_exporter.core.config import Settings
from trojan_go_exporter.main import create_app
from trojan_go_exporter.models.user_status import Speed, UserStatus


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


class FakeClient:
    """Stand-in for TrojanGoClient returning canned users or raising."""

    def __init__(self, users: list[UserStatus] | None = None):
        self.users = list(users or [])
        self.error: Exception | None = None
        self.calls = 0

    def list_users(self) -> list[UserStatus]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.users)


@pytest.fixture()
def fake_client() -> FakeClient:
    return FakeClient(
        [
            UserStatus("abc", 100, 200),
            UserStatus("def", 300, 400, Speed(upload=10, download=20)),
        ]
    )


@pytest.fixture()
def collector(fake_client: FakeClient) -> TrojanGoCollector:
    return TrojanGoCollector(fake_client)


@pytest.fixture()
def fastapi_app(collector: TrojanGoCollector) -> FastAPI:
    return create_app(Settings(_env_file=None), collector=collector)


@pytest.fixture()
async def client(fastapi_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as test_client:
        yield test_client


@pytest.fixture()
def trojan_go_server() -> Iterator[TrojanGoServer]:
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=4))
    port = server.add_insecure_port("127.0.0.1:0")
    fake = TrojanGoServer(endpoint=f"127.0.0.1:{port}", server=server)
    server.add_generic_rpc_handlers((fake.generic_handler(),))
    server.start()
    try:
        yield fake
    finally:
        server.stop(grace=None)
