from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, List

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from proving_service.app import create_app
from proving_service.config import Settings

from .samples import ASSEMBLY_LINES, ASSEMBLY_TEXT, FakeBackend


# ----------------------------
# Settings & application
# ----------------------------
@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        log_level="WARNING",
        log_format="console",
        prover_backend=None,
        proving_key_path=tmp_path / "proving_key",
        verifying_key_path=tmp_path / "verifying_key",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def app(settings: Settings, backend: FakeBackend) -> FastAPI:
    return create_app(settings, backend=backend)


@pytest.fixture
def app_without_backend(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest_asyncio.fixture
async def aclient(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the ASGI app; no server is started."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def bare_client(app_without_backend: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app_without_backend)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def assembly_text() -> str:
    return ASSEMBLY_TEXT


@pytest.fixture
def assembly_lines() -> List[str]:
    return list(ASSEMBLY_LINES)
