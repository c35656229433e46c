import asyncio
from collections.abc import Generator
from unittest.mock import AsyncMock

import httpx
import pytest

from tests.integration.fake_backend import FakeBackend
from univerify.config.settings import Settings
from univerify.services import Services, build_services
from univerify.session.session import Session


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def no_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def services(fake_backend: FakeBackend, no_sleep: AsyncMock) -> Generator[Services, None, None]:
    settings = Settings(api_base_url="http://backend.test", wallet_private_key="")
    built = build_services(
        settings,
        session=Session(),
        transport=httpx.MockTransport(fake_backend.handler),
        sleep=no_sleep,
    )
    yield built
    asyncio.run(built.aclose())
