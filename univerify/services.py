import asyncio
from dataclasses import dataclass
from pathlib import Path

import httpx

from univerify.api.client import ApiClient
from univerify.api.server_api import ServerApi
from univerify.config.settings import Settings
from univerify.confirmation.cancellation import Sleep
from univerify.confirmation.poller import ConfirmationPoller
from univerify.session.session import Session
from univerify.session.token_store import TokenStore
from univerify.upload.orchestrator import UploadOrchestrator
from univerify.upload.validator import policy_from_settings
from univerify.verification.resolver import VerificationResolver
from univerify.wallet.base import WalletSigner
from univerify.wallet.factory import WalletSignerFactory


@dataclass
class Services:
    """Everything a client front end needs, wired from one Settings object."""

    settings: Settings
    session: Session
    client: ApiClient
    api: ServerApi
    poller: ConfirmationPoller
    orchestrator: UploadOrchestrator
    resolver: VerificationResolver
    signer: WalletSigner | None = None

    async def aclose(self) -> None:
        await self.client.aclose()


def build_services(
    settings: Settings,
    *,
    session: Session | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sleep: Sleep = asyncio.sleep,
    max_size_bytes: int | None = None,
) -> Services:
    """Build the client stack: session -> HTTP layer -> workflow components."""
    if session is None:
        session = Session.load(TokenStore(Path(settings.token_store_path)))
    client = ApiClient(
        base_url=settings.api_base_url,
        session=session,
        timeout_seconds=settings.request_timeout_seconds,
        transport=transport,
    )
    api = ServerApi(client)
    poller = ConfirmationPoller(
        api,
        max_retries=settings.confirmation_max_retries,
        delay_ms=settings.confirmation_delay_ms,
        sleep=sleep,
    )
    signer = WalletSignerFactory.create(settings)
    orchestrator = UploadOrchestrator(
        api,
        poller,
        policy_from_settings(settings, max_size_bytes),
        signer=signer,
        progress_reset_seconds=settings.progress_reset_seconds,
    )
    return Services(
        settings=settings,
        session=session,
        client=client,
        api=api,
        poller=poller,
        orchestrator=orchestrator,
        resolver=VerificationResolver(api),
        signer=signer,
    )
