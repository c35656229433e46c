import asyncio
from collections.abc import Callable
from functools import partial

from univerify.api.exceptions import AuthenticationRequiredError, FileValidationError
from univerify.api.models import UploadResult
from univerify.api.server_api import ServerApi
from univerify.confirmation.cancellation import CancellationToken
from univerify.confirmation.poller import ConfirmationPoller
from univerify.logging.logger import Log
from univerify.upload.models import DocumentFile, UploadPhase, UploadPolicy, UploadProgress
from univerify.upload.progress import ProgressCallback, UploadProgressTracker
from univerify.upload.validator import validate_file
from univerify.wallet.base import WalletSigner
from univerify.wallet.messages import upload_consent_message

BatchProgressCallback = Callable[[DocumentFile, UploadProgress], None]


class UploadOrchestrator:
    """Validate -> upload -> wait for blockchain confirmation."""

    def __init__(
        self,
        api: ServerApi,
        poller: ConfirmationPoller,
        policy: UploadPolicy,
        *,
        signer: WalletSigner | None = None,
        progress_reset_seconds: float = 0,
    ) -> None:
        self._api = api
        self._poller = poller
        self._policy = policy
        self._signer = signer
        self._progress_reset_seconds = progress_reset_seconds
        self._resets: set[asyncio.Task[UploadProgress]] = set()

    async def upload_file(
        self,
        file: DocumentFile,
        *,
        folder: str | None = None,
        description: str | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> UploadResult:
        """Upload one file and wait until its transaction is confirmed.

        Sends exactly one upload request; only the confirmation lookups are
        retried. Every failure is reported through ``on_progress`` as an
        error state and then re-raised. When ``progress_reset_seconds`` is
        positive, the reported state returns to idle after that delay.
        """
        tracker = UploadProgressTracker(on_progress)
        try:
            result = await self._run(tracker, file, folder, description, cancel_token)
        except Exception as exc:
            Log.error(f"Upload of {file.filename} failed: {exc}")
            tracker.fail(str(exc))
            self._schedule_reset(tracker, on_progress)
            raise
        self._schedule_reset(tracker, on_progress)
        return result

    async def upload_files(
        self,
        files: list[DocumentFile],
        *,
        folder: str | None = None,
        description: str | None = None,
        on_progress: BatchProgressCallback | None = None,
    ) -> list[UploadResult]:
        """Upload several files concurrently.

        Every file is validated before any request is sent. The first failure
        cancels the uploads still in flight and then propagates.
        """
        if not self._api.session.is_authenticated:
            raise AuthenticationRequiredError("Authentication token is required for file upload")
        for file in files:
            try:
                validate_file(file, self._policy)
            except FileValidationError as exc:
                Log.error(f"Upload of {file.filename} failed: {exc}")
                if on_progress is not None:
                    UploadProgressTracker(partial(on_progress, file)).fail(str(exc))
                raise

        uploads = [
            asyncio.ensure_future(
                self.upload_file(
                    file,
                    folder=folder,
                    description=description,
                    on_progress=partial(on_progress, file) if on_progress is not None else None,
                )
            )
            for file in files
        ]
        try:
            return list(await asyncio.gather(*uploads))
        except Exception:
            for upload in uploads:
                upload.cancel()
            await asyncio.gather(*uploads, return_exceptions=True)
            raise

    def _schedule_reset(
        self, tracker: UploadProgressTracker, on_progress: ProgressCallback | None
    ) -> None:
        if on_progress is None or self._progress_reset_seconds <= 0:
            return
        reset = asyncio.ensure_future(tracker.reset_after(self._progress_reset_seconds))
        self._resets.add(reset)
        reset.add_done_callback(self._resets.discard)

    async def _run(
        self,
        tracker: UploadProgressTracker,
        file: DocumentFile,
        folder: str | None,
        description: str | None,
        cancel_token: CancellationToken | None,
    ) -> UploadResult:
        tracker.update(UploadPhase.UPLOADING, 10, "Validating file...")
        validate_file(file, self._policy)
        if not self._api.session.is_authenticated:
            raise AuthenticationRequiredError("Authentication token is required for file upload")

        wallet_address = signature = message = None
        if self._signer is not None:
            wallet_address = self._signer.address
            message = upload_consent_message(wallet_address)
            signature = await self._signer.sign_message(message)

        tracker.update(UploadPhase.UPLOADING, 30, "Uploading file to server...")
        Log.info(f"Uploading {file.filename} ({file.size} bytes)")
        result = await self._api.upload_file(
            file,
            folder=folder,
            description=description,
            wallet_address=wallet_address,
            signature=signature,
            message=message,
        )

        transaction_hash = result.blockchain.transaction_hash
        tracker.update(
            UploadPhase.CONFIRMING,
            60,
            "Confirming blockchain transaction...",
            transaction_hash=transaction_hash,
        )
        await self._poller.wait_for_confirmation(transaction_hash, cancel_token=cancel_token)

        tracker.update(
            UploadPhase.COMPLETED,
            100,
            "File uploaded successfully!",
            transaction_hash=transaction_hash,
        )
        Log.info(f"Upload of {file.filename} confirmed in transaction {transaction_hash}")
        return result
