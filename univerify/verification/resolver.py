from univerify.api.exceptions import ApiError
from univerify.api.models import VerificationRecord
from univerify.api.server_api import ServerApi
from univerify.logging.logger import Log
from univerify.verification.models import DocumentSnapshot, VerificationResult

DEFAULT_FAILURE_MESSAGE = "Verification failed"


class VerificationResolver:
    """Checks a document against its on-chain record.

    The transaction id is the lookup key. The hash carried by a verification
    link is kept on the snapshot for display and comparison; the backend's
    own drift check decides ``has_changed``. Needs no auth token.
    """

    def __init__(self, api: ServerApi) -> None:
        self._api = api

    async def verify_document(self, document_id: str, document_hash: str) -> VerificationResult:
        """Resolve a document; every failure becomes an invalid result."""
        try:
            record = await self._api.verify_document(document_id)
        except ApiError as exc:
            Log.warning(f"Verification of {document_id or '<empty>'} failed: {exc.message}")
            return VerificationResult(
                is_valid=False, error=exc.message or DEFAULT_FAILURE_MESSAGE
            )
        except Exception as exc:
            Log.error(f"Unexpected verification failure for {document_id}: {exc}")
            return VerificationResult(is_valid=False, error=str(exc) or DEFAULT_FAILURE_MESSAGE)

        snapshot = self._snapshot(record, document_hash)
        if snapshot.has_changed:
            Log.warning(f"Document {record.tx_id} changed since upload")
        else:
            Log.info(f"Document {record.tx_id} verified")
        return VerificationResult(is_valid=True, document=snapshot)

    @staticmethod
    def _snapshot(record: VerificationRecord, requested_hash: str) -> DocumentSnapshot:
        storage_url = record.arweave.get("url")
        return DocumentSnapshot(
            id=record.tx_id,
            tx_id=record.tx_id,
            filename=record.document.filename,
            content_type=record.document.content_type,
            size=record.document.size,
            owner=record.document.owner,
            storage_url=storage_url if isinstance(storage_url, str) else "",
            blockchain=record.blockchain,
            has_changed=record.verification.has_changed,
            uploaded_at=record.document.uploaded_at,
            last_verified=record.verification.verified_at,
            verification_hash=record.verification.hash,
            requested_hash=requested_hash,
            arweave=record.arweave,
        )
