from urllib.parse import quote

from univerify.api.client import ApiClient
from univerify.api.exceptions import ApiError, AuthenticationRequiredError
from univerify.api.models import (
    AuthResult,
    DeleteResult,
    DocumentList,
    HealthStatus,
    ShareResult,
    TransactionRecord,
    UploadResult,
    VerificationRecord,
)
from univerify.api.parsers import (
    parse_auth,
    parse_delete,
    parse_document_list,
    parse_health,
    parse_share,
    parse_transaction,
    parse_upload,
    parse_verification,
)
from univerify.logging.logger import Log
from univerify.session.session import Session
from univerify.upload.models import DocumentFile


def _segment(value: str) -> str:
    return quote(value, safe="")


class ServerApi:
    """Typed wrapper with one method per backend endpoint."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    @property
    def session(self) -> Session:
        return self._client.session

    async def health_check(self) -> HealthStatus:
        return parse_health(await self._client.request("GET", "/health"))

    async def upload_file(
        self,
        file: DocumentFile,
        *,
        folder: str | None = None,
        description: str | None = None,
        wallet_address: str | None = None,
        signature: str | None = None,
        message: str | None = None,
    ) -> UploadResult:
        """Submit one file as multipart form data."""
        form: dict[str, str] = {}
        if signature is not None:
            form["signature"] = signature
        if message is not None:
            form["message"] = message
        if wallet_address is not None:
            form["walletAddress"] = wallet_address
        if folder:
            form["folder"] = folder
        if description:
            form["description"] = description

        payload = await self._client.request(
            "POST",
            "/api/upload/single",
            authenticated=True,
            auth_message="Authentication token is required for file upload",
            data=form,
            files={"file": (file.filename, file.content, file.content_type)},
        )
        return parse_upload(payload)

    async def get_transaction(self, transaction_hash: str) -> TransactionRecord:
        payload = await self._client.request(
            "GET",
            f"/api/upload/transaction/{_segment(transaction_hash)}",
            authenticated=True,
            auth_message="Authentication token is required for transaction details",
        )
        return parse_transaction(payload)

    async def verify_transaction(self, transaction_hash: str) -> bool:
        """Return True if the transaction is confirmed, False on any API failure."""
        try:
            record = await self.get_transaction(transaction_hash)
        except ApiError as exc:
            Log.warning(f"Transaction check for {transaction_hash} failed: {exc}")
            return False
        return record.is_confirmed

    async def delete_file(self, public_id: str) -> DeleteResult:
        payload = await self._client.request(
            "DELETE",
            f"/api/upload/file/{_segment(public_id)}",
            authenticated=True,
            auth_message="Authentication token is required for file deletion",
        )
        return parse_delete(payload)

    async def login(self, *, wallet_address: str, signature: str, message: str) -> AuthResult:
        payload = await self._client.request(
            "POST",
            "/api/auth/login",
            json={"walletAddress": wallet_address, "signature": signature, "message": message},
        )
        result = parse_auth(payload)
        self.session.set_auth(result.token, result.user)
        Log.info(f"Logged in as {result.user.wallet_address or result.user.id}")
        return result

    async def signup(
        self,
        *,
        wallet_address: str,
        signature: str,
        message: str,
        name: str,
        email: str,
    ) -> AuthResult:
        payload = await self._client.request(
            "POST",
            "/api/auth/signup",
            json={
                "walletAddress": wallet_address,
                "signature": signature,
                "message": message,
                "name": name,
                "email": email,
            },
        )
        result = parse_auth(payload)
        self.session.set_auth(result.token, result.user)
        Log.info(f"Signed up as {result.user.wallet_address or result.user.id}")
        return result

    def logout(self) -> None:
        self.session.clear()

    async def verify_document(self, tx_id: str) -> VerificationRecord:
        """Fetch the backend's verification record for a transaction id.

        Raises:
            ApiError: on an empty id, a ``success: false`` reply or any request failure.
        """
        if not tx_id:
            raise ApiError("Transaction ID is required for document verification", 400)
        payload = await self._client.request("GET", f"/api/arweave/verify/{_segment(tx_id)}")
        return parse_verification(payload)

    async def list_documents(self, wallet_address: str | None = None) -> DocumentList:
        """List documents owned by a wallet, defaulting to the session's account."""
        if not self.session.is_authenticated:
            raise AuthenticationRequiredError(
                "Authentication token is required to fetch documents"
            )
        if wallet_address is None:
            user = self.session.user
            wallet_address = user.wallet_address if user is not None else ""
        if not wallet_address:
            raise AuthenticationRequiredError("Wallet address not found")
        payload = await self._client.request(
            "GET",
            f"/api/arweave/documents/{_segment(wallet_address)}",
            authenticated=True,
        )
        return parse_document_list(payload)

    async def share_document(self, document_id: str, email: str) -> ShareResult:
        """Verify a document, then share it together with its verification hash."""
        if not self.session.is_authenticated:
            raise AuthenticationRequiredError(
                "Authentication token is required for document sharing"
            )
        record = await self.verify_document(document_id)
        payload = await self._client.request(
            "POST",
            "/api/arweave/share",
            authenticated=True,
            json={
                "documentId": document_id,
                "email": email,
                "txId": record.tx_id,
                "verificationHash": record.verification.hash,
            },
        )
        return parse_share(payload)
