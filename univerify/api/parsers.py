"""Validates raw backend JSON and builds typed response records.

Every payload entering the client passes through one of the ``parse_*``
functions below, so nothing past the HTTP boundary deals with missing keys or
wrongly typed values.
"""

from typing import Any

from univerify.api.exceptions import ApiError, MalformedResponseError
from univerify.api.models import (
    AuthResult,
    AuthUser,
    BlockchainAnchor,
    BlockchainReceipt,
    DeleteResult,
    DocumentList,
    DocumentOwner,
    HealthStatus,
    ShareResult,
    StoredDocument,
    TransactionRecord,
    UploadedFile,
    UploadResult,
    UserInfo,
    VerificationData,
    VerificationRecord,
    VerifiedDocument,
)


def unwrap_envelope(payload: dict[str, Any], default_message: str) -> dict[str, Any]:
    """Return the ``data`` object of a ``{success, data}`` envelope.

    Raises:
        ApiError: (status 400) when the backend reports ``success: false``.
        MalformedResponseError: when the envelope itself is malformed.
    """
    success = payload.get("success")
    if success is not True:
        if success is False:
            raise ApiError(_failure_message(payload, default_message), 400, payload)
        raise MalformedResponseError("'success' must be a boolean")
    return _require_object(payload.get("data"), "data")


def parse_health(payload: dict[str, Any]) -> HealthStatus:
    return HealthStatus(
        status=_require_str(payload, "status", ""),
        version=_optional_str(payload, "version", ""),
        timestamp=_optional_int(payload, "timestamp", ""),
    )


def parse_upload(payload: dict[str, Any]) -> UploadResult:
    data = unwrap_envelope(payload, "File upload failed")
    raw_file = _require_object(data.get("file"), "data.file")
    raw_chain = _require_object(data.get("blockchain"), "data.blockchain")
    user_info = _optional_object(raw_file.get("user_info"), "data.file.user_info")
    uploaded = UploadedFile(
        id=_require_str(raw_file, "id", "data.file"),
        original_name=_require_str(raw_file, "original_name", "data.file"),
        size=_require_int(raw_file, "size", "data.file"),
        url=_require_str(raw_file, "url", "data.file"),
        uploaded_by=_optional_str(raw_file, "uploaded_by", "data.file"),
        user_info=UserInfo(
            email=_optional_str(user_info, "email", "data.file.user_info"),
            name=_optional_str(user_info, "name", "data.file.user_info"),
            provider=_optional_str(user_info, "provider", "data.file.user_info"),
        ),
    )
    receipt = BlockchainReceipt(
        transaction_hash=_require_str(raw_chain, "transaction_hash", "data.blockchain"),
        block_number=_optional_int(raw_chain, "block_number", "data.blockchain"),
        status=_optional_str(raw_chain, "status", "data.blockchain"),
        timestamp=_optional_int(raw_chain, "timestamp", "data.blockchain"),
    )
    return UploadResult(file=uploaded, blockchain=receipt)


def parse_transaction(payload: dict[str, Any]) -> TransactionRecord:
    data = unwrap_envelope(payload, "Transaction lookup failed")
    raw = _require_object(data.get("transaction"), "data.transaction")
    return TransactionRecord(
        hash=_require_str(raw, "hash", "data.transaction"),
        block_number=_optional_int(raw, "blockNumber", "data.transaction"),
        status=_require_str(raw, "status", "data.transaction"),
        timestamp=_optional_int(raw, "timestamp", "data.transaction"),
    )


def parse_delete(payload: dict[str, Any]) -> DeleteResult:
    data = unwrap_envelope(payload, "File deletion failed")
    return DeleteResult(
        deleted=_require_bool(data, "deleted", "data"),
        public_id=_require_str(data, "public_id", "data"),
    )


def parse_auth(payload: dict[str, Any]) -> AuthResult:
    data = unwrap_envelope(payload, "Authentication failed")
    raw_user = _require_object(data.get("user"), "data.user")
    token = _require_str(data, "token", "data")
    if not token:
        raise MalformedResponseError("'data.token' must be a non-empty string")
    user = AuthUser(
        id=_require_str(raw_user, "id", "data.user"),
        email=_optional_str(raw_user, "email", "data.user"),
        name=_optional_str(raw_user, "name", "data.user"),
        wallet_address=_optional_str(raw_user, "wallet_address", "data.user"),
    )
    return AuthResult(token=token, user=user)


def parse_verification(payload: dict[str, Any]) -> VerificationRecord:
    data = unwrap_envelope(payload, "Verification failed")
    raw_doc = _require_object(data.get("document"), "data.document")
    raw_owner = _require_object(raw_doc.get("owner"), "data.document.owner")
    raw_chain = _optional_object(data.get("blockchain"), "data.blockchain")
    raw_verification = _require_object(data.get("verification"), "data.verification")
    arweave = _optional_object(data.get("arweave"), "data.arweave")

    document = VerifiedDocument(
        filename=_require_str(raw_doc, "filename", "data.document"),
        content_type=_optional_str(raw_doc, "contentType", "data.document"),
        size=_optional_int(raw_doc, "size", "data.document"),
        owner=DocumentOwner(
            address=_require_str(raw_owner, "address", "data.document.owner"),
            name=_optional_str(raw_owner, "name", "data.document.owner"),
            email=_optional_str(raw_owner, "email", "data.document.owner"),
        ),
        uploaded_at=_optional_str(raw_doc, "uploadedAt", "data.document"),
        has_changed=_optional_bool(raw_doc, "hasChanged", "data.document"),
        last_verified=_optional_str(raw_doc, "lastVerified", "data.document"),
    )
    return VerificationRecord(
        tx_id=_require_str(data, "txId", "data"),
        document=document,
        blockchain=_build_anchor(raw_chain),
        verification=VerificationData(
            hash=_optional_str(raw_verification, "hash", "data.verification"),
            has_changed=_require_bool(raw_verification, "hasChanged", "data.verification"),
            verified_at=_optional_str(raw_verification, "verifiedAt", "data.verification"),
        ),
        arweave=dict(arweave),
        message=_optional_str(data, "message", "data"),
    )


def parse_document_list(payload: dict[str, Any]) -> DocumentList:
    data = unwrap_envelope(payload, "Failed to fetch documents")
    raw_documents = data.get("documents", [])
    if not isinstance(raw_documents, list):
        raise MalformedResponseError("'data.documents' must be a list")
    documents = [_build_stored_document(item, i) for i, item in enumerate(raw_documents)]
    total = data.get("totalDocuments", len(documents))
    if not _is_number(total):
        raise MalformedResponseError("'data.totalDocuments' must be a number")
    return DocumentList(
        user_address=_optional_str(data, "userAddress", "data"),
        documents=documents,
        total_documents=int(total),
    )


def parse_share(payload: dict[str, Any]) -> ShareResult:
    success = payload.get("success")
    if not isinstance(success, bool):
        raise MalformedResponseError("'success' must be a boolean")
    message = payload.get("message", "")
    return ShareResult(success=success, message=message if isinstance(message, str) else "")


def _build_anchor(raw: dict[str, Any]) -> BlockchainAnchor:
    path = "data.blockchain"
    return BlockchainAnchor(
        transaction_hash=_optional_str(raw, "transactionHash", path),
        block_number=_optional_int(raw, "blockNumber", path),
        block_hash=_optional_str(raw, "blockHash", path),
        contract_address=_optional_str(raw, "contractAddress", path),
        gas_used=_optional_int(raw, "gasUsed", path),
        status=_optional_str(raw, "status", path),
        confirmations=_optional_int(raw, "confirmations", path),
        timestamp=_optional_int(raw, "timestamp", path),
    )


def _build_stored_document(raw: Any, index: int) -> StoredDocument:
    path = f"data.documents[{index}]"
    item = _require_object(raw, path)
    tx_id = _require_str(item, "txId", path)
    return StoredDocument(
        id=_optional_str(item, "id", path) or tx_id,
        tx_id=tx_id,
        filename=_require_str(item, "filename", path),
        content_type=_optional_str(item, "contentType", path),
        size=_optional_int(item, "size", path),
        uploaded_at=_optional_str(item, "uploadedAt", path),
        has_changed=_optional_bool(item, "hasChanged", path),
        last_verified=_optional_str(item, "lastVerified", path),
    )


def _failure_message(payload: dict[str, Any], default: str) -> str:
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return default


def _qualified(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _require_object(raw: Any, path: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"'{path}' must be an object")
    return raw


def _optional_object(raw: Any, path: str) -> dict[str, Any]:
    if raw is None:
        return {}
    return _require_object(raw, path)


def _require_str(raw: dict[str, Any], key: str, path: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise MalformedResponseError(f"'{_qualified(path, key)}' must be a string")
    return value


def _optional_str(raw: dict[str, Any], key: str, path: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedResponseError(f"'{_qualified(path, key)}' must be a string or null")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_int(raw: dict[str, Any], key: str, path: str) -> int:
    value = raw.get(key)
    if not _is_number(value):
        raise MalformedResponseError(f"'{_qualified(path, key)}' must be a number")
    return int(value)


def _optional_int(raw: dict[str, Any], key: str, path: str) -> int:
    if raw.get(key) is None:
        return 0
    return _require_int(raw, key, path)


def _require_bool(raw: dict[str, Any], key: str, path: str) -> bool:
    value = raw.get(key)
    if not isinstance(value, bool):
        raise MalformedResponseError(f"'{_qualified(path, key)}' must be a boolean")
    return value


def _optional_bool(raw: dict[str, Any], key: str, path: str) -> bool:
    if raw.get(key) is None:
        return False
    return _require_bool(raw, key, path)
