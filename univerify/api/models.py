from dataclasses import dataclass, field
from typing import Any

CONFIRMED_STATUS = "0x1"


@dataclass(frozen=True)
class HealthStatus:
    """Backend health report."""

    status: str
    version: str = ""
    timestamp: int = 0

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class UserInfo:
    """Uploader identity attached to a stored file."""

    email: str = ""
    name: str = ""
    provider: str = ""


@dataclass(frozen=True)
class UploadedFile:
    """File metadata returned by the upload endpoint."""

    id: str
    original_name: str
    size: int
    url: str
    uploaded_by: str
    user_info: UserInfo = field(default_factory=UserInfo)


@dataclass(frozen=True)
class BlockchainReceipt:
    """Blockchain metadata returned by the upload endpoint."""

    transaction_hash: str
    block_number: int
    status: str
    timestamp: int


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one successful upload."""

    file: UploadedFile
    blockchain: BlockchainReceipt


@dataclass(frozen=True)
class TransactionRecord:
    """Blockchain transaction as reported by the backend."""

    hash: str
    block_number: int
    status: str
    timestamp: int

    @property
    def is_confirmed(self) -> bool:
        return self.status == CONFIRMED_STATUS


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a file deletion."""

    deleted: bool
    public_id: str


@dataclass(frozen=True)
class AuthUser:
    """Account returned by login and signup."""

    id: str
    email: str = ""
    name: str = ""
    wallet_address: str = ""


@dataclass(frozen=True)
class AuthResult:
    """Bearer token and account returned by login and signup."""

    token: str
    user: AuthUser


@dataclass(frozen=True)
class DocumentOwner:
    """Wallet owner of an anchored document."""

    address: str
    name: str = ""
    email: str = ""


@dataclass(frozen=True)
class BlockchainAnchor:
    """On-chain record that anchors a document hash."""

    transaction_hash: str = ""
    block_number: int = 0
    block_hash: str = ""
    contract_address: str = ""
    gas_used: int = 0
    status: str = ""
    confirmations: int = 0
    timestamp: int = 0


@dataclass(frozen=True)
class VerifiedDocument:
    """Document block of a verification response."""

    filename: str
    content_type: str
    size: int
    owner: DocumentOwner
    uploaded_at: str = ""
    has_changed: bool = False
    last_verified: str = ""


@dataclass(frozen=True)
class VerificationData:
    """Backend drift check: current content hash vs. the anchored one."""

    hash: str = ""
    has_changed: bool = False
    verified_at: str = ""


@dataclass(frozen=True)
class VerificationRecord:
    """Full response of the document verification endpoint."""

    tx_id: str
    document: VerifiedDocument
    blockchain: BlockchainAnchor
    verification: VerificationData
    arweave: dict[str, Any] = field(default_factory=dict)
    message: str = ""


@dataclass(frozen=True)
class StoredDocument:
    """One entry of a user's document listing."""

    id: str
    tx_id: str
    filename: str
    content_type: str = ""
    size: int = 0
    uploaded_at: str = ""
    has_changed: bool = False
    last_verified: str = ""


@dataclass(frozen=True)
class DocumentList:
    """Documents owned by a wallet address."""

    user_address: str
    documents: list[StoredDocument] = field(default_factory=list)
    total_documents: int = 0


@dataclass(frozen=True)
class ShareResult:
    """Outcome of sharing a document with an email address."""

    success: bool
    message: str = ""
