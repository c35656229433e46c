from dataclasses import dataclass, field
from typing import Any

from univerify.api.models import BlockchainAnchor, DocumentOwner


@dataclass(frozen=True)
class DocumentSnapshot:
    """What a verification page shows about an anchored document."""

    id: str
    tx_id: str
    filename: str
    content_type: str
    size: int
    owner: DocumentOwner
    storage_url: str
    blockchain: BlockchainAnchor
    has_changed: bool
    uploaded_at: str = ""
    last_verified: str = ""
    verification_hash: str = ""
    requested_hash: str = ""
    arweave: dict[str, Any] = field(default_factory=dict)

    @property
    def hash_matches(self) -> bool | None:
        """Whether the hash from the verification link equals the backend's hash."""
        if not self.requested_hash or not self.verification_hash:
            return None
        return self.requested_hash.lower() == self.verification_hash.lower()


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a verification; failures are values, never exceptions."""

    is_valid: bool
    document: DocumentSnapshot | None = None
    error: str | None = None
