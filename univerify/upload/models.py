from dataclasses import dataclass, field
from enum import Enum


class UploadPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    CONFIRMING = "confirming"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class UploadProgress:
    """Snapshot of an upload's progress, emitted on every phase change."""

    phase: UploadPhase = UploadPhase.IDLE
    progress: int = 0
    message: str = ""
    transaction_hash: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class DocumentFile:
    """A local file ready to be uploaded."""

    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadPolicy:
    """Caller-supplied limits checked before any upload request is sent."""

    max_size_bytes: int
    allowed_types: frozenset[str] = field(default_factory=frozenset)
