import asyncio
from collections.abc import Callable

from univerify.upload.models import UploadPhase, UploadProgress

ProgressCallback = Callable[[UploadProgress], None]


class UploadProgressTracker:
    """Holds the progress of one upload attempt and forwards every change.

    Progress never decreases within an attempt; only ``reset`` brings it back
    to zero. An error state keeps the progress reached before the failure.
    """

    def __init__(self, on_progress: ProgressCallback | None = None) -> None:
        self._on_progress = on_progress
        self._current = UploadProgress()

    @property
    def current(self) -> UploadProgress:
        return self._current

    def update(
        self,
        phase: UploadPhase,
        progress: int,
        message: str,
        transaction_hash: str | None = None,
    ) -> UploadProgress:
        if phase in (UploadPhase.ERROR, UploadPhase.IDLE):
            raise ValueError(f"Use fail() or reset() to enter the {phase.value} phase")
        if not 0 <= progress <= 100:
            raise ValueError(f"Progress must be within 0..100, got {progress}")
        if progress < self._current.progress:
            raise ValueError(
                f"Progress cannot decrease from {self._current.progress} to {progress}"
            )
        return self._emit(
            UploadProgress(
                phase=phase,
                progress=progress,
                message=message,
                transaction_hash=transaction_hash or self._current.transaction_hash,
            )
        )

    def fail(self, error: str, message: str = "Upload failed") -> UploadProgress:
        return self._emit(
            UploadProgress(
                phase=UploadPhase.ERROR,
                progress=self._current.progress,
                message=message,
                transaction_hash=self._current.transaction_hash,
                error=error,
            )
        )

    def reset(self) -> UploadProgress:
        return self._emit(UploadProgress())

    async def reset_after(self, seconds: float) -> UploadProgress:
        """Reset to idle once a finished upload has been displayed long enough."""
        await asyncio.sleep(seconds)
        return self.reset()

    def _emit(self, state: UploadProgress) -> UploadProgress:
        self._current = state
        if self._on_progress is not None:
            self._on_progress(state)
        return state
