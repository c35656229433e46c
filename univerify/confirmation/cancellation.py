import asyncio
from collections.abc import Awaitable, Callable

from univerify.api.exceptions import ConfirmationCancelledError

Sleep = Callable[[float], Awaitable[None]]


class CancellationToken:
    """Lets a caller abandon an in-flight confirmation wait."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ConfirmationCancelledError()

    async def sleep(self, seconds: float, sleep: Sleep = asyncio.sleep) -> None:
        """Run ``sleep(seconds)``, waking up early if the token is cancelled.

        Raises:
            ConfirmationCancelledError: if cancelled before or during the sleep.
        """
        self.raise_if_cancelled()
        napping = asyncio.ensure_future(sleep(seconds))
        watching = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({napping, watching}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            napping.cancel()
            watching.cancel()
        self.raise_if_cancelled()
        if napping.done() and not napping.cancelled():
            napping.result()
