import asyncio

from univerify.api.exceptions import ConfirmationTimeoutError
from univerify.api.models import TransactionRecord
from univerify.api.server_api import ServerApi
from univerify.confirmation.cancellation import CancellationToken, Sleep
from univerify.logging.logger import Log


class ConfirmationPoller:
    """Polls a transaction by hash until the backend reports it confirmed."""

    def __init__(
        self,
        api: ServerApi,
        *,
        max_retries: int = 10,
        delay_ms: int = 2000,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._api = api
        self._max_retries = max_retries
        self._delay_ms = delay_ms
        self._sleep = sleep

    async def wait_for_confirmation(
        self,
        transaction_hash: str,
        max_retries: int | None = None,
        delay_ms: int | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> TransactionRecord:
        """Fetch the transaction up to ``max_retries`` times.

        Waits ``delay_ms`` between attempts, never after the last one. A fetch
        failure on a non-final attempt is logged and retried; on the final
        attempt it propagates unchanged.

        Raises:
            ConfirmationTimeoutError: if no attempt observed a confirmed status.
            ConfirmationCancelledError: if ``cancel_token`` was cancelled.
        """
        retries = self._max_retries if max_retries is None else max_retries
        delay_seconds = (self._delay_ms if delay_ms is None else delay_ms) / 1000

        for attempt in range(1, retries + 1):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            is_last = attempt == retries
            try:
                record = await self._api.get_transaction(transaction_hash)
            except Exception as exc:
                if is_last:
                    Log.error(f"Transaction {transaction_hash} lookup failed on final attempt: {exc}")
                    raise
                Log.warning(
                    f"Transaction {transaction_hash} lookup failed "
                    f"(attempt {attempt}/{retries}), will retry: {exc}"
                )
                await self._pause(delay_seconds, cancel_token)
                continue

            if record.is_confirmed:
                Log.info(f"Transaction {transaction_hash} confirmed after {attempt} attempt(s)")
                return record
            Log.debug(f"Transaction {transaction_hash} status {record.status} (attempt {attempt}/{retries})")
            if not is_last:
                await self._pause(delay_seconds, cancel_token)

        Log.error(f"Transaction {transaction_hash} not confirmed after {retries} attempt(s)")
        raise ConfirmationTimeoutError()

    async def _pause(self, seconds: float, cancel_token: CancellationToken | None) -> None:
        if cancel_token is not None:
            await cancel_token.sleep(seconds, self._sleep)
        else:
            await self._sleep(seconds)
