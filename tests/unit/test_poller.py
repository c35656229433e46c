import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from univerify.api.exceptions import (
    ApiError,
    ConfirmationCancelledError,
    ConfirmationTimeoutError,
    NetworkError,
)
from univerify.api.models import TransactionRecord
from univerify.confirmation.cancellation import CancellationToken
from univerify.confirmation.poller import ConfirmationPoller


def _record(status: str) -> TransactionRecord:
    return TransactionRecord(hash="0xabc", block_number=1, status=status, timestamp=0)


PENDING = _record("0x0")
CONFIRMED = _record("0x1")


def _make_poller(
    side_effect: list[object], **kwargs: int
) -> tuple[ConfirmationPoller, AsyncMock, AsyncMock]:
    """Create a poller over a mocked API with a recording sleep."""
    api = MagicMock()
    api.get_transaction = AsyncMock(side_effect=side_effect)
    sleep = AsyncMock()
    poller = ConfirmationPoller(api, sleep=sleep, **kwargs)
    return poller, api.get_transaction, sleep


class TestConfirmation:
    def test_returns_immediately_when_confirmed_first(self) -> None:
        poller, fetch, sleep = _make_poller([CONFIRMED])

        record = asyncio.run(poller.wait_for_confirmation("0xabc"))

        assert record is CONFIRMED
        fetch.assert_awaited_once_with("0xabc")
        sleep.assert_not_awaited()

    @pytest.mark.parametrize("k", [1, 2, 5, 10])
    def test_confirmed_on_attempt_k_uses_k_fetches_and_k_minus_one_delays(self, k: int) -> None:
        poller, fetch, sleep = _make_poller([PENDING] * (k - 1) + [CONFIRMED])

        record = asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=10))

        assert record.is_confirmed
        assert fetch.await_count == k
        assert sleep.await_count == k - 1

    def test_delay_is_converted_to_seconds(self) -> None:
        poller, _fetch, sleep = _make_poller([PENDING, CONFIRMED])

        asyncio.run(poller.wait_for_confirmation("0xabc", delay_ms=1500))

        sleep.assert_awaited_once_with(1.5)

    def test_uses_constructor_defaults(self) -> None:
        poller, fetch, sleep = _make_poller([PENDING] * 3, max_retries=3, delay_ms=250)

        with pytest.raises(ConfirmationTimeoutError):
            asyncio.run(poller.wait_for_confirmation("0xabc"))

        assert fetch.await_count == 3
        sleep.assert_awaited_with(0.25)


class TestTimeout:
    def test_never_confirming_times_out_after_max_retries_fetches(self) -> None:
        poller, fetch, sleep = _make_poller([PENDING] * 3)

        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=3, delay_ms=0))

        assert fetch.await_count == 3
        assert sleep.await_count == 2
        assert exc_info.value.status == 408
        assert exc_info.value.message == "Transaction confirmation timeout"

    def test_default_budget_is_ten_attempts(self) -> None:
        poller, fetch, sleep = _make_poller([PENDING] * 10)

        with pytest.raises(ConfirmationTimeoutError):
            asyncio.run(poller.wait_for_confirmation("0xabc"))

        assert fetch.await_count == 10
        assert sleep.await_count == 9
        sleep.assert_awaited_with(2.0)

    def test_timeout_is_distinct_from_backend_errors(self) -> None:
        poller, _fetch, _sleep = _make_poller([PENDING])

        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=1))

        assert not isinstance(exc_info.value, NetworkError)


class TestFetchFailures:
    def test_non_final_failure_is_swallowed_and_retried(self) -> None:
        poller, fetch, sleep = _make_poller([NetworkError("Network error: down"), CONFIRMED])

        record = asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=3))

        assert record.is_confirmed
        assert fetch.await_count == 2
        assert sleep.await_count == 1

    def test_final_failure_propagates_unchanged(self) -> None:
        final_error = ApiError("Transaction not found", 404)
        poller, fetch, _sleep = _make_poller([PENDING, NetworkError("flaky"), final_error])

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=3, delay_ms=0))

        assert exc_info.value is final_error
        assert fetch.await_count == 3

    def test_single_attempt_failure_propagates(self) -> None:
        error = RuntimeError("boom")
        poller, _fetch, sleep = _make_poller([error])

        with pytest.raises(RuntimeError) as exc_info:
            asyncio.run(poller.wait_for_confirmation("0xabc", max_retries=1))

        assert exc_info.value is error
        sleep.assert_not_awaited()


class TestCancellation:
    def test_cancelled_token_stops_before_first_fetch(self) -> None:
        poller, fetch, _sleep = _make_poller([CONFIRMED])
        token = CancellationToken()
        token.cancel()

        with pytest.raises(ConfirmationCancelledError):
            asyncio.run(poller.wait_for_confirmation("0xabc", cancel_token=token))

        fetch.assert_not_awaited()

    def test_cancel_during_delay_wakes_up_immediately(self) -> None:
        api = MagicMock()
        api.get_transaction = AsyncMock(return_value=PENDING)
        poller = ConfirmationPoller(api)
        token = CancellationToken()

        async def _go() -> None:
            wait = asyncio.create_task(
                poller.wait_for_confirmation("0xabc", delay_ms=60_000, cancel_token=token)
            )
            await asyncio.sleep(0.01)
            token.cancel()
            await asyncio.wait_for(wait, timeout=1)

        with pytest.raises(ConfirmationCancelledError):
            asyncio.run(_go())

        assert api.get_transaction.await_count == 1

    def test_cancellable_wait_still_uses_injected_sleep(self) -> None:
        poller, fetch, sleep = _make_poller([PENDING, CONFIRMED])

        record = asyncio.run(
            poller.wait_for_confirmation(
                "0xabc", delay_ms=60_000, cancel_token=CancellationToken()
            )
        )

        assert record.is_confirmed
        assert fetch.await_count == 2
        sleep.assert_awaited_once_with(60.0)
