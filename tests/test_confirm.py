"""
Tests for the confirmation poller state machine.
"""

import pytest

from calcwallet.errors import ConfirmationTimeout, NetworkError
from calcwallet.solana.confirm import CONFIRMED, PENDING, TIMED_OUT, ConfirmationPoller
from calcwallet.solana.rpc import SignatureStatus


def scripted(*statuses):
    """fetch_status callable replaying statuses; the last one repeats"""
    seen = []

    def fetch(signature):
        seen.append(signature)
        index = min(len(seen), len(statuses)) - 1
        status = statuses[index]
        if isinstance(status, Exception):
            raise status
        return None if status is None else SignatureStatus(status)
    fetch.seen = seen
    return fetch


class TestSyncPolling:

    def test_confirmed_on_first_tick(self):
        sleeps = []
        poller = ConfirmationPoller(scripted("confirmed"), "sig", 30, interval=1.0)
        assert poller.run(sleep=sleeps.append) == CONFIRMED
        assert poller.attempts == 1
        assert sleeps == [1.0]

    def test_pending_until_finalized(self):
        fetch = scripted(None, "processed", "processed", "finalized")
        poller = ConfirmationPoller(fetch, "sig", 30, interval=0)
        assert poller.run(sleep=lambda _: None) == CONFIRMED
        assert poller.attempts == 4
        assert fetch.seen == ["sig"] * 4

    def test_times_out_after_bound(self):
        fetch = scripted("processed")
        poller = ConfirmationPoller(fetch, "sig", 5, interval=0)
        with pytest.raises(ConfirmationTimeout):
            poller.run(sleep=lambda _: None)
        assert poller.state == TIMED_OUT
        assert len(fetch.seen) == 5

    def test_never_seen_times_out(self):
        poller = ConfirmationPoller(scripted(None), "sig", 3, interval=0)
        with pytest.raises(ConfirmationTimeout):
            poller.run(sleep=lambda _: None)

    def test_confirmed_on_last_attempt(self):
        poller = ConfirmationPoller(scripted(None, None, "confirmed"), "sig", 3, interval=0)
        assert poller.run(sleep=lambda _: None) == CONFIRMED

    def test_onchain_error_still_confirms(self):
        err = {"InstructionError": [0, "Custom"]}

        def fetch(signature):
            return SignatureStatus("confirmed", err)
        poller = ConfirmationPoller(fetch, "sig", 60, interval=0)
        assert poller.run(sleep=lambda _: None) == CONFIRMED
        assert poller.attempts == 1
        assert poller.last_status.err == err

    def test_onchain_error_while_processed_keeps_polling(self):
        def fetch(signature):
            return SignatureStatus("processed", {"InstructionError": [0, "Custom"]})
        poller = ConfirmationPoller(fetch, "sig", 3, interval=0)
        with pytest.raises(ConfirmationTimeout):
            poller.run(sleep=lambda _: None)
        assert poller.state == TIMED_OUT
        assert poller.attempts == 3

    def test_query_errors_propagate(self):
        poller = ConfirmationPoller(scripted(NetworkError("down")), "sig", 5, interval=0)
        with pytest.raises(NetworkError):
            poller.run(sleep=lambda _: None)
        assert poller.state == PENDING

    def test_terminal_state_is_final(self):
        poller = ConfirmationPoller(scripted("finalized"), "sig", 3, interval=0)
        poller.run(sleep=lambda _: None)
        assert poller.run(sleep=lambda _: None) == CONFIRMED
        assert poller.attempts == 1

    def test_attempt_bound_must_be_positive(self):
        with pytest.raises(ValueError):
            ConfirmationPoller(scripted(None), "sig", 0)


class TestAsyncPolling:

    @pytest.mark.asyncio
    async def test_confirms(self):
        poller = ConfirmationPoller(scripted("processed", "confirmed"), "sig", 10, interval=0)
        assert await poller.run_async() == CONFIRMED
        assert poller.attempts == 2

    @pytest.mark.asyncio
    async def test_times_out(self):
        poller = ConfirmationPoller(scripted(None), "sig", 4, interval=0)
        with pytest.raises(ConfirmationTimeout):
            await poller.run_async()
        assert poller.attempts == 4
