"""
Confirmation polling for submitted signatures.

A poller starts PENDING right after a successful submission. Every tick waits
one interval, then asks the node for the signature status:

    confirmed / finalized   -> CONFIRMED (terminal)
    anything else           -> stays PENDING
    attempts exhausted      -> TIMED_OUT, raised as ConfirmationTimeout

A confirmed status that carries an on-chain `err` is still CONFIRMED; the
error stays on `last_status` for the caller to report. Status-query failures
propagate unchanged. Terminal states are final.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from calcwallet.errors import ConfirmationTimeout
from calcwallet.solana.config import Config
from calcwallet.solana.rpc import SignatureStatus

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
TIMED_OUT = "timed_out"


class ConfirmationPoller:
    """
    Bounded fixed-interval poll for one signature.

    ``fetch_status`` is a blocking callable taking the signature and returning
    a SignatureStatus or None (not yet seen).
    """

    def __init__(self, fetch_status: Callable[[str], Optional[SignatureStatus]],
                 signature: str, max_attempts: int, interval: Optional[float] = None):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.fetch_status = fetch_status
        self.signature = signature
        self.max_attempts = max_attempts
        self.interval = Config.POLL_INTERVAL if interval is None else interval
        self.attempts = 0
        self.state = PENDING
        self.last_status: Optional[SignatureStatus] = None

    @property
    def done(self) -> bool:
        return self.state != PENDING

    def _observe(self, status: Optional[SignatureStatus]):
        """Apply one status observation to the state machine"""
        self.attempts += 1
        self.last_status = status
        if status is not None and status.is_confirmed:
            self.state = CONFIRMED
            logger.info("Signature %s reached %s after %d attempt(s)",
                        self.signature, status.confirmation_status, self.attempts)
            return
        if self.attempts >= self.max_attempts:
            self.state = TIMED_OUT
            raise ConfirmationTimeout(
                f"Confirmation of {self.signature} timed out after {self.attempts} attempts"
            )
        logger.debug("Signature %s pending (%s), attempt %d/%d",
                     self.signature, status, self.attempts, self.max_attempts)

    def run(self, sleep: Callable[[float], None] = time.sleep) -> str:
        """Poll on the calling thread until a terminal state"""
        while not self.done:
            sleep(self.interval)
            self._observe(self.fetch_status(self.signature))
        return self.state

    async def run_async(self, executor=None) -> str:
        """
        Poll from an event loop. Ticks sleep with asyncio.sleep; each status
        query runs on ``executor`` so the loop never blocks on the network.
        """
        loop = asyncio.get_running_loop()
        while not self.done:
            await asyncio.sleep(self.interval)
            status = await loop.run_in_executor(executor, self.fetch_status, self.signature)
            self._observe(status)
        return self.state
