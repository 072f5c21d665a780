"""
WalletService - coordinates user-triggered wallet operations.

Runs on one asyncio event loop. Blocking work (calculator I/O, RPC calls,
key sealing and signing) is handed to a thread pool with run_in_executor;
the loop only ever awaits those results.

The calculator link and the RPC client sit behind two independent guards.
A storage operation and a network operation may overlap; operations on the
same resource serialize. No lock spans both.

A send is deliberately not atomic: unseal (no lock), fetch a blockhash
(client lock), build and sign (no lock), submit (client lock again). Two
sends started independently may interleave between those steps.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Callable, List, Dict, Optional

from calcwallet.errors import WalletError, InvalidArgument, NoCalculator
from calcwallet.crypto.custody import KeyCustody
from calcwallet.crypto.provider import CryptoProvider
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.locking import LinkGuard, ClientGuard
from calcwallet.hardware.session import open_link, validate_slot
from calcwallet.solana.addresses import decode_public_key
from calcwallet.solana.config import Config
from calcwallet.solana.confirm import ConfirmationPoller
from calcwallet.solana.rpc import RpcGateway
from calcwallet.solana.transaction import build_transfer, validate_memo
from calcwallet.wallet.core import WalletState, LoadedKeypair, CONNECTED, DISCONNECTED
from calcwallet.wallet.slots import KeyStore

logger = logging.getLogger(__name__)


def default_link_opener() -> CalculatorLink:
    return open_link(Config.CONNECTION_TYPE, Config.CONNECTION_PORT, Config.emulator_path())


class WalletService:
    """
    Async facade over the wallet's blocking components.

    Example:
        async with WalletService() as wallet:
            await wallet.connect()
            await wallet.load_keypair("Str1")
            lamports = await wallet.refresh_balance()
    """

    def __init__(
        self,
        link_opener: Callable[[], CalculatorLink] = default_link_opener,
        client_factory: Optional[Callable[[], RpcGateway]] = None,
        custody: Optional[KeyCustody] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        rpc_url: Optional[str] = None,
    ):
        self.state = WalletState()
        self.rpc_url = Config.resolve_rpc_url(rpc_url)
        self.link = LinkGuard(link_opener)
        self.client = ClientGuard(client_factory or self._build_client)
        self.custody = custody or KeyCustody(CryptoProvider(Config.PBKDF2_ITERATIONS))
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="calcwallet")

    def _build_client(self) -> RpcGateway:
        return RpcGateway(self.rpc_url, Config.RPC_TIMEOUT)

    async def _blocking(self, fn, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(fn, *args, **kwargs))

    @contextmanager
    def _operation(self, name: str):
        """Track the pending operation and record the message of a failure"""
        self.state.pending = name
        try:
            yield
        except WalletError as e:
            self.state.last_error = e.message
            logger.warning("%s failed: %s", name, e.message)
            raise
        else:
            self.state.last_error = None
        finally:
            self.state.pending = None

    def _require_keypair(self) -> LoadedKeypair:
        if self.state.keypair is None:
            raise InvalidArgument("No keypair loaded")
        return self.state.keypair

    # ------------------------------------------------------------------
    # Calculator operations
    # ------------------------------------------------------------------

    async def connect(self):
        with self._operation("connect"):
            await self._blocking(self.link.connect)
            self.state.connection = CONNECTED

    async def disconnect(self):
        with self._operation("disconnect"):
            await self._blocking(self.link.disconnect)
            self.state.connection = DISCONNECTED

    def _create_and_store(self, slot: str, password: str) -> LoadedKeypair:
        validate_slot(slot)
        if not self.link.present:
            raise NoCalculator()
        with self.custody.generate_keypair() as keypair:
            blob = self.custody.seal(password, keypair.private_key.data)
            public_key = keypair.public_key
        with self.link.acquire() as link:
            KeyStore(link).store(slot, public_key, blob)
        return LoadedKeypair(slot, public_key, blob)

    async def create_keypair(self, slot: str, password: str) -> LoadedKeypair:
        """Generate a keypair, seal it and write it to ``slot``"""
        with self._operation("create_keypair"):
            loaded = await self._blocking(self._create_and_store, slot, password)
            self.state.keypair = loaded
            self.state.balance_lamports = None
            logger.info("Created keypair %s in %s", loaded.address, slot)
            return loaded

    def _fetch_record(self, slot: str) -> LoadedKeypair:
        with self.link.acquire() as link:
            public_key, blob = KeyStore(link).fetch(slot)
        return LoadedKeypair(slot, public_key, blob)

    async def load_keypair(self, slot: str) -> LoadedKeypair:
        with self._operation("load_keypair"):
            loaded = await self._blocking(self._fetch_record, slot)
            self.state.keypair = loaded
            self.state.balance_lamports = None
            logger.info("Loaded keypair %s from %s", loaded.address, slot)
            return loaded

    def _scan(self) -> List[Dict]:
        with self.link.acquire() as link:
            return KeyStore(link).scan()

    async def scan_slots(self) -> List[Dict]:
        with self._operation("scan_slots"):
            return await self._blocking(self._scan)

    def _ping(self) -> bool:
        with self.link.acquire() as link:
            return link.is_ready()

    async def ping(self) -> bool:
        """Ask the calculator whether it is ready"""
        with self._operation("ping"):
            return await self._blocking(self._ping)

    # ------------------------------------------------------------------
    # Network operations
    # ------------------------------------------------------------------

    def _rpc(self, method: str, *args):
        with self.client.acquire() as rpc:
            return getattr(rpc, method)(*args)

    def _signature_status(self, signature: str):
        return self._rpc("signature_status", signature)

    async def refresh_balance(self) -> int:
        with self._operation("refresh_balance"):
            keypair = self._require_keypair()
            lamports = await self._blocking(self._rpc, "balance", keypair.address)
            self.state.balance_lamports = lamports
            return lamports

    async def _confirm(self, signature: str, max_attempts: int):
        poller = ConfirmationPoller(self._signature_status, signature, max_attempts)
        await poller.run_async(self.executor)
        if poller.last_status.failed:
            logger.warning("Signature %s confirmed with on-chain error: %s",
                           signature, poller.last_status.err)

    async def request_airdrop(self, lamports: int) -> str:
        """Request devnet/testnet funds and wait for confirmation"""
        with self._operation("request_airdrop"):
            keypair = self._require_keypair()
            signature = await self._blocking(self._rpc, "airdrop", keypair.address, lamports)
            logger.info("Airdrop requested: %s", signature)
            await self._confirm(signature, Config.AIRDROP_CONFIRM_ATTEMPTS)
            self.state.balance_lamports = None
            self.state.last_signature = signature
            return signature

    async def send(self, recipient: str, lamports: int, password: str,
                   memo: Optional[str] = None) -> str:
        """
        Transfer ``lamports`` to ``recipient`` and wait for confirmation.

        The plaintext key exists only between unseal and signing and is wiped
        on every path out of that window.
        """
        with self._operation("send"):
            keypair = self._require_keypair()
            to_pub = decode_public_key(recipient)
            validate_memo(memo)

            private_key = await self._blocking(self.custody.unseal, password, keypair.blob)
            with private_key:
                blockhash = await self._blocking(self._rpc, "latest_blockhash")
                tx = await self._blocking(
                    build_transfer, keypair.public_key, to_pub, lamports, blockhash,
                    private_key.data, memo, self.custody.provider,
                )

            signature = await self._blocking(self._rpc, "submit", tx.base64)
            logger.info("Transaction submitted: %s", signature)
            await self._confirm(signature, Config.TRANSFER_CONFIRM_ATTEMPTS)
            self.state.balance_lamports = None
            self.state.last_signature = signature
            return signature

    # ------------------------------------------------------------------

    async def close(self):
        link = self.link.remove()
        client = self.client.remove()
        if link is not None:
            await self._blocking(link.close)
        if client is not None:
            await self._blocking(client.close)
        self.state.connection = DISCONNECTED
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
