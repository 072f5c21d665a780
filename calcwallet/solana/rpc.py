"""
Solana JSON-RPC gateway.

Issues the five requests the wallet needs and parses their responses. The
raw methods return response text; the typed helpers parse it. Every
malformed response surfaces as JsonParseError carrying the parser's
diagnostic.
"""

import itertools
import json
import logging
from typing import Any, Optional

from calcwallet.errors import InvalidArgument, JsonParseError, WalletIOError
from calcwallet.solana.config import Config
from calcwallet.solana.network import HttpTransport

logger = logging.getLogger(__name__)

CONFIRMED_STATUSES = frozenset(("confirmed", "finalized"))


class SignatureStatus:
    """One entry of getSignatureStatuses: confirmation level plus on-chain error"""

    __slots__ = ("confirmation_status", "err")

    def __init__(self, confirmation_status: Optional[str], err: Any = None):
        self.confirmation_status = confirmation_status
        self.err = err

    @property
    def is_confirmed(self) -> bool:
        return self.confirmation_status in CONFIRMED_STATUSES

    @property
    def failed(self) -> bool:
        return self.err is not None

    def __repr__(self):
        return f"SignatureStatus({self.confirmation_status!r}, err={self.err!r})"


# ============================================================================
#                           RESPONSE PARSING
# ============================================================================

def _loads(text: str) -> dict:
    try:
        doc = json.loads(text)
    except ValueError as e:
        raise JsonParseError(str(e))
    if not isinstance(doc, dict):
        raise JsonParseError("response is not a JSON object")
    return doc


def _result(doc: dict) -> Any:
    if "result" not in doc:
        raise JsonParseError("missing result")
    return doc["result"]


def _raise_rpc_error(doc: dict):
    error = doc.get("error")
    if error is None:
        return
    message = error.get("message") if isinstance(error, dict) else None
    raise WalletIOError(message if isinstance(message, str) else "unknown RPC error")


def parse_balance(text: str) -> int:
    """getBalance: {"result":{"value": <lamports>}}"""
    doc = _loads(text)
    _raise_rpc_error(doc)
    result = _result(doc)
    value = result.get("value") if isinstance(result, dict) else None
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise JsonParseError("missing balance value")
    return value


def parse_blockhash(text: str) -> str:
    """getLatestBlockhash: {"result":{"value":{"blockhash": "..."}}}"""
    doc = _loads(text)
    _raise_rpc_error(doc)
    result = _result(doc)
    value = result.get("value") if isinstance(result, dict) else None
    blockhash = value.get("blockhash") if isinstance(value, dict) else None
    if not isinstance(blockhash, str) or not blockhash:
        raise JsonParseError("missing blockhash")
    return blockhash


def parse_string_result(text: str) -> str:
    """requestAirdrop / sendTransaction: {"result": "<signature>"}"""
    doc = _loads(text)
    _raise_rpc_error(doc)
    result = doc.get("result")
    if not isinstance(result, str):
        raise JsonParseError("missing result string")
    return result


def parse_signature_status(text: str) -> Optional[SignatureStatus]:
    """
    getSignatureStatuses: {"result":{"value":[{"confirmationStatus": ..., "err": ...}]}}

    Returns None while the node has not seen the signature yet.
    """
    doc = _loads(text)
    _raise_rpc_error(doc)
    result = _result(doc)
    value = result.get("value") if isinstance(result, dict) else None
    if not isinstance(value, list):
        raise JsonParseError("missing status list")
    if not value or value[0] is None:
        return None
    entry = value[0]
    if not isinstance(entry, dict):
        raise JsonParseError("malformed status entry")
    status = entry.get("confirmationStatus")
    if status is not None and not isinstance(status, str):
        raise JsonParseError("malformed confirmationStatus")
    return SignatureStatus(status, entry.get("err"))


# ============================================================================
#                              GATEWAY
# ============================================================================

class RpcGateway:
    """
    JSON-RPC client bound to one URL and one timeout.

    The timeout is fixed at construction and applies to every call. Request
    ids increase monotonically per gateway.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[HttpTransport] = None):
        self.url = url or Config.resolve_rpc_url()
        if not self.url:
            raise InvalidArgument("RPC URL cannot be empty")
        self.timeout = Config.RPC_TIMEOUT if timeout is None else timeout
        self.transport = transport or HttpTransport()
        self._ids = itertools.count(1)

    def _request(self, method: str, params: list) -> str:
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s id=%d", method, body["id"])
        return self.transport.post_json(self.url, body, self.timeout)

    # Raw requests

    def get_balance(self, public_key: str) -> str:
        if not public_key:
            raise InvalidArgument("Public key cannot be empty")
        return self._request("getBalance", [public_key, {"commitment": "confirmed"}])

    def request_airdrop(self, public_key: str, lamports: int) -> str:
        if not public_key or lamports <= 0:
            raise InvalidArgument("Airdrop needs a public key and a positive amount")
        return self._request("requestAirdrop", [public_key, lamports])

    def get_latest_blockhash(self) -> str:
        return self._request("getLatestBlockhash", [{"commitment": "finalized"}])

    def send_transaction(self, transaction_base64: str) -> str:
        if not transaction_base64:
            raise InvalidArgument("Transaction cannot be empty")
        return self._request("sendTransaction", [transaction_base64, {"encoding": "base64"}])

    def get_signature_status(self, signature: str) -> str:
        if not signature:
            raise InvalidArgument("Signature cannot be empty")
        return self._request(
            "getSignatureStatuses", [[signature], {"searchTransactionHistory": True}]
        )

    # Typed helpers

    def balance(self, public_key: str) -> int:
        return parse_balance(self.get_balance(public_key))

    def latest_blockhash(self) -> str:
        return parse_blockhash(self.get_latest_blockhash())

    def airdrop(self, public_key: str, lamports: int) -> str:
        return parse_string_result(self.request_airdrop(public_key, lamports))

    def submit(self, transaction_base64: str) -> str:
        return parse_string_result(self.send_transaction(transaction_base64))

    def signature_status(self, signature: str) -> Optional[SignatureStatus]:
        return parse_signature_status(self.get_signature_status(signature))

    def close(self):
        self.transport.close()
