"""
calcwallet.solana - RPC gateway, transfer transactions and confirmation.
"""

from calcwallet.solana.config import Config
from calcwallet.solana.amount import LAMPORTS_PER_SOL, parse_lamports, format_sol
from calcwallet.solana.addresses import encode_public_key, decode_public_key
from calcwallet.solana.network import HttpTransport
from calcwallet.solana.rpc import (
    RpcGateway,
    SignatureStatus,
    parse_balance,
    parse_blockhash,
    parse_string_result,
    parse_signature_status,
)
from calcwallet.solana.transaction import (
    SignedTransaction,
    build_transfer,
    MAX_MEMO_LENGTH,
    MEMO_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
)
from calcwallet.solana.confirm import ConfirmationPoller

__all__ = [
    "Config",
    "LAMPORTS_PER_SOL",
    "parse_lamports",
    "format_sol",
    "encode_public_key",
    "decode_public_key",
    "HttpTransport",
    "RpcGateway",
    "SignatureStatus",
    "parse_balance",
    "parse_blockhash",
    "parse_string_result",
    "parse_signature_status",
    "SignedTransaction",
    "build_transfer",
    "MAX_MEMO_LENGTH",
    "MEMO_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
    "ConfirmationPoller",
]
