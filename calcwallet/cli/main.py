"""
CLI entry point for the calcwallet Solana wallet.

Parses command-line arguments and dispatches to the appropriate command handler.
"""

import logging
import os
import sys
import argparse

from calcwallet.errors import WalletError
from calcwallet.hardware.constants import SLOT_NAMES
from calcwallet.solana.config import Config
from calcwallet.cli.commands import (
    cmd_create,
    cmd_load,
    cmd_slots,
    cmd_address,
    cmd_balance,
    cmd_airdrop,
    cmd_send,
    cmd_info,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calcwallet",
        description="Solana wallet with keys sealed on a TI calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s slots                       List calculator slots
  %(prog)s create --slot Str1          Create a keypair in Str1
  %(prog)s address --qr                Show address with QR code
  %(prog)s balance                     Check balance
  %(prog)s airdrop 1sol                Request 1 SOL on devnet
  %(prog)s send <address> 0.01         Send 0.01 SOL
  %(prog)s send <address> 5000lamports --memo "rent"
  %(prog)s --emulator info             Use the file-backed emulator
        """
    )

    parser.add_argument('--rpc-url', type=str, help='Solana RPC endpoint (https only)')
    parser.add_argument('--emulator', action='store_true', help='Use the file-backed calculator emulator')
    parser.add_argument('--port', type=int, help='Cable port number (default: 1)')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')

    slot_parent = argparse.ArgumentParser(add_help=False)
    slot_parent.add_argument('-s', '--slot', choices=SLOT_NAMES, default='Str1',
                             help='Calculator string slot (default: Str1)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    create_parser = subparsers.add_parser('create', parents=[slot_parent],
                                          help='Create a keypair and store it sealed on the calculator')
    create_parser.add_argument('-y', '--yes', action='store_true', help='Overwrite without asking')

    subparsers.add_parser('load', parents=[slot_parent], help='Load the keypair stored at a slot')
    subparsers.add_parser('slots', help='List calculator slots')

    addr_parser = subparsers.add_parser('address', parents=[slot_parent], help='Show receive address')
    addr_parser.add_argument('--qr', action='store_true', help='Show QR code')

    subparsers.add_parser('balance', parents=[slot_parent], help='Check balance')

    airdrop_parser = subparsers.add_parser('airdrop', parents=[slot_parent], help='Request devnet/testnet SOL')
    airdrop_parser.add_argument('amount', type=str, help='Amount: 1000000, 0.5, 1sol, 5000lamports')

    send_parser = subparsers.add_parser('send', parents=[slot_parent], help='Send SOL')
    send_parser.add_argument('address', help='Recipient base58 address')
    send_parser.add_argument('amount', type=str, help='Amount: 200000, 0.0002, 1sol, 5000lamports')
    send_parser.add_argument('-m', '--memo', type=str, help='Memo (default from settings, "" for none)')
    send_parser.add_argument('-y', '--yes', action='store_true', help='Skip confirmation')

    subparsers.add_parser('info', help='Show configuration and calculator status')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    debug = args.debug or bool(os.environ.get("CALCWALLET_DEBUG"))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.emulator:
        Config.CONNECTION_TYPE = "emulator"
    if args.port:
        Config.CONNECTION_PORT = args.port

    commands = {
        'create': cmd_create,
        'load': cmd_load,
        'slots': cmd_slots,
        'address': cmd_address,
        'balance': cmd_balance,
        'airdrop': cmd_airdrop,
        'send': cmd_send,
        'info': cmd_info,
    }

    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        return commands[args.command](args)
    except WalletError as e:
        print("")
        print(f"[FAIL] {e.message}")
        print("")
        return 1
    except KeyboardInterrupt:
        print("\nCancelled")
        return 130


if __name__ == '__main__':
    sys.exit(main())
