"""
CLI command implementations for the calcwallet Solana wallet.

Each cmd_* function corresponds to a subcommand (e.g. 'create', 'send', 'info')
and returns a process exit code. Wallet errors propagate to main(), which
prints them.
"""

import asyncio
import getpass
from contextlib import asynccontextmanager

from calcwallet.errors import CryptoError, ValidationError
from calcwallet.solana.amount import parse_lamports, format_sol
from calcwallet.solana.config import Config
from calcwallet.wallet.qr import generate_qr_ascii
from calcwallet.wallet.service import WalletService


@asynccontextmanager
async def open_wallet(args, load: bool = True):
    """Connect to the calculator and, optionally, load the key at ``args.slot``"""
    async with WalletService(rpc_url=args.rpc_url) as wallet:
        await wallet.connect()
        if load:
            await wallet.load_keypair(args.slot)
        yield wallet


def _banner(title: str):
    print("")
    print("=" * 60)
    print(title)
    print("=" * 60)


def _check_memo(memo: str):
    """Memos given on the command line must be printable ASCII"""
    if not all(' ' <= ch <= '~' for ch in memo):
        raise ValidationError("Memo must contain printable ASCII characters only")


def _read_new_password() -> str:
    password = getpass.getpass("New password: ")
    if not password:
        raise CryptoError("Password cannot be empty")
    if getpass.getpass("Confirm password: ") != password:
        raise CryptoError("Passwords do not match")
    return password


def cmd_create(args):
    """Generate a keypair, seal it and store it on the calculator"""
    _banner("CALCWALLET - CREATE KEYPAIR")
    password = _read_new_password()

    async def run():
        async with open_wallet(args, load=False) as wallet:
            slots = {s['slot']: s for s in await wallet.scan_slots()}
            if slots[args.slot]['status'] != 'empty' and not args.yes:
                print("")
                print(f"[!] {args.slot} is not empty ({slots[args.slot]['status_label']})")
                if input("    Overwrite? [y/N]: ").lower() != 'y':
                    return 1
            print("")
            print("[1/2] Generating and sealing keypair...")
            print(f"[2/2] Writing record to {args.slot}...")
            loaded = await wallet.create_keypair(args.slot, password)
        print("")
        print(f"[OK] Keypair stored in {loaded.slot}")
        print(f"Address: {loaded.address}")
        print("")
        print("IMPORTANT: the password cannot be recovered. Without it the key is lost.")
        return 0

    return asyncio.run(run())


def cmd_load(args):
    """Read the record at a slot and show its address"""
    async def run():
        async with open_wallet(args) as wallet:
            keypair = wallet.state.keypair
        print("")
        print(f"[OK] Loaded {keypair.slot}")
        print(f"Address: {keypair.address}")
        return 0

    return asyncio.run(run())


def cmd_slots(args):
    """List the ten calculator slots"""
    async def run():
        async with open_wallet(args, load=False) as wallet:
            slots = await wallet.scan_slots()
        _banner("CALCULATOR SLOTS")
        print("")
        for slot in slots:
            line = f"  {slot['slot']:<5} {slot['status_label']:<22}"
            if slot['address']:
                line += f" {slot['address']}"
            print(line)
        print("")
        return 0

    return asyncio.run(run())


def cmd_address(args):
    """Display the receive address"""
    async def run():
        async with open_wallet(args) as wallet:
            keypair = wallet.state.keypair
        _banner("CALCWALLET")
        print("")
        print(f"Slot:    {keypair.slot}")
        print(f"Cluster: {Config.cluster(wallet.rpc_url)}")
        print(f"Address: {keypair.address}")

        if args.qr:
            print("")
            print("SCAN TO RECEIVE:")
            print("")
            for line in generate_qr_ascii(keypair.address).split('\n'):
                print(f"  {line}")
        print("")
        return 0

    return asyncio.run(run())


def cmd_balance(args):
    """Fetch the balance of the loaded key"""
    async def run():
        async with open_wallet(args) as wallet:
            lamports = await wallet.refresh_balance()
            address = wallet.state.address
        print("")
        print(f"Address: {address}")
        print(f"Balance: {format_sol(lamports)} SOL ({lamports:,} lamports)")
        print("")
        return 0

    return asyncio.run(run())


def cmd_airdrop(args):
    """Request test funds and wait for confirmation"""
    lamports, description = parse_lamports(args.amount)

    async def run():
        async with open_wallet(args) as wallet:
            print("")
            print(f"Requesting airdrop of {description}...")
            signature = await wallet.request_airdrop(lamports)
        print("[OK] Airdrop confirmed")
        print(f"Signature: {signature}")
        print(f"Explorer:  {Config.explorer_url(signature, wallet.rpc_url)}")
        print("")
        return 0

    return asyncio.run(run())


def cmd_send(args):
    """Sign and submit a transfer"""
    lamports, description = parse_lamports(args.amount)
    memo = Config.DEFAULT_MEMO if args.memo is None else args.memo
    _check_memo(memo)

    _banner("SEND SOL")
    print("")
    print(f"To:     {args.address}")
    print(f"Amount: {description}")
    if memo:
        print(f"Memo:   {memo}")
    print("")
    if not args.yes and input("Confirm send? [y/N]: ").lower() != 'y':
        print("Cancelled")
        return 1
    password = getpass.getpass("Password: ")

    async def run():
        async with open_wallet(args) as wallet:
            print("Signing and submitting...")
            signature = await wallet.send(args.address, lamports, password, memo)
        print("")
        print("[OK] Transaction confirmed")
        print(f"Signature: {signature}")
        print(f"Explorer:  {Config.explorer_url(signature, wallet.rpc_url)}")
        print("")
        return 0

    return asyncio.run(run())


def cmd_info(args):
    """Show configuration and calculator status"""
    _banner("CALCWALLET STATUS")
    print("")
    print(f"RPC:        {Config.resolve_rpc_url(args.rpc_url)}")
    print(f"Cluster:    {Config.cluster(Config.resolve_rpc_url(args.rpc_url))}")
    print(f"Tor:        {'enabled' if Config.TOR_ENABLED else 'disabled'}")
    if Config.CONNECTION_TYPE == "emulator":
        print(f"Connection: emulator @ {Config.emulator_path()}")
    else:
        print(f"Connection: {Config.CONNECTION_TYPE} @ port {Config.CONNECTION_PORT}")

    async def run():
        async with open_wallet(args, load=False) as wallet:
            ready = await wallet.ping()
        print("")
        print("[OK] Calculator connected" if ready else "[!] Calculator connected but not ready")
        print("")
        return 0 if ready else 1

    return asyncio.run(run())
