"""
Amount parsing and formatting utilities for SOL.
"""

from decimal import Decimal, InvalidOperation
from typing import Tuple

from calcwallet.errors import ValidationError

LAMPORTS_PER_SOL = 1_000_000_000
MAX_LAMPORTS = 2 ** 64 - 1


def parse_lamports(amount_str: str) -> Tuple[int, str]:
    """
    Parse amount string with optional unit suffix.

    Supports:
        200000          -> 200000 lamports
        5000lamports    -> 5000 lamports
        0.0002          -> SOL (a decimal point means SOL)
        1sol / 1SOL     -> 1 SOL

    Returns: (lamports, description)
    """
    text = amount_str.strip().lower()
    if not text:
        raise ValidationError("Amount cannot be empty")

    treat_as_sol = False
    if text.endswith('lamports') or text.endswith('lamport'):
        text = text.replace('lamports', '').replace('lamport', '').strip()
    elif text.endswith('sol'):
        text = text[:-3].strip()
        treat_as_sol = True
    elif '.' in text:
        treat_as_sol = True

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {amount_str!r}")

    if not value.is_finite() or value <= 0:
        raise ValidationError("Amount must be greater than zero")

    if treat_as_sol:
        lamports = int(value * LAMPORTS_PER_SOL)
        if lamports == 0:
            raise ValidationError("Amount too small after conversion to lamports")
    else:
        if value != value.to_integral_value():
            raise ValidationError("Lamport amounts must be whole numbers")
        lamports = int(value)

    if lamports > MAX_LAMPORTS:
        raise ValidationError("Amount exceeds maximum supported size")

    return lamports, f"{lamports:,} lamports ({format_sol(lamports)} SOL)"


def format_sol(lamports: int) -> str:
    """Render lamports as SOL with nine decimals"""
    whole, frac = divmod(lamports, LAMPORTS_PER_SOL)
    return f"{whole}.{frac:09d}"
