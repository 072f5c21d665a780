"""
calcwallet - cold-storage Solana wallet backed by a graphing calculator.

Private keys are sealed under a password and stored only on the calculator's
string slots; signing unseals transiently and erases the plaintext afterwards.
"""

__version__ = "1.0.0"
