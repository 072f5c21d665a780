"""
Hardware constants for the calculator link.

Status codes must match the native shim library (calc_session.h); payload
sizes define the on-device record format.
"""

# Status codes (must match calc_session.h)
APP_OK = 0
APP_ERR_NO_CALC = 1
APP_ERR_NO_CABLE = 2
APP_ERR_ALLOC = 3
APP_ERR_NOT_READY = 4
APP_ERR_IO = 5
APP_ERR_THREAD = 6
APP_ERR_CRYPTO = 7

# Ten fixed string variables on the calculator
SLOT_NAMES = tuple(f"Str{i}" for i in range(10))

PUBLIC_KEY_LEN = 32
PRIVATE_KEY_LEN = 64
SEED_LEN = 32

# Sealed blob: version(1) | salt(16) | nonce(12) | ciphertext(64) | mac(32)
BLOB_VERSION = 1
SALT_LEN = 16
NONCE_LEN = 12
MAC_LEN = 32
BLOB_LEN = 1 + SALT_LEN + NONCE_LEN + PRIVATE_KEY_LEN + MAC_LEN

# Record stored at one slot: public_key(32) | blob(125)
STORED_KEY_PAYLOAD_LEN = PUBLIC_KEY_LEN + BLOB_LEN

# Largest variable the shim will hand back in one read
MAX_FETCH_LEN = 256
