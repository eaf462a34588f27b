"""Well-known program ids and instruction discriminators"""

import struct

from .keys import PublicKey

# Native program that owns user accounts and moves lamports, all-zero bytes
SYSTEM_PROGRAM_ID = PublicKey(bytes(32))
TOKEN_PROGRAM_ID = PublicKey.from_base58('TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA')
TOKEN_2022_PROGRAM_ID = PublicKey.from_base58('TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb')

# System instructions are tagged with a u32 LE enum index
SYSTEM_TRANSFER = struct.pack('<I', 2)

# Token instructions are tagged with a single byte; transfer-fee extension
# instructions add a second byte for the extension instruction
TOKEN_TRANSFER = bytes([3])
TOKEN_TRANSFER_CHECKED = bytes([12])
TOKEN_TRANSFER_CHECKED_WITH_FEE = bytes([26, 1])

PROGRAM_NAMES = {
    SYSTEM_PROGRAM_ID: 'System Program',
    TOKEN_PROGRAM_ID: 'Token Program',
    TOKEN_2022_PROGRAM_ID: 'Token-2022 Program',
}
