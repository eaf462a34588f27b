"""Solana message and transaction structures"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .errors import InvalidHeaderError
from .keys import Hash, PublicKey, Signature

# Versioned messages set the high bit of the first byte
VERSION_PREFIX_MASK = 0x80
MAX_COMPACT_U16 = 0xFFFF


class TransactionVersion(Enum):
    """Message wire format"""
    LEGACY = 'legacy'
    V0 = 'v0'


@dataclass(frozen=True)
class MessageHeader:
    """Transaction message header"""
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int

    def validate(self, num_static_accounts: int):
        """Check the counts against the number of static account keys"""
        if self.num_required_signatures > num_static_accounts:
            raise InvalidHeaderError(
                f"{self.num_required_signatures} required signatures but only "
                f"{num_static_accounts} account keys",
                'message header',
            )
        if self.num_readonly_signed_accounts > self.num_required_signatures:
            raise InvalidHeaderError(
                f"{self.num_readonly_signed_accounts} readonly signed accounts exceed "
                f"{self.num_required_signatures} required signatures",
                'message header',
            )
        unsigned = num_static_accounts - self.num_required_signatures
        if self.num_readonly_unsigned_accounts > unsigned:
            raise InvalidHeaderError(
                f"{self.num_readonly_unsigned_accounts} readonly unsigned accounts exceed "
                f"{unsigned} unsigned account keys",
                'message header',
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'numRequiredSignatures': self.num_required_signatures,
            'numReadonlySignedAccounts': self.num_readonly_signed_accounts,
            'numReadonlyUnsignedAccounts': self.num_readonly_unsigned_accounts,
        }


@dataclass(frozen=True)
class CompiledInstruction:
    """Compiled instruction"""
    program_id_index: int
    accounts: Tuple[int, ...]
    data: bytes


@dataclass(frozen=True)
class MessageAddressTableLookup:
    """Reference into an on-chain address lookup table"""
    account_key: PublicKey
    writable_indexes: Tuple[int, ...]
    readonly_indexes: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'addressTableKey': str(self.account_key),
            'writableIndexes': list(self.writable_indexes),
            'readonlyIndexes': list(self.readonly_indexes),
        }


@dataclass(frozen=True)
class Message:
    """Transaction message"""
    version: TransactionVersion
    header: MessageHeader
    account_keys: Tuple[PublicKey, ...]
    recent_blockhash: Hash
    instructions: Tuple[CompiledInstruction, ...]
    address_table_lookups: Tuple[MessageAddressTableLookup, ...] = ()

    def serialize(self) -> bytes:
        """Serialize message to bytes"""
        parts = []

        if self.version is TransactionVersion.V0:
            parts.append(bytes([VERSION_PREFIX_MASK]))

        # Header
        parts.append(bytes([
            self.header.num_required_signatures,
            self.header.num_readonly_signed_accounts,
            self.header.num_readonly_unsigned_accounts,
        ]))

        # Account keys
        parts.append(encode_compact_u16(len(self.account_keys)))
        for key in self.account_keys:
            parts.append(key.raw)

        # Recent blockhash
        parts.append(self.recent_blockhash.raw)

        # Instructions
        parts.append(encode_compact_u16(len(self.instructions)))
        for instruction in self.instructions:
            parts.append(bytes([instruction.program_id_index]))
            parts.append(encode_compact_u16(len(instruction.accounts)))
            parts.append(bytes(instruction.accounts))
            parts.append(encode_compact_u16(len(instruction.data)))
            parts.append(instruction.data)

        if self.version is TransactionVersion.V0:
            parts.append(encode_compact_u16(len(self.address_table_lookups)))
            for lookup in self.address_table_lookups:
                parts.append(lookup.account_key.raw)
                parts.append(encode_compact_u16(len(lookup.writable_indexes)))
                parts.append(bytes(lookup.writable_indexes))
                parts.append(encode_compact_u16(len(lookup.readonly_indexes)))
                parts.append(bytes(lookup.readonly_indexes))

        return b''.join(parts)


class Transaction:
    """Transaction object"""

    def __init__(self, message: Message, signatures: Tuple[Signature, ...] = ()):
        self.message = message
        self.signatures = tuple(signatures)

    def serialize(self) -> bytes:
        """Serialize transaction to bytes"""
        parts = [encode_compact_u16(len(self.signatures))]
        for sig in self.signatures:
            parts.append(sig.raw)
        parts.append(self.message.serialize())
        return b''.join(parts)

    def __eq__(self, other):
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.message == other.message and self.signatures == other.signatures

    def __repr__(self):
        return f"Transaction(signatures={len(self.signatures)}, message={self.message!r})"


def encode_compact_u16(length: int) -> bytes:
    """Encode length as compact-u16"""
    if not 0 <= length <= MAX_COMPACT_U16:
        raise ValueError(f"Compact-u16 value out of range: {length}")
    result = []
    while length > 0x7f:
        result.append((length & 0x7f) | 0x80)
        length >>= 7
    result.append(length)
    return bytes(result)
