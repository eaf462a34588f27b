"""Offline decoder for serialized Solana transactions and messages"""

from .decoder import (
    DecodeMode,
    DecoderConfig,
    ParsedInstruction,
    ParsedTransaction,
    TransactionDecoder,
    parse_hex,
    parse_message,
    parse_transaction,
)
from .errors import (
    AccountIndexError,
    BufferExhaustedError,
    CompactLengthOverflowError,
    MalformedInputError,
    NonCanonicalLengthError,
    TransactionParseError,
    UnsupportedVersionError,
    UsageError,
)
from .keys import Hash, PublicKey, Signature
from .resolver import AccountResolver, LookupAccount, StaticAccount
from .transaction import Message, Transaction, TransactionVersion
from .transfers import TokenTransfer, Transfer

__version__ = '0.1.0'

__all__ = [
    'AccountIndexError',
    'AccountResolver',
    'BufferExhaustedError',
    'CompactLengthOverflowError',
    'DecodeMode',
    'DecoderConfig',
    'Hash',
    'LookupAccount',
    'MalformedInputError',
    'NonCanonicalLengthError',
    'Message',
    'ParsedInstruction',
    'ParsedTransaction',
    'PublicKey',
    'Signature',
    'StaticAccount',
    'TokenTransfer',
    'Transaction',
    'TransactionDecoder',
    'TransactionParseError',
    'TransactionVersion',
    'Transfer',
    'UnsupportedVersionError',
    'UsageError',
    'parse_hex',
    'parse_message',
    'parse_transaction',
]
