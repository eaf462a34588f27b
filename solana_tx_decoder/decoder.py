"""Decoding of serialized Solana messages and transactions"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import (
    SignatureCountMismatchError,
    TrailingBytesError,
    UnsupportedVersionError,
    UsageError,
)
from .keys import Hash, PublicKey, Signature
from .reader import ByteCursor
from .resolver import AccountRef, AccountResolver, LookupAccount, StaticAccount
from .transaction import (
    VERSION_PREFIX_MASK,
    CompiledInstruction,
    Message,
    MessageAddressTableLookup,
    MessageHeader,
    Transaction,
    TransactionVersion,
)
from .transfers import TOKEN_TRANSFER_PATTERNS, TokenTransfer, Transfer, TransferExtractor

logger = logging.getLogger(__name__)


class DecodeMode(Enum):
    """What the input bytes hold"""
    MESSAGE = 'message'
    TRANSACTION = 'transaction'


@dataclass
class DecoderConfig:
    """Configuration for a TransactionDecoder"""
    allow_trailing_bytes: bool = False
    strict_signature_count: bool = False
    decode_token_transfers: bool = True


def bytes_from_hex(value: str) -> bytes:
    """Convert a hex string, optionally 0x-prefixed, to bytes"""
    cleaned = ''.join(value.split())
    if cleaned[:2].lower() == '0x':
        cleaned = cleaned[2:]
    if not cleaned:
        raise UsageError("Transaction is empty")
    try:
        return bytes.fromhex(cleaned)
    except ValueError as exc:
        raise UsageError(f"Input is not valid hex: {exc}") from exc


# Section decoders, applied in wire order


def decode_header(cursor: ByteCursor) -> Tuple[TransactionVersion, MessageHeader]:
    """Read the optional version prefix and the three header counts"""
    start = cursor.offset
    first = cursor.peek_byte('message header')
    if first & VERSION_PREFIX_MASK:
        cursor.read_byte('message header')
        version = first & 0x7F
        if version != 0:
            raise UnsupportedVersionError(version, start)
        tx_version = TransactionVersion.V0
    else:
        tx_version = TransactionVersion.LEGACY

    header = MessageHeader(
        num_required_signatures=cursor.read_byte('message header'),
        num_readonly_signed_accounts=cursor.read_byte('message header'),
        num_readonly_unsigned_accounts=cursor.read_byte('message header'),
    )
    logger.debug("Decoded %s message header %s", tx_version.value, header)
    return tx_version, header


def decode_account_keys(cursor: ByteCursor) -> Tuple[PublicKey, ...]:
    """Read the static account key list"""
    count = cursor.read_compact_u16('account keys')
    keys = tuple(PublicKey(cursor.read_fixed32('account keys')) for _ in range(count))
    logger.debug("Decoded %d static account keys", len(keys))
    return keys


def decode_recent_blockhash(cursor: ByteCursor) -> Hash:
    """Read the recent blockhash"""
    return Hash(cursor.read_fixed32('recent blockhash'))


def decode_instruction(cursor: ByteCursor) -> CompiledInstruction:
    """Read one compiled instruction"""
    program_id_index = cursor.read_byte('instruction program index')
    accounts = tuple(cursor.read_compact_bytes('instruction accounts'))
    data = cursor.read_compact_bytes('instruction data')
    return CompiledInstruction(program_id_index=program_id_index, accounts=accounts, data=data)


def decode_instructions(cursor: ByteCursor) -> Tuple[CompiledInstruction, ...]:
    """Read the instruction list"""
    count = cursor.read_compact_u16('instructions')
    instructions = tuple(decode_instruction(cursor) for _ in range(count))
    logger.debug("Decoded %d instructions", len(instructions))
    return instructions


def decode_address_table_lookup(cursor: ByteCursor) -> MessageAddressTableLookup:
    """Read one address table lookup"""
    account_key = PublicKey(cursor.read_fixed32('address table lookup key'))
    writable = tuple(cursor.read_compact_bytes('address table lookup writable indexes'))
    readonly = tuple(cursor.read_compact_bytes('address table lookup readonly indexes'))
    return MessageAddressTableLookup(
        account_key=account_key,
        writable_indexes=writable,
        readonly_indexes=readonly,
    )


def decode_address_table_lookups(cursor: ByteCursor) -> Tuple[MessageAddressTableLookup, ...]:
    """Read the address table lookup list of a v0 message"""
    count = cursor.read_compact_u16('address table lookups')
    lookups = tuple(decode_address_table_lookup(cursor) for _ in range(count))
    logger.debug("Decoded %d address table lookups", len(lookups))
    return lookups


def decode_signatures(cursor: ByteCursor) -> Tuple[Signature, ...]:
    """Read the signature array that precedes a message"""
    count = cursor.read_compact_u16('signatures')
    signatures = tuple(Signature(cursor.read_fixed64('signatures')) for _ in range(count))
    logger.debug("Decoded %d signatures", len(signatures))
    return signatures


def decode_message(cursor: ByteCursor) -> Message:
    """Decode one message starting at the cursor position"""
    version, header = decode_header(cursor)
    account_keys = decode_account_keys(cursor)
    header.validate(len(account_keys))
    recent_blockhash = decode_recent_blockhash(cursor)
    instructions = decode_instructions(cursor)
    lookups: Tuple[MessageAddressTableLookup, ...] = ()
    if version is TransactionVersion.V0:
        lookups = decode_address_table_lookups(cursor)
    return Message(
        version=version,
        header=header,
        account_keys=account_keys,
        recent_blockhash=recent_blockhash,
        instructions=instructions,
        address_table_lookups=lookups,
    )


@dataclass(frozen=True)
class ParsedInstruction:
    """Instruction with its program and accounts resolved"""
    index: int
    program: AccountRef
    accounts: Tuple[AccountRef, ...]
    data: bytes

    @property
    def static_accounts(self) -> List[StaticAccount]:
        return [a for a in self.accounts if isinstance(a, StaticAccount)]

    @property
    def address_table_lookups(self) -> List[LookupAccount]:
        return [a for a in self.accounts if isinstance(a, LookupAccount)]

    @property
    def data_hex(self) -> str:
        return self.data.hex()

    def to_dict(self) -> Dict[str, Any]:
        program = self.program
        if isinstance(program, StaticAccount):
            program_key = str(program.key)
        else:
            program_key = None
        return {
            'programKey': program_key,
            'program': program.to_dict(),
            'accounts': [a.to_dict() for a in self.static_accounts],
            'addressTableLookups': [a.to_dict() for a in self.address_table_lookups],
            'instructionDataHex': self.data_hex,
        }


@dataclass(frozen=True)
class ParsedTransaction:
    """Everything decoded from one message or transaction"""
    unsigned_payload: bytes
    signatures: Tuple[Signature, ...]
    message: Message
    account_keys: Tuple[StaticAccount, ...]
    program_keys: Tuple[PublicKey, ...]
    instructions: Tuple[ParsedInstruction, ...]
    transfers: Tuple[Transfer, ...]
    token_transfers: Tuple[TokenTransfer, ...] = ()
    signature_count_matches: bool = True

    @property
    def version(self) -> TransactionVersion:
        return self.message.version

    @property
    def header(self) -> MessageHeader:
        return self.message.header

    @property
    def recent_blockhash(self) -> Hash:
        return self.message.recent_blockhash

    @property
    def address_table_lookups(self) -> Tuple[MessageAddressTableLookup, ...]:
        return self.message.address_table_lookups

    @property
    def transaction(self) -> Transaction:
        return Transaction(self.message, self.signatures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'unsignedPayload': self.unsigned_payload.hex(),
            'version': self.version.value,
            'header': self.header.to_dict(),
            'signatures': [s.to_hex() for s in self.signatures],
            'accountKeys': [a.to_dict() for a in self.account_keys],
            'programKeys': [str(k) for k in self.program_keys],
            'recentBlockhash': str(self.recent_blockhash),
            'instructions': [i.to_dict() for i in self.instructions],
            'transfers': [t.to_dict() for t in self.transfers],
            'tokenTransfers': [t.to_dict() for t in self.token_transfers],
            'addressTableLookups': [lookup.to_dict() for lookup in self.address_table_lookups],
        }


class TransactionDecoder:
    """Decodes raw message or transaction bytes into a ParsedTransaction"""

    def __init__(self, config: Optional[DecoderConfig] = None):
        self.config = config or DecoderConfig()
        self._transfers = TransferExtractor()
        self._token_transfers = TransferExtractor(TOKEN_TRANSFER_PATTERNS)

    def decode(self, data: bytes, mode: Union[DecodeMode, str]) -> ParsedTransaction:
        """
        Decode ``data`` as a bare message or as a full transaction.

        Args:
            data: Serialized bytes
            mode: DecodeMode or its string value

        Returns:
            ParsedTransaction

        Raises:
            UsageError: unknown mode
            MalformedInputError: bytes do not form a valid message
            AccountIndexError: an instruction references a missing account
        """
        mode = self._coerce_mode(mode)
        cursor = ByteCursor(data)

        signatures: Tuple[Signature, ...] = ()
        if mode is DecodeMode.TRANSACTION:
            signatures = decode_signatures(cursor)

        payload_start = cursor.offset
        message = decode_message(cursor)
        if not cursor.eof:
            if not self.config.allow_trailing_bytes:
                raise TrailingBytesError(
                    f"{cursor.remaining} extraneous bytes after {message.version.value} message",
                    'message',
                    cursor.offset,
                )
            logger.debug("Ignoring %d trailing bytes", cursor.remaining)

        signature_count_matches = True
        if mode is DecodeMode.TRANSACTION:
            signature_count_matches = self._check_signature_count(signatures, message.header)

        return self._assemble(
            unsigned_payload=bytes(data[payload_start:]),
            signatures=signatures,
            message=message,
            signature_count_matches=signature_count_matches,
        )

    def decode_message(self, data: bytes) -> ParsedTransaction:
        return self.decode(data, DecodeMode.MESSAGE)

    def decode_transaction(self, data: bytes) -> ParsedTransaction:
        return self.decode(data, DecodeMode.TRANSACTION)

    def decode_hex(self, value: str, mode: Union[DecodeMode, str]) -> ParsedTransaction:
        mode = self._coerce_mode(mode)
        return self.decode(bytes_from_hex(value), mode)

    @staticmethod
    def _coerce_mode(mode: Union[DecodeMode, str]) -> DecodeMode:
        if isinstance(mode, DecodeMode):
            return mode
        try:
            return DecodeMode(mode)
        except ValueError as exc:
            raise UsageError(
                f"Mode must be 'message' or 'transaction', got {mode!r}"
            ) from exc

    def _check_signature_count(self, signatures: Tuple[Signature, ...], header: MessageHeader) -> bool:
        if len(signatures) == header.num_required_signatures:
            return True
        message = (
            f"Transaction carries {len(signatures)} signatures but the header "
            f"requires {header.num_required_signatures}"
        )
        if self.config.strict_signature_count:
            raise SignatureCountMismatchError(message, 'signatures', 0)
        logger.warning(message)
        return False

    def _assemble(
        self,
        unsigned_payload: bytes,
        signatures: Tuple[Signature, ...],
        message: Message,
        signature_count_matches: bool,
    ) -> ParsedTransaction:
        resolver = AccountResolver(message.header, message.account_keys, message.address_table_lookups)

        instructions = tuple(
            ParsedInstruction(
                index=i,
                program=resolver.resolve(ix.program_id_index, 'instruction program index', i),
                accounts=tuple(resolver.resolve_all(ix.accounts, 'instruction accounts', i)),
                data=ix.data,
            )
            for i, ix in enumerate(message.instructions)
        )

        transfers = tuple(self._transfers.extract(instructions))
        token_transfers: Tuple[TokenTransfer, ...] = ()
        if self.config.decode_token_transfers:
            token_transfers = tuple(self._token_transfers.extract(instructions))

        program_keys = resolver.invoked_program_keys(
            [ix.program_id_index for ix in message.instructions]
        )

        logger.debug(
            "Parsed %s message: %d accounts, %d instructions, %d transfers",
            message.version.value, len(message.account_keys), len(instructions), len(transfers),
        )
        return ParsedTransaction(
            unsigned_payload=unsigned_payload,
            signatures=signatures,
            message=message,
            account_keys=resolver.static_accounts,
            program_keys=tuple(program_keys),
            instructions=instructions,
            transfers=transfers,
            token_transfers=token_transfers,
            signature_count_matches=signature_count_matches,
        )


_default_decoder = TransactionDecoder()


def parse_message(data: bytes) -> ParsedTransaction:
    """Decode bytes holding only a message"""
    return _default_decoder.decode_message(data)


def parse_transaction(data: bytes) -> ParsedTransaction:
    """Decode bytes holding a signature array followed by a message"""
    return _default_decoder.decode_transaction(data)


def parse_hex(value: str, mode: Union[DecodeMode, str]) -> ParsedTransaction:
    """Decode a hex string in the given mode"""
    return _default_decoder.decode_hex(value, mode)
