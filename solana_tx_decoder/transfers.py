"""Value transfers derived from well-known instructions"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from .errors import BufferExhaustedError
from .keys import PublicKey
from .programs import (
    SYSTEM_PROGRAM_ID,
    SYSTEM_TRANSFER,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    TOKEN_TRANSFER,
    TOKEN_TRANSFER_CHECKED,
    TOKEN_TRANSFER_CHECKED_WITH_FEE,
)
from .reader import ByteCursor
from .resolver import AccountRef, StaticAccount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    """Native SOL transfer, amount in lamports"""
    sender: AccountRef
    receiver: AccountRef
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'from': self.sender.to_dict(),
            'to': self.receiver.to_dict(),
            'amount': self.amount,
        }


@dataclass(frozen=True)
class TokenTransfer:
    """SPL token transfer, amount in the mint's base units"""
    kind: str
    program: PublicKey
    source: AccountRef
    destination: AccountRef
    owner: AccountRef
    amount: int
    signers: Tuple[AccountRef, ...] = ()
    mint: Optional[AccountRef] = None
    decimals: Optional[int] = None
    fee: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'program': str(self.program),
            'from': self.source.to_dict(),
            'to': self.destination.to_dict(),
            'owner': self.owner.to_dict(),
            'amount': self.amount,
            'signers': [s.to_dict() for s in self.signers],
            'mint': self.mint.to_dict() if self.mint is not None else None,
            'decimals': self.decimals,
            'fee': self.fee,
        }


class InstructionPattern(NamedTuple):
    """Program id plus data prefix identifying one instruction type"""
    program_id: PublicKey
    discriminator: bytes
    decode: Callable[[PublicKey, ByteCursor, Sequence[AccountRef]], Any]


def _system_transfer(program: PublicKey, cursor: ByteCursor, accounts: Sequence[AccountRef]):
    lamports = cursor.read_u64le('transfer lamports')
    if len(accounts) < 2:
        return None
    return Transfer(sender=accounts[0], receiver=accounts[1], amount=lamports)


def _token_transfer(program: PublicKey, cursor: ByteCursor, accounts: Sequence[AccountRef]):
    amount = cursor.read_u64le('token amount')
    if len(accounts) < 3:
        return None
    return TokenTransfer(
        kind='transfer',
        program=program,
        source=accounts[0],
        destination=accounts[1],
        owner=accounts[2],
        amount=amount,
        signers=tuple(accounts[3:]),
    )


def _token_transfer_checked(program: PublicKey, cursor: ByteCursor, accounts: Sequence[AccountRef]):
    amount = cursor.read_u64le('token amount')
    decimals = cursor.read_byte('token decimals')
    if len(accounts) < 4:
        return None
    return TokenTransfer(
        kind='transferChecked',
        program=program,
        source=accounts[0],
        mint=accounts[1],
        destination=accounts[2],
        owner=accounts[3],
        amount=amount,
        decimals=decimals,
        signers=tuple(accounts[4:]),
    )


def _token_transfer_checked_with_fee(
    program: PublicKey, cursor: ByteCursor, accounts: Sequence[AccountRef]
):
    amount = cursor.read_u64le('token amount')
    decimals = cursor.read_byte('token decimals')
    fee = cursor.read_u64le('token fee')
    if len(accounts) < 4:
        return None
    return TokenTransfer(
        kind='transferCheckedWithFee',
        program=program,
        source=accounts[0],
        mint=accounts[1],
        destination=accounts[2],
        owner=accounts[3],
        amount=amount,
        decimals=decimals,
        fee=fee,
        signers=tuple(accounts[4:]),
    )


TRANSFER_PATTERNS: Tuple[InstructionPattern, ...] = (
    InstructionPattern(SYSTEM_PROGRAM_ID, SYSTEM_TRANSFER, _system_transfer),
)

TOKEN_TRANSFER_PATTERNS: Tuple[InstructionPattern, ...] = tuple(
    InstructionPattern(program_id, discriminator, decode)
    for program_id in (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID)
    for discriminator, decode in (
        (TOKEN_TRANSFER, _token_transfer),
        (TOKEN_TRANSFER_CHECKED, _token_transfer_checked),
        (TOKEN_TRANSFER_CHECKED_WITH_FEE, _token_transfer_checked_with_fee),
    )
)


class TransferExtractor:
    """Matches instructions against a table of known patterns"""

    def __init__(self, patterns: Sequence[InstructionPattern] = TRANSFER_PATTERNS):
        self.patterns = tuple(patterns)

    def match(self, program: AccountRef, accounts: Sequence[AccountRef], data: bytes):
        """Return the record for one instruction, or None when nothing matches"""
        # Programs referenced through a lookup table have no known key
        if not isinstance(program, StaticAccount):
            return None
        for pattern in self.patterns:
            if program.key != pattern.program_id:
                continue
            cursor = ByteCursor(data)
            if cursor.remaining < len(pattern.discriminator):
                continue
            if cursor.read_bytes(len(pattern.discriminator)) != pattern.discriminator:
                continue
            try:
                record = pattern.decode(program.key, cursor, accounts)
            except BufferExhaustedError:
                record = None
            if record is None:
                logger.debug(
                    "Skipping %s instruction with %d data bytes and %d accounts",
                    program.key, len(data), len(accounts),
                )
            return record
        return None

    def extract(self, instructions: Iterable[Any]) -> List[Any]:
        """Collect records from objects exposing program, accounts and data"""
        records = []
        for instruction in instructions:
            record = self.match(instruction.program, instruction.accounts, instruction.data)
            if record is not None:
                records.append(record)
        return records
