"""Resolution of instruction account indexes to accounts"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .errors import AccountIndexError
from .keys import PublicKey
from .transaction import MessageAddressTableLookup, MessageHeader


@dataclass(frozen=True)
class StaticAccount:
    """Account whose key is included in the message"""
    key: PublicKey
    signer: bool
    writable: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accountKey': str(self.key),
            'signer': self.signer,
            'writable': self.writable,
        }


@dataclass(frozen=True)
class LookupAccount:
    """Account referenced through an address lookup table, never resolved to a key"""
    table_key: PublicKey
    index: int
    writable: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'addressTableKey': str(self.table_key),
            'index': self.index,
            'writable': self.writable,
        }


AccountRef = Union[StaticAccount, LookupAccount]


class AccountResolver:
    """
    Maps account indexes onto the combined account space of a message.

    Indexes below the number of static keys select a static key; signer and
    writable flags follow from its position and the header counts. Higher
    indexes address the lookup entries, ordered as the writable indexes of
    every lookup followed by the readonly indexes of every lookup:

        [static keys] + [lookup 1 writable] + [lookup 2 writable] + ...
                      + [lookup 1 readonly] + [lookup 2 readonly] + ...
    """

    def __init__(
        self,
        header: MessageHeader,
        account_keys: Sequence[PublicKey],
        address_table_lookups: Sequence[MessageAddressTableLookup] = (),
    ):
        self.header = header
        self.account_keys = tuple(account_keys)
        self.address_table_lookups = tuple(address_table_lookups)
        self._static = tuple(
            StaticAccount(key=key, signer=self.is_signer(i), writable=self.is_writable(i))
            for i, key in enumerate(self.account_keys)
        )

    @property
    def num_static_accounts(self) -> int:
        """Number of keys carried in the message itself"""
        return len(self.account_keys)

    @property
    def num_lookup_accounts(self) -> int:
        """Number of indexes contributed by all address table lookups"""
        return sum(
            len(lookup.writable_indexes) + len(lookup.readonly_indexes)
            for lookup in self.address_table_lookups
        )

    @property
    def static_accounts(self) -> Tuple[StaticAccount, ...]:
        """Static keys with their signer and writable flags"""
        return self._static

    def is_signer(self, index: int) -> bool:
        """Whether the static account at index must sign"""
        return index < self.header.num_required_signatures

    def is_writable(self, index: int) -> bool:
        """Whether the static account at index may be written"""
        required = self.header.num_required_signatures
        if index < required:
            return index < required - self.header.num_readonly_signed_accounts
        return index < self.num_static_accounts - self.header.num_readonly_unsigned_accounts

    def resolve(
        self,
        index: int,
        field: str = 'instruction accounts',
        instruction: Optional[int] = None,
    ) -> AccountRef:
        """Map one account index to a static or lookup account"""
        if 0 <= index < self.num_static_accounts:
            return self._static[index]
        if index < 0:
            raise AccountIndexError(
                index, self.num_static_accounts, self.num_lookup_accounts, field, instruction
            )
        return self._resolve_lookup(index, field, instruction)

    def resolve_all(
        self,
        indexes: Sequence[int],
        field: str = 'instruction accounts',
        instruction: Optional[int] = None,
    ) -> List[AccountRef]:
        """Resolve a list of indexes, keeping their order"""
        return [self.resolve(i, field, instruction) for i in indexes]

    def _resolve_lookup(self, index: int, field: str, instruction: Optional[int]) -> LookupAccount:
        position = index - self.num_static_accounts
        seen = 0

        for lookup in self.address_table_lookups:
            if position < seen + len(lookup.writable_indexes):
                return LookupAccount(
                    table_key=lookup.account_key,
                    index=lookup.writable_indexes[position - seen],
                    writable=True,
                )
            seen += len(lookup.writable_indexes)

        for lookup in self.address_table_lookups:
            if position < seen + len(lookup.readonly_indexes):
                return LookupAccount(
                    table_key=lookup.account_key,
                    index=lookup.readonly_indexes[position - seen],
                    writable=False,
                )
            seen += len(lookup.readonly_indexes)

        raise AccountIndexError(index, self.num_static_accounts, seen, field, instruction)

    def invoked_program_keys(self, program_indexes: Sequence[int]) -> List[PublicKey]:
        """Static keys used as instruction programs, in account order"""
        invoked = set(program_indexes)
        return [key for i, key in enumerate(self.account_keys) if i in invoked]
