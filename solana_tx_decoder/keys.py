"""Fixed-size identities: public keys, hashes and signatures"""

from dataclasses import dataclass
from typing import ClassVar

import base58


@dataclass(frozen=True)
class _Base58Value:
    raw: bytes

    LENGTH: ClassVar[int] = 32

    def __post_init__(self):
        if len(self.raw) != self.LENGTH:
            raise ValueError(
                f"{type(self).__name__} must be {self.LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, 'raw', bytes(self.raw))

    @classmethod
    def from_base58(cls, value: str):
        return cls(base58.b58decode(value))

    def to_base58(self) -> str:
        return base58.b58encode(self.raw).decode('ascii')

    def __str__(self) -> str:
        return self.to_base58()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_base58()!r})"


class PublicKey(_Base58Value):
    """32-byte account address"""


class Hash(_Base58Value):
    """32-byte blockhash"""


@dataclass(frozen=True)
class Signature:
    """64-byte ed25519 signature, kept opaque"""
    raw: bytes

    LENGTH: ClassVar[int] = 64

    def __post_init__(self):
        if len(self.raw) != self.LENGTH:
            raise ValueError(f"Signature must be {self.LENGTH} bytes, got {len(self.raw)}")
        object.__setattr__(self, 'raw', bytes(self.raw))

    def to_hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.to_hex()
