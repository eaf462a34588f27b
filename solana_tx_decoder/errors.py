"""Errors raised while decoding Solana transactions"""

from typing import Optional


class TransactionParseError(Exception):
    """Base error for everything the decoder rejects"""

    def __init__(self, message: str, field: Optional[str] = None, offset: Optional[int] = None):
        self.message = message
        self.field = field
        self.offset = offset
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = [self.message]
        if self.field:
            parts.append(f"while parsing {self.field}")
        if self.offset is not None:
            parts.append(f"at offset {self.offset}")
        return ' '.join(parts)


class MalformedInputError(TransactionParseError):
    """The bytes do not form a valid message or transaction"""


class BufferExhaustedError(MalformedInputError):
    """A read needed more bytes than remain in the buffer"""


class CompactLengthOverflowError(MalformedInputError):
    """A compact-u16 length does not fit in 16 bits"""


class NonCanonicalLengthError(MalformedInputError):
    """A compact-u16 length encoded with more bytes than its value needs"""


class UnsupportedVersionError(MalformedInputError):
    """Versioned message with a version other than 0"""

    def __init__(self, version: int, offset: Optional[int] = None):
        self.version = version
        super().__init__(f"Unsupported message version {version}", 'message header', offset)


class InvalidHeaderError(MalformedInputError):
    """Header counts inconsistent with the static account list"""


class TrailingBytesError(MalformedInputError):
    """Bytes left over after the last section of the message"""


class SignatureCountMismatchError(MalformedInputError):
    """Signature array length differs from the header's required signatures"""


class AccountIndexError(TransactionParseError):
    """Account index beyond both static and lookup account space"""

    def __init__(
        self,
        index: int,
        static_count: int,
        lookup_count: int,
        field: str = 'instruction accounts',
        instruction: Optional[int] = None,
    ):
        self.index = index
        self.static_count = static_count
        self.lookup_count = lookup_count
        self.instruction = instruction
        message = (
            f"Account index {index} out of range "
            f"({static_count} static, {lookup_count} from address table lookups)"
        )
        if instruction is not None:
            message += f" in instruction {instruction}"
        super().__init__(message, field)


class UsageError(TransactionParseError):
    """Caller supplied an invalid mode or non-hex input"""
