"""
Shared vectors and builders for the decoder tests.

The legacy vector is a 111 lamport system transfer. The v0 vector is a
Jupiter route transaction with one address lookup table, see
https://solscan.io/tx/4tkFaZQPGNYTBag6sNTawpBnAodqiBNF494y86s2qBLohQucW1AHRaq9Mm3vWTSxFRaUTmtdYp67pbBRz5RDoAdr
"""

from types import SimpleNamespace

import pytest

from solana_tx_decoder.keys import Hash, PublicKey
from solana_tx_decoder.transaction import (
    CompiledInstruction,
    Message,
    MessageAddressTableLookup,
    MessageHeader,
    TransactionVersion,
)

LEGACY_MESSAGE_HEX = (
    "010001032b162ad640a79029d57fbe5dad39d5741066c4c65b22bd248c8677174c28a4630d42099a5e0aaeaad1"
    "d4ede263662787cb3f6291a6ede340c4aa7ca26249dbe300000000000000000000000000000000000000000000"
    "0000000000000000000021d594adba2b7fbd34a0383ded05e2ba526e907270d8394b47886805b880e732010202"
    "00010c020000006f00000000000000"
)

ZERO_SIGNATURE_HEX = "00" * 64

LEGACY_TRANSACTION_HEX = "01" + ZERO_SIGNATURE_HEX + LEGACY_MESSAGE_HEX

V0_MESSAGE_HEX = (
    "800100070ae05271368f77a2c5fefe77ce50e2b2f93ceb671eee8b172734c8d4df9d9eddc186a35856664b0330"
    "6690c1c0fbd4b5821aea1c64ffb8c368a0422e47ae0d2895de288ba87b903021e6c8c2abf12c2484e98b040792"
    "b1fbb87091bc8e0dd76b66000000000000000000000000000000000000000000000000000000000000000003064"
    "66fe5211732ffecadba72c39be7bc8ce5bbc5f7126b2c439b3a400000000479d55bf231c06eee74c56ece68150"
    "7fdb1b2dea3f48e5102b1cda256bc138f06ddf6e1d765a193d9cbe146ceeb79ac1cb485ed5f5b37913a8cf5857"
    "eff00a98c97258f4e2489f1bb3d1029148e0d830b5a1399daff1084048e7bd8dbe9f859b43ffa27f5d7f64a74c"
    "09b1f295879de4b09ab36dfc9dd514b321aa7b38ce5e8c6fa7af3bedbad3a3d65f36aabc97431b1bbe4c2d2f6e"
    "0e47ca60203452f5d616419cee70b839eb4eadd1411aa73eea6fd8700da5f0ea730136db1dd6fb2de660804000"
    "502c05c150004000903caa200000000000007060002000e03060101030200020c0200000080f0fa0200000000"
    "0601020111070600010009030601010515060002010509050805100f0a0d01020b0c0011060524e517cb977ae3"
    "ad2a01000000120064000180f0fa02000000005d34700000000000320000060302000001090158b73fa66d1fb4"
    "a0562610136ebc84c7729542a8d792cb9bd2ad1bf75c30d5a404bdc2c1ba0497bcbbbf"
)

V0_TRANSACTION_HEX = "01" + ZERO_SIGNATURE_HEX + V0_MESSAGE_HEX

SENDER_KEY = "3uC8tBZQQA1RCKv9htCngTfYm4JK4ezuYx4M4nFsZQVp"
RECIPIENT_KEY = "tkhqC9QX2gkqJtUFk2QKhBmQfFyyqZXSpr73VFRi35C"
SYSTEM_PROGRAM_KEY = "11111111111111111111111111111111"
LOOKUP_TABLE_KEY = "6yJwigBRYdkrpfDEsCRj7H5rrzdnAYv8LHzYbb5jRFKy"


def key(n: int) -> PublicKey:
    """Deterministic key whose bytes are all ``n``"""
    return PublicKey(bytes([n]) * 32)


def build_message(
    header=(1, 0, 0),
    account_keys=None,
    instructions=(),
    address_table_lookups=None,
    blockhash=b'\x07' * 32,
) -> Message:
    """Build a message; passing address_table_lookups makes it v0"""
    if account_keys is None:
        account_keys = [key(1)]
    version = TransactionVersion.LEGACY
    lookups = ()
    if address_table_lookups is not None:
        version = TransactionVersion.V0
        lookups = tuple(
            MessageAddressTableLookup(table, tuple(writable), tuple(readonly))
            for table, writable, readonly in address_table_lookups
        )
    return Message(
        version=version,
        header=MessageHeader(*header),
        account_keys=tuple(account_keys),
        recent_blockhash=Hash(blockhash),
        instructions=tuple(
            CompiledInstruction(program, tuple(accounts), bytes(data))
            for program, accounts, data in instructions
        ),
        address_table_lookups=lookups,
    )


@pytest.fixture
def legacy_message_bytes():
    return bytes.fromhex(LEGACY_MESSAGE_HEX)


@pytest.fixture
def legacy_transaction_bytes():
    return bytes.fromhex(LEGACY_TRANSACTION_HEX)


@pytest.fixture
def v0_transaction_bytes():
    return bytes.fromhex(V0_TRANSACTION_HEX)


@pytest.fixture
def make_key():
    return key


@pytest.fixture
def make_message():
    return build_message


@pytest.fixture
def vectors():
    return SimpleNamespace(
        legacy_message_hex=LEGACY_MESSAGE_HEX,
        legacy_transaction_hex=LEGACY_TRANSACTION_HEX,
        v0_message_hex=V0_MESSAGE_HEX,
        v0_transaction_hex=V0_TRANSACTION_HEX,
        zero_signature_hex=ZERO_SIGNATURE_HEX,
        sender=SENDER_KEY,
        recipient=RECIPIENT_KEY,
        system_program=SYSTEM_PROGRAM_KEY,
        lookup_table=LOOKUP_TABLE_KEY,
    )
