"""Tests for transfer extraction"""

import logging
import struct

import pytest

from solana_tx_decoder import DecoderConfig, TransactionDecoder, parse_message
from solana_tx_decoder.programs import (
    SYSTEM_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from solana_tx_decoder.resolver import LookupAccount, StaticAccount
from solana_tx_decoder.transfers import (
    TOKEN_TRANSFER_PATTERNS,
    TokenTransfer,
    Transfer,
    TransferExtractor,
)


def system_transfer_data(lamports):
    return struct.pack('<IQ', 2, lamports)


@pytest.fixture
def accounts(make_key):
    return [
        StaticAccount(make_key(1), signer=True, writable=True),
        StaticAccount(make_key(2), signer=False, writable=True),
        StaticAccount(make_key(3), signer=False, writable=False),
        StaticAccount(make_key(4), signer=True, writable=False),
        StaticAccount(make_key(5), signer=True, writable=False),
    ]


@pytest.fixture
def system_program():
    return StaticAccount(SYSTEM_PROGRAM_ID, signer=False, writable=False)


class TestSystemTransfer:
    """Only the system program's Transfer instruction yields a Transfer."""

    def test_match(self, system_program, accounts):
        record = TransferExtractor().match(system_program, accounts[:2], system_transfer_data(111))
        assert record == Transfer(sender=accounts[0], receiver=accounts[1], amount=111)

    def test_max_amount(self, system_program, accounts):
        record = TransferExtractor().match(
            system_program, accounts[:2], system_transfer_data(2 ** 64 - 1)
        )
        assert record.amount == 2 ** 64 - 1

    @pytest.mark.parametrize("data", [
        struct.pack('<IQ', 0, 111),      # CreateAccount
        struct.pack('<I', 2) + b'\x6f',  # amount cut short
        b'\x02\x00',                     # discriminator cut short
        b'',
    ])
    def test_no_match(self, system_program, accounts, data):
        assert TransferExtractor().match(system_program, accounts[:2], data) is None

    def test_truncated_amount_is_skipped(self, system_program, accounts, caplog):
        data = system_transfer_data(5)[:-1]
        with caplog.at_level(logging.DEBUG, logger='solana_tx_decoder.transfers'):
            assert TransferExtractor().match(system_program, accounts, data) is None
        assert "Skipping" in caplog.text

    def test_trailing_data_is_ignored(self, system_program, accounts):
        record = TransferExtractor().match(system_program, accounts, system_transfer_data(5) + b'\x00')
        assert record.amount == 5

    def test_single_account_is_skipped(self, system_program, accounts):
        assert TransferExtractor().match(
            system_program, accounts[:1], system_transfer_data(5)
        ) is None

    def test_other_program(self, accounts):
        program = StaticAccount(TOKEN_PROGRAM_ID, signer=False, writable=False)
        assert TransferExtractor().match(program, accounts[:2], system_transfer_data(5)) is None

    def test_program_from_lookup_table(self, make_key, accounts):
        program = LookupAccount(make_key(9), 0, False)
        assert TransferExtractor().match(program, accounts[:2], system_transfer_data(5)) is None

    def test_lookup_accounts_as_parties(self, system_program, make_key):
        parties = [LookupAccount(make_key(9), 4, True), LookupAccount(make_key(9), 7, True)]
        record = TransferExtractor().match(system_program, parties, system_transfer_data(5))
        assert record.sender == parties[0]
        assert record.receiver == parties[1]

    def test_token_instructions_never_become_transfers(self, accounts):
        program = StaticAccount(TOKEN_PROGRAM_ID, signer=False, writable=False)
        data = b'\x03' + struct.pack('<Q', 10)
        assert TransferExtractor().match(program, accounts[:3], data) is None


class TestTokenTransfers:
    """Token and Token-2022 transfers go to their own record type."""

    @pytest.fixture
    def extractor(self):
        return TransferExtractor(TOKEN_TRANSFER_PATTERNS)

    @pytest.mark.parametrize("program_id", [TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID])
    def test_transfer(self, extractor, accounts, program_id):
        program = StaticAccount(program_id, signer=False, writable=False)
        data = b'\x03' + struct.pack('<Q', 1000)
        record = extractor.match(program, accounts[:4], data)
        assert record == TokenTransfer(
            kind='transfer',
            program=program_id,
            source=accounts[0],
            destination=accounts[1],
            owner=accounts[2],
            amount=1000,
            signers=(accounts[3],),
        )

    def test_transfer_checked(self, extractor, accounts):
        program = StaticAccount(TOKEN_PROGRAM_ID, signer=False, writable=False)
        data = bytes([12]) + struct.pack('<QB', 2500, 6)
        record = extractor.match(program, accounts[:4], data)
        assert record.kind == 'transferChecked'
        assert record.source == accounts[0]
        assert record.mint == accounts[1]
        assert record.destination == accounts[2]
        assert record.owner == accounts[3]
        assert record.amount == 2500
        assert record.decimals == 6
        assert record.signers == ()

    def test_transfer_checked_with_fee(self, extractor, accounts):
        program = StaticAccount(TOKEN_2022_PROGRAM_ID, signer=False, writable=False)
        data = bytes([26, 1]) + struct.pack('<QBQ', 2500, 9, 25)
        record = extractor.match(program, accounts, data)
        assert record.kind == 'transferCheckedWithFee'
        assert record.fee == 25
        assert record.decimals == 9
        assert record.signers == (accounts[4],)

    @pytest.mark.parametrize("data,count", [
        (b'\x03' + struct.pack('<Q', 1), 2),           # missing owner
        (b'\x03\x01\x00', 3),                          # amount cut short
        (bytes([12]) + struct.pack('<Q', 1), 4),       # decimals missing
        (bytes([26, 1]) + struct.pack('<QB', 1, 6), 4),  # fee missing
        (bytes([26, 2]) + struct.pack('<QBQ', 1, 6, 1), 4),  # other fee extension instruction
        (b'\x09', 3),                                  # CloseAccount
        (b'\x1a', 4),                                  # fee extension tag without its second byte
    ])
    def test_skipped(self, extractor, accounts, data, count):
        program = StaticAccount(TOKEN_PROGRAM_ID, signer=False, writable=False)
        assert extractor.match(program, accounts[:count], data) is None


class TestDecoderIntegration:
    """Both lists are filled while decoding a message."""

    @pytest.fixture
    def message_bytes(self, make_message, make_key):
        keys = [make_key(1), make_key(2), make_key(3), SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID]
        message = make_message(
            header=(1, 0, 2),
            account_keys=keys,
            instructions=[
                (3, [0, 1], system_transfer_data(7)),
                (4, [1, 2, 0], b'\x03' + struct.pack('<Q', 42)),
                (3, [0, 2], system_transfer_data(8)),
            ],
        )
        return message.serialize()

    def test_lists_are_separate(self, message_bytes):
        parsed = parse_message(message_bytes)
        assert [t.amount for t in parsed.transfers] == [7, 8]
        assert [t.amount for t in parsed.token_transfers] == [42]
        assert parsed.token_transfers[0].owner == parsed.account_keys[0]

    def test_token_transfers_disabled(self, message_bytes):
        decoder = TransactionDecoder(DecoderConfig(decode_token_transfers=False))
        parsed = decoder.decode_message(message_bytes)
        assert len(parsed.transfers) == 2
        assert parsed.token_transfers == ()
