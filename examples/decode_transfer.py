"""Example: Decode a SOL transfer as a bare message and as a signed transaction"""

from solana_tx_decoder import LookupAccount, StaticAccount, TransactionDecoder
from solana_tx_decoder.report import format_report

TRANSFER_MESSAGE = (
    '010001032b162ad640a79029d57fbe5dad39d5741066c4c65b22bd248c8677174c28a4630d42099a5e0aaeaad1'
    'd4ede263662787cb3f6291a6ede340c4aa7ca26249dbe300000000000000000000000000000000000000000000'
    '0000000000000000000021d594adba2b7fbd34a0383ded05e2ba526e907270d8394b47886805b880e732010202'
    '00010c020000006f00000000000000'
)


def main():
    decoder = TransactionDecoder()

    # Parse the message region only
    parsed = decoder.decode_hex(TRANSFER_MESSAGE, 'message')
    print(format_report(parsed))

    # Walk the resolved accounts of every instruction
    print("\nInstruction accounts:")
    for instruction in parsed.instructions:
        for ref in instruction.accounts:
            if isinstance(ref, StaticAccount):
                print(f"  {ref.key} signer={ref.signer} writable={ref.writable}")
            elif isinstance(ref, LookupAccount):
                print(f"  table {ref.table_key}[{ref.index}] writable={ref.writable}")

    # The same message wrapped in a transaction with one placeholder signature
    transaction_hex = '01' + '00' * 64 + TRANSFER_MESSAGE
    signed = decoder.decode_hex(transaction_hex, 'transaction')
    print(f"\nSignatures: {[str(s) for s in signed.signatures]}")
    print(f"Same payload: {signed.unsigned_payload == parsed.unsigned_payload}")

    for transfer in signed.transfers:
        print(f"Transfer: {transfer.amount} lamports {transfer.sender.key} -> {transfer.receiver.key}")


if __name__ == '__main__':
    main()
