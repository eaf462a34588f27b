"""Command line entry point"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .decoder import DecodeMode, DecoderConfig, TransactionDecoder, bytes_from_hex
from .errors import TransactionParseError, UsageError
from .report import format_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='solana-tx-decode',
        description="Decode a hex-encoded Solana message or transaction without touching the network.",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        '--message',
        dest='mode',
        action='store_const',
        const=DecodeMode.MESSAGE,
        help="Input is a bare message (the signed payload).",
    )
    mode.add_argument(
        '--transaction',
        dest='mode',
        action='store_const',
        const=DecodeMode.TRANSACTION,
        help="Input is a full transaction: signature array followed by the message.",
    )
    parser.add_argument(
        'hex',
        help="Hex-encoded bytes (set to '-' to read from stdin).",
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help="Print the result as JSON.",
    )
    parser.add_argument(
        '--allow-trailing-bytes',
        action='store_true',
        help="Ignore bytes left over after the message.",
    )
    parser.add_argument(
        '--strict-signatures',
        action='store_true',
        help="Fail when the signature count differs from the header.",
    )
    parser.add_argument(
        '--no-token-transfers',
        dest='token_transfers',
        action='store_false',
        help="Skip decoding SPL token transfers.",
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help="Log each decoded section.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    value = sys.stdin.read() if args.hex == '-' else args.hex
    try:
        data = bytes_from_hex(value)
    except UsageError as exc:
        parser.error(str(exc))

    config = DecoderConfig(
        allow_trailing_bytes=args.allow_trailing_bytes,
        strict_signature_count=args.strict_signatures,
        decode_token_transfers=args.token_transfers,
    )
    try:
        parsed = TransactionDecoder(config).decode(data, args.mode)
    except TransactionParseError as exc:
        hint = (
            "--transaction" if args.mode is DecodeMode.MESSAGE else "--message"
        )
        print(f"Unable to parse {args.mode.value}: {exc}", file=sys.stderr)
        print(f"If the input is a {_other_kind(args.mode)}, try {hint}.", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(parsed.to_dict(), indent=2))
    else:
        print(format_report(parsed))
    return 0


def _other_kind(mode: DecodeMode) -> str:
    if mode is DecodeMode.MESSAGE:
        return "full transaction with signatures"
    return "bare message"


if __name__ == '__main__':
    sys.exit(main())
