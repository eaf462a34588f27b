"""Human-readable rendering of parsed transactions"""

from typing import List

from .decoder import ParsedInstruction, ParsedTransaction
from .programs import PROGRAM_NAMES
from .resolver import AccountRef, LookupAccount, StaticAccount


def _flags(signer: bool, writable: bool) -> str:
    flags = []
    if signer:
        flags.append('signer')
    flags.append('writable' if writable else 'readonly')
    return ', '.join(flags)


def describe_account(ref: AccountRef) -> str:
    """One-line description of a static or lookup account"""
    if isinstance(ref, StaticAccount):
        name = PROGRAM_NAMES.get(ref.key)
        label = f"{ref.key} ({name})" if name else str(ref.key)
        return f"{label} [{_flags(ref.signer, ref.writable)}]"
    if isinstance(ref, LookupAccount):
        return (
            f"lookup table {ref.table_key} index {ref.index} "
            f"[{_flags(False, ref.writable)}]"
        )
    raise TypeError(f"Not an account reference: {ref!r}")


def _describe_program(ref: AccountRef) -> str:
    if isinstance(ref, StaticAccount):
        name = PROGRAM_NAMES.get(ref.key)
        return f"{ref.key} ({name})" if name else str(ref.key)
    return describe_account(ref)


def _format_instruction(instruction: ParsedInstruction) -> List[str]:
    lines = [f"  Instruction {instruction.index}:"]
    lines.append(f"    Program: {_describe_program(instruction.program)}")
    if instruction.accounts:
        lines.append("    Accounts:")
        for i, ref in enumerate(instruction.accounts):
            lines.append(f"      {i}: {describe_account(ref)}")
    else:
        lines.append("    Accounts: none")
    lines.append(f"    Data: {instruction.data_hex or '(empty)'}")
    return lines


def format_report(parsed: ParsedTransaction) -> str:
    """Render every section of a parse result as plain text"""
    lines = ["Solana Parsed Transaction:"]
    lines.append(f"Version: {parsed.version.value}")
    lines.append(f"Unsigned Payload: {parsed.unsigned_payload.hex()}")

    lines.append(f"Signatures ({len(parsed.signatures)}):")
    for sig in parsed.signatures:
        lines.append(f"  {sig.to_hex()}")
    if not parsed.signature_count_matches:
        lines.append(
            f"  WARNING: header requires {parsed.header.num_required_signatures} signatures"
        )

    lines.append(f"Account Keys ({len(parsed.account_keys)}):")
    for i, account in enumerate(parsed.account_keys):
        lines.append(f"  {i}: {describe_account(account)}")

    lines.append("Program Keys:")
    for key in parsed.program_keys:
        lines.append(f"  {key}")

    lines.append(f"Recent Blockhash: {parsed.recent_blockhash}")

    lines.append(f"Instructions ({len(parsed.instructions)}):")
    for instruction in parsed.instructions:
        lines.extend(_format_instruction(instruction))

    lines.append(f"Transfers ({len(parsed.transfers)}):")
    for transfer in parsed.transfers:
        lines.append(
            f"  {transfer.amount} lamports: {describe_account(transfer.sender)}"
            f" -> {describe_account(transfer.receiver)}"
        )

    if parsed.token_transfers:
        lines.append(f"Token Transfers ({len(parsed.token_transfers)}):")
        for transfer in parsed.token_transfers:
            detail = f"  {transfer.kind} {transfer.amount}"
            if transfer.decimals is not None:
                detail += f" (decimals {transfer.decimals})"
            if transfer.fee is not None:
                detail += f" fee {transfer.fee}"
            lines.append(detail)
            lines.append(f"    from:  {describe_account(transfer.source)}")
            lines.append(f"    to:    {describe_account(transfer.destination)}")
            lines.append(f"    owner: {describe_account(transfer.owner)}")
            if transfer.mint is not None:
                lines.append(f"    mint:  {describe_account(transfer.mint)}")

    lines.append(f"Address Table Lookups ({len(parsed.address_table_lookups)}):")
    for lookup in parsed.address_table_lookups:
        lines.append(f"  {lookup.account_key}")
        lines.append(f"    writable: {list(lookup.writable_indexes)}")
        lines.append(f"    readonly: {list(lookup.readonly_indexes)}")

    return '\n'.join(lines)
