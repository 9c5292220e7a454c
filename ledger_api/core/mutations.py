"""Insert, replace and delete transactions in raw ledger text.

Each function takes the complete current text and returns the complete new
text. Ids are presentation ids and are resolved against a fresh parse of the
text that is passed in. Only the lines of the target transaction change;
every other byte of the text is carried over as it was.
"""

import re

from .assembler import assemble
from .errors import InvalidInput
from .formatter import format_transaction
from .identity import to_file_index
from .lexer import AMOUNT_RE, CLEARED_MARKER, PENDING_MARKER, LineKind, lex, split_lines

_DATE_RE = re.compile(r"^\d{4}/\d{2}/\d{2}$")
_ACCOUNT_GAP_RE = re.compile(r"\s{2,}|\t")
_LINE_BREAKS = ("\n", "\r")
_POSTING_KINDS = (LineKind.POSTING, LineKind.BARE_POSTING)
# Lines that may close a transaction's range without belonging to its body.
_TAIL_KINDS = (LineKind.BLANK, LineKind.OTHER)


def _has_line_break(value):
    return any(ch in value for ch in _LINE_BREAKS)


def _check_posting(position, posting):
    if not posting.account or not posting.account.strip():
        raise InvalidInput(f"Invalid posting data: posting {position} is missing an account")
    if any(_has_line_break(value) for value in (posting.account, posting.amount, posting.comment)):
        raise InvalidInput(f"Invalid posting data: posting {position} must be a single line")
    if ";" in posting.account or ";" in posting.amount:
        raise InvalidInput(
            f"Invalid posting data: posting {position} account and amount may not contain ';'"
        )
    if posting.account != posting.account.strip() or _ACCOUNT_GAP_RE.search(posting.account):
        raise InvalidInput(
            f"Invalid posting data: posting {position} account {posting.account!r} "
            "may not contain tabs, runs of spaces or surrounding whitespace"
        )
    if posting.amount and not AMOUNT_RE.fullmatch(posting.amount.strip()):
        raise InvalidInput(
            f"Invalid posting data: posting {position} amount {posting.amount!r} "
            "must start with an optional sign or currency symbol and a digit"
        )
    if posting.amount != posting.amount.strip() or posting.comment != posting.comment.strip():
        raise InvalidInput(
            f"Invalid posting data: posting {position} has surrounding whitespace"
        )


def _reads_back_unchanged(transaction):
    parsed = assemble(lex(format_transaction(transaction)))
    if len(parsed) != 1:
        return False
    txn = parsed[0]
    return (
        txn.date == transaction.date
        and txn.payee == transaction.payee
        and txn.cleared == transaction.cleared
        and txn.postings == transaction.postings
    )


def validate_transaction(transaction):
    if not transaction.date or not transaction.date.strip():
        raise InvalidInput("Invalid transaction data: missing date")
    if not _DATE_RE.match(transaction.date):
        raise InvalidInput(
            f"Invalid transaction data: date {transaction.date!r} is not in YYYY/MM/DD form"
        )
    if not transaction.payee or not transaction.payee.strip():
        raise InvalidInput("Invalid transaction data: missing payee")
    if _has_line_break(transaction.payee):
        raise InvalidInput("Invalid transaction data: payee must be a single line")
    if transaction.payee != transaction.payee.strip():
        raise InvalidInput("Invalid transaction data: payee has surrounding whitespace")
    if transaction.payee[0] in (CLEARED_MARKER, PENDING_MARKER):
        raise InvalidInput(
            f"Invalid transaction data: payee may not start with "
            f"'{CLEARED_MARKER}' or '{PENDING_MARKER}'"
        )
    if not transaction.postings:
        raise InvalidInput("Invalid transaction data: at least one posting is required")

    for position, posting in enumerate(transaction.postings):
        _check_posting(position, posting)

    if not _reads_back_unchanged(transaction):
        raise InvalidInput("Invalid transaction data: entry would not read back as written")


def _line_ending(text):
    for line in split_lines(text):
        if line.endswith("\n"):
            return "\r\n" if line.endswith("\r\n") else "\n"
    return "\n"


def _locate(text, transaction_id):
    lexed = lex(text)
    transactions = assemble(lexed)
    file_index = to_file_index(transaction_id, len(transactions))
    return lexed, transactions[file_index]


def _tail_start(lexed, line_range):
    """First line of the range that is kept verbatim on replace.

    The body ends at the first top-level line after a posting, so directive
    blocks (``~ Monthly`` and its lines) that precede the next header survive.
    Blank lines right before that point count as the separator.
    """
    start, end = line_range
    position = end
    seen_posting = False
    for number in range(start + 1, end):
        kind = lexed[number].kind
        if kind in _POSTING_KINDS:
            seen_posting = True
        elif kind is LineKind.OTHER and seen_posting:
            position = number
            break

    while position - 1 > start and lexed[position - 1].kind in _TAIL_KINDS:
        position -= 1
    return position


def insert_transaction(text, transaction):
    validate_transaction(transaction)
    newline = _line_ending(text)
    formatted = format_transaction(transaction, newline)
    if not text:
        return formatted

    if not text.endswith("\n"):
        text += newline
    if split_lines(text)[-1].strip():
        text += newline
    return text + formatted


def replace_transaction(text, transaction_id, transaction):
    validate_transaction(transaction)
    lexed, target = _locate(text, transaction_id)
    start, end = target.line_range
    lines = split_lines(text)

    tail = lines[_tail_start(lexed, target.line_range):end]
    formatted = format_transaction(transaction, _line_ending(text))
    return "".join(lines[:start]) + formatted + "".join(tail) + "".join(lines[end:])


def delete_transaction(text, transaction_id):
    lexed, target = _locate(text, transaction_id)
    start, end = target.line_range
    lines = split_lines(text)

    kept_from = _tail_start(lexed, target.line_range)
    while kept_from < end and lexed[kept_from].kind is LineKind.BLANK:
        kept_from += 1
    return "".join(lines[:start]) + "".join(lines[kept_from:end]) + "".join(lines[end:])
