import logging

from .lexer import CLEARED_MARKER, PENDING_MARKER, LineKind, lex
from .records import LineRange, Posting, Transaction

LOGGER = logging.getLogger("ledger_api.assembler")

_POSTING_KINDS = (LineKind.POSTING, LineKind.BARE_POSTING)


def assemble(lexed_lines):
    """Group classified lines into transactions, in file order.

    A header closes the open transaction and starts a new one; nothing else
    ends a transaction. Lines before the first header belong to no transaction.
    Transactions with no postings are returned as they are.
    """
    transactions = []
    current = None
    current_start = 0
    last_posting = None
    total_lines = len(lexed_lines)

    for line in lexed_lines:
        if line.kind is LineKind.HEADER:
            if current is not None:
                current.line_range = LineRange(current_start, line.number)
                transactions.append(current)
            current = Transaction(
                date=line.date,
                payee=line.payee,
                cleared=line.marker == CLEARED_MARKER,
                pending=line.marker == PENDING_MARKER,
            )
            current_start = line.number
            last_posting = None
            continue

        if current is None:
            continue

        if line.kind in _POSTING_KINDS:
            last_posting = Posting(account=line.account, amount=line.amount, comment=line.comment)
            current.postings.append(last_posting)
        elif line.kind is LineKind.COMMENT:
            if last_posting is None:
                LOGGER.debug(
                    "Dropping comment on line %d: no posting yet in transaction at line %d",
                    line.number,
                    current_start,
                )
            elif last_posting.comment:
                last_posting.comment = f"{last_posting.comment} {line.comment}".strip()
            else:
                last_posting.comment = line.comment

    if current is not None:
        current.line_range = LineRange(current_start, total_lines)
        transactions.append(current)

    return transactions


def parse_transactions(text):
    return assemble(lex(text))
