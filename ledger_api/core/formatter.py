from .lexer import CLEARED_MARKER

POSTING_INDENT = "  "
# Amounts start this many characters after the start of the account name.
AMOUNT_COLUMN = 50
MIN_AMOUNT_GAP = 2


def format_header(transaction, newline="\n"):
    # Pending entries are written without a marker.
    if transaction.cleared:
        return f"{transaction.date} {CLEARED_MARKER} {transaction.payee}{newline}"
    return f"{transaction.date} {transaction.payee}{newline}"


def format_posting(posting, newline="\n"):
    line = POSTING_INDENT + posting.account
    if posting.amount:
        padding = max(MIN_AMOUNT_GAP, AMOUNT_COLUMN - len(posting.account))
        line += " " * padding + posting.amount
    if posting.comment:
        line += f"  ; {posting.comment}"
    return line + newline


def format_transaction(transaction, newline="\n"):
    return format_header(transaction, newline) + "".join(
        format_posting(posting, newline) for posting in transaction.postings
    )
