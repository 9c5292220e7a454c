class LedgerError(Exception):
    """Base class for ledger engine failures."""


class InvalidInput(LedgerError):
    """Caller-supplied transaction is missing or malformed."""


class NotFound(LedgerError):
    """Transaction id is outside the current parse."""

    def __init__(self, transaction_id, total_count):
        super().__init__(
            f"Transaction {transaction_id} not found (ledger holds {total_count} transactions)"
        )
        self.transaction_id = transaction_id
        self.total_count = total_count


class LedgerIOError(LedgerError):
    """Backing ledger text could not be read or written."""


class ReportError(LedgerError):
    """The ledger command-line tool failed to produce a report."""
