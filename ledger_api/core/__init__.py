from .assembler import assemble, parse_transactions
from .errors import InvalidInput, LedgerError, LedgerIOError, NotFound, ReportError
from .formatter import format_transaction
from .identity import assign, to_file_index, to_presentation_id
from .ledger import FileTextSource, LedgerStore
from .mutations import delete_transaction, insert_transaction, replace_transaction
from .records import LineRange, Posting, Transaction

__all__ = [
    "FileTextSource",
    "InvalidInput",
    "LedgerError",
    "LedgerIOError",
    "LedgerStore",
    "LineRange",
    "NotFound",
    "Posting",
    "ReportError",
    "Transaction",
    "assemble",
    "assign",
    "delete_transaction",
    "format_transaction",
    "insert_transaction",
    "parse_transactions",
    "replace_transaction",
    "to_file_index",
    "to_presentation_id",
]
