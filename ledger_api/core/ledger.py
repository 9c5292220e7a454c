import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path

from pydantic import ValidationError

from .assembler import parse_transactions
from .errors import InvalidInput, LedgerIOError, ReportError
from .identity import assign, to_file_index
from .mutations import delete_transaction, insert_transaction, replace_transaction
from .records import Transaction
from .schemas import TransactionPayload

BACKUP_SUFFIX = ".bak"

# One read-modify-write at a time per process.
_WRITE_LOCK = threading.Lock()


class FileTextSource:
    """Ledger text on disk, backed up to ``<file>.bak`` before each write."""

    def __init__(self, path):
        self.path = Path(path)

    def read(self):
        try:
            with open(self.path, encoding="utf-8", newline="") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise LedgerIOError(f"Failed to read ledger file {self.path}: {exc}") from exc

    def backup(self):
        backup_path = self.path.with_name(self.path.name + BACKUP_SUFFIX)
        if self.path.exists():
            shutil.copyfile(self.path, backup_path)
        return backup_path

    def write(self, text):
        tmp_path = None
        try:
            self.backup()
            mode = self.path.stat().st_mode & 0o777 if self.path.exists() else None
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", newline="", delete=False, dir=self.path.parent
            ) as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = Path(tmp.name)
            if mode is not None:
                os.chmod(tmp_path, mode)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise LedgerIOError(f"Failed to write ledger file {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass


def _to_transaction(payload):
    if isinstance(payload, Transaction):
        return payload
    if isinstance(payload, TransactionPayload):
        return payload.to_transaction()
    if not isinstance(payload, dict):
        raise InvalidInput("Invalid transaction data: expected an object")
    try:
        return TransactionPayload.model_validate(payload).to_transaction()
    except ValidationError as exc:
        raise InvalidInput(f"Invalid transaction data: {exc.errors()[0].get('msg', 'bad value')}") from exc


def _serialize(presentation_id, transaction):
    data = transaction.to_dict()
    data["id"] = presentation_id
    return data


class LedgerStore:
    def __init__(self, source=None, ledger_file=None, reports_hook=None):
        self._source = source
        self._ledger_file = ledger_file
        self._reports_hook = reports_hook
        self._logger = logging.getLogger("ledger_api.ledger")

    def _ensure_source(self):
        if self._source is not None:
            return self._source
        if not self._ledger_file:
            self._ledger_file = os.getenv("LEDGER_FILE")
        if not self._ledger_file:
            raise LedgerIOError("LEDGER_FILE is not set")
        self._source = FileTextSource(self._ledger_file)
        return self._source

    def _update_reports(self):
        if self._reports_hook is None:
            return
        try:
            self._reports_hook()
        except (ReportError, OSError) as exc:
            self._logger.warning("Failed to update reports: %s", exc)

    def _commit(self, source, new_text):
        source.write(new_text)
        self._update_reports()

    def list_transactions(self, limit=None):
        text = self._ensure_source().read()
        transactions = parse_transactions(text)
        self._logger.debug("Parsed %d transactions", len(transactions))

        identified = assign(transactions)
        if limit and limit > 0:
            identified = identified[:limit]
        return [_serialize(presentation_id, txn) for presentation_id, txn in identified]

    def get_transaction(self, transaction_id):
        text = self._ensure_source().read()
        transactions = parse_transactions(text)
        file_index = to_file_index(transaction_id, len(transactions))
        return _serialize(transaction_id, transactions[file_index])

    def add_transaction(self, payload):
        transaction = _to_transaction(payload)
        source = self._ensure_source()
        with _WRITE_LOCK:
            new_text = insert_transaction(source.read(), transaction)
            self._commit(source, new_text)
        self._logger.info("Transaction added: %s %s", transaction.date, transaction.payee)
        return {"id": 0, "message": "Transaction added successfully"}

    def update_transaction(self, transaction_id, payload):
        transaction = _to_transaction(payload)
        source = self._ensure_source()
        with _WRITE_LOCK:
            new_text = replace_transaction(source.read(), transaction_id, transaction)
            self._commit(source, new_text)
        self._logger.info(
            "Transaction %s updated: %s %s", transaction_id, transaction.date, transaction.payee
        )
        return {"id": transaction_id, "message": "Transaction updated successfully"}

    def delete_transaction(self, transaction_id):
        source = self._ensure_source()
        with _WRITE_LOCK:
            new_text = delete_transaction(source.read(), transaction_id)
            self._commit(source, new_text)
        self._logger.info("Transaction %s deleted", transaction_id)
        return {"message": "Transaction deleted successfully"}
