import pytest

from ledger_api.core.errors import LedgerIOError


class FakeTextSource:
    def __init__(self, text="", fail_write=False):
        self.text = text
        self.fail_write = fail_write
        self.writes = []

    def read(self):
        return self.text

    def write(self, text):
        if self.fail_write:
            raise LedgerIOError("disk full")
        self.writes.append(text)
        self.text = text


@pytest.fixture
def fake_source():
    return FakeTextSource


@pytest.fixture(autouse=True)
def _clear_ledger_env(monkeypatch):
    for name in (
        "LEDGER_FILE",
        "LEDGER_CMD",
        "LEDGER_API_CONFIG",
        "UPDATE_REPORTS_SCRIPT",
        "LEDGER_API_LOG_LEVEL",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)
