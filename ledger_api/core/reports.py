import logging
import re
import subprocess

from .errors import ReportError

LOGGER = logging.getLogger("ledger_api.reports")

_COLUMN_SPLIT_RE = re.compile(r"\s{2,}")


def run_command(argv):
    try:
        result = subprocess.run(argv, capture_output=True, text=True, check=True)
    except FileNotFoundError as exc:
        raise ReportError(f"Command not found: {argv[0]}") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise ReportError(f"Failed to execute ledger command: {detail}") from exc
    return result.stdout


def split_columns(line):
    return _COLUMN_SPLIT_RE.split(line.strip())


def indent_level(line):
    return (len(line) - len(line.lstrip(" "))) // 2


def _report_lines(output):
    return [line for line in output.splitlines() if line.strip()]


def parse_account_rows(output):
    rows = []
    for line in _report_lines(output):
        parts = split_columns(line)
        if len(parts) >= 2:
            rows.append({"amount": parts[0], "account": parts[1], "level": indent_level(line)})
    return rows


def parse_register_rows(output):
    rows = []
    for line in _report_lines(output):
        parts = split_columns(line)
        if len(parts) >= 5:
            rows.append(
                {
                    "date": parts[0],
                    "payee": parts[1],
                    "account": parts[2],
                    "amount": parts[3],
                    "balance": parts[4],
                }
            )
    return rows


def parse_budget_rows(output):
    rows = []
    for line in _report_lines(output):
        parts = split_columns(line)
        if len(parts) >= 4:
            rows.append(
                {
                    "actual": parts[0],
                    "budget": parts[1],
                    "remaining": parts[2],
                    "percent": parts[3],
                    "account": parts[4] if len(parts) > 4 else "",
                    "level": indent_level(line),
                }
            )
    return rows


def parse_cleared_rows(output):
    rows = []
    for line in _report_lines(output):
        parts = split_columns(line)
        if len(parts) >= 3:
            rows.append(
                {
                    "cleared": parts[0],
                    "pending": parts[1],
                    "lastCleared": parts[2],
                    "account": parts[3] if len(parts) > 3 else "",
                    "level": indent_level(line),
                }
            )
    return rows


class LedgerReports:
    """Tabular reports produced by the ``ledger`` command-line tool."""

    def __init__(self, ledger_file, ledger_cmd="ledger", runner=None):
        self.ledger_file = ledger_file
        self.ledger_cmd = ledger_cmd
        self._runner = runner or run_command

    def run(self, *args):
        argv = [self.ledger_cmd, "-f", str(self.ledger_file), *args]
        LOGGER.debug("Running %s", " ".join(argv))
        return self._runner(argv)

    def summary(self):
        return parse_account_rows(self.run("balance", "^Assets", "^Liabilities", "--depth", "2"))

    def balance(self):
        return parse_account_rows(self.run("balance"))

    def register(self):
        return parse_register_rows(self.run("register"))

    def budget(self):
        return parse_budget_rows(self.run("balance", "^Expenses", "--budget"))

    def cleared(self):
        return parse_cleared_rows(self.run("balance", "--cleared", "--pending"))

    def accounts(self):
        return [line.strip() for line in _report_lines(self.run("accounts"))]


def update_reports_hook(script):
    """Return a callable that runs the post-write report refresh script."""

    def _hook():
        LOGGER.info("Updating reports with %s", script)
        run_command(["bash", script])

    return _hook
