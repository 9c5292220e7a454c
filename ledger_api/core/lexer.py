"""Line classifier for ledger-format text.

Every physical line gets exactly one ``LineKind``. Blank lines are kept as
``BLANK`` entries so that line numbers always match the source text, which the
mutation code relies on for range arithmetic.

Precedence for indented lines is fixed: a posting with an amount wins over a
comment, and anything else that is indented is a posting without an amount.
Only zero-indented lines can be transaction headers.
"""

import logging
import re
from enum import Enum
from typing import NamedTuple

LOGGER = logging.getLogger("ledger_api.lexer")

CLEARED_MARKER = "*"
PENDING_MARKER = "!"
CURRENCY_SYMBOLS = "$€£¥"

_AMOUNT_START = r"-?[" + CURRENCY_SYMBOLS + r"]?-?\d"

# A whole amount as written after the account gap.
AMOUNT_RE = re.compile(_AMOUNT_START + r"[^;]*")

_HEADER_RE = re.compile(
    r"^(?P<date>\d{4}/\d{2}/\d{2})"
    r"(?:\s+(?P<marker>[*!])?\s*(?P<payee>.*?))?\s*$"
)
_POSTING_RE = re.compile(
    r"^(?P<account>[^;\s][^;]*?)(?:\s{2,}|\t)\s*"
    r"(?P<amount>" + _AMOUNT_START + r"[^;]*?)\s*"
    r"(?:;\s*(?P<comment>.*?))?\s*$"
)
_BARE_POSTING_RE = re.compile(r"^(?P<account>[^;]*?)\s*(?:;\s*(?P<comment>.*?))?\s*$")
_COMMENT_RE = re.compile(r"^;\s*(?P<text>.*?)\s*$")


class LineKind(Enum):
    HEADER = "header"
    POSTING = "posting"
    BARE_POSTING = "bare_posting"
    COMMENT = "comment"
    OTHER = "other"
    BLANK = "blank"


class LexedLine(NamedTuple):
    number: int
    kind: LineKind
    date: str = ""
    marker: str = ""
    payee: str = ""
    account: str = ""
    amount: str = ""
    comment: str = ""


def split_lines(text):
    """Split ``text`` into lines that keep their ``\\n`` terminators.

    Only ``\\n`` separates lines; ``"".join(split_lines(text)) == text`` always.
    """
    lines = text.split("\n")
    last = lines.pop()
    result = [line + "\n" for line in lines]
    if last:
        result.append(last)
    return result


def classify_line(line, number=0):
    content = line.rstrip("\r\n")
    if not content.strip():
        return LexedLine(number, LineKind.BLANK)

    if content[0] in " \t":
        body = content.strip()

        match = _POSTING_RE.match(body)
        if match:
            return LexedLine(
                number,
                LineKind.POSTING,
                account=match.group("account").strip(),
                amount=match.group("amount").strip(),
                comment=match.group("comment") or "",
            )

        match = _COMMENT_RE.match(body)
        if match:
            return LexedLine(number, LineKind.COMMENT, comment=match.group("text"))

        match = _BARE_POSTING_RE.match(body)
        return LexedLine(
            number,
            LineKind.BARE_POSTING,
            account=match.group("account"),
            comment=match.group("comment") or "",
        )

    match = _HEADER_RE.match(content)
    if match:
        return LexedLine(
            number,
            LineKind.HEADER,
            date=match.group("date"),
            marker=match.group("marker") or "",
            payee=match.group("payee") or "",
        )

    if content[0].isdigit():
        # Looks like a dated entry but not in YYYY/MM/DD form.
        LOGGER.debug("Ambiguous line %d treated as other: %r", number, content)
    return LexedLine(number, LineKind.OTHER)


def lex(text):
    return [classify_line(line, number) for number, line in enumerate(split_lines(text))]
