from dataclasses import dataclass, field
from typing import NamedTuple, Optional


class LineRange(NamedTuple):
    """Half-open span of source lines, valid only for the text it was parsed from."""

    start: int
    end: int


@dataclass
class Posting:
    account: str
    amount: str = ""
    comment: str = ""

    def to_dict(self):
        return {"account": self.account, "amount": self.amount, "comment": self.comment}


@dataclass
class Transaction:
    date: str
    payee: str
    cleared: bool = False
    pending: bool = False
    postings: list = field(default_factory=list)
    line_range: Optional[LineRange] = None

    def to_dict(self):
        return {
            "date": self.date,
            "cleared": self.cleared,
            "pending": self.pending,
            "payee": self.payee,
            "postings": [posting.to_dict() for posting in self.postings],
        }
