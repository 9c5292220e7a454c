from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from .records import Posting, Transaction


class PostingPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    account: Optional[str] = Field(None, description="Account name, e.g. Expenses:Food.")
    amount: Optional[str] = Field("", description="Raw amount text; empty for the balancing posting.")
    comment: Optional[str] = Field("", description="Posting comment, written after ';'.")


class TransactionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[str] = Field(None, description="Transaction date YYYY/MM/DD.")
    payee: Optional[str] = Field(None, description="Payee or description.")
    is_cleared: bool = Field(False, alias="isCleared", description="Write the cleared marker.")
    postings: Optional[list[PostingPayload]] = Field(None, description="At least one posting.")

    def to_transaction(self):
        return Transaction(
            date=(self.date or "").strip(),
            payee=(self.payee or "").strip(),
            cleared=bool(self.is_cleared),
            postings=[
                Posting(
                    account=(posting.account or "").strip(),
                    amount=(posting.amount or "").strip(),
                    comment=(posting.comment or "").strip(),
                )
                for posting in (self.postings or [])
            ],
        )


class PostingOut(BaseModel):
    account: str
    amount: str
    comment: str


class TransactionOut(BaseModel):
    id: int = Field(..., description="Presentation id; 0 is the most recent entry in the file.")
    date: str
    cleared: bool
    pending: bool
    payee: str
    postings: list[PostingOut]


class MessageResponse(BaseModel):
    message: str
    id: Optional[int] = None
