import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from ledger_api.config import load_settings
from ledger_api.core.errors import InvalidInput, LedgerIOError, NotFound, ReportError
from ledger_api.core.ledger import LedgerStore
from ledger_api.core.reports import LedgerReports, update_reports_hook
from ledger_api.core.schemas import MessageResponse, TransactionOut, TransactionPayload

load_dotenv()

SETTINGS = load_settings()

logging.basicConfig(level=getattr(logging, SETTINGS.log_level.upper(), logging.INFO))
LOGGER = logging.getLogger("ledger_api")


def get_store():
    hook = None
    if SETTINGS.update_reports_script:
        hook = update_reports_hook(SETTINGS.update_reports_script)
    return LedgerStore(ledger_file=SETTINGS.ledger_file, reports_hook=hook)


def get_reports():
    return LedgerReports(SETTINGS.ledger_file, ledger_cmd=SETTINGS.ledger_cmd)


app = FastAPI(title="Ledger API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    LOGGER.info("Request: %s %s", request.method, request.url)
    try:
        response = await call_next(request)
        LOGGER.info("Response: %s", response.status_code)
        return response
    except Exception as e:
        LOGGER.error("Request failed: %s", e)
        raise


def _raise_http(exc):
    if isinstance(exc, InvalidInput):
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFound):
        raise HTTPException(status_code=404, detail="Transaction not found")
    LOGGER.error("Ledger operation failed: %s", exc)
    raise HTTPException(status_code=500, detail=str(exc))


@app.get("/health")
def health():
    readable = os.access(SETTINGS.ledger_file, os.R_OK)
    status = "ok" if readable else "degraded"
    detail = "ready" if readable else "ledger_file_unreadable"
    return {"status": status, "detail": detail, "ledger_file": SETTINGS.ledger_file}


@app.get("/api/transactions", response_model=list[TransactionOut])
def list_transactions(
    limit: int = Query(0, ge=0),
    store: LedgerStore = Depends(get_store),
):
    try:
        return store.list_transactions(limit=limit)
    except LedgerIOError as exc:
        _raise_http(exc)


@app.get("/api/transactions/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: int, store: LedgerStore = Depends(get_store)):
    try:
        return store.get_transaction(transaction_id)
    except (NotFound, LedgerIOError) as exc:
        _raise_http(exc)


@app.post("/api/transactions", status_code=201, response_model=MessageResponse)
def add_transaction(payload: TransactionPayload, store: LedgerStore = Depends(get_store)):
    try:
        return store.add_transaction(payload)
    except (InvalidInput, LedgerIOError) as exc:
        _raise_http(exc)


@app.put("/api/transactions/{transaction_id}", response_model=MessageResponse)
def update_transaction(
    transaction_id: int,
    payload: TransactionPayload,
    store: LedgerStore = Depends(get_store),
):
    try:
        return store.update_transaction(transaction_id, payload)
    except (InvalidInput, NotFound, LedgerIOError) as exc:
        _raise_http(exc)


@app.delete("/api/transactions/{transaction_id}", response_model=MessageResponse)
def delete_transaction(transaction_id: int, store: LedgerStore = Depends(get_store)):
    try:
        return store.delete_transaction(transaction_id)
    except (NotFound, LedgerIOError) as exc:
        _raise_http(exc)


def _report(fetch):
    try:
        return fetch()
    except ReportError as exc:
        LOGGER.exception("Report failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))


@app.get("/api/summary")
def summary(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.summary)


@app.get("/api/balance")
def balance(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.balance)


@app.get("/api/register")
def register(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.register)


@app.get("/api/budget")
def budget(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.budget)


@app.get("/api/cleared")
def cleared(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.cleared)


@app.get("/api/accounts")
def accounts(reports: LedgerReports = Depends(get_reports)):
    return _report(reports.accounts)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", str(SETTINGS.port)))
    uvicorn.run("ledger_api.main:app", host="0.0.0.0", port=port, log_level="info")
