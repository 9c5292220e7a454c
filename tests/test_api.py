import pytest
from fastapi.testclient import TestClient

from ledger_api import main
from ledger_api.core.errors import ReportError
from ledger_api.core.ledger import LedgerStore
from ledger_api.core.reports import LedgerReports

LEDGER = (
    "2024/01/01 * Opening Balance\n"
    "    Assets:Checking        $1,000.00\n"
    "    Equity:Opening\n"
    "\n"
    "2024/01/10 Landlord\n"
    "    Expenses:Rent          $800.00\n"
    "    Assets:Checking\n"
)


@pytest.fixture
def source(fake_source):
    return fake_source(LEDGER)


@pytest.fixture
def client(source):
    main.app.dependency_overrides[main.get_store] = lambda: LedgerStore(source=source)
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_list_transactions(client):
    res = client.get("/api/transactions")
    assert res.status_code == 200
    body = res.json()
    assert [t["id"] for t in body] == [0, 1]
    assert body[0]["payee"] == "Landlord"
    assert body[1]["cleared"] is True


def test_list_transactions_limit(client):
    body = client.get("/api/transactions", params={"limit": 1}).json()
    assert len(body) == 1
    assert body[0]["payee"] == "Landlord"


def test_get_transaction(client):
    res = client.get("/api/transactions/1")
    assert res.status_code == 200
    assert res.json()["payee"] == "Opening Balance"


def test_get_unknown_transaction(client):
    res = client.get("/api/transactions/5")
    assert res.status_code == 404
    assert res.json()["detail"] == "Transaction not found"


def test_add_transaction(client, source):
    payload = {
        "date": "2024/01/15",
        "payee": "Bakery",
        "isCleared": False,
        "postings": [
            {"account": "Expenses:Food", "amount": "$7.25"},
            {"account": "Assets:Cash", "amount": ""},
        ],
    }
    res = client.post("/api/transactions", json=payload)

    assert res.status_code == 201
    assert res.json()["message"] == "Transaction added successfully"
    assert source.text.endswith("\n\n2024/01/15 Bakery\n" + "  Expenses:Food" + " " * 37 + "$7.25\n  Assets:Cash\n")
    assert client.get("/api/transactions/0").json()["payee"] == "Bakery"


def test_add_numeric_amount_is_kept_as_text(client):
    payload = {
        "date": "2024/01/15",
        "payee": "Bakery",
        "postings": [{"account": "Expenses:Food", "amount": 7}, {"account": "Assets:Cash"}],
    }
    assert client.post("/api/transactions", json=payload).status_code == 201
    assert client.get("/api/transactions/0").json()["postings"][0]["amount"] == "7"


@pytest.mark.parametrize(
    "payload",
    [
        {"payee": "Bakery", "postings": [{"account": "Expenses:Food"}]},
        {"date": "2024/01/15", "postings": [{"account": "Expenses:Food"}]},
        {"date": "2024/01/15", "payee": "Bakery", "postings": []},
    ],
)
def test_add_invalid_transaction(client, source, payload):
    res = client.post("/api/transactions", json=payload)
    assert res.status_code == 400
    assert source.writes == []


def test_update_transaction(client, source):
    payload = {
        "date": "2024/01/01",
        "payee": "Opening Balance (corrected)",
        "isCleared": True,
        "postings": [{"account": "Assets:Checking", "amount": "$1,100.00"}, {"account": "Equity:Opening"}],
    }
    res = client.put("/api/transactions/1", json=payload)

    assert res.status_code == 200
    assert source.text.endswith("\n\n2024/01/10 Landlord\n    Expenses:Rent          $800.00\n    Assets:Checking\n")
    assert client.get("/api/transactions/1").json()["payee"] == "Opening Balance (corrected)"


def test_update_unknown_transaction(client):
    payload = {"date": "2024/01/01", "payee": "x", "postings": [{"account": "A"}]}
    assert client.put("/api/transactions/9", json=payload).status_code == 404


def test_delete_transaction(client, source):
    res = client.delete("/api/transactions/0")
    assert res.status_code == 200
    assert source.text == LEDGER.split("2024/01/10")[0]
    assert client.delete("/api/transactions/1").status_code == 404


def test_reports(client):
    runner_output = {"balance": "$1,000.00  Assets\n", "accounts": "Assets:Checking\nEquity:Opening\n"}

    def runner(argv):
        return runner_output.get(argv[3], "")

    main.app.dependency_overrides[main.get_reports] = lambda: LedgerReports("main.ledger", runner=runner)

    assert client.get("/api/balance").json() == [{"amount": "$1,000.00", "account": "Assets", "level": 0}]
    assert client.get("/api/accounts").json() == ["Assets:Checking", "Equity:Opening"]


def test_report_failure(client):
    def runner(argv):
        raise ReportError("ledger exploded")

    main.app.dependency_overrides[main.get_reports] = lambda: LedgerReports("main.ledger", runner=runner)

    res = client.get("/api/register")
    assert res.status_code == 500
    assert res.json()["detail"] == "ledger exploded"


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] in ("ok", "degraded")
