import csv
import io

from app.payouts.batches import registry
from app.payouts.csv_parser import CSV_HEADER
from services import metrics
from settings import settings
from tests.conftest import add_employee

BASE = "/api/v1/admin/payouts"


def _upload(client, headers, text: str, **form):
    return client.post(
        f"{BASE}/batches",
        headers=headers,
        data=form,
        files={"file": ("payouts.csv", text.encode("utf-8"), "text/csv")},
    )


def test_batch_runs_to_completion(client, headers, store, sender):
    add_employee(store, "Alice Ngono", phone="+237677000001")
    csv_text = (
        "employee_id,amount,currency,date,note\n"
        "EMP001,1000,XAF,2024-01-31,January\n"
        "EMP002,1000,XAF,2024-01-31,January\n"
        "EMP001,500,XAF,,\n"
    )

    r = _upload(client, headers, csv_text, default_date="2024-02-01")
    assert r.status_code == 202, r.text
    batch_id = r.json()["batch_id"]
    assert r.json()["total"] == 3

    # TestClient runs background tasks before returning
    r = client.get(f"{BASE}/batches/{batch_id}", headers=headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["state"] == "COMPLETED"
    assert (body["total"], body["done"], body["succeeded"], body["failed"]) == (3, 3, 2, 1)

    failed = [o for o in body["outcomes"] if not o["ok"]]
    assert failed == [
        {"index": 1, "employee_id": "EMP002", "ok": False, "reason": "EMPLOYEE_NOT_FOUND", "external_id": None}
    ]
    assert [r.message for r in sender.sent] == ["January", "Payout on 2024-02-01"]
    assert metrics.get_counter("payout_batches_started_total") == 1


def test_batch_directory_is_snapshotted(client, headers, store, sender):
    add_employee(store)
    r = _upload(client, headers, "employee_id,amount\nEMP001,10\n")
    assert r.status_code == 202, r.text

    batch = registry.get(r.json()["batch_id"])
    store.delete_employee("EMP001")
    assert batch.lookup("EMP001") is not None


def test_batch_medium_form_field(client, headers, store, sender):
    add_employee(store)
    r = _upload(client, headers, "employee_id,amount\nEMP001,10\n", medium="orange_money")
    assert r.status_code == 202, r.text
    assert sender.sent[0].medium.value == "orange money"


def test_batch_unknown_medium(client, headers, store):
    r = _upload(client, headers, "employee_id,amount\nEMP001,10\n", medium="bank transfer")
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "UNSUPPORTED_MEDIUM"


def test_empty_csv_rejected(client, headers):
    r = _upload(client, headers, "")
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "EMPTY_CSV"

    r = _upload(client, headers, ",".join(CSV_HEADER) + "\n")
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "EMPTY_CSV"


def test_non_utf8_csv_rejected(client, headers):
    r = client.post(
        f"{BASE}/batches",
        headers=headers,
        files={"file": ("payouts.csv", b"\xff\xfe\x00bad", "text/csv")},
    )
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "INVALID_CSV"


def test_bom_is_ignored(client, headers, store, sender):
    add_employee(store)
    r = client.post(
        f"{BASE}/batches",
        headers=headers,
        files={"file": ("payouts.csv", "\ufeffemployee_id,amount\nEMP001,10\n".encode("utf-8"), "text/csv")},
    )
    assert r.status_code == 202, r.text
    assert len(sender.sent) == 1


def test_unknown_batch(client, headers):
    assert client.get(f"{BASE}/batches/nope", headers=headers).json()["detail"] == "BATCH_NOT_FOUND"
    assert client.post(f"{BASE}/batches/nope/cancel", headers=headers).status_code == 404


def test_cancel_after_completion_keeps_final_state(client, headers, store):
    add_employee(store)
    batch_id = _upload(client, headers, "employee_id,amount\nEMP001,10\n").json()["batch_id"]

    r = client.post(f"{BASE}/batches/{batch_id}/cancel", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["state"] == "COMPLETED"
    assert r.json()["done"] == 1


def test_template_csv(client, headers, monkeypatch):
    monkeypatch.setattr(settings, "PAYOUT_DEFAULT_CURRENCY", "XOF")
    r = client.get(f"{BASE}/template.csv", headers=headers)
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("text/csv")
    assert "payments_template.csv" in r.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(r.text)))
    assert rows[0] == CSV_HEADER
    assert len(rows) >= 2
    assert rows[1][2] == "XOF"


def test_payout_endpoints_require_admin(client):
    assert client.get(f"{BASE}/template.csv").status_code == 401
    assert client.get(f"{BASE}/batches/x").status_code == 401
    r = client.post(f"{BASE}/batches", files={"file": ("p.csv", b"employee_id\nEMP001", "text/csv")})
    assert r.status_code == 401
