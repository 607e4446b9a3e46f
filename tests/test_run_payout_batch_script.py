from __future__ import annotations

import json
import sys

import pytest

from app.providers.factory import reset_sender_cache
from scripts import run_payout_batch


@pytest.fixture(autouse=True)
def _fresh_sender():
    reset_sender_cache()
    yield
    reset_sender_cache()


def _write_inputs(tmp_path, csv_text: str):
    csv_path = tmp_path / "payouts.csv"
    csv_path.write_text(csv_text, encoding="utf-8")
    employees = tmp_path / "employees.json"
    employees.write_text(
        json.dumps({"employees": [{"id": "EMP001", "name": "Alice Ngono", "email": "a@company.com", "phone": "+237677000001"}]}),
        encoding="utf-8",
    )
    return csv_path, employees


def test_load_directory_accepts_list_or_wrapper(tmp_path):
    p = tmp_path / "e.json"
    p.write_text(json.dumps([{"id": 7, "name": "Bob", "phone": "1"}]), encoding="utf-8")
    directory = run_payout_batch.load_directory(p)
    assert directory["7"].display_name == "Bob"
    assert directory["7"].email == ""


def test_all_rows_succeed(tmp_path, monkeypatch, capsys):
    csv_path, employees = _write_inputs(tmp_path, "employee_id,amount\nEMP001,100\nEMP001,200\n")
    monkeypatch.setattr(sys, "argv", ["run_payout_batch", str(csv_path), "--employees", str(employees)])

    run_payout_batch.main()

    out = capsys.readouterr().out
    assert "2/2 processed, 2 succeeded, 0 failed" in out
    assert "succeeded=2" in out


def test_failed_rows_exit_2(tmp_path, monkeypatch, capsys):
    csv_path, employees = _write_inputs(tmp_path, "employee_id,amount\nEMP001,100\nEMP404,200\n")
    monkeypatch.setattr(sys, "argv", ["run_payout_batch", str(csv_path), "--employees", str(employees)])

    with pytest.raises(SystemExit) as exc:
        run_payout_batch.main()

    assert exc.value.code == 2
    out = capsys.readouterr().out
    assert "employee_id=EMP404 reason=EMPLOYEE_NOT_FOUND" in out


def test_missing_csv(tmp_path, monkeypatch):
    _, employees = _write_inputs(tmp_path, "")
    monkeypatch.setattr(sys, "argv", ["run_payout_batch", str(tmp_path / "nope.csv"), "--employees", str(employees)])
    with pytest.raises(SystemExit) as exc:
        run_payout_batch.main()
    assert exc.value.code == 1
