import math

from app.payouts.mapper import (
    REASON_EMPLOYEE_NOT_FOUND,
    REASON_MISSING_EMPLOYEE_ID,
    map_row,
    parse_amount,
)
from app.payouts.model import PayoutMedium, PayoutRequest, PayoutRow, Rejection
from tests.conftest import entry


DIRECTORY = {"emp1": entry("Alice Ngono", phone="+237677000001")}


def _row(**kw) -> PayoutRow:
    base = dict(index=0, employee_id="emp1", amount="100", currency="XAF", date="2024-01-01", note="Bonus")
    base.update(kw)
    return PayoutRow(**base)


def _map(row: PayoutRow):
    return map_row(row, DIRECTORY.get, default_date="2024-02-29", medium=PayoutMedium.MOBILE_MONEY)


def test_contact_details_come_from_directory():
    req = _map(_row())
    assert isinstance(req, PayoutRequest)
    assert req.phone == "+237677000001"
    assert req.email == "alice.ngono@company.com"
    assert req.name == "Alice Ngono"
    assert req.user_id == "emp1"
    assert req.amount == 100.0
    assert req.message == "Bonus"
    assert req.medium is PayoutMedium.MOBILE_MONEY


def test_unknown_employee_is_rejected():
    res = _map(_row(employee_id="emp2"))
    assert isinstance(res, Rejection)
    assert res.reason == REASON_EMPLOYEE_NOT_FOUND
    assert res.employee_id == "emp2"


def test_missing_employee_id_is_rejected():
    res = _map(_row(employee_id=None))
    assert isinstance(res, Rejection)
    assert res.reason == REASON_MISSING_EMPLOYEE_ID


def test_missing_note_uses_row_date():
    req = _map(_row(note=None))
    assert req.message == "Payout on 2024-01-01"


def test_missing_date_and_note_use_default_date():
    req = _map(_row(date=None, note=None))
    assert req.message == "Payout on 2024-02-29"


def test_blank_note_is_never_sent():
    req = _map(_row(note="   "))
    assert req.message == "Payout on 2024-01-01"


def test_non_numeric_amount_passes_through_as_nan():
    req = _map(_row(amount="abc"))
    assert isinstance(req, PayoutRequest)
    assert math.isnan(req.amount)
    assert req.to_wire()["amount"] is None


def test_parse_amount_decimal():
    assert parse_amount(" 1500.50 ") == 1500.5
    assert math.isnan(parse_amount(None))


def test_batch_token_contains_employee_and_row_index():
    req = _map(_row(index=7))
    parts = req.external_id.split("-")
    assert parts[0] == "batch"
    assert parts[2] == "emp1"
    assert parts[3] == "7"


def test_wire_shape():
    wire = _map(_row()).to_wire()
    assert set(wire) == {"amount", "phone", "medium", "name", "email", "userId", "externalId", "message"}
    assert wire["medium"] == "mobile money"


def test_out_of_range_amount_is_sent_as_null():
    req = _map(_row(amount="1e999"))
    assert isinstance(req, PayoutRequest)
    assert math.isinf(req.amount)
    assert req.to_wire()["amount"] is None
