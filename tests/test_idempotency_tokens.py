from app.payouts.csv_parser import parse_csv, to_payout_rows
from app.payouts.dispatcher import PayoutBatch
from app.payouts.manual import build_manual_request
from app.payouts.model import PayoutMedium
from app.payouts.tokens import new_external_id
from app.providers.mock import MockPayoutGateway
from tests.conftest import entry


def test_tokens_unique_within_batch_for_same_employee():
    directory = {"emp1": entry("Alice Ngono")}
    rows = to_payout_rows(parse_csv("h\n" + "\n".join(["emp1,100"] * 25)))
    sender = MockPayoutGateway()

    PayoutBatch(rows, directory, sender, default_date="2024-01-01").run()

    ids = [r.external_id for r in sender.sent]
    assert len(ids) == 25
    assert len(set(ids)) == 25


def test_tokens_unique_across_manual_payouts():
    directory = {"emp1": entry("Alice Ngono")}
    ids = {
        build_manual_request(
            employee_id="emp1",
            amount=100,
            medium=PayoutMedium.ORANGE_MONEY,
            note=None,
            lookup=directory.get,
        ).external_id
        for _ in range(50)
    }
    assert len(ids) == 50


def test_token_layout():
    token = new_external_id("manual", "EMP001")
    prefix, ts, employee, nonce = token.split("-")
    assert prefix == "manual"
    assert ts.isdigit()
    assert employee == "EMP001"
    assert len(nonce) == 8
