import os
import sys
import time
import uuid

import requests


def die(message, code=1):
    print(message)
    sys.exit(code)


def step(message):
    print("\n==> " + message)


def request(method, url, headers=None, json_body=None, data=None, files=None, allow_failure=False):
    try:
        resp = requests.request(method, url, headers=headers, json=json_body, data=data, files=files, timeout=30)
    except requests.RequestException as exc:
        die("Request failed: %s" % exc)
    if resp.status_code < 200 or resp.status_code >= 300:
        if not allow_failure:
            print("HTTP %s %s" % (resp.status_code, resp.reason))
            print(resp.text)
            sys.exit(1)
    return resp


def auth_headers(token):
    return {"Authorization": "Bearer %s" % token}


def _safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return {}


def _login(base_url, email, password):
    resp = request(
        "POST",
        base_url + "/api/v1/admin/auth/login",
        json_body={"email": email, "password": password},
        allow_failure=True,
    )
    if resp.status_code != 200:
        die("Admin login failed (%s): %s" % (resp.status_code, _safe_json(resp).get("detail") or resp.text))
    token = _safe_json(resp).get("access_token")
    if not token:
        die("Missing access_token after login.")
    return token


def _create_employee(base_url, token, phone):
    suffix = uuid.uuid4().hex[:8]
    resp = request(
        "POST",
        base_url + "/api/v1/admin/employees",
        headers=auth_headers(token),
        data={
            "name": "Smoke Employee %s" % suffix,
            "email": "smoke+%s@company.com" % suffix,
            "phone": phone,
            "position": "Tester",
            "department": "QA",
            "salary": "1000",
        },
    )
    employee_id = (_safe_json(resp).get("employee") or {}).get("id")
    if not employee_id:
        die("Could not determine employee id.")
    return employee_id


def _wait_for_batch(base_url, token, batch_id, timeout_s=60):
    deadline = time.time() + timeout_s
    while True:
        r = request("GET", base_url + "/api/v1/admin/payouts/batches/%s" % batch_id, headers=auth_headers(token))
        body = r.json()
        print("state=%s done=%s/%s" % (body.get("state"), body.get("done"), body.get("total")))
        if body.get("state") in ("COMPLETED", "CANCELLED"):
            return body
        if time.time() > deadline:
            die("Batch %s did not finish in %ss" % (batch_id, timeout_s))
        time.sleep(1)


def main():
    base_url = os.getenv("BASE_URL", "http://127.0.0.1:8001")
    admin_email = os.getenv("ADMIN_EMAIL", "admin@company.com")
    admin_password = os.getenv("ADMIN_PASSWORD")
    phone = os.getenv("SMOKE_PHONE", "+237677000001")

    if not admin_password:
        die("Missing env vars: ADMIN_PASSWORD", code=2)

    step("Health")
    health = request("GET", base_url + "/health").json()
    print("payout_mode=%s" % health.get("payout_mode"))

    step("Login admin")
    token = _login(base_url, admin_email, admin_password)

    step("Create employee")
    employee_id = _create_employee(base_url, token, phone)
    print("employee_id=%s" % employee_id)

    step("Manual payout 100")
    r = request(
        "POST",
        base_url + "/api/v1/admin/payouts/manual",
        headers=auth_headers(token),
        json_body={"employee_id": employee_id, "amount": 100, "note": "smoke"},
    )
    print("external_id=%s" % r.json().get("external_id"))

    step("Download CSV template")
    r = request("GET", base_url + "/api/v1/admin/payouts/template.csv", headers=auth_headers(token))
    if not r.text.startswith("employee_id,"):
        die("Unexpected template header: %s" % r.text.splitlines()[:1])

    step("Upload payout batch")
    csv_text = "employee_id,amount,currency,date,note\n%s,50,XAF,,smoke batch\nEMP_UNKNOWN,50,XAF,,smoke batch\n" % employee_id
    r = request(
        "POST",
        base_url + "/api/v1/admin/payouts/batches",
        headers=auth_headers(token),
        files={"file": ("smoke.csv", csv_text.encode("utf-8"), "text/csv")},
    )
    batch_id = r.json().get("batch_id")
    if not batch_id:
        die("Missing batch_id from upload.")

    step("Wait for batch")
    body = _wait_for_batch(base_url, token, batch_id)
    if body.get("succeeded") != 1 or body.get("failed") != 1:
        die("Unexpected batch counts: succeeded=%s failed=%s" % (body.get("succeeded"), body.get("failed")))

    step("Delete employee")
    request("DELETE", base_url + "/api/v1/admin/employees/%s" % employee_id, headers=auth_headers(token))

    step("Smoke test completed")
    print("batch_id=%s" % batch_id)


if __name__ == "__main__":
    main()
