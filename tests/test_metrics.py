from services import metrics


def test_render_prometheus_format():
    metrics.increment_payout_attempt("mobile money", "success")
    metrics.increment_payout_attempt("mobile money", "success")
    metrics.increment_batches_started()

    text = metrics.render_prometheus()
    assert "# TYPE payout_attempts_total counter" in text
    assert 'payout_attempts_total{medium="mobile money",result="success"} 2' in text
    assert "payout_batches_started_total 1" in text


def test_empty_registry_renders_nothing():
    assert metrics.render_prometheus() == ""


def test_metrics_endpoint_requires_admin(client):
    r = client.get("/metrics")
    assert r.status_code == 401, r.text


def test_metrics_endpoint_counts_requests(client, headers):
    client.get("/health")
    r = client.get("/metrics", headers=headers)
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("text/plain")
    assert "http_requests_total" in r.text
    assert 'status="200"' in r.text
