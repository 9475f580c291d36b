import time

from conftest import auth

from beauty_directory import rate_limiter
from beauty_directory.rate_limiter import check_rate_limit


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_security_headers_on_api_responses(client):
    res = client.get("/")
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "Content-Security-Policy" in res.headers

    # Health checks are left bare for load balancers
    assert "Content-Security-Policy" not in client.get("/health").headers


def test_unknown_route_uses_message_body(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert "message" in res.json()


def test_domain_errors_carry_field(client, make_profile):
    make_profile("taken_name")
    res = client.post("/api/profiles", json={"username": "taken_name"}, headers=auth("user_new"))
    assert res.status_code == 409
    assert res.json()["field"] == "username"


def test_check_rate_limit_in_memory():
    rate_limiter.reset_rate_limits()

    assert check_rate_limit("unit:key", limit=2, window_seconds=60)[0] is True
    assert check_rate_limit("unit:key", limit=2, window_seconds=60)[0] is True
    allowed, count, ttl = check_rate_limit("unit:key", limit=2, window_seconds=60)
    assert allowed is False
    assert count == 2
    assert 0 < ttl <= 60

    # Other keys have their own window
    assert check_rate_limit("unit:other", limit=2, window_seconds=60)[0] is True


def test_rate_limit_window_resets(monkeypatch):
    rate_limiter.reset_rate_limits()
    now = time.time()
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now)

    check_rate_limit("unit:reset", limit=1, window_seconds=5)
    assert check_rate_limit("unit:reset", limit=1, window_seconds=5)[0] is False

    monkeypatch.setattr(rate_limiter.time, "time", lambda: now + 6)
    assert check_rate_limit("unit:reset", limit=1, window_seconds=5)[0] is True
