"""설정 API - 조회/저장/그룹 필터/원자성/캐시 무효화"""
from app.api import settings as settings_api
from app.config import Settings, get_settings
from app.core.errors import StorageError
from app.main import app
from app.models import SiteSetting
from app.services import site_settings as store


def _seed(db, *rows):
    db.add_all([SiteSetting(key=k, value=v, group=g) for k, v, g in rows])
    db.commit()


def test_empty_store_returns_forced_keys_only(client):
    r = client.get("/api/settings")
    assert r.status_code == 200
    assert r.json() == {"enableSearch": True}
    assert r.headers["cache-control"] == "no-store"


def test_round_trip(auth_client, invalidations):
    r = auth_client.post("/api/settings", json={"siteName": "My Blog", "postsPerPage": 10})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Settings saved"
    assert [row["key"] for row in body["results"]] == ["siteName", "postsPerPage"]
    assert body["results"][1]["value"] == "10"
    assert invalidations == [("/", "layout")]

    r = auth_client.get("/api/settings")
    assert r.json() == {"siteName": "My Blog", "postsPerPage": "10", "enableSearch": True}


def test_save_is_idempotent(auth_client, db):
    payload = {"siteName": "Same", "theme": "dark"}
    first = auth_client.post("/api/settings", json=payload)
    after_once = auth_client.get("/api/settings").json()
    second = auth_client.post("/api/settings", json=payload)
    assert first.status_code == second.status_code == 200
    assert auth_client.get("/api/settings").json() == after_once
    assert len(store.list_all(db)) == 2


def test_save_coerces_values_to_strings(auth_client):
    payload = {"count": 5, "ratio": 1.5, "whole": 2.0, "on": True, "off": False, "none": None}
    r = auth_client.post("/api/settings", json=payload)
    assert r.status_code == 200
    values = {row["key"]: row["value"] for row in r.json()["results"]}
    assert values == {"count": "5", "ratio": "1.5", "whole": "2", "on": "true", "off": "false", "none": ""}


def test_group_filter(client, db):
    _seed(
        db,
        ("siteName", "Blog", "basic"),
        ("siteDescription", None, "basic"),
        ("footerText", "(c) 2026", "layout"),
        ("ungrouped", "x", None),
    )
    r = client.get("/api/settings", params={"group": "basic"})
    assert r.json() == {"siteName": "Blog", "siteDescription": "", "enableSearch": True}

    r = client.get("/api/settings", params={"group": "missing"})
    assert r.json() == {"enableSearch": True}

    r = client.get("/api/settings", params={"group": ""})
    assert set(r.json()) == {"siteName", "siteDescription", "footerText", "ungrouped", "enableSearch"}


def test_unauthorized_write_leaves_store_unchanged(client, db, invalidations):
    _seed(db, ("siteName", "Original", None))
    r = client.post("/api/settings", json={"siteName": "Hacked"})
    assert r.status_code == 401
    assert r.json() == {"error": "Please login"}
    assert client.get("/api/settings").json()["siteName"] == "Original"
    assert invalidations == []


def test_unknown_session_cookie_rejected(client):
    client.cookies.set(get_settings().session_cookie_name, "no-such-session")
    r = client.post("/api/settings", json={"siteName": "x"})
    assert r.status_code == 401
    cookie_header = r.headers.get("set-cookie", "")
    assert cookie_header.startswith(f"{get_settings().session_cookie_name}=")
    assert "Max-Age=0" in cookie_header


def test_missing_session_cookie_does_not_set_cookie(client):
    r = client.post("/api/settings", json={"siteName": "x"})
    assert r.status_code == 401
    assert "set-cookie" not in r.headers


def test_batch_is_atomic(auth_client, db, invalidations):
    _seed(db, ("siteName", "Before", None))
    before = auth_client.get("/api/settings").json()

    r = auth_client.post("/api/settings", json={"siteName": "After", "newKey": "v", "": "empty key"})
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Database operation failed"
    assert body["details"]

    assert auth_client.get("/api/settings").json() == before
    assert invalidations == []


def test_enable_search_is_always_forced(auth_client):
    r = auth_client.post("/api/settings", json={"enableSearch": False})
    assert r.status_code == 200
    assert r.json()["results"][0]["value"] == "false"
    assert auth_client.get("/api/settings").json()["enableSearch"] is True


def test_defaults_are_overridden_by_stored_values(client, db):
    app.dependency_overrides[get_settings] = lambda: Settings(
        settings_defaults={"siteName": "Default Site", "theme": "light"}
    )
    _seed(db, ("siteName", "Stored Site", None))
    r = client.get("/api/settings")
    assert r.json() == {"siteName": "Stored Site", "theme": "light", "enableSearch": True}


def test_malformed_body_is_bad_request(auth_client):
    r = auth_client.post(
        "/api/settings", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request body"

    r = auth_client.post("/api/settings", json=["a", "b"])
    assert r.status_code == 400


def test_malformed_body_without_session_is_unauthorized(client):
    r = client.post("/api/settings", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 401


def test_invalidation_failure_does_not_fail_write(auth_client, invalidator, invalidations):
    def broken(scope, kind):
        raise RuntimeError("revalidate endpoint down")

    invalidator.register(broken)
    r = auth_client.post("/api/settings", json={"siteName": "Saved anyway"})
    assert r.status_code == 200
    assert invalidations == [("/", "layout")]
    assert auth_client.get("/api/settings").json()["siteName"] == "Saved anyway"


def test_read_failure_returns_error_envelope(client, monkeypatch):
    def boom(db):
        raise StorageError("connection refused")

    monkeypatch.setattr(settings_api.store, "list_all", boom)
    r = client.get("/api/settings")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to get settings", "details": "connection refused"}


def test_group_read_failure_returns_error_envelope(client, monkeypatch):
    def boom(db, group):
        raise StorageError("no such table: site_settings")

    monkeypatch.setattr(settings_api.store, "list_by_group", boom)
    r = client.get("/api/settings", params={"group": "basic"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to get settings", "details": "no such table: site_settings"}
