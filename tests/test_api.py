import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.main import app, store
from conftest import LOGIN_UUID, make_record

client = TestClient(app)


@pytest.fixture
def library(tmp_path: Path, login_record):
    path = tmp_path / "patterns.json"
    path.write_text(json.dumps([login_record, make_record("port @NUMBER:port@", name="PORT")]))
    store.path = path
    store.reload()
    return path


def test_health(library):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "patterns": 2, "diagnostics": 0}


def test_list_patterns(library):
    r = client.get("/patterns")
    assert r.status_code == 200
    items = r.json()
    assert [i["name"] for i in items] == ["LOGIN", "PORT"]
    assert items[0]["uuid"] == LOGIN_UUID
    assert items[0]["tags"] == ["auth"]
    assert items[0]["test_messages"] == 1


def test_parse_lines(library):
    r = client.post("/parse", json={"lines": ["user bob logged in from 10.1.2.3", "port 443", "nothing"]})
    assert r.status_code == 200
    body = r.json()
    assert [rec["matched"] for rec in body] == [True, True, False]
    assert body[0]["values"] == {"user": "bob", "ip": "10.1.2.3", "program": "login"}
    assert body[1]["name"] == "PORT"
    assert body[2]["uuid"] is None


def test_parse_rejects_bad_payload(library):
    r = client.post("/parse", json={"lines": "not a list"})
    assert r.status_code == 422


def test_validate_endpoint(library):
    r = client.get("/validate")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["diagnostics"] == []
    assert [o["outcome"] for o in body["outcomes"]] == ["pass"]


def test_validate_reports_diagnostics(library, login_record):
    library.write_text(json.dumps([login_record, make_record("x", uid="not-a-uuid")]))
    client.post("/reload")

    body = client.get("/validate").json()

    assert body["ok"] is False
    assert body["diagnostics"][0]["field"] == "uuid"
    assert body["diagnostics"][0]["error"] == "missing_field"


def test_reload_picks_up_changes(library, login_record):
    library.write_text(json.dumps([login_record]))

    r = client.post("/reload")

    assert r.status_code == 200
    assert r.json() == {"ok": True, "patterns": 1, "diagnostics": 0}


def test_reload_error_keeps_library(library):
    library.write_text("[{")

    r = client.post("/reload")

    assert r.status_code == 500
    assert "Pattern file error" in r.json()["detail"]
    assert client.get("/health").json()["patterns"] == 2
