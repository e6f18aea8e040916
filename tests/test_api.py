from fastapi.testclient import TestClient  # type: ignore

from javadoc_autofill.main import app

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_autofill_fills_comments():
    code = "class A {\n    int f() { return 1; }\n}\n"
    r = client.post("/autofill", json={"code": code, "filename": "A.java"})
    assert r.status_code == 200
    data = r.json()
    assert data["modified"] is True
    assert data["code"].startswith("/**\n * A class description\n */\n")
    assert "@return returns an integer value" in data["code"]


def test_autofill_options_use_config_names():
    code = "class A {\n    int f() { return 1; }\n}\n"
    r = client.post(
        "/autofill",
        json={"code": code, "options": {"addClassJavadoc": False, "addMethodJavadoc": False}},
    )
    assert r.status_code == 200
    assert r.json() == {"modified": False, "code": code}


def test_autofill_rejects_non_java_file():
    r = client.post("/autofill", json={"code": "x", "filename": "notes.txt"})
    assert r.status_code == 400


def test_autofill_rejects_unparsable_code():
    r = client.post("/autofill", json={"code": "class {"})
    assert r.status_code == 422
    assert "Java" in r.json()["detail"]


def test_autofill_rejects_unknown_option():
    r = client.post("/autofill", json={"code": "class A {}", "options": {"bogus": True}})
    assert r.status_code == 422
