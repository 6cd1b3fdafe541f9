import pytest
from fastapi.testclient import TestClient

from chirpy.web.main import create_app


@pytest.fixture
def client(context):
    return TestClient(create_app(context))


def register_and_login(client, email="a@x.com", password="pw1"):
    res = client.post("/api/users", json={"email": email, "password": password})
    assert res.status_code == 201, res.text
    res = client.post("/api/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_healthz(client):
    res = client.get("/api/healthz")
    assert res.status_code == 200
    assert res.text == "OK"


def test_register_hides_password_hash(client):
    res = client.post("/api/users", json={"email": "a@x.com", "password": "pw1"})
    assert res.status_code == 201
    assert res.json() == {"id": 1, "email": "a@x.com"}

    dup = client.post("/api/users", json={"email": "a@x.com", "password": "other"})
    assert dup.status_code == 409


def test_login_and_refresh_flow(client):
    user = register_and_login(client)
    assert user["id"] == 1
    assert user["email"] == "a@x.com"
    assert user["token"]
    assert len(user["refresh_token"]) == 64

    res = client.post("/api/refresh", headers=auth(user["refresh_token"]))
    assert res.status_code == 200
    new_token = res.json()["token"]

    res = client.post("/api/chirps", json={"body": "hello"}, headers=auth(new_token))
    assert res.status_code == 201

    res = client.post("/api/revoke", headers=auth(user["refresh_token"]))
    assert res.status_code == 204
    res = client.post("/api/refresh", headers=auth(user["refresh_token"]))
    assert res.status_code == 401


def test_bad_login(client):
    register_and_login(client)
    res = client.post("/api/login", json={"email": "a@x.com", "password": "wrong"})
    assert res.status_code == 401


def test_chirps_crud(client):
    token = register_and_login(client)["token"]

    res = client.post("/api/chirps", json={"body": "x" * 140}, headers=auth(token))
    assert res.status_code == 400

    res = client.post("/api/chirps", json={"body": "What a kerfuffle today"}, headers=auth(token))
    assert res.status_code == 201
    chirp = res.json()
    assert chirp == {"id": 1, "body": "What a **** today", "author_id": 1}

    assert client.get("/api/chirps/1").json() == chirp
    assert client.get("/api/chirps/2").status_code == 404
    assert client.get("/api/chirps").json() == [chirp]
    assert client.get("/api/chirps", params={"author_id": 2}).json() == []


def test_create_chirp_requires_session(client):
    res = client.post("/api/chirps", json={"body": "hello"})
    assert res.status_code == 401
    res = client.post("/api/chirps", json={"body": "hello"}, headers=auth("garbage"))
    assert res.status_code == 401


def test_renewal_token_is_not_a_session_token(client):
    user = register_and_login(client)
    res = client.post("/api/chirps", json={"body": "hello"}, headers=auth(user["refresh_token"]))
    assert res.status_code == 401


def test_update_user(client):
    token = register_and_login(client)["token"]
    res = client.put("/api/users", json={"email": "b@x.com", "password": "pw2"}, headers=auth(token))
    assert res.status_code == 200
    assert res.json() == {"id": 1, "email": "b@x.com"}

    res = client.post("/api/login", json={"email": "b@x.com", "password": "pw2"})
    assert res.status_code == 200


def test_metrics_and_reset(client):
    client.get("/app/")
    client.get("/app/index.html")
    res = client.get("/admin/metrics")
    assert "visited 2 times" in res.text

    client.get("/api/reset")
    assert "visited 0 times" in client.get("/admin/metrics").text


def test_storage_failure_is_500(client, db_path):
    db_path.write_text("{broken", encoding="utf-8")
    local = TestClient(client.app, raise_server_exceptions=False)
    res = local.get("/api/chirps")
    assert res.status_code == 500


def test_store_directory_is_never_served(settings, clock, tmp_path):
    from chirpy.app import ChirpyApp

    settings.web.static_dir = str(tmp_path)
    context = ChirpyApp(settings=settings, clock=clock).initialize(configure_logging=False)
    client = TestClient(create_app(context))
    register_and_login(client)

    res = client.get("/app/database.json")
    assert res.status_code != 200
    assert "renewal_tokens" not in res.text


def test_directory_with_env_file_is_never_served(settings, clock, tmp_path):
    from chirpy.app import ChirpyApp

    public = tmp_path / "public"
    public.mkdir()
    (public / ".env").write_text("JWT_SECRET=leaked\n", encoding="utf-8")
    settings.web.static_dir = str(public)
    context = ChirpyApp(settings=settings, clock=clock).initialize(configure_logging=False)
    client = TestClient(create_app(context))

    res = client.get("/app/.env")
    assert res.status_code != 200
    assert "leaked" not in res.text


def test_separate_static_directory_is_served(settings, clock, tmp_path):
    from chirpy.app import ChirpyApp

    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>Welcome to Chirpy</h1>", encoding="utf-8")
    settings.web.static_dir = str(public)
    context = ChirpyApp(settings=settings, clock=clock).initialize(configure_logging=False)
    client = TestClient(create_app(context))

    res = client.get("/app/")
    assert res.status_code == 200
    assert "Welcome to Chirpy" in res.text
    assert client.get("/app/database.json").status_code == 404
