import pytest
from fastapi.testclient import TestClient

from portal.main import app

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def register(client: TestClient, email: str = "asha@portal.io", role: str = "candidate", **overrides):
    data = {
        "fullName": "Asha Rao",
        "email": email,
        "phoneNumber": "9876543210",
        "password": "s3cret-pass",
        "role": role,
    }
    data.update(overrides)
    files = data.pop("files", None)
    return client.post("/api/v1/user/register", data=data, files=files)


def login(client: TestClient, email: str = "asha@portal.io", password: str = "s3cret-pass", role: str = "candidate"):
    return client.post("/api/v1/user/login", json={"email": email, "password": password, "role": role})


def test_register_then_login_sets_cookie(client) -> None:
    resp = register(client)
    assert resp.status_code == 201
    assert resp.json() == {"message": "User registered successfully", "success": True}
    # Registration does not log in
    assert "token" not in resp.cookies

    resp = login(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Login successful Asha Rao"
    assert resp.cookies.get("token")

    set_cookie = resp.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "max-age=604800" in set_cookie
    assert "samesite=strict" in set_cookie

    user = body["user"]
    assert user["id"]
    assert user["fullName"] == "Asha Rao"
    assert user["email"] == "asha@portal.io"
    assert user["phoneNumber"] == "9876543210"
    assert user["role"] == "candidate"
    assert user["profile"]["skills"] == []
    assert user["profile"]["profilePictureUrl"] == ""
    assert "password" not in str(body).lower()


def test_login_email_is_case_insensitive(client) -> None:
    register(client, email="Asha.Rao@Portal.io")
    assert login(client, email="asha.rao@portal.IO").status_code == 200


def test_register_requires_all_fields(client) -> None:
    resp = client.post("/api/v1/user/register", data={"email": "asha@portal.io", "password": "x"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "All fields are required"}


@pytest.mark.parametrize("field", ["fullName", "phoneNumber", "email"])
def test_register_rejects_whitespace_only_fields(client, mongo, field) -> None:
    resp = register(client, **{field: "   "})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "All fields are required"}
    assert mongo["users"].count_documents({}) == 0


def test_register_trims_name_and_phone(client) -> None:
    register(client, fullName="  Asha Rao ", phoneNumber=" 9876543210 ")
    user = login(client).json()["user"]
    assert user["fullName"] == "Asha Rao"
    assert user["phoneNumber"] == "9876543210"


def test_register_rejects_unknown_role(client) -> None:
    resp = register(client, role="admin")
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_register_rejects_malformed_email(client) -> None:
    resp = register(client, email="not-an-email")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid email address"


def test_duplicate_registration_keeps_first_record(client, mongo, uploads) -> None:
    assert register(client).status_code == 201

    resp = register(
        client,
        email="ASHA@portal.io",
        fullName="Impostor",
        password="other-pass",
        files={"file": ("me.png", PNG, "image/png")},
    )
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "User already exists"}
    # Rejected before touching the existing user's photo
    assert uploads.calls == []

    assert mongo["users"].count_documents({}) == 1
    assert login(client).json()["user"]["fullName"] == "Asha Rao"
    assert login(client, password="other-pass").status_code == 401


def test_wrong_password_and_unknown_email_look_the_same(client) -> None:
    register(client)
    wrong_password = login(client, password="nope")
    unknown_email = login(client, email="ghost@portal.io")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid credentials"}
    assert "token" not in wrong_password.cookies


def test_role_mismatch_is_distinct(client) -> None:
    register(client, role="recruiter")
    resp = login(client, role="candidate")
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Access denied for this role"}
    assert "token" not in resp.cookies


def test_login_requires_fields(client) -> None:
    resp = client.post("/api/v1/user/login", json={"email": "asha@portal.io"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_malformed_login_body_uses_envelope(client) -> None:
    resp = client.post("/api/v1/user/login", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_logout_clears_cookie_but_token_stays_valid(client) -> None:
    register(client)
    token = login(client).cookies.get("token")

    resp = client.get("/api/v1/user/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful", "success": True}
    assert "max-age=0" in resp.headers["set-cookie"].lower()

    # No server-side revocation: the old token still works until it expires
    other = TestClient(app, cookies={"token": token})
    resp = other.post(
        "/api/v1/user/profile/update",
        data={"fullName": "Asha Rao", "email": "asha@portal.io", "bio": "after logout"},
    )
    assert resp.status_code == 200


def test_register_with_photo_stores_url(client, uploads) -> None:
    resp = register(client, files={"file": ("me.png", PNG, "image/png")})
    assert resp.status_code == 201

    call = uploads.calls[0]
    assert call["folder"] == "profile-photos"
    assert call["content"] == PNG
    user = login(client).json()["user"]
    assert user["profile"]["profilePictureUrl"].endswith(f"profile-photos/{call['public_id']}")


def test_register_rejects_non_image_photo(client, mongo) -> None:
    resp = register(client, files={"file": ("me.exe", b"MZ", "application/octet-stream")})
    assert resp.status_code == 400
    assert mongo["users"].count_documents({}) == 0


def test_register_upload_failure_creates_nothing(client, mongo, uploads) -> None:
    uploads.fail = True
    resp = register(client, files={"file": ("me.png", PNG, "image/png")})
    assert resp.status_code == 502
    assert resp.json() == {"success": False, "message": "File upload failed"}
    assert mongo["users"].count_documents({}) == 0


def test_usage_hints(client) -> None:
    assert client.get("/api/v1/user/login").json()["requiredFields"] == ["email", "password", "role"]
    assert client.get("/api/v1/user/register").json()["method"] == "POST"


def test_unknown_route_uses_envelope(client) -> None:
    resp = client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route /api/v1/nothing-here not found"}


def test_root_lists_endpoints(client) -> None:
    body = client.get("/").json()
    assert body["status"] == "active"
    assert body["endpoints"]["user"] == "/api/v1/user"


def test_health_reports_mongodb_state(client, monkeypatch) -> None:
    monkeypatch.setattr("portal.main.test_mongo_connection", lambda: False)
    assert client.get("/api/health").json() == {"status": "healthy", "mongodb": "disconnected"}

    monkeypatch.setattr("portal.main.test_mongo_connection", lambda: True)
    assert client.get("/api/health").json()["mongodb"] == "connected"
