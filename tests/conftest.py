import os

# Settings are read at import time; set them before importing portal
os.environ.setdefault("JWT_SECRET_KEY", "pytest-signing-key-9f8e7d6c5b4a")
os.environ.setdefault("GOOGLE_CLIENT_ID", "portal-test.apps.googleusercontent.com")
os.environ.setdefault("CORS_ORIGINS", "http://testserver")

import cloudinary.uploader
import mongomock
import pytest
from cloudinary.exceptions import Error as CloudinaryError
from fastapi.testclient import TestClient
from google.oauth2 import id_token as google_id_token

from portal.db import mongodb
from portal.main import app


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    client = mongomock.MongoClient()
    monkeypatch.setattr(mongodb, "_client", client)
    monkeypatch.setattr(mongodb, "_db", client["portal_test"])
    mongodb.init_mongo_indexes()
    yield mongodb._db
    client.close()


class FakeCloudinary:
    """Records upload calls and answers like Cloudinary would."""

    def __init__(self):
        self.calls = []
        self.fail = False

    def upload(self, file, **options):
        if self.fail:
            raise CloudinaryError("Service unavailable")
        content = file.read()
        self.calls.append({"content": content, **options})
        folder = options.get("folder", "")
        public_id = options.get("public_id") or f"file{len(self.calls)}"
        full_id = f"{folder}/{public_id}" if folder else public_id
        resource_type = options.get("resource_type", "image")
        return {
            "public_id": full_id,
            "secure_url": f"https://res.cloudinary.com/demo/{resource_type}/upload/v{len(self.calls)}/{full_id}",
        }


@pytest.fixture(autouse=True)
def uploads(monkeypatch):
    fake = FakeCloudinary()
    monkeypatch.setattr(cloudinary.uploader, "upload", fake.upload)
    return fake


class FakeGoogle:
    """Maps ID tokens to payloads; anything else fails verification."""

    def __init__(self):
        self.tokens = {}
        self.requests = []
        self.audience = os.environ["GOOGLE_CLIENT_ID"]

    def add(self, token, email, name="Google User", picture=None):
        payload = {"iss": "https://accounts.google.com", "aud": self.audience, "email": email, "name": name}
        if picture is not None:
            payload["picture"] = picture
        self.tokens[token] = payload

    def verify_oauth2_token(self, token, request, audience=None, **kwargs):
        self.requests.append(request)
        if audience != self.audience:
            raise ValueError("Token has wrong audience")
        if token not in self.tokens:
            raise ValueError("Could not verify token signature.")
        return dict(self.tokens[token])


@pytest.fixture(autouse=True)
def google(monkeypatch):
    fake = FakeGoogle()
    monkeypatch.setattr(google_id_token, "verify_oauth2_token", fake.verify_oauth2_token)
    return fake


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
