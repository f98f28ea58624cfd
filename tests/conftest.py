from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from walletpass.auth import ServiceAccount
from walletpass.client import WalletClient
from walletpass.config import Settings

ISSUER_ID = "3388000000012345678"


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self) -> Any:
        return self._payload


class FakeSession:
    """Stands in for requests.Session; every call is routed to `handler`."""

    def __init__(self, handler: Callable[..., FakeResponse]):
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        call = {"method": method, "url": url, **kwargs}
        self.calls.append(call)
        return self.handler(call)


def echo_handler(call: Dict[str, Any]) -> FakeResponse:
    """Answers like the API does on success: returns the resource that was sent."""
    body = dict(call.get("json") or {})
    if call["method"] == "PATCH":
        body.setdefault("id", call["url"].rsplit("/", 1)[-1])
    if call["method"] == "POST" and "data" in call:
        return FakeResponse(200, text="--batch_response--")
    return FakeResponse(200, body)


@pytest.fixture(scope="session")
def rsa_keys():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture
def sa_info(rsa_keys):
    return {
        "type": "service_account",
        "project_id": "wallet-demo",
        "private_key_id": "abc123",
        "private_key": rsa_keys[0],
        "client_email": "wallet-issuer@wallet-demo.iam.gserviceaccount.com",
        "client_id": "1234567890",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@pytest.fixture
def keyfile(tmp_path, sa_info):
    path = tmp_path / "key.json"
    path.write_text(json.dumps(sa_info), encoding="utf-8")
    return str(path)


@pytest.fixture
def account(sa_info):
    return ServiceAccount(sa_info)


@pytest.fixture
def settings(keyfile):
    return Settings(keyfile=keyfile, issuer_id=ISSUER_ID)


@pytest.fixture
def session():
    return FakeSession(echo_handler)


@pytest.fixture
def client(session):
    return WalletClient(lambda: "test-token", session=session)
