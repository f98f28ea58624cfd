from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from google.auth import jwt as google_jwt

from .auth import ServiceAccount
from .payloads import OFFER, Vertical, existing_objects_payload, minimal_object_body

SAVE_URL_BASE = "https://pay.google.com/gp/v/save/"
DEFAULT_ORIGINS = ["www.example.com"]


def build_claims(
    issuer_email: str,
    payload: Dict[str, Any],
    origins: Optional[List[str]] = None,
    ttl: int = 3600,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    now = int(time.time()) if now is None else now
    return {
        "iss": issuer_email,
        "aud": "google",
        "typ": "savetowallet",
        "iat": now,
        "exp": now + ttl,
        "origins": list(DEFAULT_ORIGINS if origins is None else origins),
        "payload": payload,
    }


def sign(account: ServiceAccount, claims: Dict[str, Any]) -> str:
    # The service account key signs the JWT (RS256)
    signed = google_jwt.encode(account.signer, claims)
    if isinstance(signed, bytes):
        signed = signed.decode("utf-8")
    return signed


def save_url(token: str) -> str:
    return f"{SAVE_URL_BASE}{token}"


def jwt_new_objects(
    account: ServiceAccount,
    issuer_id: str,
    class_suffix: str,
    object_suffix: str,
    vertical: Vertical = OFFER,
    origins: Optional[List[str]] = None,
    ttl: int = 3600,
) -> str:
    """
    Generate a save URL whose JWT defines a new pass object.

    When the user opens the "Add to Google Wallet" URL and saves the pass,
    the object defined in the JWT is created.
    """
    payload = {vertical.jwt_object_key: [minimal_object_body(issuer_id, class_suffix, object_suffix)]}
    claims = build_claims(account.email, payload, origins=origins, ttl=ttl)
    return save_url(sign(account, claims))


def jwt_existing_objects(
    account: ServiceAccount,
    issuer_id: str,
    origins: Optional[List[str]] = None,
    ttl: int = 3600,
) -> str:
    """
    Generate a save URL whose JWT references pass objects that already exist,
    so the user can save several of them at once.
    """
    claims = build_claims(account.email, existing_objects_payload(issuer_id), origins=origins, ttl=ttl)
    return save_url(sign(account, claims))
