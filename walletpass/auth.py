from __future__ import annotations

import json
import logging
from typing import Any, Dict

from google.auth import exceptions as google_exceptions
from google.auth.crypt import RSASigner
from google.auth.transport.requests import Request
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/wallet_object.issuer"]


class AuthError(RuntimeError):
    pass


class ServiceAccount:
    """A loaded service-account key: OAuth credentials plus the JWT signer."""

    def __init__(self, info: Dict[str, Any]):
        try:
            self.info = info
            self.credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            self.signer = RSASigner.from_service_account_info(info)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Unable to load credentials: {e}") from e

    @classmethod
    def from_file(cls, keyfile: str) -> "ServiceAccount":
        try:
            with open(keyfile, "r", encoding="utf-8") as f:
                sa = json.load(f)
        except (OSError, ValueError) as e:
            raise AuthError(f"Unable to load credentials: {e}") from e
        if not isinstance(sa, dict):
            raise AuthError(f"Unable to load credentials: {keyfile} does not hold a JSON object")
        logger.debug("Loaded service account key from %s", keyfile)
        return cls(sa)

    @property
    def email(self) -> str:
        return self.info["client_email"]

    def access_token(self) -> str:
        if not self.credentials.valid:
            logger.debug("Refreshing access token for %s", self.email)
            try:
                self.credentials.refresh(Request())
            except google_exceptions.GoogleAuthError as e:
                raise AuthError(f"Unable to fetch access token: {e}") from e
        return self.credentials.token
