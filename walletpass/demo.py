from __future__ import annotations

import logging
from typing import NoReturn, Optional

import requests

from .auth import AuthError, ServiceAccount
from .client import WalletApiError, WalletClient
from .config import ConfigError, Settings
from .payloads import OFFER, make_id, minimal_object_body, new_suffix, offer_class_body, offer_object_body
from . import tokens

logger = logging.getLogger(__name__)


def fatal(message: str) -> NoReturn:
    print(message)
    raise SystemExit(1)


class DemoOffer:
    """Runs the offer-pass walkthrough against the Wallet API, printing each result."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.account: Optional[ServiceAccount] = None
        self.client: Optional[WalletClient] = None

    def auth(self) -> None:
        try:
            self.account = ServiceAccount.from_file(self.settings.keyfile)
        except AuthError as e:
            fatal(str(e))
        self.client = WalletClient(
            self.account.access_token,
            api_base=self.settings.api_base,
            batch_url=self.settings.batch_url,
            timeout=self.settings.timeout,
        )

    def create_class(self, issuer_id: str, class_suffix: str) -> None:
        try:
            res = self.client.insert_class(OFFER, offer_class_body(issuer_id, class_suffix))
        except (WalletApiError, AuthError, requests.RequestException) as e:
            fatal(f"Unable to insert class: {e}")
        print(f"Class insert id:\n{res['id']}")

    def create_object(self, issuer_id: str, class_suffix: str, object_suffix: str) -> None:
        try:
            res = self.client.insert_object(OFFER, offer_object_body(issuer_id, class_suffix, object_suffix))
        except (WalletApiError, AuthError, requests.RequestException) as e:
            fatal(f"Unable to insert object: {e}")
        print(f"Object insert id:\n{res['id']}")

    def expire_object(self, issuer_id: str, object_suffix: str) -> None:
        try:
            res = self.client.expire_object(OFFER, make_id(issuer_id, object_suffix))
        except (WalletApiError, AuthError, requests.RequestException) as e:
            fatal(f"Unable to patch object: {e}")
        print(f"Object expiration id:\n{res['id']}")

    def create_jwt_new_objects(self, issuer_id: str, class_suffix: str, object_suffix: str) -> str:
        url = tokens.jwt_new_objects(
            self.account,
            issuer_id,
            class_suffix,
            object_suffix,
            origins=self.settings.origins,
            ttl=self.settings.jwt_ttl,
        )
        print("Add to Google Wallet link")
        print(url)
        return url

    def create_jwt_existing_objects(self, issuer_id: str) -> str:
        url = tokens.jwt_existing_objects(
            self.account,
            issuer_id,
            origins=self.settings.origins,
            ttl=self.settings.jwt_ttl,
        )
        print("Add to Google Wallet link")
        print(url)
        return url

    def batch_create_objects(self, issuer_id: str, class_suffix: str, count: int = 3) -> None:
        objects = [minimal_object_body(issuer_id, class_suffix, new_suffix()) for _ in range(count)]
        try:
            body = self.client.batch_create_objects(OFFER, objects)
        except (WalletApiError, AuthError, requests.RequestException) as e:
            # batch failures are reported, not fatal
            print(e)
            return
        print(f"Batch insert response:\n{body}")

    def run(self, issuer_id: str, class_suffix: str, object_suffix: str) -> None:
        self.auth()
        self.create_class(issuer_id, class_suffix)
        self.create_object(issuer_id, class_suffix, object_suffix)
        self.expire_object(issuer_id, object_suffix)
        self.create_jwt_new_objects(issuer_id, class_suffix, object_suffix)
        self.create_jwt_existing_objects(issuer_id)
        self.batch_create_objects(issuer_id, class_suffix)


def main() -> None:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        fatal(str(e))

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    class_suffix = new_suffix()
    object_suffix = f"{new_suffix()}-{class_suffix}"

    DemoOffer(settings).run(settings.issuer_id, class_suffix, object_suffix)


if __name__ == "__main__":
    main()
