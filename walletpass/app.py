"""
HTTP surface for the offer-pass operations.

Run locally:
    flask --app "walletpass.app:create_app()" run
or under gunicorn:
    gunicorn "walletpass.app:create_app()"

Env vars are the same as for `python -m walletpass` (WALLET_ISSUER_ID,
GOOGLE_APPLICATION_CREDENTIALS, ...).
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .auth import ServiceAccount
from .client import WalletApiError, WalletClient
from .config import Settings
from .payloads import OFFER, make_id, minimal_object_body, new_suffix, offer_class_body, offer_object_body
from . import tokens

logger = logging.getLogger(__name__)

MAX_BATCH = 50


def create_app(
    settings: Optional[Settings] = None,
    account: Optional[ServiceAccount] = None,
    client: Optional[WalletClient] = None,
) -> Flask:
    settings = settings or Settings.from_env()
    account = account or ServiceAccount.from_file(settings.keyfile)
    client = client or WalletClient(
        account.access_token,
        api_base=settings.api_base,
        batch_url=settings.batch_url,
        timeout=settings.timeout,
    )
    issuer_id = settings.issuer_id

    app = Flask(__name__)

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    def _suffix(data: dict, key: str) -> str:
        return (data.get(key) or "").strip() or new_suffix()

    def _full_id(value: str) -> str:
        # bare suffixes get the issuer prefix
        value = value.strip()
        return value if "." in value else make_id(issuer_id, value)

    @app.errorhandler(WalletApiError)
    def wallet_error(e: WalletApiError):
        return jsonify(ok=False, error=str(e)), e.status_code

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Request failed")
        return jsonify(ok=False, error=str(e)), 500

    @app.get("/health")
    def health():
        return jsonify(ok=True)

    @app.post("/classes")
    def create_class():
        class_suffix = _suffix(_body(), "class_suffix")
        res = client.insert_class(OFFER, offer_class_body(issuer_id, class_suffix))
        return jsonify(ok=True, class_id=res["id"]), 201

    @app.post("/objects")
    def create_object():
        data = _body()
        class_suffix = (data.get("class_suffix") or "").strip()
        if not class_suffix:
            return jsonify(ok=False, error="missing class_suffix"), 400
        object_suffix = _suffix(data, "object_suffix")
        res = client.insert_or_patch_object(OFFER, offer_object_body(issuer_id, class_suffix, object_suffix))
        return jsonify(ok=True, object_id=res["id"], class_id=make_id(issuer_id, class_suffix)), 201

    @app.post("/objects/<object_id>/expire")
    def expire_object(object_id: str):
        res = client.expire_object(OFFER, _full_id(object_id))
        return jsonify(ok=True, object_id=res["id"], state=res.get("state"))

    @app.post("/jwt/new")
    def jwt_new():
        data = _body()
        class_suffix = (data.get("class_suffix") or "").strip()
        if not class_suffix:
            return jsonify(ok=False, error="missing class_suffix"), 400
        object_suffix = _suffix(data, "object_suffix")
        url = tokens.jwt_new_objects(
            account, issuer_id, class_suffix, object_suffix, origins=settings.origins, ttl=settings.jwt_ttl
        )
        return jsonify(ok=True, object_id=make_id(issuer_id, object_suffix), save_url=url)

    @app.get("/jwt/existing")
    def jwt_existing():
        url = tokens.jwt_existing_objects(account, issuer_id, origins=settings.origins, ttl=settings.jwt_ttl)
        return jsonify(ok=True, save_url=url)

    @app.post("/batch")
    def batch():
        data = _body()
        class_suffix = (data.get("class_suffix") or "").strip()
        if not class_suffix:
            return jsonify(ok=False, error="missing class_suffix"), 400
        try:
            count = int(data.get("count", 3))
        except (TypeError, ValueError):
            return jsonify(ok=False, error="count must be an integer"), 400
        if not 1 <= count <= MAX_BATCH:
            return jsonify(ok=False, error=f"count must be between 1 and {MAX_BATCH}"), 400

        objects = [minimal_object_body(issuer_id, class_suffix, new_suffix()) for _ in range(count)]
        body = client.batch_create_objects(OFFER, objects)
        return jsonify(ok=True, object_ids=[o["id"] for o in objects], response=body)

    return app


if __name__ == "__main__":
    _settings = Settings.from_env()
    logging.basicConfig(level=_settings.log_level)
    create_app(_settings).run(host="0.0.0.0", port=_settings.port)
