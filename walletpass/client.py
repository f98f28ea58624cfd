from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Optional
from urllib.parse import quote

import requests

from .config import API_BASE, BATCH_URL
from .payloads import Vertical, batch_body, batch_content_type, expire_patch_body

logger = logging.getLogger(__name__)


class WalletApiError(RuntimeError):
    def __init__(self, action: str, status_code: int, text: str):
        super().__init__(f"{action} failed {status_code}: {text[:2000]}")
        self.action = action
        self.status_code = status_code
        self.text = text


class WalletConflictError(WalletApiError):
    """The resource already exists (HTTP 409)."""


class WalletClient:
    """
    Thin REST wrapper around walletobjects/v1.

    token_provider is called before every request and must return a bearer
    token; ServiceAccount.access_token fits.
    """

    def __init__(
        self,
        token_provider: Callable[[], str],
        session: Optional[requests.Session] = None,
        api_base: str = API_BASE,
        batch_url: str = BATCH_URL,
        timeout: int = 30,
    ):
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.api_base = api_base.rstrip("/")
        self.batch_url = batch_url
        self.timeout = timeout

    def _headers(self, content_type: str = "application/json") -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token_provider()}",
            "Content-Type": content_type,
        }

    def _url(self, resource: str, resource_id: Optional[str] = None) -> str:
        url = f"{self.api_base}/{resource}"
        if resource_id is not None:
            url += "/" + quote(resource_id, safe="")
        return url

    def _request(self, action: str, method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = kwargs.pop("headers", None) or self._headers()
        logger.debug("%s %s", method, url)
        r = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        if r.status_code == 409:
            raise WalletConflictError(action, r.status_code, r.text)
        if not 200 <= r.status_code < 300:
            logger.error("%s failed: %s %s", action, r.status_code, r.text[:2000])
            raise WalletApiError(action, r.status_code, r.text)
        return r

    def insert_class(self, vertical: Vertical, body: Dict[str, Any]) -> Dict[str, Any]:
        r = self._request(f"{vertical.class_resource} insert", "POST", self._url(vertical.class_resource), json=body)
        logger.info("Created class %s", body.get("id"))
        return r.json()

    def get_class(self, vertical: Vertical, class_id: str) -> Dict[str, Any]:
        r = self._request(f"{vertical.class_resource} get", "GET", self._url(vertical.class_resource, class_id))
        return r.json()

    def insert_object(self, vertical: Vertical, body: Dict[str, Any]) -> Dict[str, Any]:
        r = self._request(f"{vertical.object_resource} insert", "POST", self._url(vertical.object_resource), json=body)
        logger.info("Created object %s", body.get("id"))
        return r.json()

    def get_object(self, vertical: Vertical, object_id: str) -> Dict[str, Any]:
        r = self._request(f"{vertical.object_resource} get", "GET", self._url(vertical.object_resource, object_id))
        return r.json()

    def patch_object(self, vertical: Vertical, object_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        r = self._request(
            f"{vertical.object_resource} patch",
            "PATCH",
            self._url(vertical.object_resource, object_id),
            json=body,
        )
        return r.json()

    def expire_object(self, vertical: Vertical, object_id: str) -> Dict[str, Any]:
        """
        Sets the object's state to EXPIRED. If the valid time interval is
        already set, the pass will expire automatically up to 24 hours after.
        """
        res = self.patch_object(vertical, object_id, expire_patch_body())
        logger.info("Expired object %s", object_id)
        return res

    def insert_or_patch_object(self, vertical: Vertical, body: Dict[str, Any]) -> Dict[str, Any]:
        # If already exists -> patch instead, so issuing can be repeated
        try:
            return self.insert_object(vertical, body)
        except WalletConflictError:
            logger.info("Object %s already exists, patching", body["id"])
            patch_body = {k: v for k, v in body.items() if k not in ("id", "classId")}
            return self.patch_object(vertical, body["id"], patch_body)

    def batch_create_objects(self, vertical: Vertical, objects: Iterable[Dict[str, Any]]) -> str:
        data = batch_body(vertical, objects)
        r = self._request(
            "batch insert",
            "POST",
            self.batch_url,
            headers=self._headers(batch_content_type()),
            data=data.encode("utf-8"),
        )
        return r.text
