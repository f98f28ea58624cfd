"""
Request bodies for the Google Wallet objects API.

Each pass vertical (offer, loyalty, generic, ...) has a class resource, an
object resource and a key under which objects travel in a save JWT. The
builders below only produce plain dicts; nothing here talks to the network.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

BATCH_BOUNDARY = "batch_createobjectbatch"


@dataclass(frozen=True)
class Vertical:
    name: str
    resource: str
    placeholder: str

    @property
    def class_resource(self) -> str:
        return f"{self.resource}Class"

    @property
    def object_resource(self) -> str:
        return f"{self.resource}Object"

    @property
    def jwt_class_key(self) -> str:
        return f"{self.resource}Classes"

    @property
    def jwt_object_key(self) -> str:
        return f"{self.resource}Objects"


EVENT_TICKET = Vertical("event_ticket", "eventTicket", "EVENT")
FLIGHT = Vertical("flight", "flight", "FLIGHT")
GENERIC = Vertical("generic", "generic", "GENERIC")
GIFT_CARD = Vertical("gift_card", "giftCard", "GIFT_CARD")
LOYALTY = Vertical("loyalty", "loyalty", "LOYALTY")
OFFER = Vertical("offer", "offer", "OFFER")
TRANSIT = Vertical("transit", "transit", "TRANSIT")

VERTICALS: Dict[str, Vertical] = {
    v.name: v for v in (EVENT_TICKET, FLIGHT, GENERIC, GIFT_CARD, LOYALTY, OFFER, TRANSIT)
}


def get_vertical(name: str) -> Vertical:
    try:
        return VERTICALS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown pass vertical: {name!r}") from None


def make_id(issuer_id: str, suffix: str) -> str:
    # Class and object IDs must be: "<issuerId>.<uniqueSuffix>"
    return f"{issuer_id}.{suffix}"


def new_suffix() -> str:
    return str(uuid.uuid4()).replace("-", "_")


def localized(value: str, language: str = "en-US") -> Dict[str, Any]:
    return {"defaultValue": {"language": language, "value": value}}


def offer_class_body(issuer_id: str, class_suffix: str) -> Dict[str, Any]:
    return {
        "id": make_id(issuer_id, class_suffix),
        "redemptionChannel": "ONLINE",
        "reviewStatus": "UNDER_REVIEW",
        "title": "Offer title",
        "issuerName": "Issuer name",
        "provider": "Provider name",
    }


def minimal_object_body(issuer_id: str, class_suffix: str, object_suffix: str) -> Dict[str, Any]:
    return {
        "id": make_id(issuer_id, object_suffix),
        "classId": make_id(issuer_id, class_suffix),
        "state": "ACTIVE",
    }


def offer_object_body(issuer_id: str, class_suffix: str, object_suffix: str) -> Dict[str, Any]:
    body = minimal_object_body(issuer_id, class_suffix, object_suffix)
    body.update(
        {
            "validTimeInterval": {
                "start": {"date": "2023-06-12T23:20:50.52Z"},
                "end": {"date": "2023-12-12T23:20:50.52Z"},
            },
            "heroImage": {
                "sourceUri": {"uri": "https://farm4.staticflickr.com/3723/11177041115_6e6a3b6f49_o.jpg"}
            },
            "barcode": {"type": "QR_CODE", "value": "QR code"},
            "locations": [
                {"latitude": 37.424015499999996, "longitude": -122.09259560000001},
            ],
            "linksModuleData": {
                "uris": [
                    {
                        "id": "LINK_MODULE_URI_ID",
                        "uri": "http://maps.google.com/",
                        "description": "Link module URI description",
                    },
                    {
                        "id": "LINK_MODULE_TEL_ID",
                        "uri": "tel:6505555555",
                        "description": "Link module tel description",
                    },
                ]
            },
            "imageModulesData": [
                {
                    "id": "IMAGE_MODULE_ID",
                    "mainImage": {
                        "sourceUri": {"uri": "http://farm4.staticflickr.com/3738/12440799783_3dc3c20606_b.jpg"}
                    },
                }
            ],
            "textModulesData": [
                {"header": "Text module header", "body": "Text module body", "id": "TEXT_MODULE_ID"},
            ],
        }
    )
    return body


def generic_class_body(issuer_id: str, class_suffix: str) -> Dict[str, Any]:
    return {"id": make_id(issuer_id, class_suffix)}


def generic_object_body(
    issuer_id: str,
    class_suffix: str,
    object_suffix: str,
    card_title: str,
    header: str,
    language: str = "en-US",
) -> Dict[str, Any]:
    body = minimal_object_body(issuer_id, class_suffix, object_suffix)
    # cardTitle and header are required on GenericObject
    body["cardTitle"] = localized(card_title, language)
    body["header"] = localized(header, language)
    return body


def loyalty_class_body(
    issuer_id: str,
    class_suffix: str,
    program_name: str,
    issuer_name: str,
    logo_uri: str,
) -> Dict[str, Any]:
    return {
        "id": make_id(issuer_id, class_suffix),
        "issuerName": issuer_name,
        "programName": program_name,
        "programLogo": {"sourceUri": {"uri": logo_uri}},
        "reviewStatus": "UNDER_REVIEW",
    }


def loyalty_object_body(
    issuer_id: str,
    class_suffix: str,
    object_suffix: str,
    account_name: str,
    account_id: str,
) -> Dict[str, Any]:
    body = minimal_object_body(issuer_id, class_suffix, object_suffix)
    body["accountName"] = account_name
    body["accountId"] = account_id
    return body


def expire_patch_body() -> Dict[str, Any]:
    return {"state": "EXPIRED"}


def existing_objects_payload(issuer_id: str) -> Dict[str, List[Dict[str, str]]]:
    """One reference per vertical to objects that were created beforehand."""
    payload = {}
    for v in VERTICALS.values():
        payload[v.jwt_object_key] = [
            {
                "id": make_id(issuer_id, f"{v.placeholder}_OBJECT_SUFFIX"),
                "classId": make_id(issuer_id, f"{v.placeholder}_CLASS_SUFFIX"),
            }
        ]
    return payload


def batch_body(vertical: Vertical, objects: Iterable[Dict[str, Any]], boundary: str = BATCH_BOUNDARY) -> str:
    data = ""
    for obj in objects:
        data += f"--{boundary}\n"
        data += "Content-Type: application/json\n\n"
        data += f"POST /walletobjects/v1/{vertical.object_resource}\n\n"
        data += json.dumps(obj) + "\n\n"
    data += f"--{boundary}--"
    return data


def batch_content_type(boundary: str = BATCH_BOUNDARY) -> str:
    return f"multipart/mixed; boundary={boundary}"
