import json
import re

import pytest

from walletpass import payloads
from walletpass.payloads import LOYALTY, OFFER, VERTICALS

ISSUER = "3388000000012345678"


def test_new_suffix_is_id_safe():
    suffix = payloads.new_suffix()
    assert re.fullmatch(r"[0-9a-f_]{36}", suffix)
    assert "-" not in suffix
    assert suffix != payloads.new_suffix()


def test_vertical_resources():
    assert OFFER.class_resource == "offerClass"
    assert OFFER.object_resource == "offerObject"
    assert OFFER.jwt_object_key == "offerObjects"
    assert OFFER.jwt_class_key == "offerClasses"
    assert VERTICALS["gift_card"].object_resource == "giftCardObject"
    assert VERTICALS["event_ticket"].jwt_object_key == "eventTicketObjects"


def test_get_vertical():
    assert payloads.get_vertical(" Loyalty ") is LOYALTY
    with pytest.raises(ValueError, match="boarding"):
        payloads.get_vertical("boarding")


def test_offer_class_body():
    assert payloads.offer_class_body(ISSUER, "cls") == {
        "id": f"{ISSUER}.cls",
        "redemptionChannel": "ONLINE",
        "reviewStatus": "UNDER_REVIEW",
        "title": "Offer title",
        "issuerName": "Issuer name",
        "provider": "Provider name",
    }


def test_offer_object_body():
    body = payloads.offer_object_body(ISSUER, "cls", "obj")
    assert body["id"] == f"{ISSUER}.obj"
    assert body["classId"] == f"{ISSUER}.cls"
    assert body["state"] == "ACTIVE"
    assert body["validTimeInterval"]["start"]["date"] == "2023-06-12T23:20:50.52Z"
    assert body["validTimeInterval"]["end"]["date"] == "2023-12-12T23:20:50.52Z"
    assert body["barcode"] == {"type": "QR_CODE", "value": "QR code"}
    assert body["locations"] == [{"latitude": 37.424015499999996, "longitude": -122.09259560000001}]
    assert [u["id"] for u in body["linksModuleData"]["uris"]] == ["LINK_MODULE_URI_ID", "LINK_MODULE_TEL_ID"]
    assert body["imageModulesData"][0]["id"] == "IMAGE_MODULE_ID"
    assert body["textModulesData"] == [
        {"header": "Text module header", "body": "Text module body", "id": "TEXT_MODULE_ID"}
    ]


def test_generic_and_loyalty_bodies():
    generic = payloads.generic_object_body(ISSUER, "cls", "obj", "SparkCards", "Ada")
    assert generic["cardTitle"] == {"defaultValue": {"language": "en-US", "value": "SparkCards"}}
    assert generic["header"]["defaultValue"]["value"] == "Ada"
    assert payloads.generic_class_body(ISSUER, "cls") == {"id": f"{ISSUER}.cls"}

    loyalty_class = payloads.loyalty_class_body(ISSUER, "cls", "Coffee Club", "Coffee Madrid", "https://x/logo.png")
    assert loyalty_class["programLogo"]["sourceUri"]["uri"] == "https://x/logo.png"
    loyalty = payloads.loyalty_object_body(ISSUER, "cls", "obj", "Ada", "member-1")
    assert loyalty["accountName"] == "Ada"
    assert loyalty["accountId"] == "member-1"


def test_existing_objects_payload():
    payload = payloads.existing_objects_payload(ISSUER)
    assert sorted(payload) == sorted(v.jwt_object_key for v in VERTICALS.values())
    assert payload["offerObjects"] == [
        {"id": f"{ISSUER}.OFFER_OBJECT_SUFFIX", "classId": f"{ISSUER}.OFFER_CLASS_SUFFIX"}
    ]
    assert payload["giftCardObjects"][0]["id"] == f"{ISSUER}.GIFT_CARD_OBJECT_SUFFIX"
    assert payload["eventTicketObjects"][0]["classId"] == f"{ISSUER}.EVENT_CLASS_SUFFIX"


def test_batch_body_layout():
    objs = [payloads.minimal_object_body(ISSUER, "cls", s) for s in ("a", "b")]
    data = payloads.batch_body(OFFER, objs)

    parts = data.split("--batch_createobjectbatch\n")
    assert parts[0] == ""
    assert len(parts) == 3
    assert data.endswith("--batch_createobjectbatch--")

    first = parts[1]
    header, request_line, body, _ = first.split("\n\n")
    assert header == "Content-Type: application/json"
    assert request_line == "POST /walletobjects/v1/offerObject"
    assert json.loads(body) == objs[0]


def test_batch_body_empty():
    assert payloads.batch_body(OFFER, []) == "--batch_createobjectbatch--"


def test_batch_content_type():
    assert payloads.batch_content_type() == "multipart/mixed; boundary=batch_createobjectbatch"
