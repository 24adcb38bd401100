import json

import httpx
import pytest

from billscan.core.errors import MalformedResponse, NetworkFailure, ServiceError, SubmissionEmpty
from billscan.core.models import ImageResource
from billscan.core.ocr import OCRServiceClient

URL = "http://ocr.test/process-images"

IMAGES = [
    ImageResource("a.jpg", b"\xff\xd8first", "image/jpeg"),
    ImageResource("b.png", b"\x89PNGsecond", "image/png"),
]


def _client(handler):
    return OCRServiceClient(url=URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_extract_sends_all_images_under_one_field():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"data": [{"shop": "A", "item": "x"}]})

    records = _client(handler).extract(IMAGES)

    assert records == [{"shop": "A", "item": "x"}]
    assert seen["method"] == "POST"
    assert seen["url"] == URL
    assert seen["content_type"].startswith("multipart/form-data")
    assert seen["body"].count(b'name="files"') == 2
    assert b'filename="a.jpg"' in seen["body"]
    assert b'filename="b.png"' in seen["body"]


def test_values_are_normalized_to_text():
    def handler(request):
        return httpx.Response(200, json={"data": [
            {"qty": 2, "price": 1.5, "note": None, "paid": True, "tags": ["a", "b"]},
        ]})

    records = _client(handler).extract(IMAGES)
    assert records == [{"qty": "2", "price": "1.5", "note": "", "paid": "true",
                         "tags": '["a","b"]'}]


def test_error_detail_is_used_as_message():
    def handler(request):
        return httpx.Response(422, json={"detail": "No table found in image"})

    with pytest.raises(ServiceError) as exc:
        _client(handler).extract(IMAGES)
    assert str(exc.value) == "No table found in image"
    assert exc.value.status_code == 422


def test_error_without_detail_reports_status():
    def handler(request):
        return httpx.Response(500, json={"error": "boom"})

    with pytest.raises(ServiceError) as exc:
        _client(handler).extract(IMAGES)
    assert str(exc.value) == "HTTP 500: Internal Server Error"


def test_error_without_json_is_unknown():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(ServiceError) as exc:
        _client(handler).extract(IMAGES)
    assert str(exc.value) == "Unknown error (HTTP 502)"


def test_network_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure):
        _client(handler).extract(IMAGES)


@pytest.mark.parametrize("body", [
    json.dumps({"result": []}),
    json.dumps({"data": "nope"}),
    json.dumps({"data": [1, 2]}),
    "not json",
])
def test_malformed_success_body(body):
    def handler(request):
        return httpx.Response(200, text=body)

    with pytest.raises(MalformedResponse):
        _client(handler).extract(IMAGES)


def test_empty_submission_is_rejected_before_sending():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(SubmissionEmpty):
        _client(handler).extract([])
