import asyncio

import httpx
import pytest

from errors import ErrorKind, RemoteServiceError
from mobsf_client import DOWNLOAD_PDF_PATH, RECENT_SCANS_PATH, SCAN_PATH, UPLOAD_PATH
from tests.mocking import form_data


def test_post_sends_form_data_and_auth_headers(mobsf):
    mobsf.add("POST", SCAN_PATH, (200, {"scan_id": "s1"}))

    async def _run():
        return await mobsf.client().post(SCAN_PATH, {"hash": "h1", "scan_type": "apk"})

    result = asyncio.run(_run())

    assert result == {"scan_id": "s1"}
    request = mobsf.calls(SCAN_PATH)[0]
    assert str(request.url) == "http://mobsf.test/api/v1/scan"
    assert request.headers["Authorization"] == "test-key"
    assert request.headers["X-Mobsf-Api-Key"] == "test-key"
    assert form_data(request) == {"hash": "h1", "scan_type": "apk"}


def test_get_passes_query_params(mobsf):
    mobsf.add("GET", RECENT_SCANS_PATH, (200, {"content": []}))

    asyncio.run(mobsf.client().get(RECENT_SCANS_PATH, {"page": 3}))

    assert mobsf.calls(RECENT_SCANS_PATH)[0].url.params["page"] == "3"


def test_error_status_raises_upstream_error_with_body(mobsf):
    mobsf.add("POST", SCAN_PATH, (401, {"error": "You are unauthorized to make this request."}))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().post(SCAN_PATH, {"hash": "h1"}))

    assert exc.value.status == 401
    assert exc.value.error_kind == ErrorKind.UPSTREAM
    assert exc.value.message == 'HTTP 401: {"error": "You are unauthorized to make this request."}'


def test_non_json_body_is_returned_as_text(mobsf):
    mobsf.add("POST", SCAN_PATH, (500, b"Internal Server Error"))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().post(SCAN_PATH, {"hash": "h1"}))

    assert exc.value.body == "Internal Server Error"
    assert exc.value.message == 'HTTP 500: "Internal Server Error"'


def test_empty_error_body_renders_reason(mobsf):
    mobsf.add("POST", SCAN_PATH, (503, None))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().post(SCAN_PATH, {"hash": "h1"}))

    assert exc.value.message == "HTTP 503: Request failed with status code 503"


def test_connection_failure_raises_transport_error(mobsf):
    mobsf.add("POST", SCAN_PATH, httpx.ConnectError("connection refused"))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().post(SCAN_PATH, {"hash": "h1"}))

    assert exc.value.status is None
    assert exc.value.error_kind == ErrorKind.TRANSPORT
    assert exc.value.message == "Network/unknown error: ConnectError: connection refused"


def test_upload_sends_multipart_file(mobsf, tmp_path):
    apk = tmp_path / "app.apk"
    apk.write_bytes(b"PK\x03\x04fake-apk")
    mobsf.add("POST", UPLOAD_PATH, (200, {"hash": "h1", "scan_type": "apk", "file_name": "app.apk"}))

    result = asyncio.run(mobsf.client().upload(apk))

    assert result["hash"] == "h1"
    request = mobsf.calls(UPLOAD_PATH)[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="file"; filename="app.apk"' in request.content
    assert b"fake-apk" in request.content


def test_download_streams_to_file(mobsf, tmp_path):
    mobsf.add("POST", DOWNLOAD_PDF_PATH, (200, b"%PDF-1.4 report"))
    destination = tmp_path / "reports" / "out.pdf"

    written = asyncio.run(mobsf.client().download(DOWNLOAD_PDF_PATH, {"hash": "h1"}, destination))

    assert written == len(b"%PDF-1.4 report")
    assert destination.read_bytes() == b"%PDF-1.4 report"


def test_download_error_does_not_create_file(mobsf, tmp_path):
    mobsf.add("POST", DOWNLOAD_PDF_PATH, (404, {"error": "Invalid scan hash"}))
    destination = tmp_path / "out.pdf"

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().download(DOWNLOAD_PDF_PATH, {"hash": "nope"}, destination))

    assert exc.value.status == 404
    assert not destination.exists()


class _ResetMidStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"%PDF-1.4 partial"
        raise httpx.ReadError("connection reset by peer")


def test_download_interrupted_mid_stream_removes_partial_file(mobsf, tmp_path):
    mobsf.add("POST", DOWNLOAD_PDF_PATH, lambda request: httpx.Response(200, stream=_ResetMidStream()))
    destination = tmp_path / "out.pdf"

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(mobsf.client().download(DOWNLOAD_PDF_PATH, {"hash": "h1"}, destination))

    assert exc.value.error_kind == ErrorKind.TRANSPORT
    assert "ReadError" in exc.value.message
    assert not destination.exists()


def test_download_connect_failure_keeps_existing_file(mobsf, tmp_path):
    mobsf.add("POST", DOWNLOAD_PDF_PATH, httpx.ConnectError("connection refused"))
    destination = tmp_path / "out.pdf"
    destination.write_bytes(b"previous report")

    with pytest.raises(RemoteServiceError):
        asyncio.run(mobsf.client().download(DOWNLOAD_PDF_PATH, {"hash": "h1"}, destination))

    assert destination.read_bytes() == b"previous report"
