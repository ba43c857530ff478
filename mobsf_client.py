"""Async client for the MobSF REST API.

Every method performs exactly one request. Failures surface as
``RemoteServiceError``: with a status code when MobSF answered with a
non-success response, without one when no response arrived at all.
"""
from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from config import MobSFConfig
from errors import RemoteServiceError

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/v1/upload"
SCAN_PATH = "/api/v1/scan"
REPORT_JSON_PATH = "/api/v1/report_json"
DOWNLOAD_PDF_PATH = "/api/v1/download_pdf"
VIEW_SOURCE_PATH = "/api/v1/view_source"
COMPARE_PATH = "/api/v1/compare"
RECENT_SCANS_PATH = "/api/v1/recent_scans"
DELETE_SCAN_PATH = "/api/v1/delete_scan"
SCORECARD_PATH = "/api/v1/scorecard"
SUPPRESS_FINDING_PATH = "/api/v1/suppress_finding"


class MobSFClient:
    """Thin request/response wrapper around a MobSF instance."""

    def __init__(self, config: MobSFConfig, client: httpx.AsyncClient | None = None) -> None:
        """Create a MobSF client.

        Args:
            config: Connection settings (base URL, API key, timeouts).
            client: Optional injected httpx client for testing / transport control.
        """
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=config.request_timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "MobSFClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._config.api_key,
            "X-Mobsf-Api-Key": self._config.api_key,
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        data: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
        files: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Issue one request and return the decoded body."""
        url = f"{self._base_url}{path}"
        logger.debug("MobSF %s %s", method, path)
        try:
            response = await self._client.request(
                method,
                url,
                data=dict(data) if data is not None else None,
                params=dict(params) if params is not None else None,
                files=files,
                headers=self._headers(),
                timeout=timeout if timeout is not None else self._config.request_timeout,
            )
        except httpx.RequestError as exc:
            raise RemoteServiceError(_describe_request_error(exc)) from exc

        body = _decode_body(response)
        if not response.is_success:
            raise RemoteServiceError(
                f"Request failed with status code {response.status_code}",
                status=response.status_code,
                body=body,
            )
        return body

    async def post(self, path: str, data: Mapping[str, Any]) -> Any:
        return await self.request("POST", path, data=data)

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def upload(self, file_path: Path) -> Any:
        """Upload an APK/IPA/ZIP as multipart form data under the ``file`` field."""
        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        with file_path.open("rb") as fh:
            return await self.request(
                "POST",
                UPLOAD_PATH,
                files={"file": (file_path.name, fh, content_type)},
                timeout=self._config.upload_timeout,
            )

    async def fetch_report(self, file_hash: str) -> Any:
        return await self.post(REPORT_JSON_PATH, {"hash": file_hash})

    async def download(self, path: str, data: Mapping[str, Any], destination: Path) -> int:
        """Stream a binary response body into *destination*; return bytes written."""
        url = f"{self._base_url}{path}"
        logger.debug("MobSF POST %s -> %s", path, destination)
        written = 0
        opened = False
        try:
            async with self._client.stream(
                "POST",
                url,
                data=dict(data),
                headers=self._headers(),
                timeout=self._config.upload_timeout,
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise RemoteServiceError(
                        f"Request failed with status code {response.status_code}",
                        status=response.status_code,
                        body=_decode_body(response),
                    )
                destination.parent.mkdir(parents=True, exist_ok=True)
                with destination.open("wb") as fh:
                    opened = True
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
                        written += len(chunk)
        except httpx.RequestError as exc:
            # Never leave a truncated file behind.
            if opened:
                destination.unlink(missing_ok=True)
            raise RemoteServiceError(_describe_request_error(exc)) from exc
        return written


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _describe_request_error(exc: httpx.RequestError) -> str:
    detail = str(exc)
    return f"{exc.__class__.__name__}: {detail}" if detail else exc.__class__.__name__


__all__ = [
    "COMPARE_PATH",
    "DELETE_SCAN_PATH",
    "DOWNLOAD_PDF_PATH",
    "MobSFClient",
    "RECENT_SCANS_PATH",
    "REPORT_JSON_PATH",
    "SCAN_PATH",
    "SCORECARD_PATH",
    "SUPPRESS_FINDING_PATH",
    "UPLOAD_PATH",
    "VIEW_SOURCE_PATH",
]
