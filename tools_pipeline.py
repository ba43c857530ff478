"""End-to-end scan pipeline: upload, scan, wait, project, optionally fetch the PDF."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from errors import ErrorKind, ToolError, ValidationToolError
from mobsf_client import DOWNLOAD_PDF_PATH, SCAN_PATH, MobSFClient
from tools.schemas import (
    DEFAULT_ARTIFACT_SECTIONS,
    DEFAULT_PDF_PATH,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_POLL_TIMEOUT_MS,
    SCAN_TYPES,
)
from tools_report import project_fields, project_metadata
from tools_wait_for_report import wait_for_report

logger = logging.getLogger(__name__)


def pipeline_scan_tool_def() -> dict:
    return {
        "name": "pipeline_scan",
        "description": (
            "Run a complete analysis of a local APK/IPA/ZIP: upload it, start the scan, wait for the "
            "report, and return app metadata plus the selected report sections. Set `include_pdf` to "
            "also save the PDF report. `scan_type` defaults to what MobSF detected on upload."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "file_path": {"type": "string", "description": "Path to APK/IPA/ZIP file to analyze"},
                "scan_type": {"type": "string", "enum": list(SCAN_TYPES), "description": "Type of app"},
                "interval_ms": {"type": "integer", "minimum": 1, "default": DEFAULT_POLL_INTERVAL_MS},
                "timeout_ms": {"type": "integer", "minimum": 0, "default": DEFAULT_POLL_TIMEOUT_MS},
                "sections": {
                    "type": "array",
                    "items": {"type": "string"},
                    "default": list(DEFAULT_ARTIFACT_SECTIONS),
                    "description": "Top-level report sections to return",
                },
                "include_pdf": {"type": "boolean", "default": False},
                "pdf_output_path": {"type": "string", "default": DEFAULT_PDF_PATH},
            },
            "required": ["file_path"],
        },
    }


def _resolve_scan_type(requested: Optional[str], upload: Any, path: Path) -> str:
    if requested:
        return requested
    if isinstance(upload, Mapping):
        detected = str(upload.get("scan_type") or "").lower()
        if detected in SCAN_TYPES:
            return detected
    suffix = path.suffix.lower().lstrip(".")
    if suffix in SCAN_TYPES:
        return suffix
    return "apk"


async def pipeline_scan_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    path = Path(args["file_path"]).expanduser()
    if not path.is_file():
        raise ValidationToolError(f"File not found: {args['file_path']}")

    upload = await client.upload(path)
    file_hash = upload.get("hash") if isinstance(upload, Mapping) else None
    if not file_hash:
        raise ToolError(f"MobSF upload response did not include a hash: {upload!r}", ErrorKind.UPSTREAM)

    scan_type = _resolve_scan_type(args.get("scan_type"), upload, path)
    logger.info("pipeline %s: scanning as %s", file_hash, scan_type)
    scan = await client.post(SCAN_PATH, {"hash": file_hash, "scan_type": scan_type})

    session = await wait_for_report(
        client,
        file_hash,
        interval_ms=args["interval_ms"],
        timeout_ms=args["timeout_ms"],
    )

    result: Dict[str, Any] = {
        "hash": file_hash,
        "scan_type": scan_type,
        "upload": upload,
        "scan": scan,
        "attempts": session.attempts,
        "metadata": project_metadata(session.payload),
        "artifacts": project_fields(session.payload, args["sections"]),
    }

    if args["include_pdf"]:
        destination = Path(args["pdf_output_path"]).expanduser()
        written = await client.download(DOWNLOAD_PDF_PATH, {"hash": file_hash}, destination)
        result["pdf"] = {"path": str(destination.resolve()), "bytes": written}

    return result


__all__ = ["pipeline_scan_impl", "pipeline_scan_tool_def"]
