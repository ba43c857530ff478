"""Report retrieval tools and report projections."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from mobsf_client import (
    COMPARE_PATH,
    DOWNLOAD_PDF_PATH,
    SCORECARD_PATH,
    SUPPRESS_FINDING_PATH,
    VIEW_SOURCE_PATH,
    MobSFClient,
)
from tools.schemas import DEFAULT_ARTIFACT_SECTIONS, DEFAULT_PDF_PATH, SCAN_TYPES

METADATA_FIELDS: tuple[str, ...] = (
    "file_name",
    "size",
    "scan_type",
    "md5",
    "sha1",
    "sha256",
    "package_name",
    "app_name",
    "version_name",
    "version_code",
    "sdk_version",
    "target_sdk_version",
)


def project_fields(report: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Copy the requested top-level keys that *report* actually has.

    Missing keys are left out entirely; nothing is filled with placeholders.
    """
    if not isinstance(report, Mapping):
        return {}
    return {name: report[name] for name in fields if name in report}


def project_metadata(report: Any) -> Dict[str, Any]:
    return project_fields(report, METADATA_FIELDS)


def _hash_schema(description: str = "File hash of the analyzed app") -> dict:
    return {
        "type": "object",
        "properties": {
            "hash": {"type": "string", "description": description},
        },
        "required": ["hash"],
    }


def get_scan_report_json_tool_def() -> dict:
    return {
        "name": "get_scan_report_json",
        "description": "Get detailed JSON scan report",
        "input_schema": _hash_schema(),
    }


async def get_scan_report_json_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.fetch_report(args["hash"])


def get_scan_report_pdf_tool_def() -> dict:
    schema = _hash_schema()
    schema["properties"]["output_path"] = {
        "type": "string",
        "description": "Local path to save PDF report",
        "default": DEFAULT_PDF_PATH,
    }
    return {
        "name": "get_scan_report_pdf",
        "description": "Download PDF report of security analysis",
        "input_schema": schema,
    }


async def get_scan_report_pdf_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    output_path = args["output_path"]
    destination = Path(output_path).expanduser()
    written = await client.download(DOWNLOAD_PDF_PATH, {"hash": args["hash"]}, destination)
    return {
        "message": f"PDF report saved to: {output_path}",
        "path": str(destination.resolve()),
        "bytes": written,
    }


def view_source_code_tool_def() -> dict:
    return {
        "name": "view_source_code",
        "description": "View source code of specific file from analyzed app",
        "input_schema": {
            "type": "object",
            "properties": {
                "hash": {"type": "string", "description": "File hash of the analyzed app"},
                "file": {"type": "string", "description": "Relative path to source file within the app"},
                "type": {"type": "string", "enum": list(SCAN_TYPES), "description": "App type"},
            },
            "required": ["hash", "file", "type"],
        },
    }


async def view_source_code_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.post(
        VIEW_SOURCE_PATH,
        {"hash": args["hash"], "file": args["file"], "type": args["type"]},
    )


def compare_apps_tool_def() -> dict:
    return {
        "name": "compare_apps",
        "description": "Compare security analysis of two mobile apps",
        "input_schema": {
            "type": "object",
            "properties": {
                "hash1": {"type": "string", "description": "Hash of first app"},
                "hash2": {"type": "string", "description": "Hash of second app"},
            },
            "required": ["hash1", "hash2"],
        },
    }


async def compare_apps_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.post(COMPARE_PATH, {"hash1": args["hash1"], "hash2": args["hash2"]})


def get_app_scorecard_tool_def() -> dict:
    return {
        "name": "get_app_scorecard",
        "description": "Get security scorecard summary for analyzed app",
        "input_schema": _hash_schema(),
    }


async def get_app_scorecard_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.post(SCORECARD_PATH, {"hash": args["hash"]})


def suppress_finding_tool_def() -> dict:
    return {
        "name": "suppress_finding",
        "description": "Suppress/ignore a specific security finding",
        "input_schema": {
            "type": "object",
            "properties": {
                "hash": {"type": "string", "description": "File hash of the analyzed app"},
                "finding_id": {"type": "string", "description": "ID of the finding to suppress"},
                "reason": {"type": "string", "description": "Reason for suppressing this finding"},
            },
            "required": ["hash", "finding_id"],
        },
    }


async def suppress_finding_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    data = {"hash": args["hash"], "finding_id": args["finding_id"]}
    if args.get("reason"):
        data["reason"] = args["reason"]
    return await client.post(SUPPRESS_FINDING_PATH, data)


def get_scan_metadata_tool_def() -> dict:
    return {
        "name": "get_scan_metadata",
        "description": (
            "Get identifying metadata for a scanned app (file name, size, hashes, package and app name, "
            "version and SDK levels). Fields MobSF did not report are omitted."
        ),
        "input_schema": _hash_schema(),
    }


async def get_scan_metadata_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    report = await client.fetch_report(args["hash"])
    return project_metadata(report)


def get_scan_artifacts_tool_def() -> dict:
    schema = _hash_schema()
    schema["properties"]["sections"] = {
        "type": "array",
        "items": {"type": "string"},
        "default": list(DEFAULT_ARTIFACT_SECTIONS),
        "description": "Top-level report sections to return",
    }
    return {
        "name": "get_scan_artifacts",
        "description": (
            "Get selected sections of the JSON scan report (e.g. manifest_analysis, permissions, binaries, "
            "malware, entitlements, files). Sections absent from the report are omitted."
        ),
        "input_schema": schema,
    }


async def get_scan_artifacts_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    report = await client.fetch_report(args["hash"])
    return project_fields(report, args["sections"])


__all__ = [
    "METADATA_FIELDS",
    "compare_apps_impl",
    "compare_apps_tool_def",
    "get_app_scorecard_impl",
    "get_app_scorecard_tool_def",
    "get_scan_artifacts_impl",
    "get_scan_artifacts_tool_def",
    "get_scan_metadata_impl",
    "get_scan_metadata_tool_def",
    "get_scan_report_json_impl",
    "get_scan_report_json_tool_def",
    "get_scan_report_pdf_impl",
    "get_scan_report_pdf_tool_def",
    "project_fields",
    "project_metadata",
    "suppress_finding_impl",
    "suppress_finding_tool_def",
    "view_source_code_impl",
    "view_source_code_tool_def",
]
