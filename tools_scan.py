"""Upload, scan and scan-list tools.

Each ``*_impl`` performs exactly one MobSF request and returns its decoded
body (or a small projection of it).
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from errors import ValidationToolError
from mobsf_client import (
    DELETE_SCAN_PATH,
    RECENT_SCANS_PATH,
    SCAN_PATH,
    MobSFClient,
)
from tools.schemas import SCAN_TYPES


def upload_mobile_app_tool_def() -> dict:
    return {
        "name": "upload_mobile_app",
        "description": (
            "Upload a mobile app (APK/IPA/ZIP) to MobSF for security analysis. Returns the upload record "
            "including the `hash` used by every other tool to address this app."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "file_path": {"type": "string", "description": "Path to APK/IPA/ZIP file to upload"},
            },
            "required": ["file_path"],
        },
    }


async def upload_mobile_app_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    path = Path(args["file_path"]).expanduser()
    if not path.is_file():
        raise ValidationToolError(f"File not found: {args['file_path']}")
    return await client.upload(path)


def scan_mobile_app_tool_def() -> dict:
    return {
        "name": "scan_mobile_app",
        "description": "Perform security scan on uploaded mobile app using hash",
        "input_schema": {
            "type": "object",
            "properties": {
                "hash": {"type": "string", "description": "File hash from upload response"},
                "scan_type": {
                    "type": "string",
                    "enum": list(SCAN_TYPES),
                    "default": "apk",
                    "description": "Type of app",
                },
            },
            "required": ["hash"],
        },
    }


async def scan_mobile_app_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.post(SCAN_PATH, {"hash": args["hash"], "scan_type": args["scan_type"]})


def _page_schema() -> dict:
    return {
        "type": "object",
        "properties": {
            "page": {
                "type": "integer",
                "minimum": 1,
                "default": 1,
                "description": "Page number for pagination",
            },
        },
    }


def get_recent_scans_tool_def() -> dict:
    return {
        "name": "get_recent_scans",
        "description": "Get list of recent scans and their metadata",
        "input_schema": _page_schema(),
    }


def list_uploaded_apps_tool_def() -> dict:
    return {
        "name": "list_uploaded_apps",
        "description": "List apps uploaded to MobSF (same listing as get_recent_scans)",
        "input_schema": _page_schema(),
    }


async def recent_scans_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.get(RECENT_SCANS_PATH, {"page": args["page"]})


def _hash_schema(description: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "hash": {"type": "string", "description": description},
        },
        "required": ["hash"],
    }


def delete_scan_tool_def() -> dict:
    return {
        "name": "delete_scan",
        "description": "Delete scan results and associated files",
        "input_schema": _hash_schema("File hash of scan to delete"),
    }


async def delete_scan_impl(client: MobSFClient, args: Dict[str, Any]) -> Any:
    return await client.post(DELETE_SCAN_PATH, {"hash": args["hash"]})


def cancel_scan_tool_def() -> dict:
    return {
        "name": "cancel_scan",
        "description": (
            "Cancel a scan by deleting its results and uploaded files. MobSF has no separate cancel "
            "endpoint, so this removes the scan entirely."
        ),
        "input_schema": _hash_schema("File hash of scan to cancel"),
    }


async def cancel_scan_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    response = await client.post(DELETE_SCAN_PATH, {"hash": args["hash"]})
    return {"status": "deleted", "hash": args["hash"], "response": response}


def health_check_tool_def() -> dict:
    return {
        "name": "health_check",
        "description": "Check connectivity and credentials against the configured MobSF instance",
        "input_schema": {"type": "object", "properties": {}},
    }


async def health_check_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    await client.get(RECENT_SCANS_PATH, {"page": 1})
    return {"status": "ok", "base_url": client.base_url}


__all__ = [
    "cancel_scan_impl",
    "cancel_scan_tool_def",
    "delete_scan_impl",
    "delete_scan_tool_def",
    "get_recent_scans_tool_def",
    "health_check_impl",
    "health_check_tool_def",
    "list_uploaded_apps_tool_def",
    "recent_scans_impl",
    "scan_mobile_app_impl",
    "scan_mobile_app_tool_def",
    "upload_mobile_app_impl",
    "upload_mobile_app_tool_def",
]
