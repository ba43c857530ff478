"""Pydantic schemas for validated tool inputs."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from errors import ValidationToolError

ScanType = Literal["apk", "ipa", "zip"]
SCAN_TYPES: tuple[str, ...] = ("apk", "ipa", "zip")

DEFAULT_PDF_PATH = "./mobsf_report.pdf"
DEFAULT_POLL_INTERVAL_MS = 3000
DEFAULT_POLL_TIMEOUT_MS = 60000
DEFAULT_ARTIFACT_SECTIONS: tuple[str, ...] = (
    "manifest_analysis",
    "permissions",
    "binaries",
    "malware",
    "entitlements",
    "files",
)


class ToolSchema(BaseModel):
    """Base class for all tool schemas.

    Unknown fields are dropped rather than rejected so older callers keep
    working when a tool grows new optional arguments.
    """

    model_config = {
        "extra": "ignore",
        "validate_assignment": True,
    }

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class NoArgumentsInput(ToolSchema):
    pass


class HashInput(ToolSchema):
    hash: str = Field(..., min_length=1, description="File hash of the analyzed app")


class UploadInput(ToolSchema):
    file_path: str = Field(..., min_length=1)


class ScanInput(HashInput):
    scan_type: ScanType = "apk"


class ReportPdfInput(HashInput):
    output_path: str = Field(DEFAULT_PDF_PATH, min_length=1)


class ViewSourceInput(HashInput):
    file: str = Field(..., min_length=1)
    type: ScanType


class CompareInput(ToolSchema):
    hash1: str = Field(..., min_length=1)
    hash2: str = Field(..., min_length=1)


class PageInput(ToolSchema):
    page: int = Field(1, ge=1, strict=True)


class SuppressFindingInput(HashInput):
    finding_id: str = Field(..., min_length=1)
    reason: Optional[str] = None


class WaitForReportInput(HashInput):
    interval_ms: int = Field(DEFAULT_POLL_INTERVAL_MS, ge=1, strict=True)
    timeout_ms: int = Field(DEFAULT_POLL_TIMEOUT_MS, ge=0, strict=True)


class ArtifactsInput(HashInput):
    sections: List[str] = Field(default_factory=lambda: list(DEFAULT_ARTIFACT_SECTIONS))


class PipelineScanInput(ToolSchema):
    file_path: str = Field(..., min_length=1)
    scan_type: Optional[ScanType] = None
    interval_ms: int = Field(DEFAULT_POLL_INTERVAL_MS, ge=1, strict=True)
    timeout_ms: int = Field(DEFAULT_POLL_TIMEOUT_MS, ge=0, strict=True)
    sections: List[str] = Field(default_factory=lambda: list(DEFAULT_ARTIFACT_SECTIONS))
    include_pdf: bool = False
    pdf_output_path: str = Field(DEFAULT_PDF_PATH, min_length=1)


def format_validation_error(exc: ValidationError) -> str:
    """Flatten every pydantic error into ``field: problem`` entries, comma-separated."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "input"
        messages.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return ", ".join(messages)


def parse_tool_input(schema: Type[ToolSchema], raw_input: Any) -> ToolSchema:
    """Parse and validate raw input into a Pydantic model instance.

    ``None`` is treated as an empty argument object. Raises
    ``ValidationToolError`` listing every violated field.
    """
    if raw_input is None:
        raw_input = {}
    if not isinstance(raw_input, Mapping):
        raise ValidationToolError("input: arguments must be an object")
    try:
        return schema.model_validate(dict(raw_input))
    except ValidationError as exc:
        raise ValidationToolError(format_validation_error(exc)) from exc


def validate_tool_input(schema: Type[ToolSchema], raw_input: Any) -> Dict[str, Any]:
    """Return the validated, defaulted argument dict for *schema*."""
    return parse_tool_input(schema, raw_input).dump()


__all__ = [
    "ArtifactsInput",
    "CompareInput",
    "DEFAULT_ARTIFACT_SECTIONS",
    "DEFAULT_PDF_PATH",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_POLL_TIMEOUT_MS",
    "HashInput",
    "NoArgumentsInput",
    "PageInput",
    "PipelineScanInput",
    "ReportPdfInput",
    "SCAN_TYPES",
    "ScanInput",
    "ScanType",
    "SuppressFindingInput",
    "ToolSchema",
    "UploadInput",
    "ViewSourceInput",
    "WaitForReportInput",
    "format_validation_error",
    "parse_tool_input",
    "validate_tool_input",
]
