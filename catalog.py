"""The MobSF tool catalog: one registration table, in advertised order."""
from __future__ import annotations

from tools import Tool, ToolRegistry, build_registry_from_tools
from tools.schemas import (
    ArtifactsInput,
    CompareInput,
    HashInput,
    NoArgumentsInput,
    PageInput,
    PipelineScanInput,
    ReportPdfInput,
    ScanInput,
    SuppressFindingInput,
    UploadInput,
    ViewSourceInput,
    WaitForReportInput,
)
from tools_pipeline import pipeline_scan_impl, pipeline_scan_tool_def
from tools_report import (
    compare_apps_impl,
    compare_apps_tool_def,
    get_app_scorecard_impl,
    get_app_scorecard_tool_def,
    get_scan_artifacts_impl,
    get_scan_artifacts_tool_def,
    get_scan_metadata_impl,
    get_scan_metadata_tool_def,
    get_scan_report_json_impl,
    get_scan_report_json_tool_def,
    get_scan_report_pdf_impl,
    get_scan_report_pdf_tool_def,
    suppress_finding_impl,
    suppress_finding_tool_def,
    view_source_code_impl,
    view_source_code_tool_def,
)
from tools_scan import (
    cancel_scan_impl,
    cancel_scan_tool_def,
    delete_scan_impl,
    delete_scan_tool_def,
    get_recent_scans_tool_def,
    health_check_impl,
    health_check_tool_def,
    list_uploaded_apps_tool_def,
    recent_scans_impl,
    scan_mobile_app_impl,
    scan_mobile_app_tool_def,
    upload_mobile_app_impl,
    upload_mobile_app_tool_def,
)
from tools_wait_for_report import (
    get_scan_status_impl,
    get_scan_status_tool_def,
    wait_for_report_impl,
    wait_for_report_tool_def,
)


def build_default_tools() -> list[Tool]:
    return [
        Tool(**upload_mobile_app_tool_def(), fn=upload_mobile_app_impl, input_model=UploadInput),
        Tool(**scan_mobile_app_tool_def(), fn=scan_mobile_app_impl, input_model=ScanInput),
        Tool(**get_scan_report_json_tool_def(), fn=get_scan_report_json_impl, input_model=HashInput),
        Tool(**get_scan_report_pdf_tool_def(), fn=get_scan_report_pdf_impl, input_model=ReportPdfInput),
        Tool(**view_source_code_tool_def(), fn=view_source_code_impl, input_model=ViewSourceInput),
        Tool(**compare_apps_tool_def(), fn=compare_apps_impl, input_model=CompareInput),
        Tool(**get_recent_scans_tool_def(), fn=recent_scans_impl, input_model=PageInput),
        Tool(**list_uploaded_apps_tool_def(), fn=recent_scans_impl, input_model=PageInput),
        Tool(**delete_scan_tool_def(), fn=delete_scan_impl, input_model=HashInput),
        Tool(**cancel_scan_tool_def(), fn=cancel_scan_impl, input_model=HashInput),
        Tool(**get_app_scorecard_tool_def(), fn=get_app_scorecard_impl, input_model=HashInput),
        Tool(**suppress_finding_tool_def(), fn=suppress_finding_impl, input_model=SuppressFindingInput),
        Tool(**health_check_tool_def(), fn=health_check_impl, input_model=NoArgumentsInput),
        Tool(**wait_for_report_tool_def(), fn=wait_for_report_impl, input_model=WaitForReportInput),
        Tool(**get_scan_status_tool_def(), fn=get_scan_status_impl, input_model=HashInput),
        Tool(**get_scan_metadata_tool_def(), fn=get_scan_metadata_impl, input_model=HashInput),
        Tool(**get_scan_artifacts_tool_def(), fn=get_scan_artifacts_impl, input_model=ArtifactsInput),
        Tool(**pipeline_scan_tool_def(), fn=pipeline_scan_impl, input_model=PipelineScanInput),
    ]


def build_default_registry() -> ToolRegistry:
    return build_registry_from_tools(build_default_tools())


__all__ = ["build_default_registry", "build_default_tools"]
