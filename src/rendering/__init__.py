"""
Output side of consolidation: text report, JSON artifact, and an optional
line interpretation that renders JSON management operations as CLI commands.
"""

from .artifacts import ARTIFACT_SCHEMA, outside_groups, serialize_consolidation_result, write_consolidation_artifact
from .operations import OperationFormatError, format_operation, format_operation_line, lenient
from .report import render_group, render_report

__all__ = [
    "ARTIFACT_SCHEMA",
    "OperationFormatError",
    "format_operation",
    "format_operation_line",
    "lenient",
    "outside_groups",
    "render_group",
    "render_report",
    "serialize_consolidation_result",
    "write_consolidation_artifact",
]
