"""
Response payloads of the export endpoints.

Shape::

    {
        "category": "REDEMPTION",
        "filesProcessed": 2,
        "successfulFiles": ["redemption_01.txt", "redemption_02.txt"],
        "errors": [{"fileName": "...", "errorMessage": "..."}]
    }
"""

from typing import Any

from filerelease.core.result import OperationResult

UNKNOWN_CATEGORY = "UNKNOWN"
SYSTEM_FILE_NAME = "system"


def export_response(category: str, result: OperationResult) -> dict[str, Any]:
    """Map a relocation result to the export payload; filesProcessed counts successes only."""
    return {
        "category": category,
        "filesProcessed": result.success_count,
        "successfulFiles": list(result.successful_files),
        "errors": [{"fileName": e.file_name, "errorMessage": e.error_message} for e in result.errors],
    }


def system_failure_response(category: str | None, message: str) -> dict[str, Any]:
    """Payload for a fault that aborted the whole release."""
    return {
        "category": category or UNKNOWN_CATEGORY,
        "filesProcessed": 0,
        "successfulFiles": [],
        "errors": [{"fileName": SYSTEM_FILE_NAME, "errorMessage": message}],
    }
