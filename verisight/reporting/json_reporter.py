# verisight/reporting/json_reporter.py
"""
JSON reporting utilities (optional).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from verisight.analysis.base import Assessment
from verisight.formats.result_schema import encode_result
from verisight.io.media_reader import MediaUpload


def to_json_dict(assessment: Assessment, upload: Optional[MediaUpload] = None) -> Dict[str, Any]:
    """Wrap the result document with degraded-mode and media details."""
    doc: Dict[str, Any] = {
        "degraded": assessment.degraded,
        "degradedReason": assessment.reason.value if assessment.reason else None,
        "result": encode_result(assessment.result),
    }
    if upload is not None:
        doc["media"] = {
            "path": upload.path,
            "mimeType": upload.mime_type,
            "kind": upload.kind,
            "size": upload.size,
            "sha256": upload.sha256_hex,
        }
    return doc


def write_json(assessment: Assessment, path: str, upload: Optional[MediaUpload] = None) -> None:
    """Write the report to a file as pretty JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_json_dict(assessment, upload), f, indent=2)
