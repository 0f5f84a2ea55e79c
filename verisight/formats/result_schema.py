"""
Strict JSON codec for analysis results.

Decoding validates the camelCase document returned by the remote model (and
stored in history) against the result schema and raises ResultParseError on
any mismatch. Nothing from the external payload is trusted as-is.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any, Dict, List, Sequence, Tuple

from verisight.analysis.base import (
    AnalysisResult,
    MediaMetadata,
    ProvenanceStatus,
    SimulatedProvenanceStep,
)


class ResultParseError(ValueError):
    """Raised when a payload does not match the analysis result schema."""


def _require(obj: Dict[str, Any], key: str, kind: type | Tuple[type, ...], where: str) -> Any:
    if key not in obj:
        raise ResultParseError(f"{where}: missing field '{key}'")
    value = obj[key]
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) and bool not in (kind if isinstance(kind, tuple) else (kind,)):
        raise ResultParseError(f"{where}: field '{key}' has wrong type bool")
    if not isinstance(value, kind):
        raise ResultParseError(f"{where}: field '{key}' has wrong type {type(value).__name__}")
    return value


def _string_list(obj: Dict[str, Any], key: str, where: str) -> Tuple[str, ...]:
    items = _require(obj, key, list, where)
    if not all(isinstance(x, str) for x in items):
        raise ResultParseError(f"{where}: '{key}' must contain only strings")
    return tuple(items)


def _parse_timestamp(value: str, where: str) -> datetime:
    try:
        # fromisoformat rejects a trailing 'Z' before Python 3.11
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ResultParseError(f"{where}: invalid ISO-8601 timestamp {value!r}") from e


def _comparable(ts: datetime) -> float:
    # naive timestamps are read as UTC so mixed chains still order
    if ts.tzinfo is None:
        return (ts - datetime(1970, 1, 1)).total_seconds()
    return ts.timestamp()


def _decode_step(raw: Any, index: int) -> SimulatedProvenanceStep:
    where = f"provenance[{index}]"
    if not isinstance(raw, dict):
        raise ResultParseError(f"{where}: expected object")
    status_raw = _require(raw, "status", str, where)
    try:
        status = ProvenanceStatus(status_raw)
    except ValueError as e:
        raise ResultParseError(f"{where}: unknown status {status_raw!r}") from e
    location = raw.get("location")
    if location is not None and not isinstance(location, str):
        raise ResultParseError(f"{where}: 'location' must be a string")
    return SimulatedProvenanceStep(
        id=_require(raw, "id", str, where),
        timestamp=_require(raw, "timestamp", str, where),
        action=_require(raw, "action", str, where),
        entity=_require(raw, "entity", str, where),
        hash=_require(raw, "hash", str, where),
        status=status,
        location=location,
    )


def _decode_provenance(items: List[Any]) -> Tuple[SimulatedProvenanceStep, ...]:
    steps = tuple(_decode_step(raw, i) for i, raw in enumerate(items))

    seen = set()
    for step in steps:
        if step.id in seen:
            raise ResultParseError(f"provenance: duplicate step id {step.id!r}")
        seen.add(step.id)

    times = [
        _comparable(_parse_timestamp(s.timestamp, f"provenance[{i}]")) for i, s in enumerate(steps)
    ]
    if any(b < a for a, b in zip(times, times[1:])):
        raise ResultParseError("provenance: timestamps are not in chronological order")
    return steps


def decode_result(data: Any) -> AnalysisResult:
    """Validate a decoded JSON object and build an AnalysisResult."""
    if not isinstance(data, dict):
        raise ResultParseError(f"result: expected object, got {type(data).__name__}")

    meta = _require(data, "metadata", dict, "result")
    confidence = _require(data, "confidence", (int, float), "result")
    if not math.isfinite(confidence):
        raise ResultParseError(f"result: confidence {confidence!r} is not finite")

    return AnalysisResult(
        is_deepfake=_require(data, "isDeepfake", bool, "result"),
        confidence=confidence,
        analysis_log=_string_list(data, "analysisLog", "result"),
        artifacts=_string_list(data, "artifacts", "result"),
        metadata=MediaMetadata(
            format=_require(meta, "format", str, "metadata"),
            resolution=_require(meta, "resolution", str, "metadata"),
            source_guess=_require(meta, "sourceGuess", str, "metadata"),
        ),
        provenance=_decode_provenance(_require(data, "provenance", list, "result")),
    )


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        # RecursionError: pathologically nested arrays/objects
        raise ResultParseError(f"Invalid JSON: {e}") from e


def parse_result(text: str) -> AnalysisResult:
    """Parse JSON text into an AnalysisResult."""
    return decode_result(_loads(text))


def encode_result(result: AnalysisResult) -> Dict[str, Any]:
    """Convert an AnalysisResult to its camelCase JSON document."""
    provenance = []
    for s in result.provenance:
        step: Dict[str, Any] = {
            "id": s.id,
            "timestamp": s.timestamp,
            "action": s.action,
            "entity": s.entity,
            "hash": s.hash,
            "status": s.status.value,
        }
        if s.location is not None:
            step["location"] = s.location
        provenance.append(step)

    return {
        "isDeepfake": result.is_deepfake,
        "confidence": result.confidence,
        "analysisLog": list(result.analysis_log),
        "artifacts": list(result.artifacts),
        "metadata": {
            "format": result.metadata.format,
            "resolution": result.metadata.resolution,
            "sourceGuess": result.metadata.source_guess,
        },
        "provenance": provenance,
    }


def dumps_results(results: Sequence[AnalysisResult]) -> str:
    """Serialize a sequence of results as a JSON array."""
    return json.dumps([encode_result(r) for r in results])


def loads_results(text: str) -> Tuple[AnalysisResult, ...]:
    """Parse a JSON array of results; any bad element fails the whole blob."""
    data = _loads(text)
    if not isinstance(data, list):
        raise ResultParseError(f"history: expected array, got {type(data).__name__}")
    return tuple(decode_result(item) for item in data)
