# verisight/analysis/base.py
"""
Analysis result models.

The provenance chain attached to a result is *simulated*: the remote model
invents a plausible C2PA-style custody trail for display. Nothing in it is
cryptographically verified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100


class ProvenanceStatus(str, Enum):
    """Display status of a simulated provenance step."""

    VERIFIED = "verified"
    MODIFIED = "modified"
    UNVERIFIED = "unverified"


class DegradedReason(str, Enum):
    """Why an analysis fell back to the stub result."""

    NO_CREDENTIAL = "no_credential"
    REMOTE_CALL_FAILURE = "remote_call_failure"
    RESPONSE_PARSE_FAILURE = "response_parse_failure"


def clamp_confidence(value: float) -> int:
    """Round and clamp a confidence score into [0, 100]."""
    return max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, int(round(value))))


@dataclass(frozen=True)
class MediaMetadata:
    """Model's guess about the media container and its origin."""

    format: str
    resolution: str
    source_guess: str


@dataclass(frozen=True)
class SimulatedProvenanceStep:
    """One claimed custody/edit event in a simulated provenance chain."""

    id: str
    timestamp: str  # ISO-8601
    action: str
    entity: str
    hash: str
    status: ProvenanceStatus
    location: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable outcome of one deepfake-likelihood analysis."""

    is_deepfake: bool
    confidence: int
    metadata: MediaMetadata
    analysis_log: Tuple[str, ...] = field(default_factory=tuple)
    artifacts: Tuple[str, ...] = field(default_factory=tuple)
    provenance: Tuple[SimulatedProvenanceStep, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to normalize the score
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "analysis_log", tuple(self.analysis_log))
        object.__setattr__(self, "artifacts", tuple(self.artifacts))
        object.__setattr__(self, "provenance", tuple(self.provenance))


@dataclass(frozen=True)
class Assessment:
    """An analysis result plus whether it came from the fallback stub."""

    result: AnalysisResult
    reason: Optional[DegradedReason] = None

    @property
    def degraded(self) -> bool:
        return self.reason is not None
