# verisight/analysis/analyzer.py
"""
Base Analyzer class: one remote classification per call, with a stub fallback.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from verisight.analysis.base import (
    AnalysisResult,
    Assessment,
    DegradedReason,
    MediaMetadata,
    ProvenanceStatus,
    SimulatedProvenanceStep,
)
from verisight.formats.result_schema import ResultParseError, parse_result
from verisight.observability import Timer

FALLBACK_CONFIDENCE = 12
FALLBACK_FORMAT = "image/jpeg"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fallback_result(mime_type: str, now: Optional[datetime] = None) -> AnalysisResult:
    """Fixed low-confidence "not a deepfake, unverified" stub."""
    stamp = (now or _utc_now()).isoformat()
    return AnalysisResult(
        is_deepfake=False,
        confidence=FALLBACK_CONFIDENCE,
        analysis_log=(
            "No strong facial artifact patterns detected",
            "EXIF metadata absent or minimal",
            "Color profile appears consistent across frame",
        ),
        artifacts=(),
        metadata=MediaMetadata(
            format=mime_type or FALLBACK_FORMAT,
            resolution="Unknown",
            source_guess="Unknown Device",
        ),
        provenance=(
            SimulatedProvenanceStep(
                id="step-1",
                timestamp=stamp,
                action="ingested",
                entity="local-upload",
                hash="0xMOCKHASH0001",
                status=ProvenanceStatus.UNVERIFIED,
            ),
        ),
    )


class Analyzer(ABC):
    """Abstract base class for remote media classifiers.

    Subclasses only send the request and return the model's raw text. The
    base class owns the fallback policy: a missing credential, a failed call
    or an unparseable response all produce the stub result, never an error.
    There are no retries.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or _utc_now

    def assess(self, media: bytes, mime_type: str) -> Assessment:
        """Analyze media and report whether the fallback stub was used."""
        if not self.available:
            logger.info("No API credential configured; returning fallback result")
            return self._degraded(mime_type, DegradedReason.NO_CREDENTIAL)

        try:
            with Timer(f"{self.get_model_name()} request"):
                text = self._request(media, mime_type)
        except Exception as e:
            logger.error(
                "Remote classifier call to {model} failed, returning fallback result: {error}",
                model=self.get_model_name(),
                error=e,
            )
            return self._degraded(mime_type, DegradedReason.REMOTE_CALL_FAILURE)

        try:
            result = parse_result(text)
        except ResultParseError as e:
            logger.warning("Failed to parse classifier response, returning fallback result: {error}", error=e)
            return self._degraded(mime_type, DegradedReason.RESPONSE_PARSE_FAILURE)

        logger.debug(
            "Classifier verdict: deepfake={fake} confidence={conf}",
            fake=result.is_deepfake,
            conf=result.confidence,
        )
        return Assessment(result=result)

    def analyze(self, media: bytes, mime_type: str) -> AnalysisResult:
        """Analyze media; the stub and a real verdict are indistinguishable here."""
        return self.assess(media, mime_type).result

    def _degraded(self, mime_type: str, reason: DegradedReason) -> Assessment:
        return Assessment(result=fallback_result(mime_type, self._clock()), reason=reason)

    @property
    @abstractmethod
    def available(self) -> bool:
        """True when a usable credential is configured."""
        raise NotImplementedError

    @abstractmethod
    def _request(self, media: bytes, mime_type: str) -> str:
        """Send one classification request and return the response text."""
        raise NotImplementedError

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the remote model name (e.g., 'gemini-2.5-flash')."""
        raise NotImplementedError
