"""Shared fixtures: sample payloads, result factory and a fake Gemini client."""

from __future__ import annotations

import copy
import json
from types import SimpleNamespace

import pytest

from verisight.analysis.base import AnalysisResult, MediaMetadata, ProvenanceStatus, SimulatedProvenanceStep

SAMPLE_PAYLOAD = {
    "isDeepfake": True,
    "confidence": 87,
    "analysisLog": [
        "Specular highlights in both eyes disagree with the key light",
        "Hairline blends into the background over several frames",
    ],
    "artifacts": ["eye reflection mismatch", "background warping"],
    "metadata": {"format": "image/png", "resolution": "1024x1024", "sourceGuess": "Diffusion model"},
    "provenance": [
        {
            "id": "p1",
            "timestamp": "2024-03-01T10:00:00Z",
            "action": "captured",
            "entity": "Canon EOS R5",
            "hash": "0xA1",
            "location": "Berlin, DE",
            "status": "verified",
        },
        {
            "id": "p2",
            "timestamp": "2024-03-02T08:30:00Z",
            "action": "edited",
            "entity": "Unknown editor",
            "hash": "0xB2",
            "status": "modified",
        },
        {
            "id": "p3",
            "timestamp": "2024-03-02T09:00:00Z",
            "action": "signature lost",
            "entity": "social upload",
            "hash": "0xC3",
            "status": "unverified",
        },
    ],
}


@pytest.fixture
def payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def payload_text(payload):
    return json.dumps(payload)


def make_result(n: int) -> AnalysisResult:
    """Distinct, valid result tagged by `n`."""
    return AnalysisResult(
        is_deepfake=n % 2 == 0,
        confidence=n * 7 % 101,
        analysis_log=(f"observation {n}",),
        artifacts=(f"artifact {n}",) if n % 3 else (),
        metadata=MediaMetadata(format="image/jpeg", resolution=f"{n}x{n}", source_guess=f"device {n}"),
        provenance=(
            SimulatedProvenanceStep(
                id=f"r{n}-1",
                timestamp="2024-01-01T00:00:00+00:00",
                action="ingested",
                entity="local-upload",
                hash=f"0x{n:04X}",
                status=ProvenanceStatus.UNVERIFIED,
            ),
        ),
    )


class FakeModels:
    """Stands in for `genai.Client().models`."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeClient:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)
