import json
from datetime import datetime, timezone

import pytest

from conftest import FakeClient
from verisight.analysis.analyzer import FALLBACK_CONFIDENCE, fallback_result
from verisight.analysis.base import DegradedReason, ProvenanceStatus
from verisight.analysis.gemini_analyzer import ANALYSIS_PROMPT, GeminiAnalyzer
from verisight.config import PLACEHOLDER_API_KEY, Settings

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
MEDIA = b"\x89PNG\r\n\x1a\nfake"


def _analyzer(client=None, api_key="test-key", **settings):
    return GeminiAnalyzer(
        Settings(api_key=api_key, **settings), client=client, clock=lambda: FIXED_NOW
    )


def _assert_is_fallback(result, mime_type="image/png"):
    assert result.is_deepfake is False
    assert result.confidence == FALLBACK_CONFIDENCE == 12
    assert len(result.analysis_log) == 3
    assert result.artifacts == ()
    assert result.metadata.format == mime_type
    assert len(result.provenance) == 1
    step = result.provenance[0]
    assert step.status is ProvenanceStatus.UNVERIFIED
    assert (step.id, step.action, step.entity, step.hash) == (
        "step-1",
        "ingested",
        "local-upload",
        "0xMOCKHASH0001",
    )


@pytest.mark.parametrize("api_key", [None, "", PLACEHOLDER_API_KEY])
def test_no_credential_returns_fallback_without_calling(api_key):
    client = FakeClient(text="{}")
    analyzer = _analyzer(client, api_key=api_key)

    assessment = analyzer.assess(MEDIA, "image/png")

    assert assessment.degraded
    assert assessment.reason is DegradedReason.NO_CREDENTIAL
    _assert_is_fallback(assessment.result)
    assert client.models.calls == []


def test_no_credential_is_deterministic():
    analyzer = _analyzer(api_key=None)
    assert analyzer.analyze(MEDIA, "image/png") == analyzer.analyze(MEDIA, "image/png")
    assert analyzer.analyze(MEDIA, "image/png").provenance[0].timestamp == FIXED_NOW.isoformat()


def test_successful_call_returns_decoded_result(payload_text):
    client = FakeClient(text=payload_text)
    analyzer = _analyzer(client, model="gemini-test")

    assessment = analyzer.assess(MEDIA, "image/png")

    assert not assessment.degraded
    assert assessment.result.is_deepfake is True
    assert assessment.result.confidence == 87
    assert len(client.models.calls) == 1
    call = client.models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["config"].response_mime_type == "application/json"
    media_part, prompt_part = call["contents"]
    assert media_part.inline_data.data == MEDIA
    assert media_part.inline_data.mime_type == "image/png"
    assert prompt_part.text == ANALYSIS_PROMPT


def test_remote_failure_falls_back_without_retry():
    client = FakeClient(error=ConnectionError("service unreachable"))
    analyzer = _analyzer(client)

    assessment = analyzer.assess(MEDIA, "video/mp4")

    assert assessment.reason is DegradedReason.REMOTE_CALL_FAILURE
    _assert_is_fallback(assessment.result, "video/mp4")
    assert len(client.models.calls) == 1


def test_timeout_is_treated_as_remote_failure():
    client = FakeClient(error=TimeoutError("deadline exceeded"))
    assert _analyzer(client).assess(MEDIA, "image/png").reason is DegradedReason.REMOTE_CALL_FAILURE


@pytest.mark.parametrize(
    "text",
    [None, "", "I think this is fake", json.dumps({"isDeepfake": True}), json.dumps([1])],
)
def test_unparseable_response_falls_back(text):
    assessment = _analyzer(FakeClient(text=text)).assess(MEDIA, "image/png")
    assert assessment.reason is DegradedReason.RESPONSE_PARSE_FAILURE
    _assert_is_fallback(assessment.result)


def test_remote_failure_and_no_credential_share_result_shape():
    offline = _analyzer(api_key=None).analyze(MEDIA, "image/png")
    failed = _analyzer(FakeClient(error=RuntimeError("boom"))).analyze(MEDIA, "image/png")
    assert offline == failed


def test_out_of_range_confidence_is_clamped(payload):
    payload["confidence"] = 340
    result = _analyzer(FakeClient(text=json.dumps(payload))).analyze(MEDIA, "image/png")
    assert result.confidence == 100


def test_fallback_uses_default_format_for_missing_mime_type():
    assert fallback_result("", FIXED_NOW).metadata.format == "image/jpeg"


def test_deeply_nested_response_falls_back():
    client = FakeClient(text="[" * 100000 + "]" * 100000)
    assessment = _analyzer(client).assess(MEDIA, "image/png")
    assert assessment.reason is DegradedReason.RESPONSE_PARSE_FAILURE
    _assert_is_fallback(assessment.result)
