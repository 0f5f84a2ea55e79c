# verisight/analysis/gemini_analyzer.py
"""
Gemini analyzer: sends inline media plus a fixed instruction prompt and asks
for a JSON assessment.
"""

from __future__ import annotations

from typing import Any, Optional

from google import genai
from google.genai import types

from verisight.analysis.analyzer import Analyzer, Clock
from verisight.config import Settings

ANALYSIS_PROMPT = """
Analyze this media carefully for signs of AI generation or deepfake manipulation.
Check for:
- Lighting inconsistencies
- Blur patterns in facial features (eyes, teeth)
- Background warping
- Unnatural textures
- Digital artifacts (JPEG double compression, aliasing)

Respond with a single JSON object with exactly these fields:
- "isDeepfake": boolean
- "confidence": integer from 0 to 100
- "analysisLog": list of specific observations, in the order you made them
- "artifacts": list of short labels for the specific issues found (may be empty)
- "metadata": object with string fields "format", "resolution" and "sourceGuess"
  (guessed container format, resolution and likely source)
- "provenance": a simulated "Digital Provenance Chain" of 3-4 steps based on
  standard C2PA (Content Authenticity Initiative) data as if it were a real
  authenticated file, OR a chain showing where the signature was lost if it is
  a deepfake. Each step is an object with string fields "id" (unique),
  "timestamp" (ISO-8601, chronological order), "action", "entity", "hash",
  optional "location", and "status" (one of "verified", "modified", "unverified").
""".strip()


class GeminiAnalyzer(Analyzer):
    """Analyzer implementation backed by the Google Gemini API."""

    def __init__(self, settings: Settings, *, client: Optional[Any] = None, clock: Optional[Clock] = None):
        super().__init__(clock=clock)
        self.settings = settings
        self._client = client

    @property
    def available(self) -> bool:
        return self.settings.has_credential

    def get_model_name(self) -> str:
        return self.settings.model

    @property
    def client(self) -> Any:
        if self._client is None:
            http_options = None
            if self.settings.timeout is not None:
                # HttpOptions.timeout is in milliseconds
                http_options = types.HttpOptions(timeout=int(self.settings.timeout * 1000))
            self._client = genai.Client(api_key=self.settings.api_key, http_options=http_options)
        return self._client

    def _request(self, media: bytes, mime_type: str) -> str:
        response = self.client.models.generate_content(
            model=self.settings.model,
            contents=[
                types.Part.from_bytes(data=media, mime_type=mime_type),
                types.Part.from_text(text=ANALYSIS_PROMPT),
            ],
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return response.text
