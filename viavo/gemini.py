"""Gemini boundary: body analysis and try-on image synthesis."""

import asyncio
import base64
import json
import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors, types
from pydantic import ValidationError

from viavo.config import (
    ANALYSIS_MODEL, GEMINI_API_KEY, GEMINI_TIMEOUT_SECONDS, SYNTHESIS_MODEL,
)
from viavo.datauri import split_data_uri, to_data_uri
from viavo.errors import (
    EmptyResponseError, InvalidInputError, RemoteError,
    SchemaError, SynthesisFailedError,
)
from viavo.models import BodyAnalysis, Garment, GarmentOptions

logger = logging.getLogger(__name__)

ANALYZE_PROMPT = """Analyze this full body photo for a virtual try-on system.
Estimate the person's measurements and how a well-fitted garment would sit on them.
Return a JSON object with:
{
    "heightRange": "estimated height bucket, e.g. 175-180 cm",
    "bodyType": "short body type label, e.g. athletic, slim, broad",
    "chestCm": chest circumference in cm (number),
    "waistCm": waist circumference in cm (number),
    "shoulderWidth": "shoulder width bucket, e.g. narrow, average, broad",
    "proportions": "one sentence describing the body proportions",
    "confidence": confidence of the estimate between 0 and 1 (number),
    "fitMetrics": [
        {"label": "Chest", "value": 0-100, "status": "optimal" | "tight" | "loose"}
    ]
}
Only return valid JSON, no other text."""

SYNTHESIZE_PROMPT = """TASK: Generate a photorealistic studio catalog image.

CRITICAL REQUIREMENTS:
1. BACKGROUND: Pure, blank, solid white background (#FFFFFF). No shadows on the background, no environment, no floor lines.
2. SUBJECT: Use the EXACT face and facial features from the first photo (face photo). Use the exact body shape and pose from the second photo (body photo).
3. CLOTHING: The person MUST be wearing these specific items: {product_info}.
4. SIZE REPRESENTATION:
   - If a size is 'XL' or 'L', show the garment with a slightly relaxed, oversized drape.
   - If a size is 'S' or 'XS', show the garment with a sharp, fitted look.
5. STYLE: High-end fashion editorial style. Sharp focus, professional studio lighting.
6. RESULT: Just the person standing centered on a blank white void."""

_FIT_METRIC_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "label": types.Schema(type=types.Type.STRING),
        "value": types.Schema(type=types.Type.NUMBER),
        "status": types.Schema(type=types.Type.STRING, enum=["optimal", "tight", "loose"]),
    },
    required=["label", "value", "status"],
)

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "heightRange": types.Schema(type=types.Type.STRING),
        "bodyType": types.Schema(type=types.Type.STRING),
        "chestCm": types.Schema(type=types.Type.NUMBER),
        "waistCm": types.Schema(type=types.Type.NUMBER),
        "shoulderWidth": types.Schema(type=types.Type.STRING),
        "proportions": types.Schema(type=types.Type.STRING),
        "confidence": types.Schema(type=types.Type.NUMBER),
        "fitMetrics": types.Schema(type=types.Type.ARRAY, items=_FIT_METRIC_SCHEMA),
    },
    required=[
        "heightRange", "bodyType", "chestCm", "waistCm",
        "shoulderWidth", "proportions", "confidence", "fitMetrics",
    ],
)


def _extract_json(text: str) -> Any:
    """Strip markdown code fences if present, then parse JSON."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1].rsplit("```", 1)[0]
    return json.loads(text)


def _image_part(uri: str | None, what: str) -> types.Part:
    try:
        mime_type, data = split_data_uri(uri)
    except ValueError as e:
        raise InvalidInputError(f"Invalid {what} photo data. Please upload it again.") from e
    return types.Part.from_bytes(data=data, mime_type=mime_type)


def describe_garments(garments: list[Garment], options: dict[str, GarmentOptions]) -> str:
    """Render the selection as 'Name in size M (Color)' items."""
    items = []
    for garment in garments:
        opt = options.get(garment.id)
        if opt is None:
            raise InvalidInputError(f"Please choose a size and color for {garment.name}.")
        items.append(f"{garment.name} in size {opt.size} ({opt.color})")
    return ", ".join(items)


class GeminiAdapter:
    """Single point of contact with Gemini.

    Both calls are one round trip with no retries. Gemini request and response
    types stay inside this class; callers see data URIs and ``viavo.models``.
    """

    def __init__(
        self,
        client: genai.Client | None = None,
        analysis_model: str = ANALYSIS_MODEL,
        synthesis_model: str = SYNTHESIS_MODEL,
        timeout: float | None = GEMINI_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self.analysis_model = analysis_model
        self.synthesis_model = synthesis_model
        self.timeout = timeout

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            try:
                self._client = genai.Client(api_key=GEMINI_API_KEY)
            except ValueError as e:
                raise RemoteError(f"The AI service is not configured: {e}") from e
        return self._client

    async def _generate(
        self,
        model: str,
        contents: list,
        config: types.GenerateContentConfig | None = None,
    ) -> types.GenerateContentResponse:
        call = asyncio.to_thread(
            self.client.models.generate_content,
            model=model,
            contents=contents,
            config=config,
        )
        try:
            if self.timeout:
                return await asyncio.wait_for(call, self.timeout)
            return await call
        except asyncio.TimeoutError as e:
            raise RemoteError(
                f"The AI service did not answer within {self.timeout:g}s. Please try again."
            ) from e
        except (errors.APIError, httpx.HTTPError) as e:
            raise RemoteError(f"AI service error: {e}") from e

    async def analyze(self, body_photo: str | None) -> BodyAnalysis:
        """Estimate body measurements from the full body photo."""
        if not body_photo:
            raise InvalidInputError("Invalid photo data. Please upload your full body photo.")
        image_part = _image_part(body_photo, "body")

        logger.info("requesting body analysis from %s", self.analysis_model)
        response = await self._generate(
            self.analysis_model,
            [ANALYZE_PROMPT, image_part],
            types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=ANALYSIS_SCHEMA,
            ),
        )

        text = (response.text or "").strip()
        if not text:
            raise EmptyResponseError("The body analysis came back empty. Please try again.")
        try:
            analysis = BodyAnalysis.model_validate(_extract_json(text))
        except (json.JSONDecodeError, IndexError, ValidationError) as e:
            raise SchemaError("The body analysis could not be understood. Please try again.") from e

        logger.info(
            "body analysis: type=%s chest=%.0f waist=%.0f confidence=%.2f",
            analysis.body_type, analysis.chest_cm, analysis.waist_cm, analysis.confidence,
        )
        return analysis

    async def synthesize(
        self,
        face_photo: str | None,
        body_photo: str | None,
        garments: list[Garment],
        options: dict[str, GarmentOptions],
    ) -> str:
        """Render the person from both photos wearing the selected garments."""
        if not face_photo or not body_photo:
            raise InvalidInputError("Please upload both your face photo and full body photo.")
        if not garments:
            raise InvalidInputError("Please select at least one garment.")
        prompt = SYNTHESIZE_PROMPT.format(product_info=describe_garments(garments, options))
        contents = [prompt, _image_part(face_photo, "face"), _image_part(body_photo, "body")]

        logger.info("requesting try-on image from %s for %d garments", self.synthesis_model, len(garments))
        response = await self._generate(self.synthesis_model, contents)

        candidates = response.candidates or []
        content = candidates[0].content if candidates else None
        for part in (content.parts or []) if content else []:
            inline = part.inline_data
            if inline is None or not inline.data:
                continue
            data = inline.data
            if isinstance(data, str):
                data = base64.b64decode(data)
            return to_data_uri(data, inline.mime_type or "image/png")

        raise SynthesisFailedError("AI generation failed. Please try again.")
