"""Shared fixtures: in-memory images, analysis payloads and a fake Gemini client."""

import io
import json
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from PIL import Image

from viavo.models import BodyAnalysis, Garment

ANALYSIS_PAYLOAD: dict[str, Any] = {
    "heightRange": "175-180 cm",
    "bodyType": "athletic",
    "chestCm": 100,
    "waistCm": 80,
    "shoulderWidth": "broad",
    "proportions": "Balanced upper and lower body.",
    "confidence": 0.87,
    "fitMetrics": [
        {"label": "Chest", "value": 82, "status": "optimal"},
        {"label": "Waist", "value": 64, "status": "loose"},
    ],
}


class FakeModels:
    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    def generate_content(self, model: str, contents: list, config: Any = None) -> Any:
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response()
        return response


class FakeGeminiClient:
    """Stands in for ``genai.Client``; replies with queued responses in order."""

    def __init__(self, *responses: Any) -> None:
        self.models = FakeModels(list(responses))


def text_response(text: str | None) -> SimpleNamespace:
    return SimpleNamespace(text=text, candidates=None)


def image_response(data: bytes = b"\x89PNG fake", mime_type: str | None = "image/png") -> SimpleNamespace:
    parts = [
        SimpleNamespace(text="Here is your look.", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type)),
    ]
    return SimpleNamespace(
        text=None,
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))],
    )


@pytest.fixture
def analysis_payload() -> dict[str, Any]:
    return json.loads(json.dumps(ANALYSIS_PAYLOAD))


@pytest.fixture
def analysis() -> BodyAnalysis:
    return BodyAnalysis.model_validate(ANALYSIS_PAYLOAD)


@pytest.fixture
def fake_client() -> Callable[..., FakeGeminiClient]:
    return FakeGeminiClient


@pytest.fixture
def responses() -> SimpleNamespace:
    return SimpleNamespace(
        text=text_response,
        image=image_response,
        analysis=lambda: text_response(json.dumps(ANALYSIS_PAYLOAD)),
    )


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    def _make(
        size: tuple[int, int] = (64, 48),
        mode: str = "RGB",
        color: Any = (200, 30, 30),
        fmt: str = "PNG",
        **save_kwargs: Any,
    ) -> bytes:
        buf = io.BytesIO()
        with Image.new(mode, size, color) as img:
            img.save(buf, format=fmt, **save_kwargs)
        return buf.getvalue()

    return _make


@pytest.fixture
def make_garment() -> Callable[..., Garment]:
    def _make(
        sizes: list[str],
        measurements: dict[str, dict[str, float]] | None = None,
        garment_id: str = "g1",
    ) -> Garment:
        return Garment(
            id=garment_id,
            name=f"Garment {garment_id}",
            brand="TEST",
            category="tops",
            price=100,
            description="Test garment.",
            image_url="https://example.com/g.jpg",
            sizes=sizes,
            colors=[{"name": "Black", "hex": "#000000"}],
            gender="unisex",
            measurements=measurements or {},
        )

    return _make
