from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AppStep(str, Enum):
    LANDING = "landing"
    UPLOAD = "upload"
    PRODUCTS = "products"
    RESULTS = "results"


class _Wire(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ColorOption(_Wire):
    name: str
    hex: str


class SizeMeasurements(_Wire):
    chest: float | None = None
    waist: float | None = None
    length: float | None = None
    shoulders: float | None = None


class Garment(_Wire):
    id: str
    name: str
    brand: str
    category: Literal["tops", "bottoms", "outerwear"]
    price: float
    description: str
    image_url: str = Field(alias="imageUrl")
    sizes: list[str] = Field(min_length=1)
    colors: list[ColorOption]
    gender: Literal["men", "women", "unisex"]
    measurements: dict[str, SizeMeasurements] = Field(default_factory=dict)


class GarmentOptions(_Wire):
    size: str
    color: str


class FitMetric(_Wire):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    label: str
    value: float = Field(ge=0, le=100)
    status: Literal["optimal", "tight", "loose"]


class BodyAnalysis(_Wire):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    height_range: str = Field(alias="heightRange")
    body_type: str = Field(alias="bodyType")
    chest_cm: float = Field(alias="chestCm")
    waist_cm: float = Field(alias="waistCm")
    shoulder_width: str = Field(alias="shoulderWidth")
    proportions: str
    confidence: float = Field(ge=0, le=1)
    fit_metrics: list[FitMetric] = Field(alias="fitMetrics")


class SizeRecommendation(_Wire):
    product_id: str = Field(alias="productId")
    recommended_size: str = Field(alias="recommendedSize")
    confidence: float = Field(ge=0, le=1)
    reasoning: str
    alternative_size: str | None = Field(default=None, alias="alternativeSize")


# API payloads

class SelectGarmentRequest(BaseModel):
    product_id: str
    size: str | None = None
    color: str | None = None


class StepRequest(BaseModel):
    step: AppStep


class UploadPhotoResponse(BaseModel):
    status: str
    photo_type: str
    photo_url: str | None = None


class SessionResponse(BaseModel):
    step: AppStep
    face_photo: str | None = None
    body_photo: str | None = None
    selected_products: list[str]
    selected_options: dict[str, GarmentOptions]
    result_image: str | None = None
    analysis: BodyAnalysis | None = None
    recommendations: list[SizeRecommendation]
    error: str | None = None


class TryOnResponse(BaseModel):
    status: str
    result_image: str | None = None
    analysis: BodyAnalysis | None = None
    recommendations: list[SizeRecommendation] = Field(default_factory=list)
    error: str | None = None
    redirect_to: AppStep | None = None


class HealthResponse(BaseModel):
    status: str
