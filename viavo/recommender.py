"""Nearest-size matching of estimated body measurements against garment size tables."""

import logging

from viavo.config import CHEST_WEIGHT, WAIST_WEIGHT
from viavo.models import BodyAnalysis, Garment, SizeMeasurements, SizeRecommendation

logger = logging.getLogger(__name__)


def size_distance(
    measurements: SizeMeasurements,
    analysis: BodyAnalysis,
    chest_weight: float = CHEST_WEIGHT,
    waist_weight: float = WAIST_WEIGHT,
) -> float:
    """Weighted absolute difference. Fields missing from the size entry add nothing."""
    distance = 0.0
    if measurements.chest is not None:
        distance += chest_weight * abs(measurements.chest - analysis.chest_cm)
    if measurements.waist is not None:
        distance += waist_weight * abs(measurements.waist - analysis.waist_cm)
    return distance


def recommend_size(
    analysis: BodyAnalysis,
    garment: Garment,
    chest_weight: float = CHEST_WEIGHT,
    waist_weight: float = WAIST_WEIGHT,
) -> SizeRecommendation:
    # Only sizes with a measurement entry compete; sorted() keeps declared order on ties
    candidates = [size for size in garment.sizes if size in garment.measurements]
    ranked = sorted(
        candidates,
        key=lambda size: size_distance(
            garment.measurements[size], analysis, chest_weight, waist_weight
        ),
    )
    best = ranked[0] if ranked else garment.sizes[0]
    alternative = ranked[1] if len(ranked) > 1 else None
    return SizeRecommendation(
        product_id=garment.id,
        recommended_size=best,
        confidence=analysis.confidence,
        reasoning=(
            f"With a measured chest of {analysis.chest_cm:.0f} cm and a {analysis.body_type} build, "
            f"size {best} will provide a clean, architectural silhouette."
        ),
        alternative_size=alternative,
    )


def recommend(
    analysis: BodyAnalysis,
    garments: list[Garment],
    chest_weight: float = CHEST_WEIGHT,
    waist_weight: float = WAIST_WEIGHT,
) -> list[SizeRecommendation]:
    """One recommendation per garment, in the order given. Pure and deterministic."""
    recommendations = [
        recommend_size(analysis, garment, chest_weight, waist_weight) for garment in garments
    ]
    logger.info(
        "recommended sizes: %s",
        {r.product_id: r.recommended_size for r in recommendations},
    )
    return recommendations
