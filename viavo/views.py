"""View descriptors for the four try-on steps."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from viavo.models import AppStep, BodyAnalysis, Garment, GarmentOptions, SizeRecommendation
from viavo.session import Session


class LandingView(BaseModel):
    kind: Literal["landing"] = "landing"
    next_step: AppStep = AppStep.UPLOAD


class UploadView(BaseModel):
    kind: Literal["upload"] = "upload"
    face_photo: str | None = None
    body_photo: str | None = None
    can_continue: bool


class ProductCard(BaseModel):
    product: Garment
    selected: bool
    options: GarmentOptions | None = None


class ProductsView(BaseModel):
    kind: Literal["products"] = "products"
    products: list[ProductCard]
    can_try_on: bool


class RecommendationCard(BaseModel):
    product_name: str
    recommendation: SizeRecommendation


class ResultsView(BaseModel):
    kind: Literal["results"] = "results"
    result_image: str
    analysis: BodyAnalysis
    recommendations: list[RecommendationCard]


class RestartView(BaseModel):
    """Results step reached without a result; the only action is restarting."""

    kind: Literal["restart"] = "restart"


View = Annotated[
    Union[LandingView, UploadView, ProductsView, ResultsView, RestartView],
    Field(discriminator="kind"),
]


def describe(step: AppStep, session: Session, catalog: list[Garment]) -> View:
    if step is AppStep.UPLOAD:
        return UploadView(
            face_photo=session.face_photo,
            body_photo=session.body_photo,
            can_continue=bool(session.face_photo and session.body_photo),
        )
    if step is AppStep.PRODUCTS:
        return ProductsView(
            products=[
                ProductCard(
                    product=p,
                    selected=session.is_selected(p.id),
                    options=session.selected_options.get(p.id),
                )
                for p in catalog
            ],
            can_try_on=bool(session.selected_products),
        )
    if step is AppStep.RESULTS:
        if not session.result_image or session.analysis is None:
            return RestartView()
        names = {p.id: p.name for p in session.selected_products}
        return ResultsView(
            result_image=session.result_image,
            analysis=session.analysis,
            recommendations=[
                RecommendationCard(product_name=names.get(r.product_id, r.product_id), recommendation=r)
                for r in session.recommendations
            ],
        )
    return LandingView()
