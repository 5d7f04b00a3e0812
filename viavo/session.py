"""In-memory try-on session and the store that owns it."""

import itertools
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Literal

from viavo.models import (
    AppStep, BodyAnalysis, Garment, GarmentOptions, SizeRecommendation,
)
from viavo.recommender import recommend

logger = logging.getLogger(__name__)

PhotoSlot = Literal["face", "body"]
Listener = Callable[["Session"], None]


@dataclass(frozen=True)
class Session:
    face_photo: str | None = None
    body_photo: str | None = None
    selected_products: tuple[Garment, ...] = ()
    selected_options: dict[str, GarmentOptions] = field(default_factory=dict)
    result_image: str | None = None
    analysis: BodyAnalysis | None = None
    recommendations: tuple[SizeRecommendation, ...] = ()

    def is_selected(self, product_id: str) -> bool:
        return product_id in self.selected_options


class SessionStore:
    """Owns the single session of a visit.

    Each mutation builds a complete new ``Session`` and swaps it in with one
    assignment, so a failed operation never leaves a half-updated session.
    Listeners are called with the new session after every change.
    """

    def __init__(self, recommender: Callable[..., list[SizeRecommendation]] = recommend) -> None:
        self._session = Session()
        self._step = AppStep.LANDING
        self._error: str | None = None
        self._recommender = recommender
        self._listeners: list[Listener] = []
        self._tokens = itertools.count(1)
        self._slot_tokens: dict[str, int] = {"face": 0, "body": 0}

    @property
    def session(self) -> Session:
        return self._session

    @property
    def step(self) -> AppStep:
        return self._step

    @property
    def error(self) -> str | None:
        return self._error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _commit(self, session: Session) -> None:
        self._session = session
        self._error = None
        for listener in list(self._listeners):
            listener(session)

    # Photos

    def set_face_photo(self, uri: str | None) -> None:
        self._set_photo("face", uri)

    def set_body_photo(self, uri: str | None) -> None:
        self._set_photo("body", uri)

    def _set_photo(self, slot: PhotoSlot, uri: str | None) -> None:
        # Supersedes any upload for this slot that is still decoding
        self._slot_tokens[slot] = next(self._tokens)
        self._commit(replace(self._session, **{f"{slot}_photo": uri}))

    def begin_photo_upload(self, slot: PhotoSlot) -> int:
        """Issue an ordering token for an upload; the slot itself is untouched."""
        return next(self._tokens)

    def commit_photo(self, slot: PhotoSlot, uri: str, token: int) -> bool:
        """Store a finished upload unless a newer upload already landed or the slot was set since."""
        if self._slot_tokens[slot] > token:
            logger.info("discarding stale %s photo upload", slot)
            return False
        self._slot_tokens[slot] = token
        self._commit(replace(self._session, **{f"{slot}_photo": uri}))
        return True

    # Garments

    def select_garment(self, garment: Garment, options: GarmentOptions) -> None:
        current = self._session
        products = current.selected_products
        if not current.is_selected(garment.id):
            products = products + (garment,)
        selected_options = {**current.selected_options, garment.id: options}
        self._commit(self._with_selection(current, products, selected_options))

    def remove_garment(self, product_id: str) -> None:
        current = self._session
        if not current.is_selected(product_id):
            return
        products = tuple(p for p in current.selected_products if p.id != product_id)
        selected_options = {
            pid: opts for pid, opts in current.selected_options.items() if pid != product_id
        }
        self._commit(self._with_selection(current, products, selected_options))

    def _with_selection(
        self,
        current: Session,
        products: tuple[Garment, ...],
        selected_options: dict[str, GarmentOptions],
    ) -> Session:
        recommendations = current.recommendations
        if current.analysis is not None and products != current.selected_products:
            recommendations = tuple(self._recommender(current.analysis, list(products)))
        return replace(
            current,
            selected_products=products,
            selected_options=selected_options,
            recommendations=recommendations,
        )

    # Results

    def set_result(
        self,
        image: str,
        analysis: BodyAnalysis,
        recommendations: list[SizeRecommendation],
    ) -> None:
        self._commit(replace(
            self._session,
            result_image=image,
            analysis=analysis,
            recommendations=tuple(recommendations),
        ))

    # Navigation and status

    def set_step(self, step: AppStep) -> None:
        self._step = step
        for listener in list(self._listeners):
            listener(self._session)

    def report_error(self, message: str) -> None:
        self._error = message
        for listener in list(self._listeners):
            listener(self._session)

    def clear_error(self) -> None:
        self._error = None

    def reset(self) -> None:
        for slot in self._slot_tokens:
            self._slot_tokens[slot] = next(self._tokens)
        self._step = AppStep.LANDING
        self._commit(Session())
