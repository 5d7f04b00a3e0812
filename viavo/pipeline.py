"""Orchestration: upload → normalize, analyze → recommend → synthesize, export."""

import io
import logging
import time
from pathlib import Path

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from viavo.datauri import split_data_uri
from viavo.errors import PreconditionError, RemoteError, TryOnError
from viavo.gemini import GeminiAdapter
from viavo.models import AppStep
from viavo.normalizer import check_file_type, normalize, read_upload
from viavo.recommender import recommend
from viavo.session import PhotoSlot, Session, SessionStore

logger = logging.getLogger(__name__)


def _reject_upload(store: SessionStore, slot: PhotoSlot, e: TryOnError) -> None:
    logger.warning("%s photo upload rejected: %s", slot, e.message)
    store.report_error(e.message)


async def upload_photo(
    store: SessionStore,
    slot: PhotoSlot,
    data: bytes,
    filename: str | None = None,
    content_type: str | None = None,
) -> str | None:
    """Normalize an upload into a photo slot.

    Returns the stored data URI, or None when a newer upload for the same slot
    landed first. On failure the slot keeps its previous photo.
    """
    token = store.begin_photo_upload(slot)
    try:
        uri = await normalize(data, filename=filename, content_type=content_type)
    except TryOnError as e:
        _reject_upload(store, slot, e)
        raise
    if not store.commit_photo(slot, uri, token):
        return None
    return uri


async def upload_file(store: SessionStore, slot: PhotoSlot, file: UploadFile) -> str | None:
    """Check and read an HTTP upload, then normalize it into the slot."""
    try:
        check_file_type(file.filename, file.content_type)
        data = await read_upload(file)
    except TryOnError as e:
        _reject_upload(store, slot, e)
        raise
    return await upload_photo(store, slot, data, file.filename, file.content_type)


def check_ready(session: Session) -> None:
    if not session.face_photo or not session.body_photo:
        raise PreconditionError("Please upload your profile photos first.", AppStep.UPLOAD)
    if not session.selected_products:
        raise PreconditionError("Please select at least one garment.", AppStep.PRODUCTS)


def check_unchanged(store: SessionStore, started: Session) -> None:
    """The result must match the photos and selection it was generated from."""
    current = store.session
    if (
        current.selected_products != started.selected_products
        or current.selected_options != started.selected_options
        or current.face_photo != started.face_photo
        or current.body_photo != started.body_photo
    ):
        raise PreconditionError(
            "Your photos or garment selection changed while the look was being generated. "
            "Please try again.",
            AppStep.PRODUCTS,
        )


async def run_tryon(store: SessionStore, adapter: GeminiAdapter) -> Session:
    """Analyze the body photo, pick sizes, render the try-on and store all three together."""
    session = store.session
    try:
        check_ready(session)
        garments = list(session.selected_products)
        analysis = await adapter.analyze(session.body_photo)
        check_unchanged(store, session)
        recommendations = recommend(analysis, garments)
        image = await adapter.synthesize(
            session.face_photo, session.body_photo, garments, session.selected_options,
        )
        check_unchanged(store, session)
    except PreconditionError as e:
        logger.info("try-on blocked: %s", e.message)
        store.report_error(e.message)
        store.set_step(e.redirect_to)
        raise
    except TryOnError as e:
        logger.warning("try-on failed: %s", e.message, exc_info=isinstance(e, RemoteError))
        store.report_error(f"Optimization failed: {e.message}")
        raise

    store.set_result(image, analysis, recommendations)
    store.set_step(AppStep.RESULTS)
    return store.session


def export_filename(now: float | None = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"viavo-tryon-result-{millis}.png"


def export_result(session: Session, directory: str | Path) -> Path:
    """Write the result image as a PNG file with a timestamp suffix."""
    if not session.result_image:
        raise PreconditionError("There is no try-on result to export yet.", AppStep.PRODUCTS)
    mime_type, data = split_data_uri(session.result_image)

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename()

    if mime_type == "image/png":
        path.write_bytes(data)
    else:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.save(path, format="PNG")
        except (UnidentifiedImageError, OSError) as e:
            raise RemoteError("The try-on result could not be exported. Please generate it again.") from e

    logger.info("exported try-on result to %s", path)
    return path
