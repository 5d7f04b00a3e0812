import logging

import uvicorn
from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from viavo.catalog import PRODUCTS, get_product
from viavo.config import EXPORT_DIR, VALID_PHOTO_TYPES
from viavo.errors import InvalidInputError, PreconditionError, TryOnError
from viavo.gemini import GeminiAdapter
from viavo.logging_setup import configure_logging
from viavo.models import (
    Garment, GarmentOptions, HealthResponse, SelectGarmentRequest,
    SessionResponse, StepRequest, TryOnResponse, UploadPhotoResponse,
)
from viavo.pipeline import export_result, run_tryon, upload_file
from viavo.session import SessionStore
from viavo.views import View, describe

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Viavo")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.store = SessionStore()
app.state.adapter = GeminiAdapter()
app.state.export_dir = EXPORT_DIR


def get_store(request: Request) -> SessionStore:
    return request.app.state.store


def get_adapter(request: Request) -> GeminiAdapter:
    return request.app.state.adapter


def _error_response(e: TryOnError) -> JSONResponse:
    content = {"status": "error", "error": e.message}
    if isinstance(e, PreconditionError):
        content["redirect_to"] = e.redirect_to.value
    return JSONResponse(status_code=e.status_code, content=content)


def _snapshot(store: SessionStore) -> SessionResponse:
    session = store.session
    return SessionResponse(
        step=store.step,
        face_photo=session.face_photo,
        body_photo=session.body_photo,
        selected_products=[p.id for p in session.selected_products],
        selected_options=session.selected_options,
        result_image=session.result_image,
        analysis=session.analysis,
        recommendations=list(session.recommendations),
        error=store.error,
    )


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/products", response_model=list[Garment])
async def products() -> list[Garment]:
    return PRODUCTS


@app.get("/session", response_model=SessionResponse)
async def session(store: SessionStore = Depends(get_store)) -> SessionResponse:
    return _snapshot(store)


@app.get("/view", response_model=View)
async def view(store: SessionStore = Depends(get_store)) -> View:
    return describe(store.step, store.session, PRODUCTS)


@app.post("/step", response_model=SessionResponse)
async def set_step(request: StepRequest, store: SessionStore = Depends(get_store)) -> SessionResponse:
    store.set_step(request.step)
    return _snapshot(store)


@app.post("/upload-photo", response_model=UploadPhotoResponse)
async def upload(
    file: UploadFile = File(...),
    photo_type: str = Query(..., description="One of: face, body"),
    store: SessionStore = Depends(get_store),
) -> UploadPhotoResponse:
    if photo_type not in VALID_PHOTO_TYPES:
        return JSONResponse(
            status_code=400,
            content={"status": "error", "error": f"Invalid photo_type. Must be one of {VALID_PHOTO_TYPES}"},
        )

    try:
        uri = await upload_file(store, photo_type, file)
    except TryOnError as e:
        return _error_response(e)

    if uri is None:
        return UploadPhotoResponse(status="superseded", photo_type=photo_type)
    return UploadPhotoResponse(status="uploaded", photo_type=photo_type, photo_url=uri)


@app.delete("/photos/{photo_type}", response_model=SessionResponse)
async def remove_photo(photo_type: str, store: SessionStore = Depends(get_store)) -> SessionResponse:
    if photo_type == "face":
        store.set_face_photo(None)
    elif photo_type == "body":
        store.set_body_photo(None)
    else:
        return JSONResponse(
            status_code=400,
            content={"status": "error", "error": f"Invalid photo_type. Must be one of {VALID_PHOTO_TYPES}"},
        )
    return _snapshot(store)


@app.post("/selection", response_model=SessionResponse)
async def select(request: SelectGarmentRequest, store: SessionStore = Depends(get_store)) -> SessionResponse:
    try:
        product = get_product(request.product_id)
    except KeyError:
        return JSONResponse(
            status_code=404,
            content={"status": "error", "error": f"Unknown product: {request.product_id}"},
        )

    size = request.size or product.sizes[0]
    color = request.color or product.colors[0].name
    color_names = [c.name for c in product.colors]
    if size not in product.sizes or color not in color_names:
        e = InvalidInputError(
            f"{product.name} is available in sizes {', '.join(product.sizes)} "
            f"and colors {', '.join(color_names)}."
        )
        store.report_error(e.message)
        return _error_response(e)

    store.select_garment(product, GarmentOptions(size=size, color=color))
    return _snapshot(store)


@app.delete("/selection/{product_id}", response_model=SessionResponse)
async def deselect(product_id: str, store: SessionStore = Depends(get_store)) -> SessionResponse:
    store.remove_garment(product_id)
    return _snapshot(store)


@app.post("/try-on", response_model=TryOnResponse)
async def try_on(
    store: SessionStore = Depends(get_store),
    adapter: GeminiAdapter = Depends(get_adapter),
) -> TryOnResponse:
    try:
        session = await run_tryon(store, adapter)
    except TryOnError as e:
        return _error_response(e)
    return TryOnResponse(
        status="success",
        result_image=session.result_image,
        analysis=session.analysis,
        recommendations=list(session.recommendations),
    )


@app.get("/export")
async def export(request: Request, store: SessionStore = Depends(get_store)):
    try:
        path = export_result(store.session, request.app.state.export_dir)
    except TryOnError as e:
        store.report_error(e.message)
        return _error_response(e)
    return FileResponse(path, media_type="image/png", filename=path.name)


@app.post("/reset", response_model=SessionResponse)
async def reset(store: SessionStore = Depends(get_store)) -> SessionResponse:
    store.reset()
    logger.info("session reset")
    return _snapshot(store)


if __name__ == "__main__":
    uvicorn.run("viavo.main:app", host="0.0.0.0", port=8000)
