import logging
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckscout.api import catalog_router, session_router
from deckscout.config import settings
from deckscout.models.failure import ApiResponse, KnownError, RefusalError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("deckscout"),
)

app.include_router(catalog_router)
app.include_router(session_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Overlay windows load from arbitrary local origins
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers: classify all failures


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Handle caller-correctable errors."""
    response = exc.to_response()
    return JSONResponse(
        status_code=exc.status_code,
        content=response.model_dump(mode="json"),
    )


@app.exception_handler(RefusalError)
async def refusal_error_handler(_request: Request, exc: RefusalError) -> JSONResponse:
    """Handle requests the current session state does not allow."""
    response = exc.to_response()
    return JSONResponse(
        status_code=409,
        content=response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unexpected exceptions; no raw 500 reaches a client."""
    logger.exception("Unexpected error: %s", exc)
    response = ApiResponse.unknown_failure(
        detail=f"{type(exc).__name__}: {exc!s}"[:200],
    )
    return JSONResponse(
        status_code=500,
        content=response.model_dump(mode="json"),
    )
