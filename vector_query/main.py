import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vector_query.api.routes import router as api_router
from vector_query.config import public_settings, setup_logging
from vector_query.errors import (
    DimensionMismatchError,
    IndexNotFoundError,
    InvalidFilterError,
    ProviderError,
    VectorQueryError,
)

logger = setup_logging()
app = FastAPI(title="Vector Query")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("Application starting")
logger.info("Loaded settings: %s", public_settings())

_ERROR_STATUS = {
    IndexNotFoundError: 404,
    InvalidFilterError: 400,
    DimensionMismatchError: 422,
    ProviderError: 502,
}


def error_status(exc: VectorQueryError) -> int:
    for cls in type(exc).__mro__:
        if cls in _ERROR_STATUS:
            return _ERROR_STATUS[cls]
    return 500


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.exception_handler(VectorQueryError)
async def vector_query_exception_handler(request: Request, exc: VectorQueryError):
    status_code = error_status(exc)
    logger.warning("Request failed: %s", exc, extra={"path": request.url.path, "status_code": status_code})
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(api_router)
