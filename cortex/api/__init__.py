from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from cortex.api.endpoints import get_endpoints_router
from cortex.errors import CortexError
from cortex.service import NoteService


async def cortex_error_handler(request: Request, exc: CortexError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.kind, "detail": str(exc)})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed unexpectedly")
    return JSONResponse(status_code=500, content={"error": "internal_error", "detail": str(exc)})


def create_app(*, service: NoteService) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI(title="Cortex")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CortexError, cortex_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(router=get_endpoints_router(service=service))

    return app
