import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notes_api.core.errors import NotesError, ValidationError
from notes_api.core.settings import settings

from notes_api.api.auth import router as auth_router
from notes_api.api.notes import router as notes_router
from notes_api.api.tenants import router as tenants_router

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME, version=VERSION)

app.include_router(auth_router)
app.include_router(notes_router)
app.include_router(tenants_router)


@app.exception_handler(NotesError)
def notes_error_handler(request: Request, exc: NotesError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    # parser details stay in the log, clients get the standard envelope
    logger.info("invalid request on %s %s: %s", request.method, request.url.path, exc.errors())
    err = ValidationError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL_ERROR"})


@app.get("/health")
@app.get("/api/health")
def health():
    return {
        "ok": True,
        "service": "tenant-notes",
        "env": settings.ENV,
        "version": VERSION,
    }
