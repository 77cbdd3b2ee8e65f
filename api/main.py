import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from articles import router as articles_router
from auth import router as auth_router
from auth.repository import AuthRepository
from core import config
from core.db import Database
from core.errors import ApiError, ValidationFailed
from core.schemas import error_envelope
from uploads import router as uploads_router
from users import router as users_router
from users import service as users_service

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("wildlife_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, shared by every request through app.state.
    database = Database.from_env()
    await database.connect()
    app.state.db = database
    try:
        await database.apply_schema()
        admin = config.bootstrap_admin()
        if admin is not None:
            await users_service.ensure_bootstrap_admin(AuthRepository(database), **admin)
        yield
    finally:
        await database.close()


app = FastAPI(title="Wildlife API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


def _field_name(loc: tuple) -> str:
    # ("body", "title") -> "title"; ("query", "limit") -> "limit"
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": _field_name(tuple(err.get("loc", ()))),
            "location": str(err.get("loc", ("body",))[0]),
            "message": str(err.get("msg", "Invalid value")),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=ValidationFailed.status_code_default,
        content=error_envelope(ValidationFailed.message, errors=errors),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    errors = exc.errors if isinstance(exc, ApiError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), errors=errors),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_envelope("Server error"))


app.include_router(auth_router.router, tags=["auth"])
app.include_router(articles_router.router, tags=["articles"])
app.include_router(users_router.router, tags=["users"])
app.include_router(uploads_router.router, tags=["upload"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"success": True, "message": "Wildlife API is running!"}
