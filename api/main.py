import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from albums import router as albums_router
from auth import router as auth_router
from core import db, settings
from images import router as images_router
from uploads import router as uploads_router
from users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Allow the local frontend dev server to call this API with its session cookie.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(users_router.router, tags=["users"])
app.include_router(albums_router.router, tags=["albums"])
app.include_router(images_router.router, tags=["images"])
app.include_router(uploads_router.router, tags=["uploads"])


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def handle_invalid_input(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input.", "errors": jsonable_errors(exc)},
    )


async def handle_internal_error(request: Request, exc: Exception) -> JSONResponse:
    # Never echo driver/OS error text to the client.
    logger.exception("request_failed method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error."},
    )


for _exc_type in (asyncpg.PostgresError, asyncpg.InterfaceError, OSError):
    app.add_exception_handler(_exc_type, handle_internal_error)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "media catalog api"}
