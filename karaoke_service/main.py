import logging
import os

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import bookings, customers, dashboard, rooms
from .database import create_tables
from .errors import ConflictError, KaraokeError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

create_tables()

app = FastAPI(title="Karaoke Room Booking Admin", version="1.0.0")
router_v1 = APIRouter(prefix="/api/v1")

SERVICE_NAME = "karaoke"


def error_body(request: Request, status_code: int, detail, **extra) -> dict:
    body = {
        "service": SERVICE_NAME,
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "detail": detail,
    }
    body.update(extra)
    return body


@app.exception_handler(KaraokeError)
async def karaoke_error_handler(request: Request, exc: KaraokeError):
    extra = exc.to_dict()
    extra.pop("detail")
    if isinstance(exc, ConflictError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.detail)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.detail, **extra),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Missing or ill-typed fields are reported like any other validation error
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            request,
            status.HTTP_400_BAD_REQUEST,
            "; ".join(messages) or "Invalid request",
            error="validation_error",
        ),
    )


# Registered on the Starlette base class so routing 404/405 get the envelope too
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(request, 500, "Internal server error"),
    )


@app.get("/")
def root():
    """
    Health-check endpoint for the karaoke admin service.

    Returns
    -------
    dict
        A small JSON payload indicating that the service is running.
    """
    return {"service": SERVICE_NAME, "status": "running"}


router_v1.include_router(rooms.router)
router_v1.include_router(customers.router)
router_v1.include_router(bookings.router)
router_v1.include_router(dashboard.router)

app.include_router(router_v1)
