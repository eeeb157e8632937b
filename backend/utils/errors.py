# backend/utils/errors.py
import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from utils.templating import templates
from utils.tokenJWT import PageRedirect

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


class ApiError(StarletteHTTPException):
    """HTTP error that carries structured details next to the message."""

    def __init__(self, status_code: int, message: str, details=None):
        super().__init__(status_code=status_code, detail=message)
        self.details = details


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = {"error": exc.detail}
    details = getattr(exc, "details", None)
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(
        body,
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


# Schema failures are client errors: 400 with the field-level details
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"error": "Invalid input", "details": jsonable_encoder(exc.errors())},
        status_code=400,
    )


async def page_redirect_handler(request: Request, exc: PageRedirect):
    return RedirectResponse(exc.location, status_code=302)


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """Last-resort handler: log the failure, answer with a generic 500."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            if _is_api(request):
                return JSONResponse({"error": INTERNAL_ERROR}, status_code=500)
            return templates.TemplateResponse(
                request,
                "auth/error.html",
                {"error": INTERNAL_ERROR, "user": None},
                status_code=500,
            )


def register_error_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PageRedirect, page_redirect_handler)
