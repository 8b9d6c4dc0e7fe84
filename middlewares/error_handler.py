import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.grade_aggregator import InvalidWeightSumError, NoRemainingCapacityError
from utils.exceptions import AppError

logger = logging.getLogger(__name__)


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_response(status_code: int, code: str, message: str, **extra) -> JSONResponse:
    error = {"code": code, "message": message}
    error.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "generated_at": _now_iso()},
    )


def add_error_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(exc.status_code, exc.code, exc.message, field=exc.field)

    @app.exception_handler(InvalidWeightSumError)
    async def weight_sum_handler(request: Request, exc: InvalidWeightSumError):
        logger.warning("%s %s -> %s", request.method, request.url.path, exc.message)
        return error_response(400, "INVALID_WEIGHT_SUM", exc.message)

    @app.exception_handler(NoRemainingCapacityError)
    async def no_capacity_handler(request: Request, exc: NoRemainingCapacityError):
        return error_response(422, "NO_REMAINING_CAPACITY", exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return error_response(400, "VALIDATION_ERROR", f"{location}: {message}" if location else message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "INTERNAL_ERROR", "Internal Server Error")
