"""Map domain failures onto HTTP responses.

Every error body has the shape ``{"error": {"code", "message", "details"?}}``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from shipping.errors import DuplicateTrackingNumberError
from shipping.storage.port import ProofStorageError
from shipping.utils.logging import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


def _first_message(messages: dict) -> str:
    for field_name, errors in messages.items():
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            return f"{field_name}: {first}"
    return "Invalid request"


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = exc.messages if isinstance(exc.messages, dict) else {"request": [str(exc.messages)]}
    return error_response(400, "VALIDATION", _first_message(messages), details=messages)


async def not_found_error_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, "NOT_FOUND", "Shipment not found")


async def conflict_error_handler(request: Request, exc: DuplicateTrackingNumberError) -> JSONResponse:
    return error_response(409, exc.code, str(exc))


async def storage_error_handler(request: Request, exc: ProofStorageError) -> JSONResponse:
    logger.error("proof_storage_failed", path=request.url.path, error=str(exc))
    return error_response(500, exc.code, "Failed to store delivery proof")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_error_handler)
    app.add_exception_handler(DuplicateTrackingNumberError, conflict_error_handler)
    app.add_exception_handler(ProofStorageError, storage_error_handler)
