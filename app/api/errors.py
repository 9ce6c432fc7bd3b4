"""Error responder: renders AppError subclasses as JSON error bodies."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.errors import AppError, ErrorType


def error_body(error_type: ErrorType, message: str) -> dict:
    return {
        "statusCode": error_type.status_code,
        "error": error_type.name,
        "description": error_type.description,
        "message": message,
    }


def error_response(error_type: ErrorType, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=error_type.status_code,
        content=error_body(error_type, message),
    )


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.error_type, exc.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
