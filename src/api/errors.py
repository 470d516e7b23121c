"""Map failures to JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..content.models import validation_details
from ..errors import ContentFailure, ValidationFailure


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ContentFailure)
    async def handle_content_failure(request: Request, exc: ContentFailure) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        failure = ValidationFailure("Invalid request", details=validation_details(exc))
        return JSONResponse(status_code=failure.status_code, content=failure.to_dict())
