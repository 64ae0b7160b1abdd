# quizgen/utils/errors.py
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from quizgen.utils.logger import logger


def _error_payload(
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        payload["details"] = details
    return payload


class QuizGenError(Exception):
    """Base exception for the quiz generator.

    Raised from services invoked by request handlers; the handlers registered in
    `register_exception_handlers` turn them into structured JSON responses.
    """

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        return _error_payload(
            error=self.message,
            code=self.code,
            type_=self.__class__.__name__,
            details=self.details,
        )


class ConfigurationError(QuizGenError):
    """Raised when the model provider credential is missing or the provider is unknown."""

    status_code = 500
    default_code = "configuration_error"


class InvalidInput(QuizGenError):
    """Raised when a request field is missing or malformed. The request is not attempted."""

    status_code = 400
    default_code = "invalid_input"


class UpstreamError(QuizGenError):
    """Raised when the model call or its stream fails or times out."""

    status_code = 500
    default_code = "upstream_error"


class MalformedModelOutput(QuizGenError):
    """Raised when the model output does not parse as the requested structured format.

    The raw text travels with the error so the caller can inspect what the model returned.
    """

    status_code = 500
    default_code = "malformed_model_output"

    def __init__(self, message: str, *, raw_text: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.raw_text = raw_text

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["rawText"] = self.raw_text
        return payload


class RemediationGenerationError(QuizGenError):
    """Raised when follow-up questions for a weak topic could not be generated."""

    status_code = 500
    default_code = "remediation_failed"


def register_exception_handlers(app: FastAPI) -> None:
    """Register the quiz generator's exception handlers on a FastAPI app."""

    @app.exception_handler(QuizGenError)
    async def _quizgen_exception_handler(_request: Request, exc: QuizGenError) -> JSONResponse:
        if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        else:
            logger.info(f"Rejected request ({exc.__class__.__name__}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Only bodies that fail to parse as JSON end up here.
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content=_error_payload(
                error="Request body is not valid JSON.",
                code=InvalidInput.default_code,
                type_=InvalidInput.__name__,
                details=jsonable_errors(exc),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = getattr(exc, "detail", None)
        if isinstance(detail, str):
            error = detail
            details = None
        else:
            error = "Request failed"
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=error,
                code="http_exception",
                type_=exc.__class__.__name__,
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_payload(
                error="Internal server error",
                code="internal_error",
                type_="InternalServerError",
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Keeps only the JSON-safe parts of pydantic's error list."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
