"""Reusable error primitives for API exception handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import (
    InvalidDuration,
    InvalidRange,
    JobNotFound,
    LipSyncError,
    MissingInput,
    PayloadTooLarge,
    RangeTooNarrow,
    UnsupportedKind,
)

_STATUS_BY_ERROR: Mapping[type[LipSyncError], int] = {
    InvalidDuration: 422,
    RangeTooNarrow: 422,
    InvalidRange: 422,
    MissingInput: status.HTTP_409_CONFLICT,
    UnsupportedKind: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    JobNotFound: status.HTTP_404_NOT_FOUND,
    PayloadTooLarge: 413,
}


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str
    headers: Mapping[str, str] | None = None

    def to_response(self) -> JSONResponse:
        """Materialise the error into a ``JSONResponse`` instance."""

        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
            headers=dict(self.headers or {}),
        )

    @classmethod
    def from_domain(cls, exc: LipSyncError) -> "ApiError":
        status_code = status.HTTP_400_BAD_REQUEST
        for error_type in type(exc).__mro__:
            if error_type in _STATUS_BY_ERROR:
                status_code = _STATUS_BY_ERROR[error_type]
                break
        return cls(status_code, exc.code, str(exc))


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    """Convert :class:`ApiError` exceptions into JSON payloads."""

    return exc.to_response()


async def domain_error_handler(_: Request, exc: LipSyncError) -> JSONResponse:
    """Convert domain exceptions into the same JSON envelope."""

    return ApiError.from_domain(exc).to_response()


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(LipSyncError, domain_error_handler)  # type: ignore[arg-type]


__all__ = [
    "ApiError",
    "api_error_handler",
    "domain_error_handler",
    "install_error_handlers",
]
