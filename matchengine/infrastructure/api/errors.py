"""Mapping of engine error kinds to HTTP responses."""

from fastapi.responses import JSONResponse

from matchengine.domain.errors import EngineError, ErrorKind

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.ALREADY_PROCESSED: 409,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.BELOW_MINIMUM: 400,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.DEPENDENCY_FAILURE: 502,
}


def error_response(error: EngineError, correlation_id: str | None = None) -> JSONResponse:
    body = error.to_dict()
    body["correlation_id"] = correlation_id
    return JSONResponse(status_code=STATUS_BY_KIND[error.kind], content=body)
