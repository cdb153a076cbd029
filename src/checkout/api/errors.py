"""Maps checkout and identity failures onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from checkout.identity.port import IdentityServiceUnavailable, InvalidCredential, Unauthenticated
from checkout.orchestration.errors import (
    CheckoutError,
    ConcurrentCheckoutError,
    EmptyCartError,
    PersistenceError,
    PriceResolutionError,
    UpstreamUnavailableError,
)

_STATUS_BY_ERROR = {
    EmptyCartError: 409,
    ConcurrentCheckoutError: 409,
    PriceResolutionError: 422,
    UpstreamUnavailableError: 503,
    PersistenceError: 500,
}


def _status_for(exc: CheckoutError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_cls):
            return status_code
    return 500


async def _checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:  # noqa: ARG001
    body = {"error": exc.code, "detail": exc.message, "committed": exc.committed}
    if isinstance(exc, PriceResolutionError):
        body["unresolved"] = list(exc.unresolved)
    if isinstance(exc, UpstreamUnavailableError):
        body["stage"] = exc.stage
    return JSONResponse(status_code=_status_for(exc), content=body)


async def _unauthenticated_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(
        status_code=401,
        content={"error": "unauthenticated", "detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _identity_unavailable_handler(request: Request, exc: IdentityServiceUnavailable) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(status_code=503, content={"error": "identity_unavailable", "detail": str(exc)})


def register_checkout_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CheckoutError, _checkout_error_handler)
    app.add_exception_handler(Unauthenticated, _unauthenticated_handler)
    app.add_exception_handler(InvalidCredential, _unauthenticated_handler)
    app.add_exception_handler(IdentityServiceUnavailable, _identity_unavailable_handler)
