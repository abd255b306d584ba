from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from coinhub.services.errors import CoinLedgerError, StorageFailure

logger = logging.getLogger(__name__)


async def coin_ledger_error_handler(request: Request, exc: CoinLedgerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request failed path=%s code=%s err=%s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for e in exc.errors():
        loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
        errors.append({"field": loc, "message": e.get("msg", "")})
    message = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"detail": message, "code": "validation_error", "errors": errors},
    )


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("storage failure path=%s err=%s", request.url.path, str(exc)[:220])
    err = StorageFailure("Storage is unavailable, please retry.")
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CoinLedgerError, coin_ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, storage_error_handler)
    app.add_exception_handler(InterfaceError, storage_error_handler)
