"""HTTP mapping for ordering failures that Protean's handlers don't know about.

Register after ``protean.integrations.fastapi.register_exception_handlers``;
the more specific exception classes take precedence.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError

from ordering.errors import AlreadyResolved, IllegalTransition, PersistenceFailure, RaceConditionConflict


def _error_body(exc) -> dict:
    messages = getattr(exc, "messages", None)
    return {"error": messages if messages else str(exc)}


def register_ordering_exception_handlers(app: FastAPI) -> None:
    async def conflict(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=409, content=_error_body(exc))

    async def unavailable(request: Request, exc: PersistenceFailure) -> JSONResponse:
        body = _error_body(exc)
        body["persisted_order_ids"] = exc.persisted_order_ids
        return JSONResponse(status_code=503, content=body)

    for exc_class in (IllegalTransition, RaceConditionConflict, AlreadyResolved, ExpectedVersionError):
        app.add_exception_handler(exc_class, conflict)
    app.add_exception_handler(PersistenceFailure, unavailable)
