"""Exception handlers for the FastAPI app."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from choreo.correlation import CorrelationStoreCorrupted, MissingResumptionToken
from choreo.definition import DefinitionValidationError
from choreo.workflow_engine import ExecutionNotStarted, UnknownChoreographyError


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UnknownChoreographyError)
    async def unknown_choreography_handler(request: Request, exc: UnknownChoreographyError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(MissingResumptionToken)
    async def missing_token_handler(request: Request, exc: MissingResumptionToken) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(DefinitionValidationError)
    async def definition_validation_handler(request: Request, exc: DefinitionValidationError) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=422, content={"detail": str(exc), "state": exc.state_name})

    @app.exception_handler(CorrelationStoreCorrupted)
    async def store_corrupted_handler(request: Request, exc: CorrelationStoreCorrupted) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ExecutionNotStarted)
    async def execution_not_started_handler(request: Request, exc: ExecutionNotStarted) -> JSONResponse:  # noqa: WPS430
        return JSONResponse(status_code=502, content={"detail": str(exc)})
