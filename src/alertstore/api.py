"""HTTP adapter exposing alert submission and range queries."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from .alerts import AlertRecord, AlertSubmission, require_rfc3339
from .errors import NoAlertsInRange, PersistenceError, ServiceNotFound
from .store import AlertStore


class SubmitResult(BaseModel):
    alert_id: str
    error: str | None = None


class QueryResult(BaseModel):
    # alert_id is the first match, kept for clients of the original response shape
    alert_id: str
    alerts: list[AlertRecord]


def create_app(store: AlertStore) -> FastAPI:
    """Build the FastAPI application around an existing store.

    Handlers are plain functions, so FastAPI runs each request in its thread
    pool and the store's lock arbitrates between them.
    """
    app = FastAPI(title="alertstore", description="Alerts indexed by service")
    app.state.store = store

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": errors})

    @app.get("/", response_class=PlainTextResponse)
    def home() -> str:
        return "Hello from home"

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "services": len(store),
            "alerts": store.alert_count,
        }

    @app.post("/alerts", response_model=SubmitResult)
    def write_alert(submission: AlertSubmission) -> SubmitResult:
        try:
            alert_id = store.submit_alert(submission.to_record(), submission.service_name)
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return SubmitResult(alert_id=alert_id)

    @app.get("/alerts", response_model=QueryResult)
    def read_alerts(service_id: str, start_ts: str, end_ts: str) -> QueryResult:
        return _query(store, service_id, start_ts, end_ts)

    @app.get(
        "/alerts/service_id={service_id}&start_ts={start_ts}&end_ts={end_ts}",
        response_model=QueryResult,
    )
    def read_alerts_legacy(service_id: str, start_ts: str, end_ts: str) -> QueryResult:
        return _query(store, service_id, start_ts, end_ts)

    return app


def _query(store: AlertStore, service_id: str, start_ts: str, end_ts: str) -> QueryResult:
    try:
        require_rfc3339(start_ts, "start_ts")
        require_rfc3339(end_ts, "end_ts")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        alerts = store.query_alerts(service_id, start_ts, end_ts)
    except ServiceNotFound as exc:
        raise HTTPException(status_code=404, detail="Service not found") from exc
    except NoAlertsInRange as exc:
        raise HTTPException(
            status_code=404, detail="No alerts found in the specified time range"
        ) from exc
    return QueryResult(alert_id=alerts[0].alert_id, alerts=alerts)
