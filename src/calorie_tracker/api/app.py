"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import LogEntryBody, UpdateEntryBody
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import (
    NotFound,
    RateLimited,
    UpstreamUnavailable,
    ValidationFailed,
)
from calorie_tracker.services.entries import parse_log_date
from calorie_tracker.services.rate_limit import OperationClass


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_api_token(
    request: Request, x_api_token: str | None = Header(default=None)
) -> None:
    """Ensure requests come from the trusted upstream gateway."""
    if not x_api_token or x_api_token != _container(request).settings.api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


async def current_user_id(x_user_id: UUID = Header()) -> UUID:
    """Return the caller's user id as asserted by the upstream gateway."""
    return x_user_id


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Calorie Tracker")
    app.state.container = container
    guarded = [Depends(require_api_token)]

    @app.exception_handler(ValidationFailed)
    async def validation_failed(_: Request, exc: ValidationFailed) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def not_found(_: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RateLimited)
    async def rate_limited(_: Request, exc: RateLimited) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"detail": str(exc), "retry_after": exc.reset_seconds},
            headers={"Retry-After": str(exc.reset_seconds)},
        )

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_unavailable(
        _: Request, exc: UpstreamUnavailable
    ) -> JSONResponse:
        logger.error("Upstream unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"detail": str(exc)},
            headers={"Retry-After": str(exc.retry_after_seconds)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/entries", status_code=201, dependencies=guarded)
    def log_entry(
        body: LogEntryBody,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Log a food entry."""
        entry = _container(request).entry_service.log_entry(
            user_id, body.to_request()
        )
        return {"entry": entry, "nutrition": entry.nutrients}

    @app.patch("/entries/{entry_id}", dependencies=guarded)
    def update_entry(
        entry_id: UUID,
        body: UpdateEntryBody,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Update an entry's amount, unit, meal type or time."""
        entry = _container(request).entry_service.update_entry(
            entry_id, user_id, body.to_update()
        )
        return {"entry": entry}

    @app.delete("/entries/{entry_id}", dependencies=guarded)
    def delete_entry(
        entry_id: UUID,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Delete an entry."""
        log_date = _container(request).entry_service.delete_entry(entry_id, user_id)
        return {"deleted": str(entry_id), "log_date": log_date.isoformat()}

    @app.get("/summaries/daily", dependencies=guarded)
    def daily_summary(
        request: Request,
        date: str,
        include_meals: bool = False,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Return the daily summary for a date."""
        container = _container(request)
        container.rate_limiter.enforce(user_id, OperationClass.DAILY_SUMMARY)
        summary = container.summary_service.get_daily(
            user_id, parse_log_date(date), include_meals=include_meals
        )
        return {"summary": summary}

    @app.get("/summaries/weekly", dependencies=guarded)
    def weekly_summary(
        request: Request,
        week_start: str | None = None,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Return the weekly summary. Entries newer than the cache TTL may be missing."""
        container = _container(request)
        container.rate_limiter.enforce(user_id, OperationClass.WEEKLY_SUMMARY)
        start = parse_log_date(week_start) if week_start else None
        return {"summary": container.summary_service.get_weekly(user_id, start)}

    @app.get("/summaries/trend", dependencies=guarded)
    def trend(
        request: Request,
        period: int = 30,
        start_date: str | None = None,
        end_date: str | None = None,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Return per-day totals for days with entries."""
        container = _container(request)
        container.rate_limiter.enforce(user_id, OperationClass.TREND)
        days = list(
            container.summary_service.get_trend(
                user_id,
                period_days=period,
                start=parse_log_date(start_date) if start_date else None,
                end=parse_log_date(end_date) if end_date else None,
            )
        )
        return {"trends": days, "total_days": len(days)}

    @app.get("/rate-limits/{operation}", dependencies=guarded)
    def check_rate_limit(
        operation: OperationClass,
        request: Request,
        user_id: UUID = Depends(current_user_id),
    ) -> dict[str, object]:
        """Count a request against an operation budget and report the outcome."""
        result = _container(request).rate_limiter.check_operation(user_id, operation)
        return {
            "allowed": result.allowed,
            "count": result.count,
            "limit": result.limit,
            "reset_seconds": result.reset_seconds,
        }

    return app
