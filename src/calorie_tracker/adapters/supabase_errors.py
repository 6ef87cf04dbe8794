"""Error translation for Supabase queries."""

import logging
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from calorie_tracker.domain.errors import UpstreamUnavailable

_logger = logging.getLogger(__name__)


class _Executable(Protocol):
    def execute(self) -> object: ...


def execute(query: _Executable, *, action: str) -> Any:
    """Execute a PostgREST query, surfacing failures as UpstreamUnavailable."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        _logger.warning("Supabase %s failed: %s", action, exc)
        raise UpstreamUnavailable(f"Store unavailable during {action}") from exc
