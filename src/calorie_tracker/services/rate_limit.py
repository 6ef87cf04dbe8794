"""Fixed-window request budgets built on the cache store."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from calorie_tracker.domain.errors import RateLimited
from calorie_tracker.domain.summaries import RateLimitResult
from calorie_tracker.services.cache import TTL_PERSISTENT, CacheStore

_logger = logging.getLogger(__name__)


class OperationClass(str, Enum):
    """Operation classes with independent request budgets."""

    FOOD_RECOGNITION = "food_recognition"
    NUTRITION_ADVICE = "nutrition_advice"
    MEAL_PLAN = "meal_plan"
    TREND_ANALYSIS = "trend_analysis"
    HEALTH_TIPS = "health_tips"
    DAILY_SUMMARY = "daily_summary"
    WEEKLY_SUMMARY = "weekly_summary"
    TREND = "trend"


@dataclass(frozen=True)
class Budget:
    """Requests allowed per window."""

    limit: int
    window_seconds: int


DEFAULT_BUDGETS: dict[OperationClass, Budget] = {
    OperationClass.FOOD_RECOGNITION: Budget(limit=10, window_seconds=3600),
    OperationClass.NUTRITION_ADVICE: Budget(limit=5, window_seconds=3600),
    OperationClass.MEAL_PLAN: Budget(limit=3, window_seconds=86400),
    OperationClass.TREND_ANALYSIS: Budget(limit=2, window_seconds=86400),
    OperationClass.HEALTH_TIPS: Budget(limit=10, window_seconds=3600),
    OperationClass.DAILY_SUMMARY: Budget(limit=120, window_seconds=60),
    OperationClass.WEEKLY_SUMMARY: Budget(limit=60, window_seconds=60),
    OperationClass.TREND: Budget(limit=30, window_seconds=60),
}


def rate_limit_key(user_id: UUID, operation: OperationClass) -> str:
    """Return the counter key for a user and operation class."""
    return f"rate_limit:{operation.value}:{user_id}"


@dataclass
class RateLimiter:
    """Fixed-window counters.

    A window starts at the first request and lasts ``window_seconds``, so a
    client can get up to twice the limit through across a window boundary.
    A counter found without an expiry gets the window TTL again. Storage
    failures fail open.
    """

    cache: CacheStore
    budgets: dict[OperationClass, Budget] = field(
        default_factory=lambda: dict(DEFAULT_BUDGETS)
    )

    def check(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Count a request against the window at key."""
        count = self.cache.incr(key)
        if count is None:
            _logger.warning("Rate limit storage unavailable, allowing: key=%s", key)
            return RateLimitResult(allowed=True, count=0, limit=limit, reset_seconds=0)
        if count == 1:
            self.cache.expire(key, window_seconds)
        ttl = self.cache.ttl(key)
        if ttl == TTL_PERSISTENT:
            _logger.warning("Rate limit window had no expiry, resetting: key=%s", key)
            self.cache.expire(key, window_seconds)
            ttl = window_seconds
        reset_seconds = max(ttl, 0)
        return RateLimitResult(
            allowed=count <= limit,
            count=count,
            limit=limit,
            reset_seconds=reset_seconds,
        )

    def check_operation(
        self, user_id: UUID, operation: OperationClass
    ) -> RateLimitResult:
        """Count a request against the user's budget for an operation class."""
        budget = self.budgets[operation]
        return self.check(
            rate_limit_key(user_id, operation), budget.limit, budget.window_seconds
        )

    def enforce(self, user_id: UUID, operation: OperationClass) -> RateLimitResult:
        """Count a request and raise RateLimited when over budget."""
        result = self.check_operation(user_id, operation)
        if not result.allowed:
            _logger.info(
                "Rate limited: user_id=%s operation=%s count=%s",
                user_id,
                operation.value,
                result.count,
            )
            raise RateLimited(operation.value, result.reset_seconds)
        return result
