"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.adapters.upstash_cache_store import UpstashCacheStore
from calorie_tracker.config import Settings
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.nutrition import NutrientResolver
from calorie_tracker.services.rate_limit import RateLimiter
from calorie_tracker.services.summaries import SummaryService
from calorie_tracker.services.targets import TargetService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_service: EntryService
    summary_service: SummaryService
    rate_limiter: RateLimiter


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    cache = UpstashCacheStore.create(
        url=resolved_settings.upstash_redis_rest_url,
        token=resolved_settings.upstash_redis_rest_token,
        retries=resolved_settings.cache_rest_retries,
        retry_interval_seconds=resolved_settings.cache_rest_retry_interval_seconds,
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    summary_service = SummaryService(
        entries=entry_repository,
        targets=TargetService(SupabaseProfileRepository(supabase_client)),
        cache=cache,
        daily_ttl_seconds=resolved_settings.daily_cache_ttl_seconds,
        weekly_ttl_seconds=resolved_settings.weekly_cache_ttl_seconds,
        invalidate_weekly_on_write=resolved_settings.invalidate_weekly_on_write,
    )
    entry_service = EntryService(
        resolver=NutrientResolver(SupabaseFoodRepository(supabase_client)),
        repository=entry_repository,
        summaries=summary_service,
    )
    return AppContainer(
        settings=resolved_settings,
        entry_service=entry_service,
        summary_service=summary_service,
        rate_limiter=RateLimiter(cache),
    )
