"""Entry logging service."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.entries import (
    EntryDraft,
    EntryUpdate,
    LogEntryRequest,
    LoggedEntry,
)
from calorie_tracker.domain.errors import NotFound, ValidationFailed
from calorie_tracker.domain.nutrients import NutrientProfile
from calorie_tracker.services.nutrition import NutrientResolver
from calorie_tracker.services.summaries import SummaryService

MIN_AMOUNT = 0.1
MAX_UNIT_LENGTH = 20
MAX_FOOD_NAME_LENGTH = 200

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for logged entries."""

    def insert_entry(self, draft: EntryDraft) -> LoggedEntry:
        """Persist a new entry and return the stored row."""

    def get_entry(self, entry_id: UUID, user_id: UUID) -> LoggedEntry | None:
        """Return an entry owned by the user, if present."""

    def update_entry(
        self, entry_id: UUID, user_id: UUID, update: EntryUpdate
    ) -> LoggedEntry:
        """Apply a partial update and return the stored row."""

    def delete_entry(self, entry_id: UUID, user_id: UUID) -> date:
        """Delete an entry and return its log date."""

    def fetch_entries(self, user_id: UUID, start: date, end: date) -> list[LoggedEntry]:
        """Return entries with start <= log_date <= end, ordered by date."""


@dataclass
class EntryService:
    """Service that resolves, persists and invalidates on entry writes."""

    resolver: NutrientResolver
    repository: EntryRepository
    summaries: SummaryService

    def log_entry(self, user_id: UUID, request: LogEntryRequest) -> LoggedEntry:
        """Resolve nutrients for a request and persist the entry."""
        _validate_request(request)
        nutrients = self.resolver.resolve(user_id, request)
        entry = self.repository.insert_entry(
            EntryDraft(
                user_id=user_id,
                food_id=request.food_id,
                custom_food_id=request.custom_food_id,
                custom_food_name=request.custom_food_name,
                amount=request.amount,
                unit=request.unit,
                meal_type=request.meal_type,
                log_date=request.log_date,
                log_time=request.log_time,
                nutrients=nutrients,
            )
        )
        self.summaries.invalidate(user_id, entry.log_date)
        _logger.info(
            "Logged entry: user_id=%s entry_id=%s date=%s",
            user_id,
            entry.id,
            entry.log_date,
        )
        return entry

    def update_entry(
        self, entry_id: UUID, user_id: UUID, update: EntryUpdate
    ) -> LoggedEntry:
        """Update mutable fields, rescaling nutrients when the amount changes."""
        _validate_update(update)
        existing = self.repository.get_entry(entry_id, user_id)
        if existing is None:
            raise NotFound(f"Entry {entry_id} not found")
        if update.amount is not None and update.amount != existing.amount:
            factor = update.amount / existing.amount
            update = replace(update, nutrients=existing.nutrients.scaled(factor))
        else:
            update = replace(update, nutrients=None)
        entry = self.repository.update_entry(entry_id, user_id, update)
        self.summaries.invalidate(user_id, existing.log_date)
        return entry

    def delete_entry(self, entry_id: UUID, user_id: UUID) -> date:
        """Delete an entry and return its log date."""
        log_date = self.repository.delete_entry(entry_id, user_id)
        self.summaries.invalidate(user_id, log_date)
        _logger.info("Deleted entry: user_id=%s entry_id=%s", user_id, entry_id)
        return log_date


def parse_log_date(raw: str) -> date:
    """Parse a YYYY-MM-DD date, raising ValidationFailed when malformed."""
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationFailed("Date must use the YYYY-MM-DD format") from exc


def _validate_request(request: LogEntryRequest) -> None:
    _validate_amount(request.amount)
    _validate_unit(request.unit)
    if (
        request.custom_food_name is not None
        and len(request.custom_food_name) > MAX_FOOD_NAME_LENGTH
    ):
        raise ValidationFailed(
            f"Food name must be at most {MAX_FOOD_NAME_LENGTH} characters"
        )
    if request.nutrients is not None:
        _validate_nutrients(request.nutrients)


def _validate_update(update: EntryUpdate) -> None:
    if update.is_empty():
        raise ValidationFailed("No fields to update")
    if update.clear_log_time and update.log_time is not None:
        raise ValidationFailed("Cannot both set and clear the log time")
    if update.amount is not None:
        _validate_amount(update.amount)
    if update.unit is not None:
        _validate_unit(update.unit)


def _validate_amount(amount: float) -> None:
    if not math.isfinite(amount) or amount < MIN_AMOUNT:
        raise ValidationFailed(f"Amount must be a finite number >= {MIN_AMOUNT}")


def _validate_unit(unit: str) -> None:
    if not unit or len(unit) > MAX_UNIT_LENGTH:
        raise ValidationFailed(f"Unit must be 1-{MAX_UNIT_LENGTH} characters")


def _validate_nutrients(nutrients: NutrientProfile) -> None:
    invalid = [
        name
        for name, value in nutrients.as_dict().items()
        if not math.isfinite(value) or value < 0
    ]
    if invalid:
        raise ValidationFailed(
            f"Nutrient values must be finite and >= 0: {', '.join(invalid)}"
        )
