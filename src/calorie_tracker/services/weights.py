"""Weight history service."""

from dataclasses import dataclass
from datetime import UTC, date
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.models import WeightEntry, WeightPoint


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return weight entries oldest first."""

    def create_entry(self, user_id: UUID, weight: float) -> WeightEntry:
        """Insert a weight entry and return it."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry owned by the user; return whether a row was removed."""


@dataclass
class WeightService:
    """Service for recording and charting body weight."""

    repository: WeightRepository

    def list_entries(self, user_id: UUID) -> list[WeightEntry]:
        """Return all weight entries, oldest first."""
        return self.repository.list_entries(user_id)

    def add_entry(self, user_id: UUID, weight: float) -> WeightEntry:
        """Record a new weight measurement."""
        if weight <= 0:
            raise ValueError("Weight must be positive")
        return self.repository.create_entry(user_id, weight)

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete a weight entry owned by the user."""
        return self.repository.delete_entry(user_id, entry_id)

    def chart_data(self, user_id: UUID) -> list[WeightPoint]:
        """Return the most recent entry of each UTC day, ordered by day."""
        latest: dict[date, WeightEntry] = {}
        for entry in self.repository.list_entries(user_id):
            day = entry.created_at.astimezone(UTC).date()
            current = latest.get(day)
            if current is None or entry.created_at > current.created_at:
                latest[day] = entry
        return [
            WeightPoint(day=day, weight=latest[day].weight) for day in sorted(latest)
        ]
