# Dashboard read model: conjunctive filters over loaded grievances and the
# summary tiles/bars derived from whatever the filters leave

import asyncio
import logging
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from grievance_portal import config
from grievance_portal.models import (
    CATEGORY_LABELS, HEADLINE_CATEGORIES, Category, GrievanceRecord, Urgency,
)
from grievance_portal.store import StoreReadError

logger = logging.getLogger(__name__)


class FilterError(ValueError):
    """A filter parameter could not be parsed."""


# ---------------------------------------------------------------------------
# Filter state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FilterState:
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    name: Optional[str] = None
    location: Optional[str] = None
    category: Optional[Category] = None
    urgency: Optional[Urgency] = None
    description: Optional[str] = None

    @classmethod
    def from_params(cls, date_from: Optional[str] = None, date_to: Optional[str] = None,
                    name: Optional[str] = None, location: Optional[str] = None,
                    category: Optional[str] = None, urgency: Optional[str] = None,
                    description: Optional[str] = None) -> "FilterState":
        """Parse raw query-string values; empty strings mean "not set"."""
        def _date(value, param):
            if not value:
                return None
            try:
                return datetime.strptime(value, "%Y-%m-%d").date()
            except ValueError:
                raise FilterError(f"Invalid {param}: expected YYYY-MM-DD")

        def _enum(enum_cls, value, param):
            if not value:
                return None
            try:
                return enum_cls(value)
            except ValueError:
                raise FilterError(f"Invalid {param}: {value!r}")

        return cls(
            date_from=_date(date_from, "date_from"),
            date_to=_date(date_to, "date_to"),
            name=name or None,
            location=location or None,
            category=_enum(Category, category, "category"),
            urgency=_enum(Urgency, urgency, "urgency"),
            description=description or None,
        )

    def to_params(self) -> Dict[str, str]:
        params = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, (Category, Urgency)):
                value = value.value
            params[f.name] = value
        return params

    @property
    def has_active_filters(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    # Tile/bar interactions -------------------------------------------------
    def clear_urgency(self) -> "FilterState":
        return replace(self, urgency=None)

    def toggle_urgency(self, level: Urgency) -> "FilterState":
        return replace(self, urgency=None if self.urgency == level else level)

    def toggle_category(self, category: Category) -> "FilterState":
        return replace(self, category=None if self.category == category else category)

# ---------------------------------------------------------------------------
# Filter engine
# ---------------------------------------------------------------------------
def display_location(record: GrievanceRecord) -> str:
    if record.location_text:
        return record.location_text
    if record.latitude is not None and record.longitude is not None:
        return f"GPS: {record.latitude:.4f}, {record.longitude:.4f}"
    return "N/A"

def display_name(record: GrievanceRecord) -> str:
    return record.submitter_name or "Anonymous"

def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)

def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()

def matches(record: GrievanceRecord, f: FilterState) -> bool:
    created = _aware(record.created_at)
    if f.date_from and created < datetime.combine(f.date_from, time.min, tzinfo=timezone.utc):
        return False
    if f.date_to and created > datetime.combine(f.date_to, time(23, 59, 59), tzinfo=timezone.utc):
        return False
    if f.name and not _contains(display_name(record), f.name):
        return False
    if f.location and not _contains(display_location(record), f.location):
        return False
    if f.category and record.category != f.category:
        return False
    if f.urgency and record.urgency != f.urgency:
        return False
    if f.description and not _contains(record.content, f.description):
        return False
    return True

def apply_filters(records: Sequence[GrievanceRecord], f: FilterState) -> List[GrievanceRecord]:
    return [r for r in records if matches(r, f)]

# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
@dataclass
class Summary:
    total: int
    count_by_urgency: Dict[Urgency, int]
    count_by_category: Dict[Category, int]
    percentage_by_category: Dict[Category, float]

    def category_bars(self) -> List[dict]:
        return [
            {"name": CATEGORY_LABELS[c.value], "value": c,
             "count": self.count_by_category[c], "percentage": self.percentage_by_category[c]}
            for c in HEADLINE_CATEGORIES
        ]

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "count_by_urgency": {u.value: n for u, n in self.count_by_urgency.items()},
            "count_by_category": {c.value: n for c, n in self.count_by_category.items()},
            "percentage_by_category": {c.value: p for c, p in self.percentage_by_category.items()},
            "categories": self.category_bars(),
        }


def summarize(filtered: Sequence[GrievanceRecord]) -> Summary:
    total = len(filtered)
    by_urgency = {u: 0 for u in (Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW)}
    by_category = {c: 0 for c in HEADLINE_CATEGORIES}
    for r in filtered:
        if r.urgency in by_urgency:
            by_urgency[r.urgency] += 1
        if r.category in by_category:
            by_category[r.category] += 1
    percentages = {c: (n / total) * 100 if total > 0 else 0.0 for c, n in by_category.items()}
    return Summary(total, by_urgency, by_category, percentages)

# ---------------------------------------------------------------------------
# Dashboard state
# ---------------------------------------------------------------------------
@dataclass
class DashboardState:
    """State owned by one dashboard instance: loaded rows plus active filters."""
    records: List[GrievanceRecord] = field(default_factory=list)
    filters: FilterState = field(default_factory=FilterState)
    loading: bool = False
    load_error: bool = False

    async def refresh(self, store, table: str = config.GRIEVANCE_TABLE, executor=None) -> bool:
        """Select all rows newest first. Returns False if skipped or failed."""
        if self.loading:
            return False
        self.loading = True
        loop = asyncio.get_running_loop()
        try:
            rows = await loop.run_in_executor(executor, store.select, table, "created_at", False)
        except StoreReadError as e:
            logger.error("Error fetching grievances: %s", e)
            self.load_error = True
            return False
        finally:
            self.loading = False
        records = []
        for row in rows:
            try:
                records.append(GrievanceRecord(**row))
            except ValidationError as e:
                logger.warning("Skipping unreadable grievance %s: %s", row.get("id"), e)
        self.records = records
        self.load_error = False
        return True

    @property
    def filtered(self) -> List[GrievanceRecord]:
        return apply_filters(self.records, self.filters)

    @property
    def summary(self) -> Summary:
        return summarize(self.filtered)

    @property
    def has_active_filters(self) -> bool:
        return self.filters.has_active_filters

    def set_filters(self, **changes) -> None:
        self.filters = replace(self.filters, **changes)

    def clear_filters(self) -> None:
        self.filters = FilterState()

    def click_total(self) -> None:
        self.filters = self.filters.clear_urgency()

    def click_urgency(self, level: Urgency) -> None:
        self.filters = self.filters.toggle_urgency(level)

    def click_category(self, category: Category) -> None:
        self.filters = self.filters.toggle_category(category)
