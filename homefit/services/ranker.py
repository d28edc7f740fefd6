"""Filter, annotate and rank the property collection.

A ranking pass runs cheapest filters first (proximity, region/city, text
search), computes metrics and affordability only for the survivors, applies
the affordability filter, then stable-sorts by the selected key.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Iterable, Literal

import pandas as pd
from pydantic import BaseModel, Field

from homefit.core.geo import Coordinate, CoordinateIndex, haversine_miles
from homefit.core.logging import get_logger
from homefit.models.affordability import AffordabilityResult
from homefit.models.metrics import MetricsBundle
from homefit.models.profile import FinancialProfile, LoanTerms
from homefit.models.property import PropertyRecord
from homefit.services.affordability import AffordabilityChecker
from homefit.services.collection import PropertyCollection
from homefit.services.metrics import PropertyMetricsEngine

log = get_logger(__name__)

SortDirection = Literal["asc", "desc"]

DEFAULT_SORT_KEY = "cap_rate"


class ViewFilters(BaseModel):
    """Optional narrowing of the collection."""

    region: str | None = None
    city: str | None = None
    search: str | None = None
    affordable_only: bool = False
    near_zipcode: str | None = None
    near_latitude: float | None = Field(None, ge=-90, le=90)
    near_longitude: float | None = Field(None, ge=-180, le=180)
    radius_miles: float | None = Field(None, gt=0)

    model_config = {"frozen": True}

    @property
    def uses_proximity(self) -> bool:
        return self.radius_miles is not None


class ViewInputs(BaseModel):
    """Atomic snapshot of everything a ranking pass depends on."""

    profile: FinancialProfile = Field(default_factory=FinancialProfile)
    terms: LoanTerms = Field(default_factory=LoanTerms)
    filters: ViewFilters = Field(default_factory=ViewFilters)
    sort_by: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = "desc"

    model_config = {"frozen": True}

    def cache_key(self) -> str:
        return hashlib.sha256(self.model_dump_json().encode("utf-8")).hexdigest()


class RankedProperty(BaseModel):
    """One record with its derived metrics for the active inputs."""

    record: PropertyRecord
    metrics: MetricsBundle
    affordability: AffordabilityResult
    distance_miles: float | None = None

    model_config = {"frozen": True}


class RankedView(BaseModel):
    """Ordered result of a ranking pass."""

    entries: list[RankedProperty] = Field(default_factory=list)
    total_records: int = 0
    affordable_count: int = 0
    sort_by: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = "desc"

    model_config = {"frozen": True}

    def __len__(self) -> int:
        return len(self.entries)


SORT_KEYS: dict[str, Callable[[RankedProperty], float | str]] = {
    "cap_rate": lambda e: e.metrics.cap_rate,
    "cash_on_cash": lambda e: e.metrics.cash_on_cash_return,
    "monthly_cash_flow": lambda e: e.metrics.monthly_cash_flow,
    "total_annual_return": lambda e: e.metrics.total_annual_return,
    "price": lambda e: e.record.median_price,
    "price_desc": lambda e: e.record.median_price,
    "net_gain_5yr": lambda e: e.metrics.net_gain_at(5),
    "net_gain_10yr": lambda e: e.metrics.net_gain_at(10),
    "appreciation": lambda e: e.metrics.appreciation_rate,
    "city": lambda e: e.record.city.casefold(),
}

# Keys whose direction does not follow the toggle
FIXED_DIRECTIONS: dict[str, SortDirection] = {
    "price_desc": "desc",
    "city": "asc",
}


def sort_entries(
    entries: Iterable[RankedProperty],
    sort_by: str,
    direction: SortDirection,
) -> list[RankedProperty]:
    """Stable sort; unknown keys sort by cap rate."""
    key = sort_by if sort_by in SORT_KEYS else DEFAULT_SORT_KEY
    direction = FIXED_DIRECTIONS.get(key, direction)
    return sorted(entries, key=SORT_KEYS[key], reverse=direction == "desc")


def matches_search(record: PropertyRecord, query: str) -> bool:
    """Case-insensitive substring match over name, city, zipcode and region."""
    haystack = " ".join([record.name, record.city, record.zipcode, record.region]).lower()
    return query in haystack


def toggle_sort(inputs: ViewInputs, sort_by: str) -> ViewInputs:
    """Same key flips direction; a new key starts descending."""
    if inputs.sort_by == sort_by:
        direction = "asc" if inputs.sort_direction == "desc" else "desc"
        return inputs.model_copy(update={"sort_direction": direction})
    return inputs.model_copy(update={"sort_by": sort_by, "sort_direction": "desc"})


def top_pick_by_cash_flow(view: RankedView) -> RankedProperty | None:
    """Highest monthly cash flow among entries that actually rent."""
    best = None
    for entry in view.entries:
        if entry.record.expected_rent <= 0:
            continue
        if best is None or entry.metrics.monthly_cash_flow > best.metrics.monthly_cash_flow:
            best = entry
    return best


class PortfolioRanker:
    """Produces ``RankedView`` objects for a collection and a set of inputs.

    Only the most recent view is retained, keyed by the inputs hash and the
    collection version.
    """

    def __init__(
        self,
        metrics_engine: PropertyMetricsEngine | None = None,
        checker: AffordabilityChecker | None = None,
        coordinates: CoordinateIndex | None = None,
    ):
        self.metrics_engine = metrics_engine or PropertyMetricsEngine()
        self.checker = checker or AffordabilityChecker()
        self.coordinates = coordinates or CoordinateIndex()
        self._cache_key: tuple[int, int, str] | None = None
        self._cache_view: RankedView | None = None

    def invalidate(self) -> None:
        self._cache_key = None
        self._cache_view = None

    def view(self, collection: PropertyCollection, inputs: ViewInputs) -> RankedView:
        """Cached ``recompute`` over the collection's current records."""
        key = (id(collection), collection.version, inputs.cache_key())
        if key == self._cache_key and self._cache_view is not None:
            return self._cache_view
        result = self.recompute(collection.snapshot(), inputs)
        self._cache_key = key
        self._cache_view = result
        return result

    def _reference_point(self, filters: ViewFilters) -> Coordinate | None:
        if filters.near_latitude is not None and filters.near_longitude is not None:
            return filters.near_latitude, filters.near_longitude
        return self.coordinates.lookup(filters.near_zipcode)

    def recompute(self, records: Iterable[PropertyRecord], inputs: ViewInputs) -> RankedView:
        """Run a full ranking pass from scratch."""
        records = list(records)
        filters = inputs.filters
        candidates = [r for r in records if r.is_usable]

        distances: dict[int, float] = {}
        if filters.uses_proximity:
            origin = self._reference_point(filters)
            if origin is None:
                log.info("proximity_reference_unresolved", zipcode=filters.near_zipcode)
                return RankedView(
                    total_records=len(records),
                    sort_by=inputs.sort_by,
                    sort_direction=inputs.sort_direction,
                )
            nearby = []
            for record in candidates:
                point = self.coordinates.resolve(record)
                if point is None:
                    continue
                distance = haversine_miles(origin, point)
                if distance <= filters.radius_miles:
                    distances[id(record)] = distance
                    nearby.append(record)
            candidates = nearby

        if filters.region:
            candidates = [r for r in candidates if r.region == filters.region]
        if filters.city:
            candidates = [r for r in candidates if r.city == filters.city]

        query = (filters.search or "").strip().lower()
        if query:
            candidates = [r for r in candidates if matches_search(r, query)]

        profile = inputs.profile
        entries = [
            RankedProperty(
                record=record,
                metrics=self.metrics_engine.compute(record, inputs.terms, profile.current_rent),
                affordability=self.checker.check(record, profile, inputs.terms),
                distance_miles=distances.get(id(record)),
            )
            for record in candidates
        ]

        if profile.has_financials:
            affordable_count = sum(1 for e in entries if e.affordability.affordable)
            if filters.affordable_only:
                entries = [e for e in entries if e.affordability.affordable]
        else:
            affordable_count = len(entries)

        entries = sort_entries(entries, inputs.sort_by, inputs.sort_direction)

        log.info(
            "ranked_view_computed",
            total=len(records),
            shown=len(entries),
            sort_by=inputs.sort_by,
            direction=inputs.sort_direction,
        )
        return RankedView(
            entries=entries,
            total_records=len(records),
            affordable_count=affordable_count,
            sort_by=inputs.sort_by,
            sort_direction=inputs.sort_direction,
        )


FRAME_COLUMNS = [
    "rank", "key", "name", "city", "region", "median_price", "expected_rent",
    "cap_rate", "cash_on_cash", "monthly_cash_flow", "total_annual_return",
    "net_gain_10yr", "cash_invested", "affordable", "distance_miles",
]


def view_to_frame(view: RankedView) -> pd.DataFrame:
    """Flatten a ranked view into one row per property."""
    rows = []
    for rank, entry in enumerate(view.entries, start=1):
        m = entry.metrics
        rows.append({
            "rank": rank,
            "key": entry.record.key,
            "name": entry.record.display_name,
            "city": entry.record.city,
            "region": entry.record.region,
            "median_price": entry.record.median_price,
            "expected_rent": entry.record.expected_rent,
            "cap_rate": m.cap_rate,
            "cash_on_cash": m.cash_on_cash_return,
            "monthly_cash_flow": m.monthly_cash_flow,
            "total_annual_return": m.total_annual_return,
            "net_gain_10yr": m.net_gain_at(10),
            "cash_invested": m.cash_invested,
            "affordable": entry.affordability.affordable,
            "distance_miles": entry.distance_miles,
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
