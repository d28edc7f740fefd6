"""User-held property collection.

Records are keyed by zipcode, falling back to name for legacy entries. All
writes go through this class, which serializes them and bumps ``version`` so
the ranker can tell when its cached view is stale.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from homefit.core.exceptions import InvalidParameterError, UnknownPropertyError
from homefit.core.logging import get_logger
from homefit.models.property import PropertyRecord

log = get_logger(__name__)


@dataclass(frozen=True)
class MergeReport:
    """Outcome of merging a seed catalog into the collection."""
    added: int = 0
    backfilled: int = 0
    unchanged: int = 0


def backfill(existing: PropertyRecord, seed: PropertyRecord) -> PropertyRecord:
    """Fill fields ``existing`` never set from ``seed``, keeping user edits."""
    missing = {
        name: getattr(seed, name)
        for name in seed.model_fields_set
        if name not in existing.model_fields_set
    }
    if not missing:
        return existing
    merged = existing.model_copy(update=missing)
    merged.model_fields_set.update(missing)
    return merged


class PropertyCollection:
    """Ordered, deduplicated set of ``PropertyRecord`` entries."""

    def __init__(self, records: Iterable[PropertyRecord] = ()):
        self._lock = threading.RLock()
        self._records: dict[str, PropertyRecord] = {}
        self.version = 0
        for record in records:
            self._records.setdefault(record.key, record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PropertyRecord]:
        return iter(self.snapshot())

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def get(self, key: str) -> PropertyRecord | None:
        return self._records.get(key)

    def snapshot(self) -> tuple[PropertyRecord, ...]:
        """Consistent copy of the records, in insertion order."""
        with self._lock:
            return tuple(self._records.values())

    def _touch(self) -> None:
        self.version += 1

    # --- Edits ---

    def add(self, record: PropertyRecord) -> bool:
        """Add a user-entered record.

        Records need a city and a positive price; a missing name defaults to
        the city. Returns False when the record is rejected or its key is
        already present.
        """
        if not record.city or not record.is_usable:
            log.debug("property_rejected", key=record.key, city=record.city)
            return False
        if not record.name:
            record = record.model_copy(update={"name": record.city})
            record.model_fields_set.add("name")
        with self._lock:
            if record.key in self._records:
                return False
            self._records[record.key] = record
            self._touch()
        log.info("property_added", key=record.key)
        return True

    def update(self, key: str, **changes: Any) -> PropertyRecord:
        """Apply field changes to the record stored under ``key``.

        Raises:
            UnknownPropertyError: No record has that key
            InvalidParameterError: The change would move the record onto
                another record's key
        """
        with self._lock:
            current = self._records.get(key)
            if current is None:
                raise UnknownPropertyError(key)
            updated = PropertyRecord.model_validate({**current.model_dump(exclude_unset=True), **changes})
            if updated.key != key and updated.key in self._records:
                field = "zipcode" if "zipcode" in changes else "name"
                raise InvalidParameterError(field, updated.key, "already in the collection")
            # Keep the record's position even if its key changed
            self._records = {
                (updated.key if k == key else k): (updated if k == key else v)
                for k, v in self._records.items()
            }
            self._touch()
        log.info("property_updated", key=key, fields=sorted(changes))
        return updated

    def remove(self, key: str) -> bool:
        with self._lock:
            if self._records.pop(key, None) is None:
                return False
            self._touch()
        log.info("property_removed", key=key)
        return True

    def merge_seed(self, seed: Iterable[PropertyRecord]) -> MergeReport:
        """Merge a seed catalog; safe to repeat.

        New keys are appended. Known keys keep every field the user has set
        and only gain fields they never had.
        """
        added = backfilled = unchanged = 0
        with self._lock:
            for record in seed:
                if not record.key:
                    continue
                existing = self._records.get(record.key)
                if existing is None:
                    self._records[record.key] = record
                    added += 1
                    continue
                merged = backfill(existing, record)
                if merged is existing:
                    unchanged += 1
                else:
                    self._records[record.key] = merged
                    backfilled += 1
            if added or backfilled:
                self._touch()

        report = MergeReport(added=added, backfilled=backfilled, unchanged=unchanged)
        log.info("seed_catalog_merged", added=added, backfilled=backfilled, unchanged=unchanged)
        return report

    def clear_seeded(self, seed: Iterable[PropertyRecord]) -> int:
        """Remove every record whose key appears in ``seed``."""
        seeded_keys = {record.key for record in seed}
        with self._lock:
            before = len(self._records)
            self._records = {k: v for k, v in self._records.items() if k not in seeded_keys}
            removed = before - len(self._records)
            if removed:
                self._touch()
        log.info("seed_catalog_cleared", removed=removed)
        return removed

    # --- Facets ---

    def available_regions(self) -> list[str]:
        return sorted({r.region for r in self.snapshot() if r.region})

    def available_cities(self, region: str | None = None) -> list[str]:
        """Cities present, limited to ``region`` when one is given."""
        return sorted(
            {
                r.city
                for r in self.snapshot()
                if r.city and (not region or r.region == region)
            }
        )
