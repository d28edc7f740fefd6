"""Session persistence.

Saves the household profile, loan terms, the property collection and sort
preferences to a single JSON file so a session can be resumed.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from homefit.core.exceptions import DataLoadError
from homefit.core.logging import get_logger
from homefit.core.settings import AppSettings, get_settings
from homefit.models.profile import FinancialProfile, LoanTerms
from homefit.models.property import PropertyRecord
from homefit.services.collection import PropertyCollection
from homefit.services.ranker import DEFAULT_SORT_KEY, SortDirection, ViewInputs

log = get_logger(__name__)


class SessionState(BaseModel):
    """Everything a user session owns."""

    profile: FinancialProfile = Field(default_factory=FinancialProfile)
    terms: LoanTerms = Field(default_factory=LoanTerms)
    records: list[PropertyRecord] = Field(default_factory=list)
    seeded_loaded: bool = False
    sort_by: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = "desc"

    def collection(self) -> PropertyCollection:
        return PropertyCollection(self.records)

    def view_inputs(self, **filters) -> ViewInputs:
        return ViewInputs(
            profile=self.profile,
            terms=self.terms,
            filters=filters,
            sort_by=self.sort_by,
            sort_direction=self.sort_direction,
        )

    def with_collection(self, collection: PropertyCollection) -> SessionState:
        return self.model_copy(update={"records": list(collection.snapshot())})


class SessionStore:
    """Reads and writes ``SessionState`` at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> SessionStore:
        settings = settings or get_settings()
        return cls(settings.state_file)

    def load(self) -> SessionState:
        """Stored state, or defaults when nothing was saved yet.

        Raises:
            DataLoadError: The file exists but cannot be parsed
        """
        if not self.path.exists():
            log.debug("session_state_missing", path=str(self.path))
            return SessionState()

        try:
            with open(self.path, encoding="utf-8") as f:
                payload = json.load(f)
            state = SessionState.model_validate(payload.get("state", payload))
        except (OSError, json.JSONDecodeError, AttributeError, ValidationError) as e:
            log.error("session_state_load_failed", path=str(self.path), error=str(e))
            raise DataLoadError(f"Corrupt session state {self.path}: {e}") from e

        log.info("session_state_loaded", path=str(self.path), records=len(state.records))
        return state

    def save(self, state: SessionState) -> Path:
        """Write ``state`` atomically: a temp file in the same directory is
        moved over the target so readers never see a partial file.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        body = state.model_dump(mode="json", exclude={"records"})
        # Unset record fields stay absent so a later seed merge can backfill them
        body["records"] = [r.model_dump(mode="json", exclude_unset=True) for r in state.records]
        payload = {"saved_at": datetime.now().isoformat(), "state": body}
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".homefit-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            log.error("session_state_save_failed", path=str(self.path), error=str(e))
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        log.info("session_state_saved", path=str(self.path), records=len(state.records))
        return self.path
