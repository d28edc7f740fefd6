"""Application services."""

from .affordability import AffordabilityChecker
from .catalog import build_catalog, load_catalog_csv, load_seed_catalog, save_seed_catalog
from .collection import MergeReport, PropertyCollection
from .metrics import PropertyMetricsEngine
from .ranker import PortfolioRanker, RankedProperty, RankedView, ViewFilters, ViewInputs
from .solver import AffordabilitySolver
from .store import SessionState, SessionStore

__all__ = [
    "AffordabilityChecker",
    "AffordabilitySolver",
    "MergeReport",
    "PortfolioRanker",
    "PropertyCollection",
    "PropertyMetricsEngine",
    "RankedProperty",
    "RankedView",
    "SessionState",
    "SessionStore",
    "ViewFilters",
    "ViewInputs",
    "build_catalog",
    "load_catalog_csv",
    "load_seed_catalog",
    "save_seed_catalog",
]
