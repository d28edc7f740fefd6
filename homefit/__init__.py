"""
homefit - Home affordability and rental investment analytics

This package contains the financial analytics engine behind the property explorer.

Modules:
    - core: Finance formulas, market constants, settings, logging, formatting
    - models: Pydantic data models for profiles, loan terms, properties and metrics
    - services: Affordability solver, metrics engine, ranker, catalog and session store
"""

__version__ = "1.4.0"
