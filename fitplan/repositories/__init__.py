"""Repositories package."""
from fitplan.repositories.catalog_repository import (
    CatalogLoadError,
    ExerciseCatalog,
    load_catalog,
    parse_catalog,
)

__all__ = [
    "CatalogLoadError",
    "ExerciseCatalog",
    "load_catalog",
    "parse_catalog",
]
