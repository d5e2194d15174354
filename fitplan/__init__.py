"""Rule-based weekly workout plan generator."""
from fitplan.models.profile import UserProfile
from fitplan.repositories.catalog_repository import ExerciseCatalog, load_catalog
from fitplan.services.plan_generator import generate

__version__ = "0.1.0"

__all__ = ["ExerciseCatalog", "UserProfile", "generate", "load_catalog"]
