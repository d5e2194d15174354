"""Plan generation pipeline stages."""
from fitplan.services.plan_generator import generate, validate_profile

__all__ = ["generate", "validate_profile"]
