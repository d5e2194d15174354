"""Shared fixtures for the plan generator tests."""
import logging
from datetime import datetime

import pytest
import structlog
import yaml

from fitplan.config.generation_config_loader import GenerationConfigLoader, get_generation_config
from fitplan.config.settings import get_settings
from fitplan.models.enums import Equipment, ExperienceLevel, Gender, Goal
from fitplan.models.profile import UserProfile
from fitplan.repositories.catalog_repository import load_catalog

FULL_GYM = frozenset(Equipment)
FIXED_TIME = datetime(2024, 1, 1, 8, 0, 0)


@pytest.fixture(scope="session")
def catalog():
    """The bundled exercise catalog."""
    return load_catalog()


@pytest.fixture(scope="session")
def generation_config():
    """The bundled, validated rule tables."""
    return get_generation_config()


@pytest.fixture
def raw_generation_config():
    """Fresh parsed YAML of the bundled rule tables, safe to mutate."""
    with open(get_settings().generation_config_path) as f:
        return yaml.safe_load(f)


@pytest.fixture
def reset_config_loader():
    """Drop the loader singleton before and after a test that replaces it."""
    GenerationConfigLoader.reset()
    yield
    GenerationConfigLoader.reset()


@pytest.fixture
def make_profile():
    """Factory for profiles; defaults to a healthy intermediate with a full gym."""

    def _make(**overrides) -> UserProfile:
        fields = dict(
            age=30,
            gender=Gender.FEMALE,
            height_cm=168,
            weight_kg=65,
            goal=Goal.MUSCLE_GAIN,
            experience=ExperienceLevel.INTERMEDIATE,
            sessions_per_week=3,
            session_duration_minutes=60,
            equipment=FULL_GYM,
        )
        fields.update(overrides)
        return UserProfile(**fields)

    return _make


@pytest.fixture
def restore_logging():
    """Undo configure_logging() so later tests do not write to a closed capture stream."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
