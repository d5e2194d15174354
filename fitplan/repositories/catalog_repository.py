"""Read-only, in-memory exercise catalog."""
from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml

from fitplan.models.catalog import ExerciseCatalogEntry
from fitplan.models.enums import (
    Equipment,
    ExerciseRole,
    ExperienceLevel,
    MovementTag,
    MuscleGroup,
)

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Raised when the catalog file cannot be read or contains invalid entries."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}


class ExerciseCatalog:
    """Immutable collection of catalog entries with lookup indices.

    Entries keep their source order, which is the tie-break order used by the
    filter engine. Indices are built once on construction; nothing mutates the
    catalog afterwards, so a single instance is shared across requests.
    """

    def __init__(self, entries: Iterable[ExerciseCatalogEntry]):
        self._entries: tuple[ExerciseCatalogEntry, ...] = tuple(entries)
        self._by_id: dict[str, ExerciseCatalogEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise CatalogLoadError(f"Duplicate exercise id '{entry.id}'", {"id": entry.id})
            self._by_id[entry.id] = entry
        self._position = {entry.id: i for i, entry in enumerate(self._entries)}
        by_role: dict[ExerciseRole, list[ExerciseCatalogEntry]] = {role: [] for role in ExerciseRole}
        for entry in self._entries:
            for role in entry.roles:
                by_role[role].append(entry)
        self._by_role = {role: tuple(items) for role, items in by_role.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ExerciseCatalogEntry]:
        return iter(self._entries)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def get(self, exercise_id: str) -> ExerciseCatalogEntry | None:
        return self._by_id.get(exercise_id)

    def position(self, exercise_id: str) -> int:
        return self._position[exercise_id]

    def for_role(self, role: ExerciseRole) -> tuple[ExerciseCatalogEntry, ...]:
        return self._by_role[role]

    def summary(self) -> dict[str, Any]:
        """Entry counts by role and primary muscle group."""
        return {
            "total": len(self._entries),
            "by_role": {role.value: len(self._by_role[role]) for role in ExerciseRole},
            "by_primary_muscle": dict(
                sorted(Counter(e.primary_muscle.value for e in self._entries).items())
            ),
        }


def _parse_entry(raw: dict[str, Any], index: int) -> ExerciseCatalogEntry:
    try:
        muscles = tuple(MuscleGroup(m) for m in raw["muscles"])
        if not muscles:
            raise ValueError("muscles must not be empty")
        roles = frozenset(ExerciseRole(r) for r in raw["roles"])
        if not roles:
            raise ValueError("roles must not be empty")
        return ExerciseCatalogEntry(
            id=str(raw["id"]),
            name=str(raw["name"]),
            equipment=frozenset(Equipment(e) for e in raw.get("equipment") or ["bodyweight"]),
            patterns=frozenset(MovementTag(p) for p in raw.get("patterns") or []),
            contraindications=frozenset(MovementTag(c) for c in raw.get("contraindications") or []),
            muscles=muscles,
            difficulty=ExperienceLevel(raw.get("difficulty", "beginner")),
            roles=roles,
        )
    except (KeyError, ValueError, TypeError) as e:
        raise CatalogLoadError(
            f"Invalid catalog entry at position {index}: {e}",
            details={"index": index, "id": raw.get("id") if isinstance(raw, dict) else None},
        ) from e


def parse_catalog(data: dict[str, Any]) -> ExerciseCatalog:
    """Build a catalog from parsed YAML data."""
    exercises = data.get("exercises") if isinstance(data, dict) else None
    if not exercises:
        raise CatalogLoadError("Catalog contains no exercises")
    return ExerciseCatalog(_parse_entry(raw, i) for i, raw in enumerate(exercises))


def load_catalog(path: Path | str | None = None) -> ExerciseCatalog:
    """Load the exercise catalog from a YAML file (the bundled one by default)."""
    if path is None:
        from fitplan.config.settings import get_settings

        path = get_settings().catalog_path
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogLoadError(f"Catalog file not found: {path}")
    except yaml.YAMLError as e:
        raise CatalogLoadError(f"Failed to parse catalog YAML: {e}", details={"file_path": str(path)})

    catalog = parse_catalog(data)
    logger.info("Loaded %d catalog exercises from %s", len(catalog), path)
    return catalog
