"""Application configuration module.

This module organizes configuration into specialized files:

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Catalog and rule-table file paths, logging level, slow-generation threshold
  - Loaded from environment (FITPLAN_ prefix) or a .env file via pydantic-settings

- **generation_config.yaml**: Rule tables for plan generation
  - Prescription bands, split lookup, weekday schedules, day templates
  - Time budget, compound ratios, calorie factors
  - Loaded and exhaustively validated by GenerationConfigLoader

- **safety_rules.py**: Safety rule tables with rationale
  - Keyword dictionaries mapping free text to closed injury/condition/medication tags
  - Per-tag exclusions, RPE caps, clearance flags and warnings
"""
from fitplan.config.settings import Settings, get_settings

# Generation config loader (lazy import to avoid circular dependencies)
# Use: from fitplan.config.generation_config_loader import get_generation_config
