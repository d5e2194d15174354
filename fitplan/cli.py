"""
Command-line plan generation.

Usage examples:
    # Generate a plan from a JSON profile and print it as JSON
    python scripts/generate_plan.py profile.json

    # Human-readable summary, custom catalog
    python scripts/generate_plan.py profile.json --format text --catalog my_catalog.yaml

The profile file uses the same fields as the POST /api/v1/plans body.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError as PydanticValidationError

from fitplan.core.exceptions import DomainError
from fitplan.core.logging import configure_logging
from fitplan.models.plan import WeeklyPlan
from fitplan.repositories.catalog_repository import CatalogLoadError, load_catalog
from fitplan.schemas.plan import UserProfileRequest, WeeklyPlanResponse
from fitplan.services.plan_generator import generate


def render_text(plan: WeeklyPlan) -> str:
    lines = [plan.title, "=" * len(plan.title), plan.description, ""]
    if plan.warnings:
        lines.append("Warnings:")
        lines.extend(f"  ! {w}" for w in plan.warnings)
        lines.append("")
    for day in plan.days:
        lines.append(
            f"{day.title} (~{day.estimated_duration_minutes} min, ~{day.estimated_calories} kcal)"
        )
        for section, exercises in (("Warm-up", day.warmup), ("Main", day.main), ("Cool-down", day.cooldown)):
            lines.append(f"  {section}:")
            for ex in exercises:
                p = ex.prescription
                lines.append(f"    - {ex.name}: {p.sets} x {p.reps_display}, rest {p.rest_seconds}s")
        lines.append("")
    lines.append("Rest days: " + (", ".join(d.label for d in plan.rest_days) or "none"))
    if plan.substitution_notes:
        lines.append("")
        lines.append("Substitutions:")
        lines.extend(f"  * {n}" for n in plan.substitution_notes)
    lines.append("")
    lines.append("Tips:")
    lines.extend(f"  * {t}" for t in plan.coaching_tips)
    lines.append("")
    lines.append(plan.progression_note)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a one-week workout plan")
    parser.add_argument("profile", type=Path, help="Path to a JSON profile file")
    parser.add_argument("--catalog", type=Path, default=None, help="Exercise catalog YAML")
    parser.add_argument("--format", choices=("json", "text"), default="json")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    # stdout carries the plan only
    configure_logging(stream=sys.stderr)

    try:
        payload = json.loads(args.profile.read_text())
        profile = UserProfileRequest.model_validate(payload).to_profile()
        catalog = load_catalog(args.catalog)
        plan = generate(profile, catalog)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read profile: {e}", file=sys.stderr)
        return 2
    except PydanticValidationError as e:
        print(f"Invalid profile:\n{e}", file=sys.stderr)
        return 2
    except CatalogLoadError as e:
        print(f"Could not load catalog: {e}", file=sys.stderr)
        return 2
    except DomainError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1

    if args.format == "text":
        print(render_text(plan))
    else:
        print(WeeklyPlanResponse.from_plan(plan).model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
