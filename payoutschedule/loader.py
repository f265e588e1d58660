"""YAML plan file loader, validator and writer."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from . import constants
from .schema import EngineConfig, PayoutPlan, PlanFile

logger = logging.getLogger(__name__)


def find_plans_location() -> Optional[tuple[str, Path]]:
    """
    Locate plan storage (directory or file).

    Search order (highest to lowest priority):
    1. PAYOUTSCHEDULE_DIR environment variable → directory mode
    2. PAYOUTSCHEDULE_FILE environment variable → file mode
    3. plans/ directory in current directory → directory mode
    4. plans.yaml in current directory → file mode

    Returns:
        Tuple of ("dir", Path) or ("file", Path), or None if not found
    """
    if env_dir := os.getenv(constants.ENV_PLANS_DIR):
        path = Path(env_dir)
        if path.is_dir():
            return ("dir", path)
        logger.warning("%s points to non-existent directory: %s", constants.ENV_PLANS_DIR, env_dir)

    if env_file := os.getenv(constants.ENV_PLANS_FILE):
        path = Path(env_file)
        if path.is_file():
            return ("file", path)
        logger.warning("%s points to non-existent file: %s", constants.ENV_PLANS_FILE, env_file)

    cwd_dir = Path.cwd() / constants.DEFAULT_PLANS_DIR
    if cwd_dir.is_dir():
        return ("dir", cwd_dir)

    cwd_file = Path.cwd() / constants.DEFAULT_PLANS_FILE
    if cwd_file.is_file():
        return ("file", cwd_file)

    return None


def load_plan_from_file(filepath: Path) -> Optional[PayoutPlan]:
    """
    Load a single plan from an individual YAML file.

    Args:
        filepath: Path to individual plan YAML file

    Returns:
        PayoutPlan or None if file is invalid

    Note:
        Errors are logged but not raised - allows directory loading to continue
    """
    try:
        with filepath.open() as f:
            data = yaml.safe_load(f)

        if data is None:
            logger.warning("Empty plan file: %s", filepath)
            return None

        plan = PayoutPlan(**data).model_copy(update={"source_file": filepath})

        expected_filename = f"{plan.id}.yaml"
        if filepath.name != expected_filename:
            logger.error(
                "Failed to load plan from '%s':\n"
                "  Plan ID '%s' does not match filename.\n"
                "  Expected: '%s'\n"
                "  Fix: Rename file to '%s' or change 'id' field to '%s'",
                filepath,
                plan.id,
                expected_filename,
                expected_filename,
                filepath.stem,
            )
            return None

        return plan

    except yaml.YAMLError as e:
        logger.error("YAML parsing error in '%s': %s", filepath, e)
        return None
    except (ValueError, TypeError) as e:
        logger.error("Invalid plan data in '%s': %s", filepath, e)
        return None


def load_plans_from_directory(dirpath: Path) -> PlanFile:
    """
    Load all plans from a directory structure.

    Directory structure:
        plans/
        ├── _config.yaml     # Engine config (optional)
        ├── plan-id-1.yaml   # Individual plan files
        └── ...

    Args:
        dirpath: Path to plans directory

    Returns:
        PlanFile with all loaded plans
    """
    logger.info("Loading plans from directory: %s", dirpath)

    config_path = dirpath / constants.CONFIG_FILENAME
    config = EngineConfig()

    if config_path.is_file():
        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)

            if config_data is not None:
                config = EngineConfig(**config_data)
                logger.debug("Loaded engine config from: %s", config_path)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            logger.warning("Failed to load config from '%s', using defaults: %s", config_path, e)

    plans: list[PayoutPlan] = []
    seen_ids: set[Optional[str]] = set()

    for plan_path in sorted(dirpath.glob(constants.PLAN_FILE_PATTERN)):
        if plan_path.name == constants.CONFIG_FILENAME or plan_path.name.startswith("."):
            continue

        plan = load_plan_from_file(plan_path)
        if plan is None:
            continue

        if plan.id in seen_ids:
            logger.error("Duplicate plan ID '%s' in %s will be ignored", plan.id, plan_path)
            continue

        seen_ids.add(plan.id)
        plans.append(plan)

    logger.info("Loaded %d plans from directory: %s", len(plans), dirpath)
    return PlanFile(plans=plans, config=config)


def load_plans_file(filepath: Path) -> PlanFile:
    """
    Load and validate a single plans.yaml file.

    Raises:
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If schema validation fails
    """
    logger.info("Loading plans from: %s", filepath)

    try:
        with filepath.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("YAML parsing error in %s: %s", filepath, e)
        raise

    if data is None:
        logger.warning("Empty plans file: %s", filepath)
        return PlanFile()

    if data.get("plans") is None:
        data["plans"] = []

    plan_file = PlanFile(**data)
    plan_file.plans = [p.model_copy(update={"source_file": filepath}) for p in plan_file.plans]

    logger.info("Loaded %d plans", len(plan_file.plans))
    return plan_file


def load_plans_from_path(path: Optional[Path] = None) -> Optional[PlanFile]:
    """
    Load plans from a file or directory, auto-discovering when path is None.

    Returns:
        PlanFile, or None if nothing was found
    """
    if path is None:
        location = find_plans_location()
        if location is None:
            logger.info("No plans file or directory found")
            return None
        _, path = location

    if path.is_dir():
        return load_plans_from_directory(path)
    if path.is_file():
        return load_plans_file(path)
    return None


def plan_to_dict(plan: PayoutPlan) -> dict:
    """Serialize a plan to plain YAML-safe data."""
    return plan.model_dump(mode="json", exclude_none=True)


def save_plan(plan: PayoutPlan, path: Path) -> Path:
    """
    Write a plan to YAML.

    If path is a directory, the plan is written to ``<path>/<plan.id>.yaml``
    so it can be loaded back in directory mode.
    """
    if path.is_dir():
        if not plan.id:
            raise ValueError("plan needs an id to be saved into a directory")
        path = path / f"{plan.id}.yaml"

    with path.open("w") as f:
        yaml.safe_dump(plan_to_dict(plan), f, sort_keys=False)

    logger.info("Saved plan %s to %s", plan.id, path)
    return path
