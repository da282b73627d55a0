"""Seed profiles from a YAML file into an empty store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from profile_directory.directory.models import ProfileDraft
from profile_directory.directory.store import ProfileStore

logger = logging.getLogger(__name__)


def read_seed_file(seed_file: str | Path) -> List[ProfileDraft]:
    """
    Parse a YAML list of profile drafts.

    Args:
        seed_file: Path to a YAML file holding a list of profile mappings,
            or a mapping with a ``profiles`` key.

    Returns:
        Drafts in file order. Ids in the file are ignored.

    Raises:
        yaml.YAMLError: If the file is not valid YAML
        ValidationError: If an entry is not a valid profile
    """
    path = Path(seed_file)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        logger.warning(f"Empty seed file: {path}")
        return []
    if isinstance(data, dict):
        data = data.get("profiles") or []
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a list of profiles")

    drafts = []
    for entry in data:
        try:
            drafts.append(ProfileDraft.model_validate(entry))
        except ValidationError as e:
            logger.error(f"Validation error in {path}: {e}")
            raise
    return drafts


def seed_store(store: ProfileStore, seed_file: str | Path) -> int:
    """
    Load sample profiles when the store is empty.

    Returns:
        Number of profiles added; 0 when the store already had data or the
        file does not exist.
    """
    path = Path(seed_file)
    if not path.is_file():
        logger.warning(f"Seed file not found: {seed_file}")
        return 0

    if store.list():
        logger.debug("Store already holds profiles, skipping seed")
        return 0

    drafts = read_seed_file(path)
    for draft in drafts:
        store.add(draft)
    logger.info(f"Seeded {len(drafts)} profiles from {path}")
    return len(drafts)
