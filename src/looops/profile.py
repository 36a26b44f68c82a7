"""User prototype and directional document, stored in profile.yaml."""

from __future__ import annotations

import logging
from typing import Optional

import yaml
from pydantic import ValidationError

from .config import PROFILE_PATH, ensure_data_dirs
from .models import DirectionalDocument, UserPrototype

logger = logging.getLogger(__name__)

PROTOTYPE_SECTION = "prototype"
DIRECTIONS_SECTION = "directional_document"


def _read_profile() -> dict:
    """Read the raw profile YAML. Missing or unreadable files read as empty."""
    ensure_data_dirs()
    if not PROFILE_PATH.exists():
        return {}
    try:
        with open(PROFILE_PATH, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except Exception as e:
        logger.warning("Failed to read profile, treating as empty: %s", e)
        return {}


def _write_section(section: str, value: dict) -> None:
    profile = _read_profile()
    profile[section] = value
    PROFILE_PATH.write_text(
        yaml.safe_dump(profile, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )


def get_prototype() -> Optional[UserPrototype]:
    """The stored user prototype, or None if unset or malformed."""
    data = _read_profile().get(PROTOTYPE_SECTION)
    if not data:
        return None
    try:
        return UserPrototype.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring malformed prototype in profile: %s", e)
        return None


def save_prototype(prototype: UserPrototype) -> UserPrototype:
    _write_section(PROTOTYPE_SECTION, prototype.model_dump(mode="json"))
    logger.info("Saved user prototype")
    return prototype


def get_directional_document() -> Optional[DirectionalDocument]:
    """The stored directional document, or None if unset or malformed."""
    data = _read_profile().get(DIRECTIONS_SECTION)
    if not data:
        return None
    try:
        return DirectionalDocument.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring malformed directional document in profile: %s", e)
        return None


def save_directional_document(doc: DirectionalDocument) -> DirectionalDocument:
    _write_section(DIRECTIONS_SECTION, doc.model_dump(mode="json"))
    logger.info("Saved directional document (status=%s)", doc.status.value)
    return doc
