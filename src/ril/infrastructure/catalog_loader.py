"""
Challenge collection loader.

Reads an ordered list of challenges from a YAML document:

    challenges:
      - id: 1
        category: Hooks & State
        difficulty: Expert
        title: ...
        description: ...

The bundled catalog lives in `ril/data/challenges.yaml`.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.error

from ril.domain.errors import CatalogError
from ril.domain.models import Category, Challenge, Difficulty

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "category", "difficulty", "title", "description")
TEXT_FIELDS = ("time_estimate", "real_world", "starter_code", "solution_code", "follow_up")
LIST_FIELDS = ("requirements", "key_points")


def load_catalog(path: Path | None = None) -> list[Challenge]:
    """
    Load the challenge collection.

    Args:
        path: YAML catalog file. Uses the bundled catalog when None.

    Raises:
        CatalogError: If the file is missing, unparsable or invalid.
    """
    if path is None:
        text = resources.files("ril.data").joinpath("challenges.yaml").read_text(encoding="utf-8")
        source = "bundled catalog"
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Could not read catalog {path}: {e}") from e
        source = str(path)

    challenges = parse_catalog(text)
    logger.debug(f"Loaded {len(challenges)} challenges from {source}")
    return challenges


def parse_catalog(text: str) -> list[Challenge]:
    try:
        data = yaml.safe_load(text)
    except yaml.error.YAMLError as e:
        raise CatalogError(f"Invalid catalog YAML: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("challenges"), list):
        raise CatalogError("Catalog must be a mapping with a 'challenges' list")

    challenges: list[Challenge] = []
    seen: set[int] = set()
    for index, entry in enumerate(data["challenges"]):
        challenge = _build_challenge(entry, index)
        if challenge.id in seen:
            raise CatalogError(f"Duplicate challenge id {challenge.id}")
        seen.add(challenge.id)
        challenges.append(challenge)
    return challenges


def _build_challenge(entry: Any, index: int) -> Challenge:
    if not isinstance(entry, dict):
        raise CatalogError(f"Challenge #{index} is not a mapping")

    missing = [f for f in REQUIRED_FIELDS if entry.get(f) in (None, "")]
    if missing:
        raise CatalogError(f"Challenge #{index} is missing {', '.join(missing)}")

    cid = entry["id"]
    if not isinstance(cid, int) or isinstance(cid, bool) or cid <= 0:
        raise CatalogError(f"Challenge #{index} has invalid id {cid!r}")

    try:
        category = Category(entry["category"])
    except ValueError:
        raise CatalogError(f"Challenge {cid} has unknown category {entry['category']!r}")
    try:
        difficulty = Difficulty(entry["difficulty"])
    except ValueError:
        raise CatalogError(f"Challenge {cid} has unknown difficulty {entry['difficulty']!r}")

    extras: dict[str, Any] = {}
    for f in TEXT_FIELDS:
        if entry.get(f) is not None:
            extras[f] = str(entry[f])
    for f in LIST_FIELDS:
        items = entry.get(f) or []
        if not isinstance(items, list):
            raise CatalogError(f"Challenge {cid}: '{f}' must be a list")
        extras[f] = tuple(str(i) for i in items)

    test_code = entry.get("test_code")
    return Challenge(
        id=cid,
        category=category,
        difficulty=difficulty,
        title=str(entry["title"]),
        description=str(entry["description"]),
        test_code=str(test_code) if test_code else None,
        **extras,
    )
