"""Quest validation: schema compliance of structured trees and graph integrity.

Schema checks raise jsonschema.ValidationError; integrity checks return a
list of human-readable issues (empty if the quest is consistent).
"""

from typing import Any, Dict, List

import jsonschema

from .model import Quest
from .schema import QUEST_SCHEMA, QUEST_COLLECTION_SCHEMA


def validate_schema(tree: Dict[str, Any]) -> bool:
    """Validate a single quest tree against the quest schema."""
    jsonschema.validate(tree, QUEST_SCHEMA)
    return True


def validate_collection_schema(tree: Dict[str, Any]) -> bool:
    """Validate a quest-id -> quest tree mapping."""
    jsonschema.validate(tree, QUEST_COLLECTION_SCHEMA)
    return True


def schema_errors(tree: Dict[str, Any]) -> List[str]:
    """Every schema violation of a quest tree, as 'path: message' strings."""
    validator = jsonschema.Draft7Validator(QUEST_SCHEMA)
    errors = []
    for error in sorted(validator.iter_errors(tree), key=lambda e: list(e.path)):
        path = "/".join(str(p) for p in error.path) or "<root>"
        errors.append(f"{path}: {error.message}")
    return errors


def validate_quest_integrity(quest: Quest) -> List[str]:
    """Check the stage graph of a quest for structural problems.

    Args:
        quest: Quest to check

    Returns:
        List of issue messages (empty if valid)
    """
    issues = []

    if not quest.stages:
        issues.append(f"Quest {quest.id} has no stages")
        return issues

    seen = set()
    for stage in quest.stages:
        if stage.id in seen:
            issues.append(f"Quest {quest.id}: duplicate stage id '{stage.id}'")
        seen.add(stage.id)

    for stage in quest.stages:
        linked = set()
        for link in stage.next_stages:
            if link.target == stage.id:
                issues.append(f"Quest {quest.id}: stage '{stage.id}' links to itself")
            elif link.target not in seen:
                issues.append(f"Quest {quest.id}: stage '{stage.id}' links to missing stage '{link.target}'")
            if link.target in linked:
                issues.append(f"Quest {quest.id}: stage '{stage.id}' links to '{link.target}' more than once")
            linked.add(link.target)

    return issues
