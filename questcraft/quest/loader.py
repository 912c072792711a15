"""Quest loader from structured trees and JSON files.

This module turns structured quest trees (the canonical export form) back
into Quest objects. Absent optional fields take their documented defaults.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from config import get_validate_on_load
from .model import Quest, Stage, Objective, NextStageLink, ItemReward, Rewards, QuestCollection
from .validator import validate_collection_schema, validate_quest_integrity
from .variants import condition_from_fields, event_from_tree


def load_quest_collection(collection_file_path: str) -> QuestCollection:
    """Load a quest collection (quest id -> quest tree) from a JSON file.

    Args:
        collection_file_path: Path to the JSON file

    Returns:
        Quest collection in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is invalid or not an object
        jsonschema.ValidationError: If schema validation is on and fails
    """
    collection_path = Path(collection_file_path)
    if not collection_path.exists():
        raise FileNotFoundError(f"Quest file not found: {collection_file_path}")

    try:
        with open(collection_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in quest file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Quest file must contain an object mapping quest ids to quests")

    if get_validate_on_load():
        validate_collection_schema(data)

    collection = parse_collection(data)
    logging.info(f"Loaded {len(collection)} quests from {collection_path}")
    return collection


def parse_collection(data: Dict[str, Any]) -> QuestCollection:
    """Parse a quest id -> quest tree mapping.

    The collection key is authoritative: a quest tree whose inner id differs
    from its key is re-keyed to match.
    """
    collection = {}
    for quest_id, quest_data in data.items():
        quest = parse_quest(quest_data)
        if quest.id != quest_id:
            logging.warning(f"Quest key '{quest_id}' differs from its id '{quest.id}', using the key")
            quest.id = quest_id
        for issue in validate_quest_integrity(quest):
            logging.warning(issue)
        collection[quest_id] = quest
    return collection


def parse_quest(quest_data: Dict[str, Any]) -> Quest:
    """Parse a single quest from its structured tree."""
    return Quest(
        id=quest_data.get('id', ''),
        title=quest_data.get('title') or '',
        description=quest_data.get('description') or '',
        short_description=quest_data.get('short_description') or '',
        importance=quest_data.get('importance') or 'Side',
        is_main_quest=bool(quest_data.get('is_main_quest', False)),
        is_hidden=bool(quest_data.get('is_hidden', False)),
        related_npcs=list(quest_data.get('related_npcs') or []),
        related_locations=list(quest_data.get('related_locations') or []),
        stages=[_parse_stage(s) for s in quest_data.get('stages') or []],
        rewards=_parse_rewards(quest_data.get('rewards') or {}),
    )


def _parse_stage(stage_data: Dict[str, Any]) -> Stage:
    return Stage(
        id=stage_data.get('id', ''),
        description=stage_data.get('description') or '',
        notification_text=stage_data.get('notification_text') or '',
        status=stage_data.get('status') or 'NotStarted',
        objectives=[_parse_objective(o) for o in stage_data.get('objectives') or []],
        completion_events=[_parse_event(e) for e in stage_data.get('completion_events') or []],
        next_stages=[_parse_link(link) for link in stage_data.get('next_stages') or []],
    )


def _parse_objective(objective_data: Dict[str, Any]) -> Objective:
    return Objective(
        id=objective_data.get('id', ''),
        description=objective_data.get('description') or '',
        is_completed=bool(objective_data.get('is_completed', False)),
        is_optional=bool(objective_data.get('is_optional', False)),
        required_clues=list(objective_data.get('required_clues') or []),
        required_items=list(objective_data.get('required_items') or []),
        required_location=objective_data.get('required_location') or None,
        required_npc_interaction=objective_data.get('required_npc_interaction') or None,
        completion_events=[_parse_event(e) for e in objective_data.get('completion_events') or []],
    )


def _parse_link(link_data: Dict[str, Any]) -> NextStageLink:
    condition = None
    condition_data = link_data.get('condition')
    if condition_data:
        condition = condition_from_fields(
            condition_data.get('condition_type'),
            condition_data.get('target_id'),
            condition_data.get('value'),
        )
    return NextStageLink(
        target=link_data.get('stage_id', ''),
        condition=condition,
        choice_description=link_data.get('choice_description'),
    )


def _parse_event(event_data: Dict[str, Any]):
    return event_from_tree(event_data.get('event_type', ''), event_data.get('data'))


def _parse_rewards(reward_data: Dict[str, Any]) -> Rewards:
    items = [
        ItemReward(
            id=item.get('id', ''),
            name=item.get('name') or '',
            description=item.get('description') or '',
            effects=dict(item.get('effects') or {}),
        )
        for item in reward_data.get('items') or []
    ]
    return Rewards(
        items=items,
        skill_rewards=dict(reward_data.get('skill_rewards') or {}),
        relationship_changes=dict(reward_data.get('relationship_changes') or {}),
        experience=int(reward_data.get('experience') or 0),
        unlocked_locations=list(reward_data.get('unlocked_locations') or []),
        unlocked_dialogues=list(reward_data.get('unlocked_dialogues') or []),
    )
