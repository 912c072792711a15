"""JSON schema definitions for the structured quest tree.

Optional fields may be omitted (the loader fills defaults); fields that are
present must have the right type.
"""

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_INT_MAP = {"type": "object", "additionalProperties": {"type": "integer"}}

EVENT_SCHEMA = {
    "type": "object",
    "required": ["event_type"],
    "properties": {
        "event_type": {"type": "string", "minLength": 1},
        "data": {},  # shape depends on event_type, unknown types are opaque
    },
}

CONDITION_SCHEMA = {
    "type": ["object", "null"],
    "required": ["condition_type"],
    "properties": {
        "condition_type": {
            "type": "string",
            "enum": ["HasItem", "HasClue", "LocationVisited", "NPCRelationship", "SkillValue", "DialogueChoice"],
        },
        "target_id": {"type": ["string", "null"]},
        "value": {"type": ["integer", "null"]},
    },
}

OBJECTIVE_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string"},
        "description": {"type": "string"},
        "required_clues": _STRING_LIST,
        "required_items": _STRING_LIST,
        "required_location": {"type": ["string", "null"]},
        "required_npc_interaction": {"type": ["string", "null"]},
        "is_completed": {"type": "boolean"},
        "is_optional": {"type": "boolean"},
        "completion_events": {"type": "array", "items": EVENT_SCHEMA},
    },
}

STAGE_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "notification_text": {"type": "string"},
        "status": {"type": "string", "enum": ["NotStarted", "InProgress", "Completed", "Failed"]},
        "objectives": {"type": "array", "items": OBJECTIVE_SCHEMA},
        "completion_events": {"type": "array", "items": EVENT_SCHEMA},
        "next_stages": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["stage_id"],
                "properties": {
                    "stage_id": {"type": "string"},
                    "condition": CONDITION_SCHEMA,
                    "choice_description": {"type": ["string", "null"]},
                },
            },
        },
    },
}

REWARDS_SCHEMA = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "effects": {"type": "object"},
                },
            },
        },
        "skill_rewards": _INT_MAP,
        "relationship_changes": _INT_MAP,
        "experience": {"type": "integer"},
        "unlocked_locations": _STRING_LIST,
        "unlocked_dialogues": _STRING_LIST,
    },
}

QUEST_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "title": {"type": "string"},
        "description": {"type": "string"},
        "short_description": {"type": "string"},
        "importance": {"type": "string", "enum": ["Main", "Side", "Misc"]},
        "is_hidden": {"type": "boolean"},
        "is_main_quest": {"type": "boolean"},
        "related_npcs": _STRING_LIST,
        "related_locations": _STRING_LIST,
        "stages": {"type": "array", "minItems": 1, "items": STAGE_SCHEMA},
        "rewards": REWARDS_SCHEMA,
    },
}

QUEST_COLLECTION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": {k: v for k, v in QUEST_SCHEMA.items() if k != "$schema"},
}
