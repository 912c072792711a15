"""Quest export: structured tree / JSON and the line-oriented text form.

The structured tree is the canonical form: plain dicts and lists mirroring
the model, safe to pass through any JSON codec. The text form is emitted
directly from the model with fixed rules:

- string scalars are always double-quoted, embedded quotes escaped as \\";
  nothing else is escaped, so newlines stay verbatim inside the quotes
- booleans, numbers and null are bare
- empty sequences are [], others one "- " entry per element; the reward
  unlocked_locations / unlocked_dialogues lists are inline [a, b]
- mappings are "key: value" lines, or {} when empty, in mapping order
- event payloads dispatch on shape; a mapping payload degrades to a quoted,
  escaped JSON string
- the document starts with a --- separator line
"""

import json
from typing import Any, Dict, List, Optional

from config import get_json_indent
from .model import Quest, Stage, Objective, NextStageLink, ItemReward, Rewards, QuestCollection
from .variants import CompletionEvent, Condition

DOCUMENT_SEPARATOR = "---"
INDENT = "  "


# ---------------- Structured tree ----------------

def condition_to_tree(condition: Optional[Condition]) -> Optional[Dict[str, Any]]:
    if condition is None:
        return None
    return {
        "condition_type": condition.condition_type,
        "target_id": condition.target_id,
        "value": condition.value,
    }


def event_to_tree(event: CompletionEvent) -> Dict[str, Any]:
    return {"event_type": event.event_type, "data": event.data}


def _link_to_tree(link: NextStageLink) -> Dict[str, Any]:
    return {
        "stage_id": link.target,
        "condition": condition_to_tree(link.condition),
        "choice_description": link.choice_description,
    }


def _objective_to_tree(objective: Objective) -> Dict[str, Any]:
    return {
        "id": objective.id,
        "description": objective.description,
        "required_clues": list(objective.required_clues),
        "required_items": list(objective.required_items),
        "required_location": objective.required_location,
        "required_npc_interaction": objective.required_npc_interaction,
        "is_completed": objective.is_completed,
        "is_optional": objective.is_optional,
        "completion_events": [event_to_tree(e) for e in objective.completion_events],
    }


def _stage_to_tree(stage: Stage) -> Dict[str, Any]:
    return {
        "id": stage.id,
        "description": stage.description,
        "notification_text": stage.notification_text,
        "status": stage.status,
        "objectives": [_objective_to_tree(o) for o in stage.objectives],
        "completion_events": [event_to_tree(e) for e in stage.completion_events],
        "next_stages": [_link_to_tree(link) for link in stage.next_stages],
    }


def _item_to_tree(item: ItemReward) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.display_name,
        "description": item.description,
        "effects": json.loads(json.dumps(item.effects)),
    }


def _rewards_to_tree(rewards: Rewards) -> Dict[str, Any]:
    return {
        "items": [_item_to_tree(i) for i in rewards.items],
        "skill_rewards": dict(rewards.skill_rewards),
        "relationship_changes": dict(rewards.relationship_changes),
        "experience": rewards.experience,
        "unlocked_locations": list(rewards.unlocked_locations),
        "unlocked_dialogues": list(rewards.unlocked_dialogues),
    }


def quest_to_tree(quest: Quest) -> Dict[str, Any]:
    """Convert a quest and its whole graph into the structured tree form."""
    return {
        "id": quest.id,
        "title": quest.title,
        "description": quest.description,
        "short_description": quest.short_description,
        "importance": quest.importance,
        "is_hidden": quest.is_hidden,
        "is_main_quest": quest.is_main_quest,
        "related_npcs": list(quest.related_npcs),
        "related_locations": list(quest.related_locations),
        "stages": [_stage_to_tree(s) for s in quest.stages],
        "rewards": _rewards_to_tree(quest.rewards),
    }


def collection_to_tree(collection: QuestCollection) -> Dict[str, Any]:
    return {quest_id: quest_to_tree(quest) for quest_id, quest in collection.items()}


def quest_to_json(quest: Quest, indent: Optional[int] = None) -> str:
    """Structured tree as JSON text (indent defaults to QC_JSON_INDENT)."""
    if indent is None:
        indent = get_json_indent()
    return json.dumps(quest_to_tree(quest), indent=indent, ensure_ascii=False)


def collection_to_json(collection: QuestCollection, indent: Optional[int] = None) -> str:
    if indent is None:
        indent = get_json_indent()
    return json.dumps(collection_to_tree(collection), indent=indent, ensure_ascii=False)


# ---------------- Line-oriented text ----------------

def _quote(text: Any) -> str:
    return '"' + str(text).replace('"', '\\"') + '"'


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return _quote(value)


def _inline_array(values: List[Any]) -> str:
    if not values:
        return "[]"
    return "[" + ", ".join(format_event_data(v) for v in values) + "]"


def format_event_data(data: Any) -> str:
    """Render an event payload (or mapping value) as a single text token."""
    if data is None or isinstance(data, (str, bool, int, float)):
        return _scalar(data)
    if isinstance(data, (list, tuple)):
        return _inline_array(list(data))
    if isinstance(data, dict):
        if not data:
            return "{}"
        return _quote(json.dumps(data, separators=(",", ":"), ensure_ascii=False))
    return _quote(data)


def _indent(lines: List[str], depth: int = 1) -> List[str]:
    prefix = INDENT * depth
    return [prefix + line for line in lines]


def _block_list(key: str, entries: List[List[str]]) -> List[str]:
    """A key followed by one "- " entry per element, or "key: []"."""
    if not entries:
        return [f"{key}: []"]
    lines = [f"{key}:"]
    for entry in entries:
        for i, line in enumerate(entry):
            lines.append(INDENT + ("- " if i == 0 else INDENT) + line)
    return lines


def _string_list(key: str, values: List[str]) -> List[str]:
    return _block_list(key, [[_quote(v)] for v in values])


def _mapping(key: str, mapping: Dict[str, Any]) -> List[str]:
    if not mapping:
        return [f"{key}: {{}}"]
    return [f"{key}:"] + [f"{INDENT}{k}: {format_event_data(v)}" for k, v in mapping.items()]


def _event_lines(event: CompletionEvent) -> List[str]:
    return [
        f"event_type: {_quote(event.event_type)}",
        f"data: {format_event_data(event.data)}",
    ]


def _condition_lines(condition: Optional[Condition]) -> List[str]:
    if condition is None:
        return ["condition: null"]
    return ["condition:"] + _indent([
        f"condition_type: {_quote(condition.condition_type)}",
        f"target_id: {_quote(condition.target_id or '')}",
        f"value: {_scalar(condition.value)}",
    ])


def _link_lines(link: NextStageLink) -> List[str]:
    choice = link.choice_description
    return (
        [f"stage_id: {_quote(link.target)}"]
        + _condition_lines(link.condition)
        + [f"choice_description: {_quote(choice) if choice else 'null'}"]
    )


def _objective_lines(objective: Objective) -> List[str]:
    lines = [
        f"id: {_quote(objective.id)}",
        f"description: {_quote(objective.description)}",
    ]
    lines += _string_list("required_clues", objective.required_clues)
    lines += _string_list("required_items", objective.required_items)
    location = objective.required_location
    npc = objective.required_npc_interaction
    lines.append(f"required_location: {_quote(location) if location else 'null'}")
    lines.append(f"required_npc_interaction: {_quote(npc) if npc else 'null'}")
    lines.append(f"is_completed: {_scalar(objective.is_completed)}")
    lines.append(f"is_optional: {_scalar(objective.is_optional)}")
    lines += _block_list("completion_events", [_event_lines(e) for e in objective.completion_events])
    return lines


def _stage_lines(stage: Stage) -> List[str]:
    lines = [
        f"id: {_quote(stage.id)}",
        f"description: {_quote(stage.description)}",
        f"notification_text: {_quote(stage.notification_text)}",
        f"status: {_quote(stage.status)}",
    ]
    lines += _block_list("objectives", [_objective_lines(o) for o in stage.objectives])
    lines += _block_list("completion_events", [_event_lines(e) for e in stage.completion_events])
    lines += _block_list("next_stages", [_link_lines(link) for link in stage.next_stages])
    return lines


def _item_lines(item: ItemReward) -> List[str]:
    return [
        f"id: {_quote(item.id)}",
        f"name: {_quote(item.display_name)}",
        f"description: {_quote(item.description)}",
    ] + _mapping("effects", item.effects)


def _rewards_lines(rewards: Rewards) -> List[str]:
    lines = _block_list("items", [_item_lines(i) for i in rewards.items])
    lines += _mapping("skill_rewards", rewards.skill_rewards)
    lines += _mapping("relationship_changes", rewards.relationship_changes)
    lines.append(f"experience: {_scalar(rewards.experience or 0)}")
    lines.append(f"unlocked_locations: {_inline_array(rewards.unlocked_locations)}")
    lines.append(f"unlocked_dialogues: {_inline_array(rewards.unlocked_dialogues)}")
    return lines


def _quest_lines(quest: Quest) -> List[str]:
    lines = [
        f"id: {_quote(quest.id)}",
        f"title: {_quote(quest.title)}",
        f"description: {_quote(quest.description)}",
        f"short_description: {_quote(quest.short_description)}",
        f"importance: {_quote(quest.importance or 'Side')}",
        f"is_hidden: {_scalar(quest.is_hidden)}",
        f"is_main_quest: {_scalar(quest.is_main_quest)}",
    ]
    lines += _string_list("related_npcs", quest.related_npcs)
    lines += _string_list("related_locations", quest.related_locations)
    lines += _block_list("stages", [_stage_lines(s) for s in quest.stages])
    lines += ["rewards:"] + _indent(_rewards_lines(quest.rewards))
    return lines


def quest_to_text(quest: Quest) -> str:
    """Render one quest in the line-oriented text form."""
    return "\n".join([DOCUMENT_SEPARATOR] + _quest_lines(quest)) + "\n"


def collection_to_text(collection: QuestCollection) -> str:
    """Render every quest under a quests: root, keyed by collection key."""
    if not collection:
        return "quests: {}\n"
    lines = ["quests:"]
    for quest_id, quest in collection.items():
        lines.append(f"{INDENT}{quest_id}:")
        lines += _indent(_quest_lines(quest), 2)
    return "\n".join(lines) + "\n"
