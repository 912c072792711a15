"""Read-only queries across quests, the dialogue corpus and host catalogs.

The dialogue corpus is a mapping of node id -> node dict. A node may carry a
"speaker", a "text" and a list of "options"; each option may carry a "text"
and a list of "consequences" shaped {"event_type": ..., "data": ...}.
None of these functions mutate their inputs.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from .model import Quest, QuestCollection

DialogueCorpus = Mapping[str, Mapping[str, Any]]

# Effects whose payload is the quest id itself
_QUEST_ID_EFFECTS = ("StartQuest", "FailQuest")
# Effects whose payload is a (quest_id, ...) sequence
_QUEST_TUPLE_EFFECTS = ("AdvanceQuest", "CompleteQuestObjective")


@dataclass(frozen=True)
class RelatedDialogue:
    """A dialogue option whose consequences reference a quest."""
    node_id: str
    node_text: str
    speaker: str
    option_text: str


@dataclass(frozen=True)
class HostCatalogs:
    """Read-only enumerations supplied by the host."""
    skills: Sequence[str] = ()
    items: Sequence[str] = ()
    locations: Sequence[str] = ()


def distinct_npc_speakers(dialogue: DialogueCorpus) -> List[str]:
    """Collect every non-blank speaker in the corpus, deduplicated and sorted."""
    speakers = set()
    for node in dialogue.values():
        speaker = node.get("speaker")
        if isinstance(speaker, str) and speaker.strip():
            speakers.add(speaker)
    return sorted(speakers)


def _references_quest(effect: Mapping[str, Any], quest_id: str) -> bool:
    event_type = effect.get("event_type")
    data = effect.get("data")

    if event_type in _QUEST_ID_EFFECTS:
        return data == quest_id

    if event_type in _QUEST_TUPLE_EFFECTS:
        return isinstance(data, (list, tuple)) and len(data) > 0 and data[0] == quest_id

    return False


def find_related_dialogue(dialogue: DialogueCorpus, quest_id: str) -> List[RelatedDialogue]:
    """Find dialogue options that start, advance, complete or fail a quest.

    Args:
        dialogue: Dialogue corpus (node id -> node)
        quest_id: Quest to look for

    Returns:
        One entry per matching option, in corpus order
    """
    if not quest_id:
        return []

    related = []
    for node_id, node in dialogue.items():
        for option in node.get("options") or []:
            consequences = option.get("consequences") or []
            if any(_references_quest(effect, quest_id) for effect in consequences):
                related.append(RelatedDialogue(
                    node_id=node_id,
                    node_text=node.get("text") or "",
                    speaker=node.get("speaker") or "",
                    option_text=option.get("text") or "",
                ))
    return related


def filter_quests(collection: QuestCollection, term: str) -> QuestCollection:
    """Quests whose id, title or description contains term (case-insensitive)."""
    if not term or not term.strip():
        return dict(collection)

    needle = term.lower()
    return {
        quest_id: quest
        for quest_id, quest in collection.items()
        if needle in quest.id.lower()
        or needle in quest.title.lower()
        or needle in quest.description.lower()
    }


def stage_summaries(quest: Quest) -> List[Dict[str, str]]:
    """{id, description} for every stage, e.g. to fill a target-stage selector."""
    return [{"id": stage.id, "description": stage.description} for stage in quest.stages]


def objective_summaries(quest: Quest, stage_id: str) -> List[Dict[str, str]]:
    """{id, description} for every objective of a stage; [] if the stage is missing."""
    stage = quest.get_stage(stage_id)
    if stage is None:
        return []
    return [{"id": obj.id, "description": obj.description} for obj in stage.objectives]


def selector_options(kind: str, dialogue: DialogueCorpus, catalogs: HostCatalogs) -> List[str]:
    """Options for an id selector of the given kind.

    Args:
        kind: One of "npc", "skill", "item", "location"
        dialogue: Dialogue corpus, source of NPC ids
        catalogs: Host-supplied skill/item/location catalogs

    Raises:
        ValueError: For an unknown kind
    """
    if kind == "npc":
        return distinct_npc_speakers(dialogue)
    elif kind == "skill":
        return list(catalogs.skills)
    elif kind == "item":
        return list(catalogs.items)
    elif kind == "location":
        return list(catalogs.locations)
    raise ValueError(f"Unknown selector kind: {kind}")
