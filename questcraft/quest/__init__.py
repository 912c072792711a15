"""Quest authoring core for questcraft."""

from .errors import ErrorKind, QuestEditError
from .identifiers import validate_identifier, CounterIdGenerator, UuidIdGenerator, unique_id
from .model import Quest, Stage, Objective, NextStageLink, ItemReward, Rewards
from .variants import make_condition, make_event, event_from_tree, CustomEvent
from .patches import UNSET, QuestPatch, RewardsPatch, StagePatch, ObjectivePatch, LinkPatch
from .graph import (
    create_quest, add_quest, rename_quest, delete_quest, update_quest_fields,
    add_stage, rename_stage, delete_stage, update_stage,
    add_objective, update_objective, delete_objective,
    add_completion_event, update_completion_event, delete_completion_event,
    add_next_stage_link, update_next_stage_link, delete_next_stage_link, set_condition,
)
from .resolver import distinct_npc_speakers, find_related_dialogue, HostCatalogs, RelatedDialogue
from .serializer import quest_to_tree, quest_to_json, quest_to_text, collection_to_text, collection_to_json
from .loader import load_quest_collection, parse_quest, parse_collection
from .validator import validate_schema, validate_quest_integrity
from .workspace import QuestWorkspace

__all__ = [
    'ErrorKind', 'QuestEditError',
    'validate_identifier', 'CounterIdGenerator', 'UuidIdGenerator', 'unique_id',
    'Quest', 'Stage', 'Objective', 'NextStageLink', 'ItemReward', 'Rewards',
    'make_condition', 'make_event', 'event_from_tree', 'CustomEvent',
    'UNSET', 'QuestPatch', 'RewardsPatch', 'StagePatch', 'ObjectivePatch', 'LinkPatch',
    'create_quest', 'add_quest', 'rename_quest', 'delete_quest', 'update_quest_fields',
    'add_stage', 'rename_stage', 'delete_stage', 'update_stage',
    'add_objective', 'update_objective', 'delete_objective',
    'add_completion_event', 'update_completion_event', 'delete_completion_event',
    'add_next_stage_link', 'update_next_stage_link', 'delete_next_stage_link', 'set_condition',
    'distinct_npc_speakers', 'find_related_dialogue', 'HostCatalogs', 'RelatedDialogue',
    'quest_to_tree', 'quest_to_json', 'quest_to_text', 'collection_to_text', 'collection_to_json',
    'load_quest_collection', 'parse_quest', 'parse_collection',
    'validate_schema', 'validate_quest_integrity',
    'QuestWorkspace',
]
