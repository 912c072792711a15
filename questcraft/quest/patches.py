"""Partial-update structures for quest entities.

Every patch field defaults to UNSET, meaning "leave unchanged". Any other
value, including None or an empty list, replaces the field. Rewards can be
patched field by field through a nested RewardsPatch so that changing, say,
the experience never touches the item list.
"""

import copy
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .model import Importance, Rewards, StageStatus, Objective, NextStageLink, ItemReward
from .variants import CompletionEvent, Condition


class _Sentinel(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Sentinel.UNSET


@dataclass
class RewardsPatch:
    items: Union[List[ItemReward], _Sentinel] = UNSET
    skill_rewards: Union[Dict[str, int], _Sentinel] = UNSET
    relationship_changes: Union[Dict[str, int], _Sentinel] = UNSET
    experience: Union[int, _Sentinel] = UNSET
    unlocked_locations: Union[List[str], _Sentinel] = UNSET
    unlocked_dialogues: Union[List[str], _Sentinel] = UNSET


@dataclass
class QuestPatch:
    title: Union[str, _Sentinel] = UNSET
    description: Union[str, _Sentinel] = UNSET
    short_description: Union[str, _Sentinel] = UNSET
    importance: Union[Importance, _Sentinel] = UNSET
    is_main_quest: Union[bool, _Sentinel] = UNSET
    is_hidden: Union[bool, _Sentinel] = UNSET
    related_npcs: Union[List[str], _Sentinel] = UNSET
    related_locations: Union[List[str], _Sentinel] = UNSET
    # RewardsPatch merges, a Rewards instance replaces the whole set
    rewards: Union[RewardsPatch, Rewards, _Sentinel] = UNSET


@dataclass
class StagePatch:
    description: Union[str, _Sentinel] = UNSET
    notification_text: Union[str, _Sentinel] = UNSET
    status: Union[StageStatus, _Sentinel] = UNSET
    objectives: Union[List[Objective], _Sentinel] = UNSET
    completion_events: Union[List[CompletionEvent], _Sentinel] = UNSET
    next_stages: Union[List[NextStageLink], _Sentinel] = UNSET


@dataclass
class ObjectivePatch:
    id: Union[str, _Sentinel] = UNSET
    description: Union[str, _Sentinel] = UNSET
    is_completed: Union[bool, _Sentinel] = UNSET
    is_optional: Union[bool, _Sentinel] = UNSET
    required_clues: Union[List[str], _Sentinel] = UNSET
    required_items: Union[List[str], _Sentinel] = UNSET
    required_location: Union[Optional[str], _Sentinel] = UNSET
    required_npc_interaction: Union[Optional[str], _Sentinel] = UNSET
    completion_events: Union[List[CompletionEvent], _Sentinel] = UNSET


@dataclass
class LinkPatch:
    target: Union[str, _Sentinel] = UNSET
    condition: Union[Optional[Condition], _Sentinel] = UNSET
    choice_description: Union[Optional[str], _Sentinel] = UNSET


def changed_fields(patch: Any) -> Dict[str, Any]:
    """Fields of a patch that are set, in declaration order."""
    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not UNSET
    }


def apply_patch(target: Any, patch: Any) -> Any:
    """Return a copy of target with the patch's set fields applied.

    Values are deep-copied so the result never shares mutable state with the
    patch. A nested RewardsPatch is merged into the existing reward set.
    """
    changes = {}
    for name, value in changed_fields(patch).items():
        if isinstance(value, RewardsPatch):
            changes[name] = apply_patch(getattr(target, name), value)
        else:
            changes[name] = copy.deepcopy(value)
    return replace(copy.deepcopy(target), **changes)
