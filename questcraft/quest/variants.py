"""Tagged variants for stage transition conditions and completion events.

Conditions gate a NextStageLink:
- HasItem: player carries an item
- HasClue: player has discovered a clue
- LocationVisited: player has been to a location
- NPCRelationship: relationship with an NPC is at least min_value
- SkillValue: a skill is at least min_value
- DialogueChoice: a dialogue option has been picked

Completion events fire when a stage or an objective completes:
- AddClue, AddItem: structured payloads
- ModifySkill, ModifyRelationship: (id, delta) pairs
- ChangeLocation, UnlockLocation: a location id
- CustomEvent: any other event type, payload kept as-is
"""

import copy
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterable, Optional, Union

from .identifiers import IdGenerator, unique_id


@dataclass
class _ConditionBase:
    """Shared accessors mapping variant fields onto the {target_id, value} shape."""
    condition_type: ClassVar[str] = ""

    @property
    def target_id(self) -> str:
        return getattr(self, fields(self)[0].name)

    @property
    def value(self) -> Optional[int]:
        own = fields(self)
        if len(own) < 2:
            return None
        return getattr(self, own[1].name)


@dataclass
class HasItem(_ConditionBase):
    item_id: str = ""
    condition_type: ClassVar[str] = "HasItem"


@dataclass
class HasClue(_ConditionBase):
    clue_id: str = ""
    condition_type: ClassVar[str] = "HasClue"


@dataclass
class LocationVisited(_ConditionBase):
    location_id: str = ""
    condition_type: ClassVar[str] = "LocationVisited"


@dataclass
class NPCRelationship(_ConditionBase):
    npc_id: str = ""
    min_value: int = 0
    condition_type: ClassVar[str] = "NPCRelationship"


@dataclass
class SkillValue(_ConditionBase):
    skill_id: str = ""
    min_value: int = 0
    condition_type: ClassVar[str] = "SkillValue"


@dataclass
class DialogueChoice(_ConditionBase):
    option_id: str = ""
    condition_type: ClassVar[str] = "DialogueChoice"


Condition = Union[HasItem, HasClue, LocationVisited, NPCRelationship, SkillValue, DialogueChoice]

CONDITION_TYPES = {
    cls.condition_type: cls
    for cls in (HasItem, HasClue, LocationVisited, NPCRelationship, SkillValue, DialogueChoice)
}


def make_condition(condition_type: str) -> Condition:
    """Build the zeroed default payload for a condition type.

    Raises:
        ValueError: If condition_type is not a known variant
    """
    cls = CONDITION_TYPES.get(condition_type)
    if cls is None:
        raise ValueError(f"Unknown condition type: {condition_type}")
    return cls()


def condition_from_fields(condition_type: str, target_id: Optional[str] = "", value: Optional[int] = None) -> Condition:
    """Build a condition from its flat {condition_type, target_id, value} fields."""
    condition = make_condition(condition_type)
    own = fields(condition)
    setattr(condition, own[0].name, target_id or "")
    if len(own) > 1 and value is not None:
        setattr(condition, own[1].name, int(value))
    return condition


@dataclass
class AddClue:
    id: str = ""
    description: str = ""
    related_quest: str = ""
    discovered: bool = False
    event_type: ClassVar[str] = "AddClue"

    @property
    def data(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "related_quest": self.related_quest,
            "discovered": self.discovered,
        }


@dataclass
class AddItem:
    id: str = ""
    name: str = ""
    description: str = ""
    effects: Dict[str, Any] = field(default_factory=dict)
    event_type: ClassVar[str] = "AddItem"

    @property
    def data(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "effects": copy.deepcopy(self.effects),
        }


@dataclass
class ModifySkill:
    skill_id: str = ""
    delta: int = 0
    event_type: ClassVar[str] = "ModifySkill"

    @property
    def data(self) -> list:
        return [self.skill_id, self.delta]


@dataclass
class ModifyRelationship:
    npc_id: str = ""
    delta: int = 0
    event_type: ClassVar[str] = "ModifyRelationship"

    @property
    def data(self) -> list:
        return [self.npc_id, self.delta]


@dataclass
class ChangeLocation:
    location_id: str = ""
    event_type: ClassVar[str] = "ChangeLocation"

    @property
    def data(self) -> str:
        return self.location_id


@dataclass
class UnlockLocation:
    location_id: str = ""
    event_type: ClassVar[str] = "UnlockLocation"

    @property
    def data(self) -> str:
        return self.location_id


@dataclass
class CustomEvent:
    """Any event type without a dedicated variant; the payload is opaque."""
    event_type: str
    payload: Any = ""

    @property
    def data(self) -> Any:
        return copy.deepcopy(self.payload)


CompletionEvent = Union[
    AddClue, AddItem, ModifySkill, ModifyRelationship, ChangeLocation, UnlockLocation, CustomEvent
]

EVENT_TYPES = {
    cls.event_type: cls
    for cls in (AddClue, AddItem, ModifySkill, ModifyRelationship, ChangeLocation, UnlockLocation)
}


def make_event(
    event_type: str,
    id_generator: Optional[IdGenerator] = None,
    existing_clue_ids: Iterable[str] = (),
) -> CompletionEvent:
    """Build a completion event of the given type with its default payload.

    Args:
        event_type: Variant name; unknown names produce a CustomEvent
        id_generator: Id source for generated clue ids
        existing_clue_ids: Clue ids already used in the quest

    Returns:
        New completion event
    """
    if event_type == "AddClue":
        clue_id = unique_id("clue", existing_clue_ids, id_generator)
        return AddClue(id=clue_id, description="New clue")

    cls = EVENT_TYPES.get(event_type)
    if cls is not None:
        return cls()

    return CustomEvent(event_type=event_type, payload="")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def event_from_tree(event_type: str, data: Any) -> CompletionEvent:
    """Parse an {event_type, data} payload into its variant.

    A known event type whose payload does not have the expected shape is kept
    as a CustomEvent so no data is dropped.
    """
    if event_type == "AddClue" and isinstance(data, dict):
        return AddClue(
            id=str(data.get("id") or ""),
            description=str(data.get("description") or ""),
            related_quest=str(data.get("related_quest") or ""),
            discovered=bool(data.get("discovered", False)),
        )

    elif event_type == "AddItem" and isinstance(data, dict):
        effects = data.get("effects") or {}
        if isinstance(effects, dict):
            return AddItem(
                id=str(data.get("id") or ""),
                name=str(data.get("name") or ""),
                description=str(data.get("description") or ""),
                effects=copy.deepcopy(effects),
            )

    elif event_type in ("ModifySkill", "ModifyRelationship") and isinstance(data, (list, tuple)):
        if len(data) == 2 and isinstance(data[0], str) and _is_int(data[1]):
            return EVENT_TYPES[event_type](data[0], data[1])

    elif event_type in ("ChangeLocation", "UnlockLocation") and isinstance(data, str):
        return EVENT_TYPES[event_type](data)

    return CustomEvent(event_type=event_type, payload=copy.deepcopy(data))
