"""Quest content data models for questcraft.

This module defines the authoring-time structures: Quest, Stage, Objective,
NextStageLink and the reward set. A quest is a graph of stages; links point
at sibling stages by id.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Literal

from .variants import CompletionEvent, Condition

Importance = Literal["Main", "Side", "Misc"]
StageStatus = Literal["NotStarted", "InProgress", "Completed", "Failed"]

IMPORTANCE_LEVELS = ("Main", "Side", "Misc")
STAGE_STATUSES = ("NotStarted", "InProgress", "Completed", "Failed")

START_STAGE_ID = "start"


@dataclass
class NextStageLink:
    """Outgoing transition from a stage to the sibling stage `target`."""
    target: str
    condition: Optional[Condition] = None
    choice_description: Optional[str] = None


@dataclass
class Objective:
    """A task inside a stage; its own events fire when it completes."""
    id: str
    description: str = ""
    is_completed: bool = False
    is_optional: bool = False
    required_clues: List[str] = field(default_factory=list)
    required_items: List[str] = field(default_factory=list)
    required_location: Optional[str] = None
    required_npc_interaction: Optional[str] = None
    completion_events: List[CompletionEvent] = field(default_factory=list)


@dataclass
class Stage:
    """A node in a quest's progression graph."""
    id: str
    description: str = ""
    notification_text: str = ""
    status: StageStatus = "NotStarted"
    objectives: List[Objective] = field(default_factory=list)
    completion_events: List[CompletionEvent] = field(default_factory=list)
    next_stages: List[NextStageLink] = field(default_factory=list)

    def linked_targets(self) -> List[str]:
        """Ids of the stages this stage links to, in link order."""
        return [link.target for link in self.next_stages]


@dataclass
class ItemReward:
    """An item granted when the quest completes."""
    id: str
    name: str = ""
    description: str = ""
    effects: Dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class Rewards:
    """Rewards granted upon quest completion."""
    items: List[ItemReward] = field(default_factory=list)
    skill_rewards: Dict[str, int] = field(default_factory=dict)  # {"lockpicking": 2}, -10..10
    relationship_changes: Dict[str, int] = field(default_factory=dict)  # {"mara": 15}, -100..100
    experience: int = 0
    unlocked_locations: List[str] = field(default_factory=list)
    unlocked_dialogues: List[str] = field(default_factory=list)


@dataclass
class Quest:
    """A named graph of stages plus its reward set."""
    id: str
    title: str = ""
    description: str = ""
    short_description: str = ""
    importance: Importance = "Side"
    is_main_quest: bool = False
    is_hidden: bool = False
    related_npcs: List[str] = field(default_factory=list)
    related_locations: List[str] = field(default_factory=list)
    stages: List[Stage] = field(default_factory=list)
    rewards: Rewards = field(default_factory=Rewards)

    def stage_ids(self) -> List[str]:
        return [stage.id for stage in self.stages]

    def get_stage(self, stage_id: str) -> Optional[Stage]:
        """Get a stage by id, or None."""
        for stage in self.stages:
            if stage.id == stage_id:
                return stage
        return None


# quest id -> Quest, insertion ordered
QuestCollection = Dict[str, Quest]
