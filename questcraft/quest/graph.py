"""Structural edits on quests and quest collections.

Every operation is a pure transform: the inputs are never modified and a new
quest / stage / collection is returned. Referential integrity between stages
is kept here: renaming a stage rewrites the links pointing at it, deleting a
stage removes them, and a quest always keeps at least one stage.
"""

import copy
import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .errors import ErrorKind, QuestEditError
from .identifiers import IdGenerator, unique_id, validate_identifier
from .model import (
    Quest, Stage, Objective, NextStageLink, Rewards, QuestCollection, START_STAGE_ID,
)
from .patches import QuestPatch, StagePatch, ObjectivePatch, LinkPatch, apply_patch
from .variants import AddClue, CompletionEvent, Condition, make_condition, make_event

# Asked before destructive edits; returning False cancels the edit
ConfirmCallback = Callable[[str], bool]

EventOwner = Union[Stage, Objective]


def _confirmed(confirm: Optional[ConfirmCallback], message: str) -> bool:
    if confirm is None:
        return True
    return bool(confirm(message))


def check_index(items: list, index: int, what: str) -> None:
    if not 0 <= index < len(items):
        raise QuestEditError(
            ErrorKind.INDEX_OUT_OF_RANGE,
            f"{what} index {index} out of range (0..{len(items) - 1})",
        )


# ---------------- Quests ----------------

def create_quest(existing_ids: Iterable[str] = (), id_generator: Optional[IdGenerator] = None) -> Quest:
    """Create a new quest with a single 'start' stage and empty rewards.

    Args:
        existing_ids: Quest ids already in the collection
        id_generator: Id source for the new quest id

    Returns:
        New Quest whose id is not in existing_ids
    """
    quest_id = unique_id("quest", existing_ids, id_generator)
    return Quest(
        id=quest_id,
        title="New Quest",
        description="Quest description",
        short_description="Short description",
        importance="Side",
        stages=[
            Stage(
                id=START_STAGE_ID,
                description="Initial quest stage",
                notification_text="New quest started",
            )
        ],
        rewards=Rewards(),
    )


def add_quest(collection: QuestCollection, id_generator: Optional[IdGenerator] = None) -> Tuple[QuestCollection, str]:
    """Add a freshly created quest to a collection.

    Returns:
        (new collection, id of the created quest)
    """
    quest = create_quest(collection.keys(), id_generator)
    updated = dict(collection)
    updated[quest.id] = quest
    logging.debug(f"Created quest {quest.id}")
    return updated, quest.id


def rename_quest(collection: QuestCollection, old_id: str, new_id: str) -> QuestCollection:
    """Re-key a quest under a new id, keeping its position in the collection.

    Sibling quest ids are not checked for uniqueness; renaming onto an
    existing key replaces that entry.

    Raises:
        QuestEditError: Invalid identifier or QUEST_NOT_FOUND
    """
    if old_id not in collection:
        raise QuestEditError(ErrorKind.QUEST_NOT_FOUND, f"Quest not found: {old_id}")

    validate_identifier(new_id, current_id=old_id)
    if new_id == old_id:
        return dict(collection)

    renamed = replace(copy.deepcopy(collection[old_id]), id=new_id)
    updated: QuestCollection = {}
    for quest_id, quest in collection.items():
        if quest_id == old_id:
            updated[new_id] = renamed
        elif quest_id != new_id:
            updated[quest_id] = quest
    logging.debug(f"Renamed quest {old_id} -> {new_id}")
    return updated


def delete_quest(collection: QuestCollection, quest_id: str, confirm: Optional[ConfirmCallback] = None) -> QuestCollection:
    """Remove a quest. Missing ids and declined confirmations are no-ops."""
    if quest_id not in collection:
        return dict(collection)
    if not _confirmed(confirm, f"Are you sure you want to delete quest '{quest_id}'?"):
        return dict(collection)

    updated = {key: quest for key, quest in collection.items() if key != quest_id}
    logging.debug(f"Deleted quest {quest_id}")
    return updated


def update_quest_fields(collection: QuestCollection, quest_id: str, patch: QuestPatch) -> QuestCollection:
    """Apply a QuestPatch to the identified quest.

    Raises:
        QuestEditError: QUEST_NOT_FOUND if quest_id is absent
    """
    quest = collection.get(quest_id)
    if quest is None:
        raise QuestEditError(ErrorKind.QUEST_NOT_FOUND, f"Quest not found: {quest_id}")

    updated = dict(collection)
    updated[quest_id] = apply_patch(quest, patch)
    return updated


# ---------------- Stages ----------------

def stage_index(quest: Quest, stage_id: str) -> int:
    """Position of a stage in the quest, or -1."""
    for i, stage in enumerate(quest.stages):
        if stage.id == stage_id:
            return i
    return -1


def add_stage(quest: Quest, id_generator: Optional[IdGenerator] = None) -> Quest:
    """Append a new empty stage with an id unique within the quest."""
    stage_id = unique_id("stage", quest.stage_ids(), id_generator)
    new_stage = Stage(
        id=stage_id,
        description="New quest stage",
        notification_text="Quest updated",
    )
    updated = copy.deepcopy(quest)
    updated.stages.append(new_stage)
    logging.debug(f"Quest {quest.id}: added stage {stage_id}")
    return updated


def rename_stage(quest: Quest, old_id: str, new_id: str) -> Quest:
    """Rename a stage and retarget every link that pointed at it.

    Raises:
        QuestEditError: Invalid or duplicate identifier
    """
    index = stage_index(quest, old_id)
    if index < 0:
        return copy.deepcopy(quest)

    validate_identifier(new_id, quest.stage_ids(), current_id=old_id, check_unique=True)

    updated = copy.deepcopy(quest)
    updated.stages[index].id = new_id
    for stage in updated.stages:
        for link in stage.next_stages:
            if link.target == old_id:
                link.target = new_id
    logging.debug(f"Quest {quest.id}: renamed stage {old_id} -> {new_id}")
    return updated


def delete_stage(quest: Quest, stage_id: str, confirm: Optional[ConfirmCallback] = None) -> Quest:
    """Delete a stage and every link targeting it.

    Raises:
        QuestEditError: LAST_STAGE_DELETION when it is the only stage
    """
    if len(quest.stages) <= 1:
        raise QuestEditError(
            ErrorKind.LAST_STAGE_DELETION,
            "Cannot delete the only stage in a quest. Delete the entire quest instead.",
        )

    index = stage_index(quest, stage_id)
    if index < 0:
        return copy.deepcopy(quest)
    if not _confirmed(confirm, f"Are you sure you want to delete stage '{stage_id}'?"):
        return copy.deepcopy(quest)

    updated = copy.deepcopy(quest)
    del updated.stages[index]
    for stage in updated.stages:
        stage.next_stages = [link for link in stage.next_stages if link.target != stage_id]
    logging.debug(f"Quest {quest.id}: deleted stage {stage_id}")
    return updated


def update_stage(quest: Quest, index: int, patch: StagePatch) -> Quest:
    """Apply a StagePatch to the stage at a position."""
    check_index(quest.stages, index, "Stage")
    updated = copy.deepcopy(quest)
    updated.stages[index] = apply_patch(quest.stages[index], patch)
    return updated


# ---------------- Objectives ----------------

def add_objective(stage: Stage, id_generator: Optional[IdGenerator] = None) -> Stage:
    """Append a new objective with default values."""
    objective_id = unique_id("objective", [o.id for o in stage.objectives], id_generator)
    updated = copy.deepcopy(stage)
    updated.objectives.append(Objective(id=objective_id, description="New objective"))
    return updated


def update_objective(stage: Stage, index: int, patch: ObjectivePatch) -> Stage:
    """Apply an ObjectivePatch to the objective at a position."""
    check_index(stage.objectives, index, "Objective")
    updated = copy.deepcopy(stage)
    updated.objectives[index] = apply_patch(stage.objectives[index], patch)
    return updated


def delete_objective(stage: Stage, index: int) -> Stage:
    """Remove the objective at a position."""
    check_index(stage.objectives, index, "Objective")
    updated = copy.deepcopy(stage)
    del updated.objectives[index]
    return updated


# ---------------- Completion events ----------------

def _owner_clue_ids(owner: EventOwner) -> List[str]:
    events = list(owner.completion_events)
    if isinstance(owner, Stage):
        for objective in owner.objectives:
            events.extend(objective.completion_events)
    return [event.id for event in events if isinstance(event, AddClue)]


def quest_clue_ids(quest: Quest) -> List[str]:
    """Ids of every AddClue event in the quest, stage and objective events alike."""
    ids = []
    for stage in quest.stages:
        ids.extend(_owner_clue_ids(stage))
    return ids


def add_completion_event(
    owner: EventOwner,
    event_type: str,
    id_generator: Optional[IdGenerator] = None,
    existing_clue_ids: Iterable[str] = (),
) -> EventOwner:
    """Append a default event of the given type to a stage or objective.

    A new AddClue gets an id unused by the owner's events and by
    existing_clue_ids (pass quest_clue_ids(quest) to cover the whole quest).
    """
    taken = set(existing_clue_ids)
    taken.update(_owner_clue_ids(owner))
    updated = copy.deepcopy(owner)
    updated.completion_events.append(make_event(event_type, id_generator, taken))
    return updated


def update_completion_event(owner: EventOwner, index: int, event: CompletionEvent) -> EventOwner:
    """Replace the event at a position."""
    check_index(owner.completion_events, index, "Completion event")
    updated = copy.deepcopy(owner)
    updated.completion_events[index] = copy.deepcopy(event)
    return updated


def delete_completion_event(owner: EventOwner, index: int) -> EventOwner:
    """Remove the event at a position; out-of-range indexes are a no-op."""
    updated = copy.deepcopy(owner)
    if 0 <= index < len(updated.completion_events):
        del updated.completion_events[index]
    return updated


# ---------------- Next-stage links ----------------

def eligible_link_targets(stage: Stage, all_stages: List[Stage]) -> List[str]:
    """Stage ids this stage could still link to, in stage order."""
    linked = set(stage.linked_targets())
    return [s.id for s in all_stages if s.id != stage.id and s.id not in linked]


def add_next_stage_link(stage: Stage, all_stages: List[Stage]) -> Stage:
    """Link the stage to the first sibling it is not linked to yet.

    Raises:
        QuestEditError: NO_ELIGIBLE_TARGET if every other stage is linked
    """
    candidates = eligible_link_targets(stage, all_stages)
    if not candidates:
        raise QuestEditError(
            ErrorKind.NO_ELIGIBLE_TARGET,
            "All available stages are already added to next stages or there are no other stages",
        )
    updated = copy.deepcopy(stage)
    updated.next_stages.append(NextStageLink(target=candidates[0]))
    return updated


def update_next_stage_link(stage: Stage, index: int, patch: LinkPatch) -> Stage:
    """Apply a LinkPatch to the link at a position."""
    check_index(stage.next_stages, index, "Next stage")
    updated = copy.deepcopy(stage)
    updated.next_stages[index] = apply_patch(stage.next_stages[index], patch)
    return updated


def delete_next_stage_link(stage: Stage, index: int) -> Stage:
    """Remove the link at a position; out-of-range indexes are a no-op."""
    updated = copy.deepcopy(stage)
    if 0 <= index < len(updated.next_stages):
        del updated.next_stages[index]
    return updated


def set_condition(link: NextStageLink, condition_type: Optional[str]) -> NextStageLink:
    """Switch a link's condition type, resetting its payload to defaults.

    Passing None removes the condition.
    """
    condition: Optional[Condition] = None
    if condition_type:
        condition = make_condition(condition_type)
    return replace(copy.deepcopy(link), condition=condition)
