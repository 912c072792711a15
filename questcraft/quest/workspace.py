"""Quest editing session for a host application.

QuestWorkspace sequences edits on one quest collection: it applies graph
operations by quest/stage id, keeps an undo/redo history, and hands every
new collection to the host through on_change. It never touches storage.
"""

import copy
import logging
from typing import Callable, Dict, List, Optional

from config import get_history_limit
from . import graph
from .errors import ErrorKind, QuestEditError
from .identifiers import IdGenerator, default_id_generator
from .model import Quest, Stage, QuestCollection
from .patches import QuestPatch, StagePatch, ObjectivePatch, LinkPatch
from .resolver import (
    DialogueCorpus, HostCatalogs, RelatedDialogue,
    distinct_npc_speakers, filter_quests, find_related_dialogue, selector_options,
)
from .serializer import collection_to_json, collection_to_text, quest_to_json, quest_to_text
from .variants import CompletionEvent


class QuestHistory:
    """Bounded undo/redo stacks of quest collections."""

    def __init__(self, initial: QuestCollection, limit: Optional[int] = None):
        self.current: QuestCollection = initial
        self.limit = limit or get_history_limit()
        self._undo: List[QuestCollection] = []
        self._redo: List[QuestCollection] = []

    def push(self, collection: QuestCollection) -> None:
        """Record a new state; clears the redo branch."""
        self._undo.append(self.current)
        self._redo.clear()
        self.current = collection
        if len(self._undo) > self.limit:
            self._undo.pop(0)

    def undo(self) -> Optional[QuestCollection]:
        if not self._undo:
            return None
        self._redo.append(self.current)
        self.current = self._undo.pop()
        return self.current

    def redo(self) -> Optional[QuestCollection]:
        if not self._redo:
            return None
        self._undo.append(self.current)
        self.current = self._redo.pop()
        return self.current

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)


class QuestWorkspace:
    """Applies validated edits to a host-owned quest collection."""

    def __init__(
        self,
        quests: Optional[QuestCollection] = None,
        dialogue: Optional[DialogueCorpus] = None,
        catalogs: Optional[HostCatalogs] = None,
        confirm: Optional[graph.ConfirmCallback] = None,
        id_generator: Optional[IdGenerator] = None,
        on_change: Optional[Callable[[QuestCollection], None]] = None,
        history_limit: Optional[int] = None,
    ):
        """Initialize the workspace.

        Args:
            quests: Initial quest collection supplied by the host
            dialogue: Read-only dialogue corpus
            catalogs: Read-only skill/item/location catalogs
            confirm: Asked before destructive edits; False cancels them
            id_generator: Id source for new quests, stages, objectives, clues
            on_change: Receives the new collection after every edit
            history_limit: Max undo steps (QC_HISTORY_LIMIT by default)
        """
        self.dialogue: DialogueCorpus = dialogue or {}
        self.catalogs = catalogs or HostCatalogs()
        self.confirm = confirm
        self.id_generator = id_generator or default_id_generator()
        self.on_change = on_change
        self.history = QuestHistory(dict(quests or {}), history_limit)

    @property
    def quests(self) -> QuestCollection:
        return self.history.current

    def get_quest(self, quest_id: str) -> Quest:
        """Get quest by ID.

        Raises:
            QuestEditError: QUEST_NOT_FOUND
        """
        quest = self.quests.get(quest_id)
        if quest is None:
            raise QuestEditError(ErrorKind.QUEST_NOT_FOUND, f"Quest not found: {quest_id}")
        return quest

    def _stage(self, quest: Quest, stage_id: str) -> int:
        index = graph.stage_index(quest, stage_id)
        if index < 0:
            raise QuestEditError(ErrorKind.INDEX_OUT_OF_RANGE, f"Stage not found in {quest.id}: {stage_id}")
        return index

    def _commit(self, collection: QuestCollection) -> QuestCollection:
        self.history.push(collection)
        if self.on_change:
            self.on_change(collection)
        return collection

    def _replace_quest(self, quest: Quest) -> QuestCollection:
        updated = dict(self.quests)
        updated[quest.id] = quest
        return self._commit(updated)

    def _replace_stage(self, quest: Quest, index: int, stage: Stage) -> QuestCollection:
        updated = copy.deepcopy(quest)
        updated.stages[index] = stage
        return self._replace_quest(updated)

    # ---------------- Quests ----------------

    def create_quest(self) -> str:
        """Add a new quest and return its id."""
        collection, quest_id = graph.add_quest(self.quests, self.id_generator)
        self._commit(collection)
        return quest_id

    def rename_quest(self, old_id: str, new_id: str) -> QuestCollection:
        try:
            collection = graph.rename_quest(self.quests, old_id, new_id)
        except QuestEditError as e:
            logging.warning(f"Rename of quest {old_id} rejected: {e.message}")
            raise
        return self._commit(collection)

    def delete_quest(self, quest_id: str) -> QuestCollection:
        collection = graph.delete_quest(self.quests, quest_id, self.confirm)
        if collection.keys() == self.quests.keys():
            return self.quests
        return self._commit(collection)

    def update_quest(self, quest_id: str, patch: QuestPatch) -> QuestCollection:
        return self._commit(graph.update_quest_fields(self.quests, quest_id, patch))

    # ---------------- Stages ----------------

    def add_stage(self, quest_id: str) -> str:
        """Append a stage to a quest and return the new stage id."""
        updated = graph.add_stage(self.get_quest(quest_id), self.id_generator)
        self._replace_quest(updated)
        return updated.stages[-1].id

    def rename_stage(self, quest_id: str, old_id: str, new_id: str) -> QuestCollection:
        quest = self.get_quest(quest_id)
        self._stage(quest, old_id)
        try:
            updated = graph.rename_stage(quest, old_id, new_id)
        except QuestEditError as e:
            logging.warning(f"Rename of stage {quest_id}/{old_id} rejected: {e.message}")
            raise
        return self._replace_quest(updated)

    def delete_stage(self, quest_id: str, stage_id: str) -> QuestCollection:
        quest = self.get_quest(quest_id)
        self._stage(quest, stage_id)
        updated = graph.delete_stage(quest, stage_id, self.confirm)
        if len(updated.stages) == len(quest.stages):
            return self.quests
        return self._replace_quest(updated)

    def update_stage(self, quest_id: str, stage_id: str, patch: StagePatch) -> QuestCollection:
        quest = self.get_quest(quest_id)
        return self._replace_quest(graph.update_stage(quest, self._stage(quest, stage_id), patch))

    # ---------------- Objectives ----------------

    def add_objective(self, quest_id: str, stage_id: str) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.add_objective(quest.stages[index], self.id_generator))

    def update_objective(self, quest_id: str, stage_id: str, objective_index: int, patch: ObjectivePatch) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.update_objective(quest.stages[index], objective_index, patch))

    def delete_objective(self, quest_id: str, stage_id: str, objective_index: int) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.delete_objective(quest.stages[index], objective_index))

    # ---------------- Completion events ----------------

    def add_completion_event(self, quest_id: str, stage_id: str, event_type: str,
                             objective_index: Optional[int] = None) -> QuestCollection:
        """Add a default event to a stage, or to one of its objectives."""
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        stage = quest.stages[index]
        clue_ids = graph.quest_clue_ids(quest)
        if objective_index is None:
            return self._replace_stage(quest, index, graph.add_completion_event(
                stage, event_type, self.id_generator, clue_ids))

        graph.check_index(stage.objectives, objective_index, "Objective")
        objective = graph.add_completion_event(
            stage.objectives[objective_index], event_type, self.id_generator, clue_ids)
        updated = copy.deepcopy(stage)
        updated.objectives[objective_index] = objective
        return self._replace_stage(quest, index, updated)

    def update_completion_event(self, quest_id: str, stage_id: str, event_index: int,
                                event: CompletionEvent) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.update_completion_event(quest.stages[index], event_index, event))

    def delete_completion_event(self, quest_id: str, stage_id: str, event_index: int) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.delete_completion_event(quest.stages[index], event_index))

    # ---------------- Next-stage links ----------------

    def add_next_stage_link(self, quest_id: str, stage_id: str) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.add_next_stage_link(quest.stages[index], quest.stages))

    def update_next_stage_link(self, quest_id: str, stage_id: str, link_index: int,
                               patch: LinkPatch) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.update_next_stage_link(quest.stages[index], link_index, patch))

    def delete_next_stage_link(self, quest_id: str, stage_id: str, link_index: int) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        return self._replace_stage(quest, index, graph.delete_next_stage_link(quest.stages[index], link_index))

    def set_condition(self, quest_id: str, stage_id: str, link_index: int,
                      condition_type: Optional[str]) -> QuestCollection:
        quest = self.get_quest(quest_id)
        index = self._stage(quest, stage_id)
        stage = quest.stages[index]
        graph.check_index(stage.next_stages, link_index, "Next stage")
        link = graph.set_condition(stage.next_stages[link_index], condition_type)
        return self._replace_stage(quest, index, graph.update_next_stage_link(
            stage, link_index, LinkPatch(condition=link.condition)))

    # ---------------- History ----------------

    def undo(self) -> bool:
        """Step back one edit. Returns False when there is nothing to undo."""
        collection = self.history.undo()
        if collection is None:
            return False
        if self.on_change:
            self.on_change(collection)
        return True

    def redo(self) -> bool:
        collection = self.history.redo()
        if collection is None:
            return False
        if self.on_change:
            self.on_change(collection)
        return True

    # ---------------- Queries & export ----------------

    def search(self, term: str) -> QuestCollection:
        return filter_quests(self.quests, term)

    def npc_options(self) -> List[str]:
        return distinct_npc_speakers(self.dialogue)

    def options(self, kind: str) -> List[str]:
        return selector_options(kind, self.dialogue, self.catalogs)

    def related_dialogue(self, quest_id: str) -> List[RelatedDialogue]:
        return find_related_dialogue(self.dialogue, quest_id)

    def export_text(self, quest_id: Optional[str] = None) -> str:
        """Line-oriented text of one quest, or of the whole collection."""
        if quest_id is None:
            return collection_to_text(self.quests)
        return quest_to_text(self.get_quest(quest_id))

    def export_json(self, quest_id: Optional[str] = None) -> str:
        if quest_id is None:
            return collection_to_json(self.quests)
        return quest_to_json(self.get_quest(quest_id))

    def summary(self) -> Dict[str, int]:
        """Counts for a status line."""
        quests = list(self.quests.values())
        return {
            "quests": len(quests),
            "stages": sum(len(q.stages) for q in quests),
            "objectives": sum(len(s.objectives) for q in quests for s in q.stages),
        }
